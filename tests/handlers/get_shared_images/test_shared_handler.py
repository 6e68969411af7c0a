from datetime import timedelta
from typing import Any

from core.utils.time import epoch_seconds, utc_now
from factories import DESIGN_ID, OWNER_ID, api_event, design_image_path, parse_body
from handlers.get_shared_images.handler import handler
from handlers.share_images.handler import handler as share_handler


def _resolve_event(token: str | None) -> dict[str, Any]:
    return api_event(method="GET", path_params={"token": token} if token is not None else None, user_id=None)


def _store_link(table, token: str, *, expires_in: timedelta) -> None:
    now = utc_now()
    expires_at = now + expires_in
    table.put_item(
        Item={
            "share_token": token,
            "design_id": DESIGN_ID,
            "user_id": OWNER_ID,
            "image_paths": [design_image_path(1)],
            "created_at": (expires_at - timedelta(days=30)).isoformat(),
            "expires_at": expires_at.isoformat(),
            "expires_at_epoch": epoch_seconds(expires_at),
        }
    )


class TestGetSharedImagesHandler:
    def test_share_then_resolve_round_trip(
        self,
        lambda_context,
        stored_design,
        share_links_table,
    ) -> None:
        paths = [design_image_path(2), design_image_path(1)]
        issued = share_handler(
            api_event(body={"designId": DESIGN_ID, "imagePaths": paths}),
            lambda_context,
        )
        token = parse_body(issued)["shareToken"]

        response = handler(_resolve_event(token), lambda_context)

        assert response["statusCode"] == 200
        body = parse_body(response)
        assert body["designId"] == DESIGN_ID
        assert body["images"] == paths
        assert len(body["imageUrls"]) == 2
        assert design_image_path(2) in body["imageUrls"][0]
        assert body["expiresAt"] == parse_body(issued)["expiresAt"]

    def test_expired_and_unknown_tokens_are_both_404(
        self,
        lambda_context,
        share_links_table,
    ) -> None:
        _store_link(share_links_table, "expired-token", expires_in=timedelta(seconds=-5))

        expired = handler(_resolve_event("expired-token"), lambda_context)
        unknown = handler(_resolve_event("never-issued"), lambda_context)

        assert expired["statusCode"] == unknown["statusCode"] == 404
        expired_body = parse_body(expired)
        unknown_body = parse_body(unknown)
        assert expired_body["error"] == unknown_body["error"] == "SHARE_LINK_NOT_FOUND"
        assert expired_body["message"] == unknown_body["message"]

    def test_resolution_needs_no_authentication(
        self,
        lambda_context,
        stored_design,
        share_links_table,
    ) -> None:
        _store_link(share_links_table, "live-token", expires_in=timedelta(days=1))

        response = handler(_resolve_event("live-token"), lambda_context)

        assert response["statusCode"] == 200

    def test_missing_token_is_bad_request(self, lambda_context) -> None:
        response = handler(_resolve_event(None), lambda_context)

        assert response["statusCode"] == 400
        assert parse_body(response)["error"] == "VALIDATION_FAILED"

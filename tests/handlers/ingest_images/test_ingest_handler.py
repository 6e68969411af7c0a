from typing import Any
from unittest.mock import patch

import pytest
import requests

from factories import DESIGN_ID, OTHER_USER_ID, OWNER_ID, api_event, design_image_path, parse_body
from handlers.ingest_images.handler import handler


class FakeFetcher:
    def __init__(self, responses: dict[str, Any]) -> None:
        self.responses = responses

    def get_bytes(self, url: str) -> bytes:
        outcome = self.responses[url]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def fake_fetcher(sample_image_binary):
    fetcher = FakeFetcher(
        {
            "https://gen.example.com/front.png": sample_image_binary,
            "https://gen.example.com/top.png": sample_image_binary,
            "https://gen.example.com/expired.png": requests.HTTPError("403 Forbidden"),
            "https://gen.example.com?sig=abc": sample_image_binary,
        }
    )
    with patch("handlers.ingest_images.service.HttpFetcher", return_value=fetcher):
        yield fetcher


def _event(images: list[dict[str, Any]], **body: Any) -> dict[str, Any]:
    return api_event(
        body={"images": images, **body},
        path_params={"design_id": DESIGN_ID},
    )


class TestIngestImagesHandler:
    def test_ingests_and_records_images(
        self,
        lambda_context,
        stored_design,
        designs_table,
        s3_list_keys,
        fake_fetcher,
    ) -> None:
        event = _event([{"url": "https://gen.example.com/top.png", "viewNumber": 3, "viewType": "top"}])

        response = handler(event, lambda_context)

        assert response["statusCode"] == 200
        body = parse_body(response)
        assert body["designId"] == DESIGN_ID
        assert body["succeeded"] == 1
        assert body["failed"] == 0

        new_path = body["results"][0]["storagePath"]
        assert new_path.startswith(f"{OWNER_ID}/{DESIGN_ID}/view_3_")
        assert new_path in s3_list_keys(f"{OWNER_ID}/{DESIGN_ID}/")

        item = designs_table.get_item(Key={"design_id": DESIGN_ID})["Item"]
        assert [image["view_number"] for image in item["images"]] == [1, 2, 3]

    def test_partial_failure_reports_each_item(
        self,
        lambda_context,
        stored_design,
        fake_fetcher,
    ) -> None:
        event = _event(
            [
                {"url": "https://gen.example.com/front.png", "viewNumber": 1},
                {"url": "https://gen.example.com/expired.png", "viewNumber": 2},
            ]
        )

        response = handler(event, lambda_context)

        assert response["statusCode"] == 200
        body = parse_body(response)
        assert body["succeeded"] == 1
        assert body["failed"] == 1
        assert body["results"][0]["storageUrl"]
        assert body["results"][1]["error"] == "Unable to fetch source image"

    def test_replace_existing_removes_previous_objects(
        self,
        lambda_context,
        stored_design,
        designs_table,
        s3_list_keys,
        fake_fetcher,
    ) -> None:
        event = _event(
            [{"url": "https://gen.example.com/front.png", "viewNumber": 1}],
            replaceExisting=True,
        )

        response = handler(event, lambda_context)

        new_path = parse_body(response)["results"][0]["storagePath"]
        assert s3_list_keys(f"{OWNER_ID}/{DESIGN_ID}/") == [new_path]
        assert design_image_path(2) not in s3_list_keys("")

        item = designs_table.get_item(Key={"design_id": DESIGN_ID})["Item"]
        assert [image["storage_path"] for image in item["images"]] == [new_path]

    def test_path_design_id_wins_over_body(
        self,
        lambda_context,
        stored_design,
        fake_fetcher,
    ) -> None:
        event = _event(
            [{"url": "https://gen.example.com/front.png", "viewNumber": 1}],
            designId="someone-elses-design",
        )

        response = handler(event, lambda_context)

        assert response["statusCode"] == 200
        assert parse_body(response)["designId"] == DESIGN_ID

    def test_foreign_design_is_forbidden(
        self,
        lambda_context,
        stored_design,
        s3_list_keys,
        fake_fetcher,
    ) -> None:
        event = api_event(
            body={"images": [{"url": "https://gen.example.com/front.png", "viewNumber": 1}]},
            path_params={"design_id": DESIGN_ID},
            user_id=OTHER_USER_ID,
        )

        response = handler(event, lambda_context)

        assert response["statusCode"] == 403
        assert parse_body(response)["error"] == "DESIGN_ACCESS_DENIED"
        assert s3_list_keys(f"{OTHER_USER_ID}/") == []

    def test_unauthenticated_request_is_rejected(self, lambda_context) -> None:
        event = api_event(
            body={"images": []},
            path_params={"design_id": DESIGN_ID},
            user_id=None,
        )

        response = handler(event, lambda_context)

        assert response["statusCode"] == 401

    def test_invalid_payload_is_bad_request(self, lambda_context) -> None:
        event = _event([{"url": "not-a-url", "viewNumber": 1}])

        response = handler(event, lambda_context)

        assert response["statusCode"] == 400
        body = parse_body(response)
        assert body["error"] == "VALIDATION_FAILED"
        assert body["details"]["errors"][0]["field"] == "images.0.url"
        assert body["details"]["errors"][0]["message"] == "Must be a valid http(s) URL"

    def test_original_url_is_reported_as_submitted(
        self,
        lambda_context,
        stored_design,
        fake_fetcher,
    ) -> None:
        event = _event([{"url": "https://gen.example.com?sig=abc", "viewNumber": 4}])

        response = handler(event, lambda_context)

        assert parse_body(response)["results"][0]["originalUrl"] == "https://gen.example.com?sig=abc"

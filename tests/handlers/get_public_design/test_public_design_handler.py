from factories import DESIGN_ID, make_design_item, parse_body
from handlers.get_public_design.handler import handler


def _event(design_id):
    return {
        "httpMethod": "GET",
        "pathParameters": {"design_id": design_id} if design_id is not None else None,
        "requestContext": {},
    }


class TestGetPublicDesignHandler:
    def test_public_design_is_readable_without_auth(self, lambda_context, designs_table) -> None:
        designs_table.put_item(Item={**make_design_item(), "is_public": True})

        response = handler(_event(DESIGN_ID), lambda_context)

        assert response["statusCode"] == 200
        body = parse_body(response)
        assert body["designId"] == DESIGN_ID
        assert body["priceCents"] == 189900
        assert len(body["images"]) == 2
        assert "userId" not in body

    def test_private_and_unknown_get_identical_404(self, lambda_context, designs_table) -> None:
        designs_table.put_item(Item=make_design_item())

        private = parse_body(handler(_event(DESIGN_ID), lambda_context))
        unknown = parse_body(handler(_event("nope"), lambda_context))

        for body in (private, unknown):
            body.pop("timestamp")
        assert private == unknown
        assert private["error"] == "DESIGN_NOT_FOUND"

    def test_missing_id_is_bad_request(self, lambda_context) -> None:
        response = handler(_event(None), lambda_context)

        assert response["statusCode"] == 400

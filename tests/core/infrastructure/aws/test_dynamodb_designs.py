"""Unit tests for the DynamoDBDesigns repository."""

from typing import Any

import pytest
from botocore.exceptions import ClientError
from core.infrastructure.aws.dynamodb_designs import DynamoDBDesigns
from core.models.design import Design, ImageReference
from core.models.errors import MetadataOperationFailedError
from factories import DESIGN_ID, OTHER_USER_ID, OWNER_ID, make_design_item


class DummyAdapter:
    """Minimal DynamoDBAdapter stub."""

    def __init__(self, item: dict[str, Any] | None = None) -> None:
        self.item = item

    def get_item(self, **_: Any) -> dict[str, Any]:
        return {"Item": self.item} if self.item is not None else {}

    def update_item(self, **_: Any) -> dict[str, Any]:
        raise ClientError({"Error": {"Code": "ConditionalCheckFailedException"}}, "UpdateItem")


def _reference(view_number: int) -> ImageReference:
    return ImageReference(
        design_id=DESIGN_ID,
        view_number=view_number,
        view_type="top",
        storage_path=f"{OWNER_ID}/{DESIGN_ID}/view_{view_number}_1.png",
        public_url=f"https://cdn.example.com/{view_number}.png",
    )


class TestDynamoDBDesigns:
    def test_get_design_found(self, designs_table) -> None:
        designs_table.put_item(Item=make_design_item())

        design = DynamoDBDesigns().get_design(design_id=DESIGN_ID)

        assert design is not None
        assert design.user_id == OWNER_ID
        assert design.price_cents == 189900
        assert [image.view_number for image in design.images] == [1, 2]

    def test_get_design_missing_returns_none(self, designs_table) -> None:
        assert DynamoDBDesigns().get_design(design_id="nope") is None

    def test_get_design_malformed_row_raises(self) -> None:
        repo = DynamoDBDesigns(DummyAdapter({"design_id": DESIGN_ID}))

        with pytest.raises(MetadataOperationFailedError):
            repo.get_design(design_id=DESIGN_ID)

    def test_replace_images_overwrites_list(self, designs_table) -> None:
        designs_table.put_item(Item=make_design_item())
        repo = DynamoDBDesigns()

        repo.replace_images(design_id=DESIGN_ID, images=[_reference(3)])

        design = repo.get_design(design_id=DESIGN_ID)
        assert design is not None
        assert [image.view_number for image in design.images] == [3]
        assert design.updated_at is not None

    def test_replace_images_on_missing_design_raises(self, designs_table) -> None:
        with pytest.raises(MetadataOperationFailedError) as exc_info:
            DynamoDBDesigns().replace_images(design_id="nope", images=[_reference(1)])

        assert exc_info.value.error_code == "DESIGN_UPDATE_FAILED"

    def test_replace_images_translates_client_error(self) -> None:
        repo = DynamoDBDesigns(DummyAdapter())

        with pytest.raises(MetadataOperationFailedError):
            repo.replace_images(design_id=DESIGN_ID, images=[])

    def test_create_design_round_trip(self, designs_table) -> None:
        repo = DynamoDBDesigns()
        design = Design(
            design_id="dsn_new",
            user_id=OWNER_ID,
            prompt="platinum solitaire",
            price_cents=250000,
            is_public=True,
            created_at="2024-05-02T10:00:00+00:00",
        )

        repo.create_design(design=design)

        stored = designs_table.get_item(Key={"design_id": "dsn_new"})["Item"]
        assert stored["price_cents"] == 250000
        assert "title" not in stored
        assert repo.get_design(design_id="dsn_new") == design

    def test_create_design_never_overwrites(self, designs_table) -> None:
        designs_table.put_item(Item=make_design_item())
        clash = Design(design_id=DESIGN_ID, user_id=OTHER_USER_ID, created_at="2024-05-02T10:00:00+00:00")

        with pytest.raises(MetadataOperationFailedError) as exc_info:
            DynamoDBDesigns().create_design(design=clash)

        assert exc_info.value.error_code == "DESIGN_CREATE_FAILED"
        assert designs_table.get_item(Key={"design_id": DESIGN_ID})["Item"]["user_id"] == OWNER_ID

    def test_list_user_designs_newest_first(self, designs_table) -> None:
        older = make_design_item(design_id="d-old")
        newer = {**make_design_item(design_id="d-new"), "created_at": "2024-06-01T10:00:00+00:00"}
        foreign = make_design_item(design_id="d-foreign", user_id=OTHER_USER_ID)
        for item in (older, newer, foreign):
            designs_table.put_item(Item=item)

        designs = DynamoDBDesigns().list_user_designs(user_id=OWNER_ID)

        assert [design.design_id for design in designs] == ["d-new", "d-old"]

    def test_list_user_designs_malformed_row_raises(self, designs_table) -> None:
        designs_table.put_item(
            Item={
                "design_id": "broken",
                "user_id": OWNER_ID,
                "created_at": "2024-05-01T10:00:00+00:00",
                "images": "x",
            }
        )

        with pytest.raises(MetadataOperationFailedError) as exc_info:
            DynamoDBDesigns().list_user_designs(user_id=OWNER_ID)

        assert exc_info.value.error_code == "DESIGN_LIST_FAILED"

import re
from typing import Any
from unittest.mock import MagicMock

import pytest
import requests

from core.infrastructure.adapters.http_fetcher import ResponseTooLargeError
from core.models.design import Design
from core.models.errors import AuthorizationError, SourceFetchError, StorageError
from factories import DESIGN_ID, OTHER_USER_ID, OWNER_ID, design_image_path, make_design_item
from handlers.ingest_images.models import IngestImageItem
from handlers.ingest_images.service import (
    ImageIngestionService,
    build_storage_path,
    design_prefix,
)

PNG = b"\x89PNG\r\n\x1a\nimage"
JPEG = b"\xff\xd8\xff\xe0image"


class FakeFetcher:
    """Serves canned bodies, or raises, per URL."""

    def __init__(self, responses: dict[str, Any]) -> None:
        self.responses = responses
        self.requested: list[str] = []

    def get_bytes(self, url: str) -> bytes:
        self.requested.append(url)
        outcome = self.responses[url]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _service(responses: dict[str, Any], design: dict[str, Any] | None = None):
    storage = MagicMock()
    storage.upload_image.side_effect = lambda **kw: f"https://cdn.example.com/{kw['key']}"
    storage.list_design_images.return_value = []
    designs = MagicMock()
    designs.get_design.return_value = Design.model_validate(design) if design else None

    service = ImageIngestionService(
        storage=storage,
        designs=designs,
        fetcher=FakeFetcher(responses),
    )
    return service, storage, designs


def _item(view_number: int, view_type: str | None = None) -> IngestImageItem:
    return IngestImageItem(url=f"https://gen.example.com/{view_number}.png", view_number=view_number, view_type=view_type)


class TestStoragePaths:
    def test_design_prefix_uses_owner(self) -> None:
        assert design_prefix("d1", "u1") == "u1/d1/"

    def test_design_prefix_without_owner(self) -> None:
        assert design_prefix("d1", None) == "anonymous/d1/"

    def test_build_storage_path_layout(self) -> None:
        path = build_storage_path(design_id="d1", user_id="u1", view_number=3, extension="jpg")

        assert re.fullmatch(r"u1/d1/view_3_\d{13}\.jpg", path)


class TestIngestImage:
    def test_stores_one_object_with_detected_type(self) -> None:
        url = "https://gen.example.com/1.jpg"
        service, storage, _ = _service({url: JPEG})

        result = service.ingest_image(source_url=url, design_id="d1", view_number=1, user_id="u1")

        assert result.succeeded
        assert result.storage_path.startswith("u1/d1/view_1_")
        assert result.storage_path.endswith(".jpg")
        assert result.storage_url == f"https://cdn.example.com/{result.storage_path}"
        storage.upload_image.assert_called_once()
        assert storage.upload_image.call_args.kwargs["content_type"] == "image/jpeg"

    def test_unknown_bytes_are_stored_as_png(self) -> None:
        url = "https://gen.example.com/1"
        service, storage, _ = _service({url: b"mystery"})

        result = service.ingest_image(source_url=url, design_id="d1", view_number=1)

        assert result.storage_path.startswith("anonymous/d1/")
        assert storage.upload_image.call_args.kwargs["content_type"] == "image/png"

    def test_fetch_failure_raises_without_writing(self) -> None:
        url = "https://gen.example.com/1.png"
        service, storage, _ = _service({url: requests.ConnectionError("refused")})

        with pytest.raises(SourceFetchError):
            service.ingest_image(source_url=url, design_id="d1", view_number=1)

        storage.upload_image.assert_not_called()

    def test_oversized_source_is_rejected(self) -> None:
        url = "https://gen.example.com/1.png"
        service, _, _ = _service({url: ResponseTooLargeError("too big")})

        with pytest.raises(SourceFetchError) as exc_info:
            service.ingest_image(source_url=url, design_id="d1", view_number=1)

        assert exc_info.value.error_code == "SOURCE_TOO_LARGE"

    def test_empty_body_is_rejected(self) -> None:
        url = "https://gen.example.com/1.png"
        service, storage, _ = _service({url: b""})

        with pytest.raises(SourceFetchError):
            service.ingest_image(source_url=url, design_id="d1", view_number=1)

        storage.upload_image.assert_not_called()


class TestIngestBatch:
    def test_one_failure_does_not_abort_siblings(self) -> None:
        urls = [f"https://gen.example.com/{n}.png" for n in (1, 2, 3)]
        service, storage, _ = _service(
            {urls[0]: PNG, urls[1]: requests.HTTPError("403 Forbidden"), urls[2]: PNG}
        )

        results = service.ingest_batch(
            items=[(url, n) for n, url in enumerate(urls, start=1)],
            design_id="d1",
            user_id="u1",
        )

        assert [result.view_number for result in results] == [1, 2, 3]
        assert [result.succeeded for result in results] == [True, False, True]
        assert results[1].error == "Unable to fetch source image"
        assert results[1].storage_url is None
        assert storage.upload_image.call_count == 2

    def test_storage_failure_is_reported_per_item(self) -> None:
        url = "https://gen.example.com/1.png"
        service, storage, _ = _service({url: PNG})
        storage.upload_image.side_effect = StorageError(message="Unable to store image at this time")

        results = service.ingest_batch(items=[(url, 1)], design_id="d1")

        assert results[0].error == "Unable to store image at this time"


class TestIngestForDesign:
    def test_rejects_foreign_design(self) -> None:
        service, _, _ = _service({}, design=make_design_item(user_id=OTHER_USER_ID))

        with pytest.raises(AuthorizationError) as exc_info:
            service.ingest_for_design(design_id=DESIGN_ID, caller_id=OWNER_ID, images=[_item(1)])

        assert exc_info.value.error_code == "DESIGN_ACCESS_DENIED"

    def test_rejects_missing_design(self) -> None:
        service, _, _ = _service({})

        with pytest.raises(AuthorizationError):
            service.ingest_for_design(design_id="nope", caller_id=OWNER_ID, images=[_item(1)])

    def test_merges_new_views_into_existing_references(self) -> None:
        service, _, designs = _service(
            {"https://gen.example.com/2.png": PNG, "https://gen.example.com/3.png": PNG},
            design=make_design_item(views=2),
        )

        service.ingest_for_design(
            design_id=DESIGN_ID,
            caller_id=OWNER_ID,
            images=[_item(3, "top"), _item(2, "side")],
        )

        references = designs.replace_images.call_args.kwargs["images"]
        assert [reference.view_number for reference in references] == [1, 2, 3]
        assert references[0].storage_path == design_image_path(1)
        assert references[1].storage_path != design_image_path(2)
        assert references[2].view_type == "top"

    def test_replace_existing_swaps_references_and_deletes_old_objects(self) -> None:
        service, storage, designs = _service(
            {"https://gen.example.com/1.png": PNG},
            design=make_design_item(views=2),
        )
        storage.list_design_images.return_value = [design_image_path(1), design_image_path(2)]

        results = service.ingest_for_design(
            design_id=DESIGN_ID,
            caller_id=OWNER_ID,
            images=[_item(1)],
            replace_existing=True,
        )

        new_path = results[0].storage_path
        references = designs.replace_images.call_args.kwargs["images"]
        assert [reference.storage_path for reference in references] == [new_path]
        storage.list_design_images.assert_called_once_with(prefix=f"{OWNER_ID}/{DESIGN_ID}/")
        storage.remove_images.assert_called_once_with(
            keys=[design_image_path(1), design_image_path(2)]
        )

    def test_all_failures_leave_design_unchanged(self) -> None:
        service, storage, designs = _service(
            {"https://gen.example.com/1.png": requests.Timeout("slow")},
            design=make_design_item(),
        )

        results = service.ingest_for_design(
            design_id=DESIGN_ID,
            caller_id=OWNER_ID,
            images=[_item(1)],
            replace_existing=True,
        )

        assert results[0].succeeded is False
        designs.replace_images.assert_not_called()
        storage.remove_images.assert_not_called()


class TestClearDesignImages:
    def test_keeps_listed_paths(self) -> None:
        service, storage, _ = _service({})
        storage.list_design_images.return_value = ["u/d/a.png", "u/d/b.png"]

        deleted = service.clear_design_images(design_id="d", user_id="u", keep=["u/d/b.png"])

        assert deleted == 1
        storage.remove_images.assert_called_once_with(keys=["u/d/a.png"])

"""Pydantic models for design image ingestion request/response."""

from pydantic import Field, HttpUrl, StrictBool, StrictInt, StrictStr, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError

from core.models.api import ApiModel
from core.utils.constants import MAX_BATCH_IMAGES

_HTTP_URL = TypeAdapter(HttpUrl)


class IngestImageItem(ApiModel):
    """One generated image to persist."""

    url: StrictStr = Field(..., description="Time-limited source URL from the image generator")
    view_number: StrictInt = Field(..., ge=1, description="1-based view index")
    view_type: StrictStr | None = Field(None, max_length=50, description="View label, e.g. 'front'")

    @field_validator("url")
    @classmethod
    def validate_url(cls, value: str) -> str:
        # Validated as HttpUrl, stored verbatim
        try:
            _HTTP_URL.validate_python(value)
        except PydanticValidationError as exc:
            raise ValueError("Must be a valid http(s) URL") from exc
        return value


class IngestImagesRequest(ApiModel):
    """Validation model for POST /designs/{design_id}/images."""

    design_id: StrictStr = Field(..., min_length=1, description="Target design")
    images: list[IngestImageItem] = Field(..., min_length=1, max_length=MAX_BATCH_IMAGES)
    replace_existing: StrictBool = Field(
        False,
        description="Replace the design's current images and delete their objects",
    )

    @field_validator("images")
    @classmethod
    def validate_unique_view_numbers(cls, value: list[IngestImageItem]) -> list[IngestImageItem]:
        view_numbers = [item.view_number for item in value]
        if len(set(view_numbers)) != len(view_numbers):
            raise ValueError("Each image must have a distinct viewNumber")
        return value


class IngestionResult(ApiModel):
    """Outcome of ingesting one source image; exactly one of url/error is set."""

    view_number: int
    original_url: str
    storage_path: str | None = None
    storage_url: str | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class IngestImagesResponse(ApiModel):
    """Per-item ingestion report, in request order."""

    design_id: str
    results: list[IngestionResult]
    succeeded: int
    failed: int

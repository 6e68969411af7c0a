"""Pydantic models for share link issuance."""

from pydantic import Field, StrictStr

from core.models.api import ApiModel
from core.utils.constants import MAX_BATCH_IMAGES


class ShareImagesRequest(ApiModel):
    """Validation model for POST /images/share.

    Emptiness of `image_paths` is enforced by the service so direct
    callers get the same error.
    """

    design_id: StrictStr = Field(..., min_length=1, description="Design whose images are shared")
    image_paths: list[StrictStr] = Field(
        ...,
        max_length=MAX_BATCH_IMAGES,
        description="Storage paths to expose, in display order",
    )


class ShareImagesResponse(ApiModel):
    """Response model for a newly issued share link."""

    success: bool = True
    share_url: str = Field(..., description="Public URL embedding the share token")
    share_token: str
    expires_at: str = Field(..., description="ISO-8601 expiry timestamp (UTC)")
    expires_in_days: int

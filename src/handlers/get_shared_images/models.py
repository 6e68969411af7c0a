from pydantic import Field, StrictStr

from core.models.api import ApiModel


class GetSharedImagesRequest(ApiModel):
    """Validation model for GET /images/shared/{token}."""

    token: StrictStr = Field(..., min_length=1, max_length=128, description="Share token")


class SharedImagesResponse(ApiModel):
    """Images exposed by a live share link, in issued order."""

    success: bool = True
    images: list[str] = Field(..., description="Storage paths")
    image_urls: list[str] = Field(..., description="Time-limited read URLs, parallel to images")
    design_id: str
    expires_at: str

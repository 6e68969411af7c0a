"""Pydantic models for saving and listing a user's designs."""

from pydantic import Field, StrictBool, StrictInt, StrictStr, field_validator

from core.models.api import ApiModel
from core.models.design import Design
from core.utils.constants import DEFAULT_CURRENCY, MAX_DESIGN_TAGS


class SaveDesignRequest(ApiModel):
    """Validation model for POST /designs."""

    title: StrictStr | None = Field(None, max_length=200, description="Display title")
    prompt: StrictStr = Field(..., min_length=1, max_length=4000, description="Generation prompt")
    tags: list[StrictStr] = Field(default_factory=list, max_length=MAX_DESIGN_TAGS)
    jewelry_type: StrictStr | None = Field(None, max_length=50, description="e.g. 'ring'")
    price_cents: StrictInt | None = Field(None, ge=0, description="Quoted price in integer cents")
    currency: StrictStr = Field(DEFAULT_CURRENCY, pattern=r"^[A-Z]{3}$")
    make_public: StrictBool = Field(False, description="Expose the design on the public route")

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, value: list[str]) -> list[str]:
        cleaned = [tag.strip() for tag in value if tag.strip()]
        if any(len(tag) > 50 for tag in cleaned):
            raise ValueError("Tags must be at most 50 characters")
        return list(dict.fromkeys(cleaned))


class DesignImageView(ApiModel):
    view_number: int
    view_type: str | None = None
    storage_path: str
    public_url: str


class DesignView(ApiModel):
    """A design as returned to its owner."""

    design_id: str
    title: str | None = None
    prompt: str | None = None
    tags: list[str] = Field(default_factory=list)
    jewelry_type: str | None = None
    price_cents: int | None = None
    currency: str
    is_public: bool
    images: list[DesignImageView] = Field(default_factory=list)
    created_at: str
    updated_at: str | None = None

    @classmethod
    def from_design(cls, design: Design) -> "DesignView":
        return cls(
            design_id=design.design_id,
            title=design.title,
            prompt=design.prompt,
            tags=design.tags or [],
            jewelry_type=design.jewelry_type,
            price_cents=design.price_cents,
            currency=design.currency,
            is_public=design.is_public,
            images=[
                DesignImageView(
                    view_number=image.view_number,
                    view_type=image.view_type,
                    storage_path=image.storage_path,
                    public_url=image.public_url,
                )
                for image in design.images
            ],
            created_at=design.created_at,
            updated_at=design.updated_at,
        )


class SaveDesignResponse(ApiModel):
    success: bool = True
    design: DesignView


class ListDesignsResponse(ApiModel):
    designs: list[DesignView]
    total: int

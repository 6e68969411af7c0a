from pydantic import Field, StrictStr

from core.models.api import ApiModel
from core.models.design import Design


class GetPublicDesignRequest(ApiModel):
    """Validation model for GET /designs/public/{design_id}."""

    design_id: StrictStr = Field(..., min_length=1, max_length=128)


class PublicDesignImage(ApiModel):
    view_number: int
    view_type: str | None = None
    url: str


class PublicDesignResponse(ApiModel):
    """A public design without any owner identity."""

    design_id: str
    title: str | None = None
    prompt: str | None = None
    tags: list[str] = Field(default_factory=list)
    jewelry_type: str | None = None
    price_cents: int | None = None
    currency: str
    images: list[PublicDesignImage]
    created_at: str

    @classmethod
    def from_design(cls, design: Design) -> "PublicDesignResponse":
        return cls(
            design_id=design.design_id,
            title=design.title,
            prompt=design.prompt,
            tags=design.tags or [],
            jewelry_type=design.jewelry_type,
            price_cents=design.price_cents,
            currency=design.currency,
            images=[
                PublicDesignImage(
                    view_number=image.view_number,
                    view_type=image.view_type,
                    url=image.public_url,
                )
                for image in design.images
            ],
            created_at=design.created_at,
        )

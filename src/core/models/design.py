"""Shared design and image reference models."""

from pydantic import BaseModel, Field, StrictInt, StrictStr


class ImageReference(BaseModel):
    """One stored view of a design."""

    design_id: StrictStr = Field(..., description="Owning design identifier")
    view_number: StrictInt = Field(..., ge=1, description="1-based view index")
    view_type: StrictStr | None = Field(None, description="View label, e.g. 'front'")
    storage_path: StrictStr = Field(..., description="Object key inside the image bucket")
    public_url: StrictStr = Field(..., description="Durable URL of the stored object")


class Design(BaseModel):
    """A user's jewelry design as persisted in DynamoDB."""

    design_id: StrictStr = Field(..., description="Unique design identifier")
    user_id: StrictStr = Field(..., description="Owner user identifier")

    title: StrictStr | None = Field(None, description="Optional design title")
    prompt: StrictStr | None = Field(None, description="Prompt used to generate the design")
    tags: list[StrictStr] | None = Field(None, description="Optional list of tags")
    jewelry_type: StrictStr | None = Field(None, description="Jewelry category, e.g. 'ring'")

    images: list[ImageReference] = Field(default_factory=list, description="Ordered image references")

    price_cents: StrictInt | None = Field(None, ge=0, description="Quoted price in integer cents")
    currency: StrictStr = Field("USD", description="ISO-4217 currency code")

    created_at: StrictStr = Field(..., description="ISO-8601 creation timestamp (UTC)")
    updated_at: StrictStr | None = Field(None, description="ISO-8601 last update timestamp (UTC)")
    is_public: bool = Field(False, description="Readable by anyone through the public design route")
    anonymized: bool = Field(False, description="Owner identity has been erased")

    def storage_paths(self) -> list[str]:
        return [image.storage_path for image in self.images]

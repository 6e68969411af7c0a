"""Share link model."""

from datetime import datetime

from pydantic import BaseModel, Field, StrictInt, StrictStr

from core.utils.time import parse_iso


class ShareLink(BaseModel):
    """Capability mapping from an opaque token to a design's image set."""

    share_token: StrictStr = Field(..., description="Opaque URL-safe random token")
    design_id: StrictStr = Field(..., description="Shared design identifier")
    user_id: StrictStr = Field(..., description="User who issued the link")
    image_paths: list[StrictStr] = Field(..., min_length=1, description="Exposed storage paths, in order")
    created_at: StrictStr = Field(..., description="ISO-8601 issuance timestamp (UTC)")
    expires_at: StrictStr = Field(..., description="ISO-8601 expiry timestamp (UTC)")
    expires_at_epoch: StrictInt = Field(..., description="Expiry in epoch seconds (DynamoDB TTL)")

    def is_expired(self, now: datetime) -> bool:
        """A link is unusable once its expiry is at or before `now`."""
        return parse_iso(self.expires_at) <= now

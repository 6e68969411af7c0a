"""Pydantic models for account erasure requests."""

from pydantic import Field, StrictBool, StrictStr

from core.models.api import ApiModel
from core.utils.constants import DELETION_GRACE_PERIOD_DAYS


class DeleteAccountRequest(ApiModel):
    """Validation model for POST /user/delete-account."""

    immediate: StrictBool = Field(False, description="Anonymize now instead of scheduling")
    reason: StrictStr | None = Field(
        None,
        max_length=1000,
        description="Free-text reason; never logged verbatim",
    )


class ImmediateDeletionResponse(ApiModel):
    success: bool = True
    message: str = "Your account has been anonymized and deleted."
    deleted_at: str


class ScheduledDeletionResponse(ApiModel):
    success: bool = True
    message: str = "Your account deletion has been scheduled."
    scheduled_for: str
    grace_period_days: int = DELETION_GRACE_PERIOD_DAYS
    cancellation_instructions: str = (
        f"You can cancel this request from your account settings "
        f"within {DELETION_GRACE_PERIOD_DAYS} days."
    )


class CancelDeletionResponse(ApiModel):
    success: bool = True
    message: str = "Your account deletion request has been cancelled."


class DeletionStatusResponse(ApiModel):
    """Response model for GET /user/delete-account."""

    deletion_requested: bool
    scheduled_for: str | None = None
    requested_at: str | None = None
    can_cancel: bool

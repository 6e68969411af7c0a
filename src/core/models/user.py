"""Models for data-subject requests and consent records."""

from pydantic import BaseModel, Field, StrictBool, StrictStr


class DeletionStatus(BaseModel):
    """Current erasure state of a user account."""

    deletion_requested: StrictBool = Field(False, description="A scheduled deletion is pending")
    scheduled_for: StrictStr | None = Field(None, description="When anonymization becomes due")
    requested_at: StrictStr | None = Field(None, description="When the request was made")


class ConsentRecord(BaseModel):
    """One append-only entry of the consent log."""

    user_id: StrictStr
    consent_type: StrictStr
    consent_given: StrictBool
    consent_version: StrictStr
    consent_text: StrictStr | None = None
    recorded_at: StrictStr


class CurrentConsent(BaseModel):
    """Latest consent flags as held on the user row."""

    gdpr_consent: StrictBool = False
    gdpr_consent_date: StrictStr | None = None
    gdpr_consent_version: StrictStr | None = None
    marketing_consent: StrictBool = False
    data_retention_accepted: StrictBool = False

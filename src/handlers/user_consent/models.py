"""Pydantic models for consent recording and retrieval."""

from pydantic import Field, StrictBool, StrictStr, field_validator

from core.models.api import ApiModel
from core.utils.constants import CONSENT_TYPES


class RecordConsentRequest(ApiModel):
    """Validation model for POST /user/consent."""

    consent_type: StrictStr = Field(..., description="terms | privacy | marketing | data_retention")
    consent_given: StrictBool
    consent_version: StrictStr = Field(..., min_length=1, max_length=32)
    consent_text: StrictStr | None = Field(None, max_length=5000)

    @field_validator("consent_type")
    @classmethod
    def validate_consent_type(cls, value: str) -> str:
        if value not in CONSENT_TYPES:
            raise ValueError(f"consentType must be one of: {', '.join(sorted(CONSENT_TYPES))}")
        return value


class RecordConsentResponse(ApiModel):
    success: bool = True
    message: str = "Consent recorded successfully"
    recorded_at: str


class ConsentHistoryEntry(ApiModel):
    consent_type: str
    consent_given: bool
    consent_version: str
    recorded_at: str


class CurrentConsentBody(ApiModel):
    gdpr_consent: bool
    gdpr_consent_date: str | None = None
    gdpr_consent_version: str | None = None
    marketing_consent: bool
    data_retention_accepted: bool


class ConsentOverviewResponse(ApiModel):
    """Response model for GET /user/consent; history is newest first."""

    current_consent: CurrentConsentBody
    consent_history: list[ConsentHistoryEntry]

"""Business logic for the consent log."""

from aws_lambda_powertools import Logger

from core.infrastructure.aws.dynamodb_user_data import DynamoDBUserData
from core.models.user import ConsentRecord
from core.repositories.metadata_repository import UserDataRepository
from core.utils.redaction import log_gdpr_event
from core.utils.time import utc_now_iso

from .models import (
    ConsentHistoryEntry,
    ConsentOverviewResponse,
    CurrentConsentBody,
    RecordConsentRequest,
)

logger = Logger(UTC=True)


class ConsentService:
    def __init__(self, user_data: UserDataRepository | None = None) -> None:
        self.user_data = user_data or DynamoDBUserData()

    def record(self, *, user_id: str, request: RecordConsentRequest) -> str:
        """Append a consent decision and return its timestamp."""
        record = ConsentRecord(
            user_id=user_id,
            consent_type=request.consent_type,
            consent_given=request.consent_given,
            consent_version=request.consent_version,
            consent_text=request.consent_text or f"{request.consent_type} consent",
            recorded_at=utc_now_iso(),
        )
        self.user_data.record_consent(record=record)

        log_gdpr_event(
            logger,
            "consent",
            user_id,
            consent_type=request.consent_type,
            consent_given=request.consent_given,
            version=request.consent_version,
        )
        return record.recorded_at

    def overview(self, *, user_id: str) -> ConsentOverviewResponse:
        current = self.user_data.get_current_consent(user_id=user_id)
        history = self.user_data.list_consent_history(user_id=user_id)

        return ConsentOverviewResponse(
            current_consent=CurrentConsentBody(**current.model_dump()),
            consent_history=[
                ConsentHistoryEntry(
                    consent_type=entry.consent_type,
                    consent_given=entry.consent_given,
                    consent_version=entry.consent_version,
                    recorded_at=entry.recorded_at,
                )
                for entry in history
            ],
        )

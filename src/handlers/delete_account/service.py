"""
Business logic for the right to erasure.

Two paths exist:
- Immediate: anonymize now and end the caller's sessions
- Scheduled: flag the account; anonymization becomes due after the
  grace period and can be cancelled until then
"""

from datetime import datetime

from aws_lambda_powertools import Logger

from core.infrastructure.aws.cognito_sessions import CognitoSessions
from core.infrastructure.aws.dynamodb_user_data import DynamoDBUserData
from core.models.errors import IdentityProviderError
from core.repositories.metadata_repository import UserDataRepository
from core.utils.auth import CallerIdentity
from core.utils.constants import DELETION_GRACE_PERIOD_DAYS
from core.utils.redaction import log_gdpr_event
from core.utils.time import days_from, parse_iso, utc_now

from .models import (
    CancelDeletionResponse,
    DeletionStatusResponse,
    ImmediateDeletionResponse,
    ScheduledDeletionResponse,
)

logger = Logger(UTC=True)


class DeleteAccountService:
    """Application service for account erasure requests."""

    def __init__(
        self,
        *,
        user_data: UserDataRepository | None = None,
        sessions: CognitoSessions | None = None,
    ) -> None:
        self.user_data = user_data or DynamoDBUserData()
        self._sessions = sessions

    @property
    def sessions(self) -> CognitoSessions:
        # Built lazily: only the immediate path needs the user pool
        if self._sessions is None:
            self._sessions = CognitoSessions()
        return self._sessions

    def delete_now(self, *, caller: CallerIdentity, reason: str | None = None) -> ImmediateDeletionResponse:
        """Anonymize synchronously, then sign the caller out everywhere.

        Raises:
            MetadataOperationFailedError: If anonymization fails
        """
        self._log_request(caller.user_id, immediate=True, reason=reason)

        deleted_at = self.user_data.anonymize_user_data(user_id=caller.user_id)

        try:
            self.sessions.sign_out_everywhere(username=caller.username)
        except IdentityProviderError:
            # Anonymization has already committed
            logger.exception("Sign-out after anonymization failed", extra={"user_id": caller.user_id})

        logger.info("User data anonymized immediately", extra={"user_id": caller.user_id})
        return ImmediateDeletionResponse(deleted_at=deleted_at)

    def schedule(
        self,
        *,
        user_id: str,
        reason: str | None = None,
        now: datetime | None = None,
    ) -> ScheduledDeletionResponse:
        self._log_request(user_id, immediate=False, reason=reason)

        requested_at = now or utc_now()
        scheduled_for = days_from(requested_at, DELETION_GRACE_PERIOD_DAYS).isoformat()

        self.user_data.schedule_deletion(
            user_id=user_id,
            requested_at=requested_at.isoformat(),
            scheduled_for=scheduled_for,
        )

        return ScheduledDeletionResponse(scheduled_for=scheduled_for)

    def cancel(self, *, user_id: str) -> CancelDeletionResponse:
        """Cancel a pending request; cancelling nothing is still a success."""
        self.user_data.cancel_deletion(user_id=user_id)
        log_gdpr_event(logger, "deletion", user_id, outcome="cancelled")
        return CancelDeletionResponse()

    def status(self, *, user_id: str, now: datetime | None = None) -> DeletionStatusResponse:
        current = self.user_data.get_deletion_status(user_id=user_id)
        now = now or utc_now()

        can_cancel = bool(
            current.deletion_requested
            and current.scheduled_for
            and parse_iso(current.scheduled_for) > now
        )

        return DeletionStatusResponse(
            deletion_requested=current.deletion_requested,
            scheduled_for=current.scheduled_for,
            requested_at=current.requested_at,
            can_cancel=can_cancel,
        )

    @staticmethod
    def _log_request(user_id: str, *, immediate: bool, reason: str | None) -> None:
        log_gdpr_event(
            logger,
            "deletion",
            user_id,
            immediate=immediate,
            note_supplied=reason is not None,
        )

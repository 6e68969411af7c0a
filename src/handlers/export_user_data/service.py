"""Business logic for the data portability (export) request."""

from typing import Any

from aws_lambda_powertools import Logger

from core.infrastructure.aws.dynamodb_user_data import DynamoDBUserData
from core.models.errors import MetadataOperationFailedError
from core.repositories.metadata_repository import UserDataRepository
from core.utils.constants import EXPORT_FILENAME_TEMPLATE
from core.utils.redaction import log_gdpr_event
from core.utils.time import utc_now_iso

from .models import ExportStatusResponse

logger = Logger(UTC=True)


def export_filename(user_id: str, timestamp: str) -> str:
    return EXPORT_FILENAME_TEMPLATE.format(user_id=user_id, timestamp=timestamp)


class ExportService:
    """Builds the user's export document and tracks when it was taken."""

    def __init__(self, user_data: UserDataRepository | None = None) -> None:
        self.user_data = user_data or DynamoDBUserData()

    def export(self, *, user_id: str) -> tuple[dict[str, Any], str]:
        """Return the full export document and its download filename.

        The document is built completely before anything is returned, so a
        failure never yields a partial export.

        Raises:
            MetadataOperationFailedError: If the export cannot be built
        """
        log_gdpr_event(logger, "export", user_id, initiated_by="user")

        document = self.user_data.export_user_data(user_id=user_id)
        exported_at = utc_now_iso()

        # The export is already built; bookkeeping must not fail the download
        try:
            self.user_data.record_export(user_id=user_id, exported_at=exported_at)
        except MetadataOperationFailedError:
            logger.exception("Failed to record export time", extra={"user_id": user_id})

        return document, export_filename(user_id, exported_at)

    def status(self, *, user_id: str) -> ExportStatusResponse:
        return ExportStatusResponse(last_export=self.user_data.get_last_export(user_id=user_id))

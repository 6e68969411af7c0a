"""DynamoDB-backed implementation of UserDataRepository.

One user's footprint spans four tables: the user row, their designs,
their share links and the consent log. Export and anonymisation walk
all of them; everything else touches the user row or the consent log.
"""

import hashlib
from typing import Any

from aws_lambda_powertools import Logger
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError as PydanticValidationError

from core.infrastructure.adapters.dynamodb_adapter import (
    DynamoDBAdapter,
    DynamoDBAdapterProtocol,
    normalize_item,
)
from core.models.errors import MetadataOperationFailedError
from core.models.user import ConsentRecord, CurrentConsent, DeletionStatus
from core.repositories.metadata_repository import Record, UserDataRepository
from core.utils.constants import (
    ANONYMIZED_EMAIL_DOMAIN,
    ANONYMIZED_NAME,
    ANONYMIZED_OWNER_PREFIX,
    ENV_CONSENT_LOG_TABLE_NAME,
    ENV_DESIGNS_TABLE_NAME,
    ENV_SHARE_LINKS_TABLE_NAME,
    ENV_USERS_TABLE_NAME,
    ERROR_CODE_CONSENT_FETCH_FAILED,
    ERROR_CODE_CONSENT_RECORD_FAILED,
    ERROR_CODE_DELETION_CANCEL_FAILED,
    ERROR_CODE_DELETION_SCHEDULE_FAILED,
    ERROR_CODE_DELETION_STATUS_FAILED,
    ERROR_CODE_USER_ANONYMIZE_FAILED,
    ERROR_CODE_USER_EXPORT_FAILED,
    EXPORT_SCHEMA_VERSION,
    USER_CREATED_INDEX,
)
from core.utils.time import utc_now_iso

logger = Logger(UTC=True)

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"

# Consent type -> user row attribute holding its current value
CONSENT_FLAG_ATTRIBUTES: dict[str, str] = {
    "terms": "gdpr_consent_given",
    "privacy": "gdpr_consent_given",
    "marketing": "marketing_consent",
    "data_retention": "data_retention_notice_accepted",
}

DELETION_ATTRIBUTES = ("deletion_requested_at", "scheduled_deletion_date")


def pseudonymous_owner_id(user_id: str) -> str:
    """Derive a stable owner id that cannot be reversed to the user id."""
    digest = hashlib.sha256(user_id.encode("utf-8")).hexdigest()
    return f"{ANONYMIZED_OWNER_PREFIX}{digest[:24]}"


def _is_conditional_failure(exc: ClientError) -> bool:
    return exc.response.get("Error", {}).get("Code") == CONDITIONAL_CHECK_FAILED


class DynamoDBUserData(UserDataRepository):
    """Data-subject operations over the users, designs, share link and consent tables."""

    def __init__(
        self,
        *,
        users: DynamoDBAdapterProtocol | None = None,
        designs: DynamoDBAdapterProtocol | None = None,
        share_links: DynamoDBAdapterProtocol | None = None,
        consent_log: DynamoDBAdapterProtocol | None = None,
    ) -> None:
        self._users: DynamoDBAdapterProtocol = users or DynamoDBAdapter(ENV_USERS_TABLE_NAME)
        self._designs: DynamoDBAdapterProtocol = designs or DynamoDBAdapter(ENV_DESIGNS_TABLE_NAME)
        self._share_links: DynamoDBAdapterProtocol = share_links or DynamoDBAdapter(
            ENV_SHARE_LINKS_TABLE_NAME
        )
        self._consent_log: DynamoDBAdapterProtocol = consent_log or DynamoDBAdapter(
            ENV_CONSENT_LOG_TABLE_NAME
        )

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_user_data(self, *, user_id: str) -> Record:
        """Gather every row scoped to the user into one document.

        The document is fully materialised before returning; any failure
        aborts the whole export.
        """
        logger.debug("Exporting user data", extra={"user_id": user_id})

        try:
            profile = self._users.get_item(key={"user_id": user_id}).get("Item")
            designs = self._query_owned(self._designs, user_id)
            share_links = self._query_owned(self._share_links, user_id)
            consent_history = self._consent_log.query_all(
                KeyConditionExpression=Key("user_id").eq(user_id),
                ScanIndexForward=False,
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error("User data export failed", extra={"user_id": user_id})
            raise MetadataOperationFailedError(
                message="Unable to export user data",
                error_code=ERROR_CODE_USER_EXPORT_FAILED,
            ) from exc

        document: Record = {
            "schema_version": EXPORT_SCHEMA_VERSION,
            "user_id": user_id,
            "exported_at": utc_now_iso(),
            "profile": normalize_item(profile) if profile else None,
            "designs": normalize_item(designs),
            "share_links": normalize_item(share_links),
            "consent_history": normalize_item(consent_history),
        }

        logger.info(
            "User data exported",
            extra={
                "user_id": user_id,
                "designs": len(designs),
                "share_links": len(share_links),
                "consent_records": len(consent_history),
            },
        )
        return document

    def record_export(self, *, user_id: str, exported_at: str) -> None:
        try:
            self._users.update_item(
                key={"user_id": user_id},
                UpdateExpression="SET last_export_at = :exported_at",
                ExpressionAttributeValues={":exported_at": exported_at},
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error("Failed to record export", extra={"user_id": user_id})
            raise MetadataOperationFailedError(
                message="Unable to record data export",
                error_code=ERROR_CODE_USER_EXPORT_FAILED,
            ) from exc

    def get_last_export(self, *, user_id: str) -> str | None:
        try:
            item = self._users.get_item(key={"user_id": user_id}).get("Item") or {}
        except (ClientError, BotoCoreError) as exc:
            logger.error("Failed to read export history", extra={"user_id": user_id})
            raise MetadataOperationFailedError(
                message="Unable to read export history",
                error_code=ERROR_CODE_USER_EXPORT_FAILED,
            ) from exc

        last_export: str | None = item.get("last_export_at")
        return last_export

    # ------------------------------------------------------------------
    # Erasure
    # ------------------------------------------------------------------

    def anonymize_user_data(self, *, user_id: str) -> str:
        """Strip identifying data while keeping designs and the consent log.

        - Profile fields are replaced with placeholders and deletion flags cleared
        - Owned designs are re-keyed to a pseudonymous owner
        - Share links issued by the user are deleted
        """
        anonymized_at = utc_now_iso()
        pseudonym = pseudonymous_owner_id(user_id)
        logger.debug("Anonymizing user", extra={"user_id": user_id})

        try:
            self._anonymize_profile(user_id, pseudonym, anonymized_at)

            designs = self._query_owned(self._designs, user_id)
            for design in designs:
                self._designs.update_item(
                    key={"design_id": design["design_id"]},
                    UpdateExpression="SET user_id = :owner, anonymized = :true, updated_at = :now",
                    ExpressionAttributeValues={
                        ":owner": pseudonym,
                        ":true": True,
                        ":now": anonymized_at,
                    },
                )

            share_links = self._query_owned(self._share_links, user_id)
            self._share_links.batch_delete(
                keys=[{"share_token": link["share_token"]} for link in share_links]
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error("User anonymization failed", extra={"user_id": user_id})
            raise MetadataOperationFailedError(
                message="Unable to anonymize user data",
                error_code=ERROR_CODE_USER_ANONYMIZE_FAILED,
            ) from exc

        logger.info(
            "User anonymized",
            extra={
                "user_id": user_id,
                "designs": len(designs),
                "share_links_revoked": len(share_links),
            },
        )
        return anonymized_at

    def _anonymize_profile(self, user_id: str, pseudonym: str, anonymized_at: str) -> None:
        try:
            self._users.update_item(
                key={"user_id": user_id},
                UpdateExpression=(
                    "SET #email = :email, #name = :name, anonymized_at = :now, "
                    "deletion_requested = :false "
                    "REMOVE #phone, #address, deletion_requested_at, scheduled_deletion_date"
                ),
                ConditionExpression="attribute_exists(user_id)",
                ExpressionAttributeNames={
                    "#email": "email",
                    "#name": "name",
                    "#phone": "phone",
                    "#address": "address",
                },
                ExpressionAttributeValues={
                    ":email": f"{pseudonym}@{ANONYMIZED_EMAIL_DOMAIN}",
                    ":name": ANONYMIZED_NAME,
                    ":now": anonymized_at,
                    ":false": False,
                },
            )
        except ClientError as exc:
            if not _is_conditional_failure(exc):
                raise
            logger.info("No profile row to anonymize", extra={"user_id": user_id})

    def schedule_deletion(
        self,
        *,
        user_id: str,
        requested_at: str,
        scheduled_for: str,
    ) -> None:
        """Flag the account for anonymisation once the grace period ends.

        Re-requesting overwrites the previous schedule.
        """
        try:
            self._users.update_item(
                key={"user_id": user_id},
                UpdateExpression=(
                    "SET deletion_requested = :true, "
                    "deletion_requested_at = :requested_at, "
                    "scheduled_deletion_date = :scheduled_for"
                ),
                ExpressionAttributeValues={
                    ":true": True,
                    ":requested_at": requested_at,
                    ":scheduled_for": scheduled_for,
                },
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error("Failed to schedule deletion", extra={"user_id": user_id})
            raise MetadataOperationFailedError(
                message="Unable to schedule account deletion",
                error_code=ERROR_CODE_DELETION_SCHEDULE_FAILED,
            ) from exc

        logger.info("Deletion scheduled", extra={"user_id": user_id, "scheduled_for": scheduled_for})

    def cancel_deletion(self, *, user_id: str) -> None:
        try:
            self._users.update_item(
                key={"user_id": user_id},
                UpdateExpression=(
                    "SET deletion_requested = :false REMOVE " + ", ".join(DELETION_ATTRIBUTES)
                ),
                ConditionExpression="attribute_exists(user_id)",
                ExpressionAttributeValues={":false": False},
            )
        except ClientError as exc:
            if _is_conditional_failure(exc):
                logger.info("No user row; nothing to cancel", extra={"user_id": user_id})
                return

            logger.error("Failed to cancel deletion", extra={"user_id": user_id})
            raise MetadataOperationFailedError(
                message="Unable to cancel account deletion",
                error_code=ERROR_CODE_DELETION_CANCEL_FAILED,
            ) from exc
        except BotoCoreError as exc:
            logger.error("Failed to cancel deletion", extra={"user_id": user_id})
            raise MetadataOperationFailedError(
                message="Unable to cancel account deletion",
                error_code=ERROR_CODE_DELETION_CANCEL_FAILED,
            ) from exc

        logger.info("Deletion cancelled", extra={"user_id": user_id})

    def get_deletion_status(self, *, user_id: str) -> DeletionStatus:
        try:
            item = self._users.get_item(key={"user_id": user_id}).get("Item") or {}
        except (ClientError, BotoCoreError) as exc:
            logger.error("Failed to read deletion status", extra={"user_id": user_id})
            raise MetadataOperationFailedError(
                message="Unable to read account deletion status",
                error_code=ERROR_CODE_DELETION_STATUS_FAILED,
            ) from exc

        return DeletionStatus(
            deletion_requested=bool(item.get("deletion_requested", False)),
            scheduled_for=item.get("scheduled_deletion_date"),
            requested_at=item.get("deletion_requested_at"),
        )

    # ------------------------------------------------------------------
    # Consent
    # ------------------------------------------------------------------

    def record_consent(self, *, record: ConsentRecord) -> None:
        """Append to the consent log, then mirror the flag on the user row.

        The log is the legal record; a failed flag update is logged and
        does not undo the appended entry.
        """
        try:
            self._consent_log.put_item(
                item=record.model_dump(exclude_none=True),
                condition_expression="attribute_not_exists(recorded_at)",
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error(
                "Failed to record consent",
                extra={"user_id": record.user_id, "consent_type": record.consent_type},
            )
            raise MetadataOperationFailedError(
                message="Unable to record consent",
                error_code=ERROR_CODE_CONSENT_RECORD_FAILED,
            ) from exc

        try:
            self._update_consent_flag(record)
        except (ClientError, BotoCoreError):
            logger.exception(
                "Failed to update current consent",
                extra={"user_id": record.user_id, "consent_type": record.consent_type},
            )

    def _update_consent_flag(self, record: ConsentRecord) -> None:
        attribute = CONSENT_FLAG_ATTRIBUTES.get(record.consent_type)
        if attribute is None:
            return

        update = "SET #flag = :given"
        values: dict[str, Any] = {":given": record.consent_given}

        if attribute == "gdpr_consent_given":
            update += ", gdpr_consent_date = :recorded_at, gdpr_consent_version = :version"
            values[":recorded_at"] = record.recorded_at
            values[":version"] = record.consent_version

        self._users.update_item(
            key={"user_id": record.user_id},
            UpdateExpression=update,
            ExpressionAttributeNames={"#flag": attribute},
            ExpressionAttributeValues=values,
        )

    def list_consent_history(self, *, user_id: str) -> list[ConsentRecord]:
        try:
            items = self._consent_log.query_all(
                KeyConditionExpression=Key("user_id").eq(user_id),
                ScanIndexForward=False,
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error("Failed to fetch consent history", extra={"user_id": user_id})
            raise MetadataOperationFailedError(
                message="Unable to fetch consent history",
                error_code=ERROR_CODE_CONSENT_FETCH_FAILED,
            ) from exc

        try:
            return [ConsentRecord.model_validate(normalize_item(item)) for item in items]
        except PydanticValidationError as exc:
            logger.error("Stored consent record is malformed", extra={"user_id": user_id})
            raise MetadataOperationFailedError(
                message="Invalid consent record format",
                error_code=ERROR_CODE_CONSENT_FETCH_FAILED,
            ) from exc

    def get_current_consent(self, *, user_id: str) -> CurrentConsent:
        try:
            item = self._users.get_item(key={"user_id": user_id}).get("Item") or {}
        except (ClientError, BotoCoreError) as exc:
            logger.error("Failed to fetch current consent", extra={"user_id": user_id})
            raise MetadataOperationFailedError(
                message="Unable to fetch consent status",
                error_code=ERROR_CODE_CONSENT_FETCH_FAILED,
            ) from exc

        return CurrentConsent(
            gdpr_consent=bool(item.get("gdpr_consent_given", False)),
            gdpr_consent_date=item.get("gdpr_consent_date"),
            gdpr_consent_version=item.get("gdpr_consent_version"),
            marketing_consent=bool(item.get("marketing_consent", False)),
            data_retention_accepted=bool(item.get("data_retention_notice_accepted", False)),
        )

    @staticmethod
    def _query_owned(table: DynamoDBAdapterProtocol, user_id: str) -> list[dict[str, Any]]:
        return table.query_all(
            IndexName=USER_CREATED_INDEX,
            KeyConditionExpression=Key("user_id").eq(user_id),
            ScanIndexForward=False,
        )

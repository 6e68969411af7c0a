"""DynamoDB-backed implementation of ShareLinkRepository."""

from datetime import datetime

from aws_lambda_powertools import Logger
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError as PydanticValidationError

from core.infrastructure.adapters.dynamodb_adapter import (
    DynamoDBAdapter,
    DynamoDBAdapterProtocol,
    normalize_item,
)
from core.models.errors import StorageError
from core.models.share_link import ShareLink
from core.repositories.metadata_repository import ShareLinkRepository
from core.utils.constants import (
    ENV_SHARE_LINKS_TABLE_NAME,
    ERROR_CODE_SHARE_LINK_CREATE_FAILED,
    ERROR_CODE_SHARE_LINK_FETCH_FAILED,
    ERROR_CODE_SHARE_LINK_PURGE_FAILED,
)
from core.utils.time import epoch_seconds

logger = Logger(UTC=True)


class DynamoDBShareLinks(ShareLinkRepository):
    """DynamoDB-backed share link storage.

    Tokens are logged only as a short prefix.
    """

    def __init__(self, adapter: DynamoDBAdapterProtocol | None = None) -> None:
        self._db: DynamoDBAdapterProtocol = adapter or DynamoDBAdapter(ENV_SHARE_LINKS_TABLE_NAME)

    def create_share_link(self, *, share_link: ShareLink) -> None:
        """Persist a share link.

        Raises:
            StorageError: If the write fails, including a token collision
        """
        log_context = {
            "design_id": share_link.design_id,
            "token_prefix": share_link.share_token[:6],
        }
        logger.debug("Creating share link", extra=log_context)

        try:
            self._db.put_item(
                item=share_link.model_dump(),
                condition_expression="attribute_not_exists(share_token)",
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error("DynamoDB put_item failed", extra=log_context)
            raise StorageError(
                message="Unable to create share link at this time",
                error_code=ERROR_CODE_SHARE_LINK_CREATE_FAILED,
                details={"design_id": share_link.design_id},
            ) from exc

        logger.info("Share link created", extra=log_context)

    def get_share_link(self, *, share_token: str) -> ShareLink | None:
        logger.debug("Fetching share link", extra={"token_prefix": share_token[:6]})

        try:
            response = self._db.get_item(key={"share_token": share_token})
        except (ClientError, BotoCoreError) as exc:
            logger.error("DynamoDB get_item failed", extra={"token_prefix": share_token[:6]})
            raise StorageError(
                message="Unable to retrieve share link",
                error_code=ERROR_CODE_SHARE_LINK_FETCH_FAILED,
            ) from exc

        item = response.get("Item")
        if item is None:
            return None

        try:
            return ShareLink.model_validate(normalize_item(item))
        except PydanticValidationError as exc:
            logger.error("Stored share link is malformed", extra={"token_prefix": share_token[:6]})
            raise StorageError(
                message="Invalid share link record format",
                error_code=ERROR_CODE_SHARE_LINK_FETCH_FAILED,
            ) from exc

    def purge_expired(self, *, now: datetime) -> int:
        """Delete rows whose TTL attribute is at or before `now`.

        DynamoDB TTL deletion lags by up to a couple of days; this sweep
        removes expired rows promptly.
        """
        cutoff = epoch_seconds(now)
        logger.debug("Purging expired share links", extra={"cutoff": cutoff})

        try:
            items = self._db.scan_all(
                FilterExpression=Attr("expires_at_epoch").lte(cutoff),
                ProjectionExpression="share_token",
            )
            keys = [{"share_token": item["share_token"]} for item in items]
            self._db.batch_delete(keys=keys)
        except (ClientError, BotoCoreError) as exc:
            logger.error("Share link purge failed", extra={"cutoff": cutoff})
            raise StorageError(
                message="Unable to purge expired share links",
                error_code=ERROR_CODE_SHARE_LINK_PURGE_FAILED,
            ) from exc

        logger.info("Expired share links purged", extra={"count": len(keys)})
        return len(keys)

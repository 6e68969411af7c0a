"""DynamoDB-backed implementation of DesignRepository."""

from aws_lambda_powertools import Logger
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError as PydanticValidationError

from core.infrastructure.adapters.dynamodb_adapter import (
    DynamoDBAdapter,
    DynamoDBAdapterProtocol,
    normalize_item,
)
from core.models.design import Design, ImageReference
from core.models.errors import MetadataOperationFailedError
from core.repositories.metadata_repository import DesignRepository
from core.utils.constants import (
    ENV_DESIGNS_TABLE_NAME,
    ERROR_CODE_DESIGN_CREATE_FAILED,
    ERROR_CODE_DESIGN_FETCH_FAILED,
    ERROR_CODE_DESIGN_LIST_FAILED,
    ERROR_CODE_DESIGN_UPDATE_FAILED,
    USER_CREATED_INDEX,
)
from core.utils.time import utc_now_iso

logger = Logger(UTC=True)


class DynamoDBDesigns(DesignRepository):
    """DynamoDB-backed design storage with error handling.

    All boto3 errors are caught and translated into
    domain-specific errors with stable semantics.
    """

    def __init__(self, adapter: DynamoDBAdapterProtocol | None = None) -> None:
        """Initialize with DynamoDB adapter."""
        self._db: DynamoDBAdapterProtocol = adapter or DynamoDBAdapter(ENV_DESIGNS_TABLE_NAME)

    def create_design(self, *, design: Design) -> None:
        """Insert a new design row.

        Raises:
            MetadataOperationFailedError: If the write fails, including an
                id collision
        """
        log_context = {"design_id": design.design_id, "user_id": design.user_id}
        logger.debug("Creating design", extra=log_context)

        try:
            self._db.put_item(
                item=design.model_dump(exclude_none=True),
                condition_expression="attribute_not_exists(design_id)",
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error("DynamoDB put_item failed", extra=log_context)
            raise MetadataOperationFailedError(
                message="Unable to save design at this time",
                error_code=ERROR_CODE_DESIGN_CREATE_FAILED,
                details={"design_id": design.design_id},
            ) from exc

        logger.info("Design created", extra=log_context)

    def get_design(self, *, design_id: str) -> Design | None:
        """Fetch a single design.

        Raises:
            MetadataOperationFailedError: If the read fails or the row is malformed
        """
        logger.debug("Fetching design", extra={"design_id": design_id})

        try:
            response = self._db.get_item(key={"design_id": design_id})
        except (ClientError, BotoCoreError) as exc:
            logger.error("DynamoDB get_item failed", extra={"design_id": design_id})
            raise MetadataOperationFailedError(
                message="Unable to retrieve design",
                error_code=ERROR_CODE_DESIGN_FETCH_FAILED,
                details={"design_id": design_id},
            ) from exc

        item = response.get("Item")
        if item is None:
            return None

        try:
            return Design.model_validate(normalize_item(item))
        except PydanticValidationError as exc:
            logger.error("Stored design is malformed", extra={"design_id": design_id})
            raise MetadataOperationFailedError(
                message="Invalid design record format",
                error_code=ERROR_CODE_DESIGN_FETCH_FAILED,
                details={"design_id": design_id},
            ) from exc

    def list_user_designs(self, *, user_id: str) -> list[Design]:
        try:
            items = self._db.query_all(
                IndexName=USER_CREATED_INDEX,
                KeyConditionExpression=Key("user_id").eq(user_id),
                ScanIndexForward=False,
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error("DynamoDB query failed", extra={"user_id": user_id})
            raise MetadataOperationFailedError(
                message="Unable to list designs",
                error_code=ERROR_CODE_DESIGN_LIST_FAILED,
            ) from exc

        try:
            return [Design.model_validate(normalize_item(item)) for item in items]
        except PydanticValidationError as exc:
            logger.error("Stored design is malformed", extra={"user_id": user_id})
            raise MetadataOperationFailedError(
                message="Invalid design record format",
                error_code=ERROR_CODE_DESIGN_LIST_FAILED,
            ) from exc

    def replace_images(self, *, design_id: str, images: list[ImageReference]) -> None:
        """Overwrite the ordered image references of an existing design."""
        logger.debug(
            "Updating design images",
            extra={"design_id": design_id, "count": len(images)},
        )

        try:
            self._db.update_item(
                key={"design_id": design_id},
                UpdateExpression="SET images = :images, updated_at = :updated_at",
                ConditionExpression="attribute_exists(design_id)",
                ExpressionAttributeValues={
                    ":images": [image.model_dump() for image in images],
                    ":updated_at": utc_now_iso(),
                },
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error("DynamoDB update_item failed", extra={"design_id": design_id})
            raise MetadataOperationFailedError(
                message="Unable to update design images",
                error_code=ERROR_CODE_DESIGN_UPDATE_FAILED,
                details={"design_id": design_id},
            ) from exc

        logger.info("Design images updated", extra={"design_id": design_id, "count": len(images)})

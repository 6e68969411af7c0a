"""S3-backed implementation of ImageStorageRepository."""

import os

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from core.infrastructure.adapters.s3_adapter import S3Adapter, S3AdapterProtocol
from core.models.errors import StorageError
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import (
    ENV_APP_RUNTIME,
    ERROR_CODE_IMAGE_DELETE_FAILED,
    ERROR_CODE_IMAGE_LIST_FAILED,
    ERROR_CODE_IMAGE_LOOKUP_FAILED,
    ERROR_CODE_IMAGE_PRESIGNED_URL_FAILED,
    ERROR_CODE_IMAGE_UPLOAD_FAILED,
    IMAGE_CACHE_CONTROL,
    LOCALHOST_URL,
    LOCALSTACK_URL,
)

logger = Logger(UTC=True)

NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


class S3ImageStorage(ImageStorageRepository):
    """Image storage implementation backed by Amazon S3.

    All botocore errors are caught and translated into StorageError.
    """

    def __init__(self, adapter: S3AdapterProtocol | None = None) -> None:
        """Create storage using the provided S3 adapter."""
        self._s3: S3AdapterProtocol = adapter or S3Adapter()

    def upload_image(
        self,
        *,
        key: str,
        data: bytes,
        content_type: str,
        metadata: dict[str, str],
    ) -> str:
        """Upload image bytes to S3 and return the object's public URL."""
        logger.debug(
            "Uploading image",
            extra={"key": key, "size": len(data), "content_type": content_type},
        )

        try:
            self._s3.put_object(
                key=key,
                body=data,
                content_type=content_type,
                metadata=metadata,
                cache_control=IMAGE_CACHE_CONTROL,
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error("S3 upload failed", extra={"key": key})
            raise StorageError(
                message="Unable to store image at this time",
                error_code=ERROR_CODE_IMAGE_UPLOAD_FAILED,
                details={"key": key},
            ) from exc

        logger.info("Image uploaded successfully", extra={"key": key})
        return self._s3.public_url(key)

    def image_exists(self, *, key: str) -> bool:
        """Check whether an object exists via HEAD."""
        try:
            self._s3.head_object(key=key)
            return True

        except ClientError as exc:
            if _error_code(exc) in NOT_FOUND_CODES:
                return False

            logger.error("S3 head_object failed", extra={"key": key})
            raise StorageError(
                message="Unable to verify image at this time",
                error_code=ERROR_CODE_IMAGE_LOOKUP_FAILED,
                details={"key": key},
            ) from exc

        except BotoCoreError as exc:
            logger.error("S3 head_object failed", extra={"key": key})
            raise StorageError(
                message="Unable to verify image at this time",
                error_code=ERROR_CODE_IMAGE_LOOKUP_FAILED,
                details={"key": key},
            ) from exc

    def list_design_images(self, *, prefix: str) -> list[str]:
        logger.debug("Listing images", extra={"prefix": prefix})

        try:
            return self._s3.list_keys(prefix=prefix)
        except (ClientError, BotoCoreError) as exc:
            logger.error("S3 listing failed", extra={"prefix": prefix})
            raise StorageError(
                message="Unable to list images at this time",
                error_code=ERROR_CODE_IMAGE_LIST_FAILED,
                details={"prefix": prefix},
            ) from exc

    def remove_images(self, *, keys: list[str]) -> None:
        """Delete image objects from S3 in batches."""
        if not keys:
            return

        logger.debug("Deleting images", extra={"count": len(keys)})

        try:
            failed = self._s3.delete_objects(keys=keys)
        except (ClientError, BotoCoreError) as exc:
            logger.error("S3 deletion failed", extra={"count": len(keys)})
            raise StorageError(
                message="Unable to delete images at this time",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={"count": len(keys)},
            ) from exc

        if failed:
            logger.error("S3 refused some deletions", extra={"failed": failed})
            raise StorageError(
                message="Unable to delete images at this time",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={"failed_keys": failed},
            )

        logger.info("Images deleted successfully", extra={"count": len(keys)})

    def generate_presigned_get_url(self, *, key: str, expires_in: int) -> str:
        """Generate a pre-signed S3 URL for reading an image object."""
        logger.debug(
            "Generating pre-signed S3 URL",
            extra={"key": key, "expires_in": expires_in},
        )

        try:
            url = self._s3.generate_presigned_url(
                method="get_object",
                params={"Key": key},
                expires_in=expires_in,
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error("Failed to generate pre-signed URL", extra={"key": key})
            raise StorageError(
                message="Unable to generate image access URL",
                error_code=ERROR_CODE_IMAGE_PRESIGNED_URL_FAILED,
                details={"key": key},
            ) from exc

        if os.getenv(ENV_APP_RUNTIME) == "localstack":
            # Containers reach LocalStack by service name, browsers by localhost
            url = url.replace(LOCALSTACK_URL, LOCALHOST_URL, 1)

        return url

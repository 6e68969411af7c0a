"""
Business logic for resolving share tokens.

Resolution is unauthenticated; holding a live token is the only
credential. Unknown and expired tokens produce the same error so a
caller cannot tell which tokens ever existed.
"""

from datetime import datetime

from aws_lambda_powertools import Logger

from core.infrastructure.aws.dynamodb_share_links import DynamoDBShareLinks
from core.infrastructure.aws.s3_image_storage import S3ImageStorage
from core.models.errors import NotFoundError
from core.repositories.metadata_repository import ShareLinkRepository
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import ERROR_CODE_SHARE_LINK_NOT_FOUND, SHARED_IMAGE_URL_MAX_SECONDS
from core.utils.time import parse_iso, utc_now

from .models import SharedImagesResponse

logger = Logger(UTC=True)


class ShareResolverService:
    def __init__(
        self,
        *,
        share_links: ShareLinkRepository | None = None,
        storage: ImageStorageRepository | None = None,
    ) -> None:
        self.share_links = share_links or DynamoDBShareLinks()
        self.storage = storage or S3ImageStorage()

    def resolve(self, share_token: str, *, now: datetime | None = None) -> SharedImagesResponse:
        """Return the design id, paths, expiry and read URLs for a live token.

        Raises:
            NotFoundError: If the token is unknown or expired
            StorageError: If the link cannot be read or URLs cannot be signed
        """
        now = now or utc_now()
        share_link = self.share_links.get_share_link(share_token=share_token)

        if share_link is None or share_link.is_expired(now):
            logger.info(
                "Share link not resolvable",
                extra={"token_prefix": share_token[:6], "known": share_link is not None},
            )
            raise NotFoundError(
                message="Share link not found or expired",
                error_code=ERROR_CODE_SHARE_LINK_NOT_FOUND,
            )

        # Read URLs never outlive the link itself
        remaining = int((parse_iso(share_link.expires_at) - now).total_seconds())
        expires_in = max(1, min(remaining, SHARED_IMAGE_URL_MAX_SECONDS))

        image_urls = [
            self.storage.generate_presigned_get_url(key=path, expires_in=expires_in)
            for path in share_link.image_paths
        ]

        logger.info(
            "Share link resolved",
            extra={"design_id": share_link.design_id, "image_count": len(image_urls)},
        )

        return SharedImagesResponse(
            images=list(share_link.image_paths),
            image_urls=image_urls,
            design_id=share_link.design_id,
            expires_at=share_link.expires_at,
        )

"""Business logic for issuing share links.

A share link is a capability: anyone holding the token can view the
exposed images until the link expires. Issuance therefore checks that
the caller owns the design and that every exposed path is one of the
design's stored images.
"""

import secrets

from aws_lambda_powertools import Logger

from core.infrastructure.adapters.client_config import require_env
from core.infrastructure.aws.dynamodb_designs import DynamoDBDesigns
from core.infrastructure.aws.dynamodb_share_links import DynamoDBShareLinks
from core.infrastructure.aws.s3_image_storage import S3ImageStorage
from core.models.errors import AuthorizationError, ValidationError
from core.models.share_link import ShareLink
from core.repositories.metadata_repository import DesignRepository, ShareLinkRepository
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import (
    ENV_PUBLIC_BASE_URL,
    ERROR_CODE_DESIGN_ACCESS_DENIED,
    ERROR_CODE_IMAGE_ACCESS_DENIED,
    ERROR_CODE_IMAGE_MISSING_FROM_STORAGE,
    ERROR_CODE_IMAGE_PATHS_REQUIRED,
    SHARE_LINK_TTL_DAYS,
    SHARE_PATH_SEGMENT,
    SHARE_TOKEN_BYTES,
)
from core.utils.time import days_from, epoch_seconds, utc_now

logger = Logger(UTC=True)


def generate_share_token() -> str:
    """URL-safe token carrying 256 bits of entropy."""
    return secrets.token_urlsafe(SHARE_TOKEN_BYTES)


class ShareService:
    """Application service responsible for minting share links."""

    def __init__(
        self,
        *,
        designs: DesignRepository | None = None,
        storage: ImageStorageRepository | None = None,
        share_links: ShareLinkRepository | None = None,
        public_base_url: str | None = None,
    ) -> None:
        self.designs = designs or DynamoDBDesigns()
        self.storage = storage or S3ImageStorage()
        self.share_links = share_links or DynamoDBShareLinks()
        self.public_base_url = (public_base_url or require_env(ENV_PUBLIC_BASE_URL)).rstrip("/")

    def share_url(self, share_token: str) -> str:
        return f"{self.public_base_url}/{SHARE_PATH_SEGMENT}/{share_token}"

    def issue_share_link(
        self,
        *,
        design_id: str,
        user_id: str,
        image_paths: list[str],
    ) -> tuple[ShareLink, str]:
        """Create a share link exposing `image_paths` of the caller's design.

        Returns:
            The persisted link and its public URL

        Raises:
            ValidationError: If no paths are given or a path is missing from storage
            AuthorizationError: If the design is not the caller's, or a path is not
                one of the design's images
            StorageError: If the link cannot be persisted
        """
        if not image_paths:
            raise ValidationError(
                message="At least one image path is required",
                error_code=ERROR_CODE_IMAGE_PATHS_REQUIRED,
            )

        # Preserve the caller's order, drop repeats
        paths = list(dict.fromkeys(image_paths))

        design = self.designs.get_design(design_id=design_id)
        if design is None or design.user_id != user_id:
            logger.warning(
                "Share denied: design not owned by caller",
                extra={"design_id": design_id, "found": design is not None},
            )
            raise AuthorizationError(
                message="You do not have access to this design",
                error_code=ERROR_CODE_DESIGN_ACCESS_DENIED,
            )

        stored_paths = set(design.storage_paths())
        foreign = [path for path in paths if path not in stored_paths]
        if foreign:
            logger.warning(
                "Share denied: paths outside design",
                extra={"design_id": design_id, "count": len(foreign)},
            )
            raise AuthorizationError(
                message="Image paths do not belong to this design",
                error_code=ERROR_CODE_IMAGE_ACCESS_DENIED,
                details={"image_paths": foreign},
            )

        missing = [path for path in paths if not self.storage.image_exists(key=path)]
        if missing:
            raise ValidationError(
                message="Some images are no longer available",
                error_code=ERROR_CODE_IMAGE_MISSING_FROM_STORAGE,
                details={"image_paths": missing},
            )

        created_at = utc_now()
        expires_at = days_from(created_at, SHARE_LINK_TTL_DAYS)

        share_link = ShareLink(
            share_token=generate_share_token(),
            design_id=design_id,
            user_id=user_id,
            image_paths=paths,
            created_at=created_at.isoformat(),
            expires_at=expires_at.isoformat(),
            expires_at_epoch=epoch_seconds(expires_at),
        )
        self.share_links.create_share_link(share_link=share_link)

        logger.info(
            "Share link issued",
            extra={"design_id": design_id, "image_count": len(paths)},
        )
        return share_link, self.share_url(share_link.share_token)

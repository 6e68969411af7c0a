"""Business logic for persisting generated design images.

Source images are served by the generator from short-lived URLs; this
module copies them into the image bucket so designs keep durable URLs.
"""

from collections.abc import Sequence
from urllib.parse import urlsplit

import requests
from aws_lambda_powertools import Logger

from core.infrastructure.adapters.http_fetcher import HttpFetcher, ResponseTooLargeError
from core.infrastructure.aws.dynamodb_designs import DynamoDBDesigns
from core.infrastructure.aws.s3_image_storage import S3ImageStorage
from core.models.design import Design, ImageReference
from core.models.errors import AuthorizationError, DesignServiceError, SourceFetchError
from core.repositories.metadata_repository import DesignRepository
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import (
    ANONYMOUS_OWNER_SEGMENT,
    ERROR_CODE_DESIGN_ACCESS_DENIED,
    ERROR_CODE_SOURCE_TOO_LARGE,
)
from core.utils.mime import extension_for, guess_image_mime_type
from core.utils.time import epoch_millis, utc_now

from .models import IngestImageItem, IngestionResult

logger = Logger(UTC=True)


def design_prefix(design_id: str, user_id: str | None) -> str:
    return f"{user_id or ANONYMOUS_OWNER_SEGMENT}/{design_id}/"


def build_storage_path(
    *,
    design_id: str,
    user_id: str | None,
    view_number: int,
    extension: str,
) -> str:
    """Object key: `<owner or anonymous>/<design_id>/view_<n>_<epoch_millis>.<ext>`."""
    return (
        f"{design_prefix(design_id, user_id)}"
        f"view_{view_number}_{epoch_millis(utc_now())}.{extension}"
    )


def _source_host(url: str) -> str:
    # Source URLs embed signatures; only the host is safe to log
    return urlsplit(url).netloc


class ImageIngestionService:
    """Application service responsible for image ingestion.

    This service orchestrates:
    - Fetching generated images from their source URLs
    - Writing each image as one object in the image bucket
    - Recording the stored images on the owning design
    """

    def __init__(
        self,
        *,
        storage: ImageStorageRepository | None = None,
        designs: DesignRepository | None = None,
        fetcher: HttpFetcher | None = None,
    ) -> None:
        self.storage = storage or S3ImageStorage()
        self.designs = designs or DynamoDBDesigns()
        self.fetcher = fetcher or HttpFetcher()

    def ingest_image(
        self,
        *,
        source_url: str,
        design_id: str,
        view_number: int,
        user_id: str | None = None,
    ) -> IngestionResult:
        """Fetch one source image and store it.

        Exactly one object is written on success. No retries.

        Raises:
            SourceFetchError: If the source cannot be downloaded
            StorageError: If the bucket rejects the write
        """
        log_context = {
            "design_id": design_id,
            "view_number": view_number,
            "source_host": _source_host(source_url),
        }
        logger.debug("Fetching source image", extra=log_context)

        try:
            data = self.fetcher.get_bytes(source_url)
        except ResponseTooLargeError as exc:
            logger.warning("Source image too large", extra=log_context)
            raise SourceFetchError(
                message="Source image exceeds the maximum allowed size",
                error_code=ERROR_CODE_SOURCE_TOO_LARGE,
                details={"view_number": view_number},
            ) from exc
        except requests.RequestException as exc:
            logger.warning("Source image fetch failed", extra=log_context)
            raise SourceFetchError(
                message="Unable to fetch source image",
                details={"view_number": view_number},
            ) from exc

        if not data:
            raise SourceFetchError(
                message="Source image is empty",
                details={"view_number": view_number},
            )

        content_type = guess_image_mime_type(data)
        storage_path = build_storage_path(
            design_id=design_id,
            user_id=user_id,
            view_number=view_number,
            extension=extension_for(content_type),
        )

        storage_url = self.storage.upload_image(
            key=storage_path,
            data=data,
            content_type=content_type,
            metadata={
                "design_id": design_id,
                "view_number": str(view_number),
                "owner": user_id or ANONYMOUS_OWNER_SEGMENT,
            },
        )

        logger.info(
            "Source image stored",
            extra={**log_context, "storage_path": storage_path, "size": len(data)},
        )
        return IngestionResult(
            view_number=view_number,
            original_url=source_url,
            storage_path=storage_path,
            storage_url=storage_url,
        )

    def ingest_batch(
        self,
        *,
        items: Sequence[tuple[str, int]],
        design_id: str,
        user_id: str | None = None,
    ) -> list[IngestionResult]:
        """Ingest `(source_url, view_number)` pairs sequentially.

        One result per input, in input order. A failing item is reported
        with `error` set and never aborts its siblings.
        """
        results: list[IngestionResult] = []

        for source_url, view_number in items:
            try:
                results.append(
                    self.ingest_image(
                        source_url=source_url,
                        design_id=design_id,
                        view_number=view_number,
                        user_id=user_id,
                    )
                )
            except DesignServiceError as exc:
                logger.warning(
                    "Image ingestion failed",
                    extra={
                        "design_id": design_id,
                        "view_number": view_number,
                        "error_code": exc.error_code,
                    },
                )
                results.append(
                    IngestionResult(
                        view_number=view_number,
                        original_url=source_url,
                        error=exc.message,
                    )
                )

        return results

    def clear_design_images(
        self,
        *,
        design_id: str,
        user_id: str | None = None,
        keep: Sequence[str] = (),
    ) -> int:
        """Delete every object under the design's prefix except `keep`.

        Returns the number of objects deleted.
        """
        keys = self.storage.list_design_images(prefix=design_prefix(design_id, user_id))
        kept = set(keep)
        doomed = [key for key in keys if key not in kept]

        self.storage.remove_images(keys=doomed)

        logger.info(
            "Design images cleared",
            extra={"design_id": design_id, "deleted": len(doomed)},
        )
        return len(doomed)

    def ingest_for_design(
        self,
        *,
        design_id: str,
        caller_id: str,
        images: Sequence[IngestImageItem],
        replace_existing: bool = False,
    ) -> list[IngestionResult]:
        """Ingest images for a design the caller owns and record them on it.

        Without `replace_existing`, new views are merged into the design's
        references, replacing any with the same view number.

        Raises:
            AuthorizationError: If the design is missing or owned by someone else
        """
        design = self._require_owned_design(design_id=design_id, caller_id=caller_id)

        results = self.ingest_batch(
            items=[(item.url, item.view_number) for item in images],
            design_id=design_id,
            user_id=caller_id,
        )

        view_types = {item.view_number: item.view_type for item in images}
        new_references = [
            ImageReference(
                design_id=design_id,
                view_number=result.view_number,
                view_type=view_types.get(result.view_number),
                storage_path=result.storage_path,
                public_url=result.storage_url,
            )
            for result in results
            if result.succeeded and result.storage_path and result.storage_url
        ]

        if not new_references:
            logger.warning("No images ingested; design unchanged", extra={"design_id": design_id})
            return results

        if replace_existing:
            references = new_references
        else:
            replaced_views = {reference.view_number for reference in new_references}
            references = [
                reference
                for reference in design.images
                if reference.view_number not in replaced_views
            ] + new_references

        references.sort(key=lambda reference: reference.view_number)
        self.designs.replace_images(design_id=design_id, images=references)

        if replace_existing:
            self.clear_design_images(
                design_id=design_id,
                user_id=caller_id,
                keep=[reference.storage_path for reference in references],
            )

        return results

    def _require_owned_design(self, *, design_id: str, caller_id: str) -> Design:
        design = self.designs.get_design(design_id=design_id)

        # Missing and foreign designs are indistinguishable to the caller
        if design is None or design.user_id != caller_id:
            logger.warning(
                "Design access denied",
                extra={"design_id": design_id, "found": design is not None},
            )
            raise AuthorizationError(
                message="You do not have access to this design",
                error_code=ERROR_CODE_DESIGN_ACCESS_DENIED,
            )

        return design

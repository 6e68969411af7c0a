"""Abstract contract for design image file storage."""

from abc import ABC, abstractmethod


class ImageStorageRepository(ABC):
    """Contract for storing and addressing design image objects.

    Implementations could be S3, GCS, local disk, etc.
    Services depend on this interface, not the implementation.
    """

    @abstractmethod
    def upload_image(
        self,
        *,
        key: str,
        data: bytes,
        content_type: str,
        metadata: dict[str, str],
    ) -> str:
        """Write one image object and return its durable public URL.

        Args:
            key: Object key, e.g. '<owner>/<design_id>/view_1_<millis>.png'
            data: Binary image content
            content_type: MIME type (e.g., 'image/png')
            metadata: Small string metadata stored with the object

        Raises:
            StorageError: If the write is rejected
        """

    @abstractmethod
    def image_exists(self, *, key: str) -> bool:
        """Return True when an object exists at `key`.

        Raises:
            StorageError: If the lookup fails for reasons other than absence
        """

    @abstractmethod
    def list_design_images(self, *, prefix: str) -> list[str]:
        """List every object key below a design prefix.

        Raises:
            StorageError: If listing fails
        """

    @abstractmethod
    def remove_images(self, *, keys: list[str]) -> None:
        """Delete the given objects.

        Raises:
            StorageError: If any object could not be deleted
        """

    @abstractmethod
    def generate_presigned_get_url(self, *, key: str, expires_in: int) -> str:
        """Return a time-limited read URL for an object.

        Raises:
            StorageError: If signing fails
        """

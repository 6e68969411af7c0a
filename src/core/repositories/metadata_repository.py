"""Abstract contracts for record persistence (designs, share links, users)."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from core.models.design import Design, ImageReference
from core.models.share_link import ShareLink
from core.models.user import ConsentRecord, CurrentConsent, DeletionStatus

Record = dict[str, Any]


class DesignRepository(ABC):
    """Contract for reading and updating designs.

    Designs are never hard-deleted; erasure re-keys them instead.
    """

    @abstractmethod
    def create_design(self, *, design: Design) -> None:
        """Persist a new design; an existing design_id is never overwritten.

        Raises:
            MetadataOperationFailedError: If the write fails
        """

    @abstractmethod
    def get_design(self, *, design_id: str) -> Design | None:
        """Fetch a design by id, or None if it does not exist.

        Raises:
            MetadataOperationFailedError: If the read fails
        """

    @abstractmethod
    def list_user_designs(self, *, user_id: str) -> list[Design]:
        """Return the user's designs, newest first."""

    @abstractmethod
    def replace_images(self, *, design_id: str, images: list[ImageReference]) -> None:
        """Overwrite the design's ordered image references.

        Raises:
            MetadataOperationFailedError: If the update fails
        """


class ShareLinkRepository(ABC):
    """Contract for persisting share tokens."""

    @abstractmethod
    def create_share_link(self, *, share_link: ShareLink) -> None:
        """Persist a new share link; tokens are never overwritten.

        Raises:
            StorageError: If persistence fails
        """

    @abstractmethod
    def get_share_link(self, *, share_token: str) -> ShareLink | None:
        """Fetch a share link by token, or None if unknown.

        Raises:
            StorageError: If the read fails
        """

    @abstractmethod
    def purge_expired(self, *, now: datetime) -> int:
        """Delete every share link that expired at or before `now`.

        Returns:
            Number of rows deleted

        Raises:
            StorageError: If the sweep fails
        """


class UserDataRepository(ABC):
    """Contract for data-subject operations scoped to one user.

    Export and anonymisation are single repository operations so the
    whole user footprint is handled in one place.
    """

    @abstractmethod
    def export_user_data(self, *, user_id: str) -> Record:
        """Return every record scoped to the user as one JSON-ready document.

        Raises:
            MetadataOperationFailedError: If any part of the export fails
        """

    @abstractmethod
    def record_export(self, *, user_id: str, exported_at: str) -> None:
        """Stamp the time of the user's latest export."""

    @abstractmethod
    def get_last_export(self, *, user_id: str) -> str | None:
        """Return the ISO timestamp of the latest export, if any."""

    @abstractmethod
    def anonymize_user_data(self, *, user_id: str) -> str:
        """Irreversibly anonymise the user and return the anonymisation time.

        Raises:
            MetadataOperationFailedError: If anonymisation fails
        """

    @abstractmethod
    def schedule_deletion(
        self,
        *,
        user_id: str,
        requested_at: str,
        scheduled_for: str,
    ) -> None:
        """Record a pending deletion request on the user row."""

    @abstractmethod
    def cancel_deletion(self, *, user_id: str) -> None:
        """Clear a pending deletion request; a no-op when none exists."""

    @abstractmethod
    def get_deletion_status(self, *, user_id: str) -> DeletionStatus:
        """Return the user's deletion request state without side effects."""

    @abstractmethod
    def record_consent(self, *, record: ConsentRecord) -> None:
        """Append a consent record and update the current consent flag."""

    @abstractmethod
    def list_consent_history(self, *, user_id: str) -> list[ConsentRecord]:
        """Return the user's consent records, newest first."""

    @abstractmethod
    def get_current_consent(self, *, user_id: str) -> CurrentConsent:
        """Return the consent flags currently held on the user row."""

"""Custom exception classes for the design service."""

from http import HTTPStatus
from typing import Any

from core.utils.constants import (
    ERROR_CODE_AUTHENTICATION_REQUIRED,
    ERROR_CODE_FORBIDDEN,
    ERROR_CODE_IDENTITY_PROVIDER,
    ERROR_CODE_METADATA_OPERATION_FAILED,
    ERROR_CODE_RESOURCE_NOT_FOUND,
    ERROR_CODE_SOURCE_FETCH_FAILED,
    ERROR_CODE_STORAGE,
    ERROR_CODE_UPSTREAM,
    ERROR_CODE_VALIDATION_FAILED,
)


class DesignServiceError(Exception):
    """
    Base exception for all design service errors.

    All custom errors must inherit from this class.
    Callers must explicitly provide a message and error code.
    Optional contextual information can be supplied via `details`.
    Each subclass declares the HTTP status it maps to at the API boundary.
    """

    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(self.message)


class AuthenticationError(DesignServiceError):
    """Raised when the caller identity is missing or invalid."""

    status = HTTPStatus.UNAUTHORIZED

    def __init__(
        self,
        *,
        message: str = "Authentication required",
        error_code: str = ERROR_CODE_AUTHENTICATION_REQUIRED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class ValidationError(DesignServiceError):
    """Raised when request validation fails."""

    status = HTTPStatus.BAD_REQUEST

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_VALIDATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class AuthorizationError(DesignServiceError):
    """Raised when the caller lacks rights over the referenced resource."""

    status = HTTPStatus.FORBIDDEN

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_FORBIDDEN,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class NotFoundError(DesignServiceError):
    """Raised when a requested resource is not found."""

    status = HTTPStatus.NOT_FOUND

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_RESOURCE_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class UpstreamError(DesignServiceError):
    """Raised when an external dependency fails."""

    status = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_UPSTREAM,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class SourceFetchError(UpstreamError):
    """Raised when a generated image cannot be fetched from its source URL."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_SOURCE_FETCH_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class StorageError(UpstreamError):
    """Raised when an object storage operation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_STORAGE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class MetadataOperationFailedError(UpstreamError):
    """Raised when a DynamoDB-backed record operation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_METADATA_OPERATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class IdentityProviderError(UpstreamError):
    """Raised when the identity provider rejects a session operation."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_IDENTITY_PROVIDER,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )

"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Authentication / Authorization Errors
ERROR_CODE_AUTHENTICATION_REQUIRED = "AUTHENTICATION_REQUIRED"
ERROR_CODE_FORBIDDEN = "FORBIDDEN"
ERROR_CODE_DESIGN_ACCESS_DENIED = "DESIGN_ACCESS_DENIED"
ERROR_CODE_IMAGE_ACCESS_DENIED = "IMAGE_ACCESS_DENIED"

# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_INVALID_JSON = "INVALID_JSON"
ERROR_CODE_IMAGE_PATHS_REQUIRED = "IMAGE_PATHS_REQUIRED"
ERROR_CODE_IMAGE_MISSING_FROM_STORAGE = "IMAGE_MISSING_FROM_STORAGE"

# Not Found Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"
ERROR_CODE_DESIGN_NOT_FOUND = "DESIGN_NOT_FOUND"
ERROR_CODE_SHARE_LINK_NOT_FOUND = "SHARE_LINK_NOT_FOUND"

# Upstream Errors
ERROR_CODE_UPSTREAM = "UPSTREAM_ERROR"
ERROR_CODE_SOURCE_FETCH_FAILED = "SOURCE_FETCH_FAILED"
ERROR_CODE_SOURCE_TOO_LARGE = "SOURCE_TOO_LARGE"
ERROR_CODE_IDENTITY_PROVIDER = "IDENTITY_PROVIDER_ERROR"

# Storage Errors
ERROR_CODE_STORAGE = "STORAGE_ERROR"
ERROR_CODE_IMAGE_UPLOAD_FAILED = "IMAGE_UPLOAD_FAILED"
ERROR_CODE_IMAGE_DELETE_FAILED = "IMAGE_DELETE_FAILED"
ERROR_CODE_IMAGE_LIST_FAILED = "IMAGE_LIST_FAILED"
ERROR_CODE_IMAGE_LOOKUP_FAILED = "IMAGE_LOOKUP_FAILED"
ERROR_CODE_IMAGE_PRESIGNED_URL_FAILED = "PRESIGNED_URL_FAILED"

# Metadata / DynamoDB Errors
ERROR_CODE_METADATA_OPERATION_FAILED = "METADATA_OPERATION_FAILED"
ERROR_CODE_DESIGN_CREATE_FAILED = "DESIGN_CREATE_FAILED"
ERROR_CODE_DESIGN_FETCH_FAILED = "DESIGN_FETCH_FAILED"
ERROR_CODE_DESIGN_LIST_FAILED = "DESIGN_LIST_FAILED"
ERROR_CODE_DESIGN_UPDATE_FAILED = "DESIGN_UPDATE_FAILED"
ERROR_CODE_SHARE_LINK_CREATE_FAILED = "SHARE_LINK_CREATE_FAILED"
ERROR_CODE_SHARE_LINK_FETCH_FAILED = "SHARE_LINK_FETCH_FAILED"
ERROR_CODE_SHARE_LINK_PURGE_FAILED = "SHARE_LINK_PURGE_FAILED"
ERROR_CODE_USER_EXPORT_FAILED = "USER_EXPORT_FAILED"
ERROR_CODE_USER_ANONYMIZE_FAILED = "USER_ANONYMIZE_FAILED"
ERROR_CODE_DELETION_SCHEDULE_FAILED = "DELETION_SCHEDULE_FAILED"
ERROR_CODE_DELETION_CANCEL_FAILED = "DELETION_CANCEL_FAILED"
ERROR_CODE_DELETION_STATUS_FAILED = "DELETION_STATUS_FAILED"
ERROR_CODE_CONSENT_RECORD_FAILED = "CONSENT_RECORD_FAILED"
ERROR_CODE_CONSENT_FETCH_FAILED = "CONSENT_FETCH_FAILED"


# ============================================================================
# Designs
# ============================================================================

DESIGN_ID_PREFIX = "dsn_"
DEFAULT_DESIGN_TITLE = "Untitled Design"
DEFAULT_JEWELRY_TYPE = "custom"
DEFAULT_CURRENCY = "USD"
MAX_DESIGN_TAGS = 20


# ============================================================================
# Image Ingestion
# ============================================================================

MAX_SOURCE_IMAGE_BYTES = 10 * 1024 * 1024  # 10MB in bytes
DEFAULT_SOURCE_FETCH_TIMEOUT_SECONDS = 30.0
DEFAULT_IMAGE_MIME_TYPE = "image/png"
IMAGE_CACHE_CONTROL = "public, max-age=31536000"
ANONYMOUS_OWNER_SEGMENT = "anonymous"
MAX_BATCH_IMAGES = 12

MIME_TYPE_EXTENSION_MAP: Final[dict[str, str]] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}


# ============================================================================
# Share Links
# ============================================================================

SHARE_LINK_TTL_DAYS = 30
SHARE_TOKEN_BYTES = 32  # 256 bits of entropy
SHARED_IMAGE_URL_MAX_SECONDS = 3600
SHARE_PATH_SEGMENT = "shared"


# ============================================================================
# Data Subject Requests
# ============================================================================

DELETION_GRACE_PERIOD_DAYS = 30
ANONYMIZED_OWNER_PREFIX = "anon_"
ANONYMIZED_NAME = "Deleted User"
ANONYMIZED_EMAIL_DOMAIN = "anonymized.invalid"
EXPORT_FILENAME_TEMPLATE = "user-data-{user_id}-{timestamp}.json"
EXPORT_SCHEMA_VERSION = "1.0"

CONSENT_TYPES: Final[frozenset[str]] = frozenset(
    {"terms", "privacy", "marketing", "data_retention"}
)


# ============================================================================
# DynamoDB Indexes
# ============================================================================

USER_CREATED_INDEX = "user-created-index"
BATCH_DELETE_CHUNK = 1000


# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,PUT,DELETE,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key"
EXPOSE_HEADERS = "Content-Type,Content-Length,Content-Disposition"
DEFAULT_CONTENT_TYPE = "application/json"


# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
ENV_IMAGE_S3_BUCKET_NAME = "IMAGE_S3_BUCKET_NAME"
ENV_IMAGE_PUBLIC_BASE_URL = "IMAGE_PUBLIC_BASE_URL"
ENV_DESIGNS_TABLE_NAME = "DESIGNS_TABLE_NAME"
ENV_SHARE_LINKS_TABLE_NAME = "SHARE_LINKS_TABLE_NAME"
ENV_USERS_TABLE_NAME = "USERS_TABLE_NAME"
ENV_CONSENT_LOG_TABLE_NAME = "CONSENT_LOG_TABLE_NAME"
ENV_PUBLIC_BASE_URL = "PUBLIC_BASE_URL"
ENV_USER_POOL_ID = "USER_POOL_ID"
ENV_SOURCE_FETCH_TIMEOUT_SECONDS = "SOURCE_FETCH_TIMEOUT_SECONDS"
ENV_APP_RUNTIME = "APP_RUNTIME"
LOCALSTACK_URL = "http://localstack"
LOCALHOST_URL = "http://localhost"

# ============================================================================
# AWS Client Timeouts
# ============================================================================

AWS_CONNECT_TIMEOUT_SECONDS = 5
AWS_READ_TIMEOUT_SECONDS = 10
AWS_MAX_ATTEMPTS = 3

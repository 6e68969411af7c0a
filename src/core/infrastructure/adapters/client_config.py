"""Shared boto3 client configuration."""

import os
from typing import Any

from botocore.config import Config

from core.utils.constants import (
    AWS_CONNECT_TIMEOUT_SECONDS,
    AWS_MAX_ATTEMPTS,
    AWS_READ_TIMEOUT_SECONDS,
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
)

BOTO_CONFIG = Config(
    connect_timeout=AWS_CONNECT_TIMEOUT_SECONDS,
    read_timeout=AWS_READ_TIMEOUT_SECONDS,
    retries={"max_attempts": AWS_MAX_ATTEMPTS, "mode": "standard"},
)


def client_kwargs() -> dict[str, Any]:
    """Keyword arguments common to every boto3 client and resource."""
    return {
        "endpoint_url": os.getenv(ENV_AWS_ENDPOINT_URL),
        "region_name": os.getenv(ENV_AWS_REGION),
        "config": BOTO_CONFIG,
    }


def require_env(name: str) -> str:
    """Return a required environment variable or fail fast."""
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"{name} environment variable is not set")
    return value

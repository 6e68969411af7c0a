"""Thin adapter for interacting with Amazon S3."""

from collections.abc import Iterator, Mapping, Sequence
import os
from typing import Any, Protocol

import boto3

from core.infrastructure.adapters.client_config import client_kwargs, require_env
from core.utils.constants import (
    BATCH_DELETE_CHUNK,
    ENV_AWS_REGION,
    ENV_IMAGE_PUBLIC_BASE_URL,
    ENV_IMAGE_S3_BUCKET_NAME,
)


class S3AdapterProtocol(Protocol):
    """Minimal S3 adapter protocol (repository-facing)."""

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
        cache_control: str | None = None,
    ) -> None: ...

    def head_object(self, *, key: str) -> Mapping[str, Any]: ...

    def list_keys(self, *, prefix: str) -> list[str]: ...

    def delete_objects(self, *, keys: Sequence[str]) -> list[str]: ...

    def public_url(self, key: str) -> str: ...

    def generate_presigned_url(
        self,
        *,
        method: str,
        params: dict[str, Any],
        expires_in: int,
    ) -> str: ...


def _chunks(items: Sequence[str], size: int) -> Iterator[Sequence[str]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


class S3Adapter:
    """Low-level S3 operations (mechanical, no error handling).

    This adapter:
    - Wraps boto3 S3 client
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(self) -> None:
        """Create S3 client from environment configuration."""
        self._bucket = require_env(ENV_IMAGE_S3_BUCKET_NAME)
        self._region = os.getenv(ENV_AWS_REGION) or "us-east-1"
        self._public_base_url = os.getenv(ENV_IMAGE_PUBLIC_BASE_URL)
        self._client = boto3.client("s3", **client_kwargs())

    @property
    def bucket(self) -> str:
        return self._bucket

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
        cache_control: str | None = None,
    ) -> None:
        """Store object in S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        kwargs: dict[str, Any] = {
            "Bucket": self._bucket,
            "Key": key,
            "Body": body,
            "ContentType": content_type,
            "Metadata": metadata,
        }
        if cache_control:
            kwargs["CacheControl"] = cache_control

        self._client.put_object(**kwargs)

    def head_object(self, *, key: str) -> Mapping[str, Any]:
        """Fetch object headers.
        Raises boto3 exceptions (404 as ClientError) - caught by domain implementation.
        """
        response: Mapping[str, Any] = self._client.head_object(
            Bucket=self._bucket,
            Key=key,
        )
        return response

    def list_keys(self, *, prefix: str) -> list[str]:
        """List every object key under a prefix, following pagination."""
        keys: list[str] = []
        paginator = self._client.get_paginator("list_objects_v2")

        for page in paginator.paginate(Bucket=self._bucket, Prefix=prefix):
            keys.extend(obj["Key"] for obj in page.get("Contents", []))

        return keys

    def delete_objects(self, *, keys: Sequence[str]) -> list[str]:
        """Delete objects in batches and return the keys S3 refused to delete."""
        failed: list[str] = []

        for chunk in _chunks(keys, BATCH_DELETE_CHUNK):
            response = self._client.delete_objects(
                Bucket=self._bucket,
                Delete={"Objects": [{"Key": key} for key in chunk], "Quiet": True},
            )
            failed.extend(err["Key"] for err in response.get("Errors", []))

        return failed

    def public_url(self, key: str) -> str:
        """Return the durable URL of an object.

        A configured CDN/base URL takes precedence over the bucket's
        virtual-hosted address.
        """
        if self._public_base_url:
            return f"{self._public_base_url.rstrip('/')}/{key}"
        return f"https://{self._bucket}.s3.{self._region}.amazonaws.com/{key}"

    def generate_presigned_url(
        self,
        *,
        method: str,
        params: dict[str, Any],
        expires_in: int,
    ) -> str:
        """Generate a pre-signed S3 URL."""
        url: str = self._client.generate_presigned_url(
            ClientMethod=method,
            Params={**params, "Bucket": self._bucket},
            ExpiresIn=expires_in,
        )
        return url

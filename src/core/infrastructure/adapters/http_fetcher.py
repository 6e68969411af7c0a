"""Thin adapter for downloading generated images over HTTP."""

import os

import requests

from core.utils.constants import (
    DEFAULT_SOURCE_FETCH_TIMEOUT_SECONDS,
    ENV_SOURCE_FETCH_TIMEOUT_SECONDS,
    MAX_SOURCE_IMAGE_BYTES,
)

CHUNK_SIZE = 64 * 1024


class ResponseTooLargeError(Exception):
    """Raised when a source body exceeds the configured ceiling."""


class HttpFetcher:
    """Low-level HTTP GET (mechanical, no domain error handling).

    This adapter:
    - Uses one requests.Session per instance
    - Applies a finite timeout to every request
    - Lets requests exceptions bubble up
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        timeout: float | None = None,
        max_bytes: int = MAX_SOURCE_IMAGE_BYTES,
    ) -> None:
        self._session = session or requests.Session()
        self._timeout = timeout or float(
            os.getenv(ENV_SOURCE_FETCH_TIMEOUT_SECONDS, DEFAULT_SOURCE_FETCH_TIMEOUT_SECONDS)
        )
        self._max_bytes = max_bytes

    def get_bytes(self, url: str) -> bytes:
        """Download `url` and return its body.

        Raises:
            requests.RequestException: On network errors, timeouts and non-2xx
            ResponseTooLargeError: If the body exceeds `max_bytes`
        """
        with self._session.get(url, timeout=self._timeout, stream=True) as response:
            response.raise_for_status()

            body = bytearray()
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                body.extend(chunk)
                if len(body) > self._max_bytes:
                    raise ResponseTooLargeError(f"Source image exceeds {self._max_bytes} bytes")

            return bytes(body)

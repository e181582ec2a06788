"""Remote fetcher: retrieve a byte payload from an untrusted URL.

The URL is validated before any network call. The request runs under one
deadline (connect + headers + body) and sends a fixed browser-like header
set. A declared Content-Length above the cap is refused before the body is
read; otherwise the body is streamed with a running total and abandoned as
soon as it passes the cap. The buffer is what the storage backend receives.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx

from app.application.services.url_validation import validate_remote_url
from app.core.constants import (
    DEFAULT_CONTENT_TYPE,
    FETCH_HEADERS,
    FETCH_TIMEOUT_SECONDS,
    MAX_REMOTE_FILE_SIZE,
)
from app.infrastructure.exceptions import (
    EmptyPayloadError,
    PayloadTooLargeError,
    RemoteFetchTimeoutError,
    UpstreamResponseError,
    UpstreamUnreachableError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchedContent:
    """Body and declared content type of a successful fetch."""

    url: str
    content: bytes
    content_type: str

    @property
    def size(self) -> int:
        return len(self.content)


def _declared_length(response: httpx.Response) -> int | None:
    value = response.headers.get("content-length")
    try:
        return int(value) if value is not None else None
    except ValueError:
        return None


class RemoteFetcher:
    """Fetch a URL under a deadline and size cap. Does not retry."""

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout_seconds: float = FETCH_TIMEOUT_SECONDS,
        max_size: int = MAX_REMOTE_FILE_SIZE,
    ) -> None:
        """Initialize fetcher.

        Args:
            http_client: Optional shared client (connection reuse); a short-lived one otherwise.
            timeout_seconds: Deadline for the whole request including the body.
            max_size: Largest accepted body in bytes.
        """
        self._shared_http = http_client
        self.timeout_seconds = timeout_seconds
        self.max_size = max_size

    @asynccontextmanager
    async def _http_cm(self):
        """Yield shared HTTP client or a short-lived one."""
        if self._shared_http is not None:
            yield self._shared_http
            return
        async with httpx.AsyncClient() as client:
            yield client

    async def _download(self, url: str) -> tuple[str, bytes]:
        """Return (content type, body), enforcing status and size while streaming."""
        async with self._http_cm() as client:
            async with client.stream(
                "GET",
                url,
                headers=FETCH_HEADERS,
                follow_redirects=True,
                timeout=self.timeout_seconds,
            ) as response:
                if not response.is_success:
                    raise UpstreamResponseError(url, response.status_code, response.reason_phrase)

                declared = _declared_length(response)
                if declared is not None and declared > self.max_size:
                    raise PayloadTooLargeError(declared, self.max_size)

                chunks: list[bytes] = []
                size = 0
                async for chunk in response.aiter_bytes():
                    size += len(chunk)
                    if size > self.max_size:
                        raise PayloadTooLargeError(size, self.max_size)
                    chunks.append(chunk)

                content_type = response.headers.get("content-type") or DEFAULT_CONTENT_TYPE
                return content_type, b"".join(chunks)

    async def fetch(self, url: str) -> FetchedContent:
        """Fetch url and return its body and content type.

        Raises:
            ValidationException: URL malformed or not http(s); no request is made.
            RemoteFetchTimeoutError: Deadline expired.
            UpstreamUnreachableError: Transport failure.
            UpstreamResponseError: Non-2xx response.
            EmptyPayloadError: Zero-length body.
            PayloadTooLargeError: Declared or received body larger than max_size.
        """
        validate_remote_url(url)
        logger.info("Fetching remote file: %s", url)
        try:
            content_type, content = await asyncio.wait_for(
                self._download(url), timeout=self.timeout_seconds
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.warning("Remote fetch timed out after %ss: %s", self.timeout_seconds, url)
            raise RemoteFetchTimeoutError(url, self.timeout_seconds) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            reason = str(e) or e.__class__.__name__
            logger.warning("Remote fetch failed: %s (%s)", url, reason)
            raise UpstreamUnreachableError(url, reason) from e

        if not content:
            raise EmptyPayloadError(url)

        logger.info("Fetched %s bytes (%s) from %s", len(content), content_type, url)
        return FetchedContent(url=url, content=content, content_type=content_type)

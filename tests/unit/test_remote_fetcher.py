"""RemoteFetcher: URL validation, deadline, status and size checks."""

import httpx
import pytest

from app.core.constants import MAX_REMOTE_FILE_SIZE
from app.domain.exceptions import ValidationException
from app.infrastructure.exceptions import (
    EmptyPayloadError,
    PayloadTooLargeError,
    RemoteFetchTimeoutError,
    UpstreamResponseError,
    UpstreamUnreachableError,
)
from app.infrastructure.external.fetch import RemoteFetcher, validate_remote_url


def _fetcher(handler, **kwargs) -> tuple[RemoteFetcher, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def _record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(_record))
    return RemoteFetcher(http_client=client, **kwargs), seen


@pytest.mark.parametrize(
    ("url", "message"),
    [
        ("ftp://example.com/a.png", "Only HTTP/HTTPS URLs are supported"),
        ("file:///etc/passwd", "Only HTTP/HTTPS URLs are supported"),
        ("not a url", "Invalid URL format"),
        ("http://", "Invalid URL format"),
        ("http://example.com:99999/a", "Invalid URL format"),
    ],
)
def test_validate_rejects_bad_urls(url: str, message: str) -> None:
    with pytest.raises(ValidationException) as exc_info:
        validate_remote_url(url)
    assert exc_info.value.message == message


async def test_rejected_scheme_makes_no_request() -> None:
    fetcher, seen = _fetcher(lambda r: httpx.Response(200, content=b"x"))
    with pytest.raises(ValidationException):
        await fetcher.fetch("ftp://example.com/a.png")
    assert seen == []


async def test_fetch_returns_body_and_content_type() -> None:
    fetcher, seen = _fetcher(
        lambda r: httpx.Response(200, content=b"png-bytes", headers={"Content-Type": "image/png"})
    )
    fetched = await fetcher.fetch("https://example.com/pic.png")
    assert fetched.content == b"png-bytes"
    assert fetched.content_type == "image/png"
    assert fetched.size == 9
    assert len(seen) == 1
    assert "Chrome" in seen[0].headers["User-Agent"]


async def test_missing_content_type_defaults_to_octet_stream() -> None:
    fetcher, _ = _fetcher(lambda r: httpx.Response(200, content=b"x"))
    fetched = await fetcher.fetch("https://example.com/blob")
    assert fetched.content_type == "application/octet-stream"


async def test_body_at_exact_limit_is_accepted() -> None:
    body = b"a" * MAX_REMOTE_FILE_SIZE
    fetcher, _ = _fetcher(lambda r: httpx.Response(200, content=body))
    fetched = await fetcher.fetch("https://example.com/big.bin")
    assert fetched.size == MAX_REMOTE_FILE_SIZE


async def test_body_over_limit_is_rejected() -> None:
    fetcher, _ = _fetcher(lambda r: httpx.Response(200, content=b"a" * 11), max_size=10)
    with pytest.raises(PayloadTooLargeError) as exc_info:
        await fetcher.fetch("https://example.com/big.bin")
    assert exc_info.value.details == {"size": 11, "limit": 10}


async def test_declared_length_over_limit_is_rejected_before_reading_body() -> None:
    consumed: list[bytes] = []

    async def body():
        consumed.append(b"x")
        yield b"x"

    fetcher, _ = _fetcher(
        lambda r: httpx.Response(200, headers={"Content-Length": "11"}, content=body()),
        max_size=10,
    )
    with pytest.raises(PayloadTooLargeError) as exc_info:
        await fetcher.fetch("https://example.com/huge.bin")
    assert exc_info.value.details == {"size": 11, "limit": 10}
    assert consumed == []


async def test_undeclared_body_stops_once_over_limit() -> None:
    chunks_sent: list[int] = []

    async def body():
        for _ in range(5):
            chunks_sent.append(4)
            yield b"abcd"

    fetcher, _ = _fetcher(lambda r: httpx.Response(200, content=body()), max_size=10)
    with pytest.raises(PayloadTooLargeError) as exc_info:
        await fetcher.fetch("https://example.com/chunked.bin")
    assert exc_info.value.details == {"size": 12, "limit": 10}
    assert len(chunks_sent) == 3


async def test_empty_body_is_rejected() -> None:
    fetcher, _ = _fetcher(lambda r: httpx.Response(200, content=b""))
    with pytest.raises(EmptyPayloadError):
        await fetcher.fetch("https://example.com/empty")


async def test_non_success_status() -> None:
    fetcher, _ = _fetcher(lambda r: httpx.Response(404))
    with pytest.raises(UpstreamResponseError) as exc_info:
        await fetcher.fetch("https://example.com/missing.png")
    assert exc_info.value.message == "Target URL returned an error: 404 Not Found"
    assert exc_info.value.details["status_code"] == 404


async def test_redirects_are_followed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old.png":
            return httpx.Response(302, headers={"Location": "https://example.com/new.png"})
        return httpx.Response(200, content=b"moved", headers={"Content-Type": "image/png"})

    fetcher, seen = _fetcher(handler)
    fetched = await fetcher.fetch("https://example.com/old.png")
    assert fetched.content == b"moved"
    assert [r.url.path for r in seen] == ["/old.png", "/new.png"]


async def test_timeout_maps_to_fetch_timeout() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    fetcher, _ = _fetcher(handler, timeout_seconds=5.0)
    with pytest.raises(RemoteFetchTimeoutError) as exc_info:
        await fetcher.fetch("https://slow.example.com/a.png")
    assert exc_info.value.details["timeout_seconds"] == 5.0


async def test_transport_failure_maps_to_unreachable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    fetcher, _ = _fetcher(handler)
    with pytest.raises(UpstreamUnreachableError) as exc_info:
        await fetcher.fetch("https://down.example.com/a.png")
    assert exc_info.value.message == "Unable to connect to the target URL: connection refused"

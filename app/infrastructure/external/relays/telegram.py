"""Telegram Bot API uploader with retry and downgrade handling.

Sending a file is a small state machine over (attempt, method). Each HTTP
attempt produces a SendResult; next_step() turns (state, result) into one of
succeed / retry-after-delay / fail. Three retry ladders exist and are checked
in this order:

1. 429 rate limit: wait the relay's retry_after (default 5s), same method.
2. other non-2xx on sendPhoto/sendAudio: resend immediately as sendDocument.
3. timeout / transport failure: linear (timeout) or exponential backoff.

413 is terminal. All ladders share one attempt budget (max_retries extra
attempts), so the loop in TelegramUploader.send_file() always terminates.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx

from app.core.storage_config import TelegramConfig
from app.infrastructure.exceptions import (
    MissingFileIdError,
    RelayNetworkError,
    RelayPayloadRejectedError,
    RelayRateLimitedError,
    RelayRejectedError,
    RelayTimeoutError,
    StorageUploadError,
)
from app.shared.enums import TelegramMethod

logger = logging.getLogger(__name__)

DEFAULT_RETRY_AFTER_SECONDS = 5.0
TIMEOUT_BACKOFF_SECONDS = 2.0
TRANSPORT_BACKOFF_SECONDS = 1.0


class ResultKind(str, Enum):
    """Classification of a single send attempt."""

    SUCCESS = "success"
    HTTP_ERROR = "http_error"
    TIMEOUT = "timeout"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class SendResult:
    """Outcome of one HTTP attempt against the Bot API."""

    kind: ResultKind
    status_code: int | None = None
    body: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    @classmethod
    def from_response(cls, status_code: int, body: dict[str, Any]) -> SendResult:
        kind = ResultKind.SUCCESS if 200 <= status_code < 300 else ResultKind.HTTP_ERROR
        return cls(kind=kind, status_code=status_code, body=body)

    @classmethod
    def timeout(cls) -> SendResult:
        return cls(kind=ResultKind.TIMEOUT, error="timeout")

    @classmethod
    def transport_error(cls, reason: str) -> SendResult:
        return cls(kind=ResultKind.TRANSPORT_ERROR, error=reason)

    @property
    def retry_after(self) -> float:
        """Relay-suggested wait for 429 responses (default 5 seconds)."""
        params = self.body.get("parameters") or {}
        value = params.get("retry_after") if isinstance(params, dict) else None
        try:
            return float(value) if value else DEFAULT_RETRY_AFTER_SECONDS
        except (TypeError, ValueError):
            return DEFAULT_RETRY_AFTER_SECONDS

    @property
    def description(self) -> str | None:
        value = self.body.get("description")
        return str(value) if value else None


@dataclass(frozen=True)
class SendState:
    """Current attempt (0-based) and the API method it uses."""

    attempt: int
    method: TelegramMethod


class StepAction(str, Enum):
    SUCCEED = "succeed"
    RETRY = "retry"
    FAIL = "fail"


@dataclass(frozen=True)
class Step:
    """Transition produced by next_step()."""

    action: StepAction
    next_state: SendState | None = None
    delay: float = 0.0
    reason: str = ""
    error: StorageUploadError | None = None


def next_step(state: SendState, result: SendResult, max_retries: int = 3) -> Step:
    """Decide what follows an attempt. Pure: no I/O, no clock."""
    can_retry = state.attempt < max_retries

    if result.kind is ResultKind.SUCCESS:
        return Step(StepAction.SUCCEED)

    if result.kind is ResultKind.HTTP_ERROR:
        if result.status_code == 429:
            wait = result.retry_after
            if can_retry:
                return Step(
                    StepAction.RETRY,
                    SendState(state.attempt + 1, state.method),
                    delay=wait,
                    reason="rate_limited",
                )
            return Step(StepAction.FAIL, error=RelayRateLimitedError(wait))

        if result.status_code == 413:
            return Step(StepAction.FAIL, error=RelayPayloadRejectedError())

        if can_retry and state.method.can_downgrade:
            return Step(
                StepAction.RETRY,
                SendState(state.attempt + 1, TelegramMethod.DOCUMENT),
                reason="downgrade_to_document",
            )
        return Step(
            StepAction.FAIL,
            error=RelayRejectedError(result.status_code or 0, result.description),
        )

    if result.kind is ResultKind.TIMEOUT:
        if can_retry:
            return Step(
                StepAction.RETRY,
                SendState(state.attempt + 1, state.method),
                delay=TIMEOUT_BACKOFF_SECONDS * (state.attempt + 1),
                reason="timeout",
            )
        return Step(StepAction.FAIL, error=RelayTimeoutError())

    if can_retry:
        return Step(
            StepAction.RETRY,
            SendState(state.attempt + 1, state.method),
            delay=TRANSPORT_BACKOFF_SECONDS * (2**state.attempt),
            reason="transport_error",
        )
    return Step(StepAction.FAIL, error=RelayNetworkError(result.error or "unknown"))


def extract_file_id(body: dict[str, Any]) -> str | None:
    """Return the file id from a successful sendX response.

    Photos come in several sizes; the largest (by declared file_size) wins.
    """
    if not body.get("ok") or not isinstance(body.get("result"), dict):
        return None
    result = body["result"]
    photos = result.get("photo")
    if photos:
        largest = max(photos, key=lambda p: p.get("file_size") or 0)
        return largest.get("file_id")
    for kind in ("document", "video", "audio"):
        ref = result.get(kind)
        if isinstance(ref, dict) and ref.get("file_id"):
            return ref["file_id"]
    return None


@dataclass(frozen=True)
class TelegramUploadResult:
    file_id: str
    message_id: int | None
    method: TelegramMethod
    attempts: int


class TelegramUploader:
    """Send a file to the configured chat and return the relay's file id."""

    def __init__(
        self,
        config: TelegramConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """Initialize uploader.

        Args:
            config: Bot token, chat id, API base, per-call timeout, retry budget.
            http_client: Optional shared client; a short-lived one otherwise.
            sleep: Awaitable delay function (injected in tests).
        """
        self.config = config
        self._shared_http = http_client
        self._sleep = sleep

    @asynccontextmanager
    async def _http_cm(self):
        if self._shared_http is not None:
            yield self._shared_http
            return
        async with httpx.AsyncClient() as client:
            yield client

    def _method_url(self, method: TelegramMethod) -> str:
        return f"{self.config.api_base}/bot{self.config.bot_token}/{method.value}"

    async def _post(
        self,
        method: TelegramMethod,
        content: bytes,
        file_name: str,
        content_type: str,
    ) -> httpx.Response:
        async with self._http_cm() as client:
            return await client.post(
                self._method_url(method),
                data={"chat_id": self.config.chat_id},
                files={method.field_name: (file_name, content, content_type)},
                timeout=self.config.timeout_seconds,
            )

    async def send_once(
        self,
        method: TelegramMethod,
        content: bytes,
        file_name: str,
        content_type: str,
    ) -> SendResult:
        """Perform one attempt and classify it. Never raises for HTTP/transport failures."""
        try:
            response = await asyncio.wait_for(
                self._post(method, content, file_name, content_type),
                timeout=self.config.timeout_seconds,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            return SendResult.timeout()
        except httpx.HTTPError as e:
            return SendResult.transport_error(str(e) or e.__class__.__name__)
        try:
            body = response.json()
        except ValueError:
            # Error pages from proxies are often HTML; the status still decides the ladder.
            if not response.is_success:
                return SendResult.from_response(response.status_code, {})
            return SendResult.transport_error(
                f"invalid JSON response (HTTP {response.status_code})"
            )
        if not isinstance(body, dict):
            body = {}
        return SendResult.from_response(response.status_code, body)

    async def send_file(
        self,
        content: bytes,
        file_name: str,
        content_type: str,
    ) -> TelegramUploadResult:
        """Upload content, following next_step() until success or a terminal failure.

        Raises:
            StorageUploadError: One of the relay errors (rate limited, rejected,
                payload rejected, timeout, network) or MissingFileIdError.
        """
        state = SendState(0, TelegramMethod.for_content_type(content_type))
        while True:
            logger.debug(
                "Telegram %s attempt %s for %s", state.method.value, state.attempt + 1, file_name
            )
            result = await self.send_once(state.method, content, file_name, content_type)
            step = next_step(state, result, self.config.max_retries)

            if step.action is StepAction.SUCCEED:
                file_id = extract_file_id(result.body)
                if not file_id:
                    raise MissingFileIdError()
                message_id = (result.body.get("result") or {}).get("message_id")
                return TelegramUploadResult(
                    file_id=file_id,
                    message_id=message_id,
                    method=state.method,
                    attempts=state.attempt + 1,
                )

            if step.action is StepAction.FAIL:
                assert step.error is not None
                logger.warning(
                    "Telegram upload failed after %s attempt(s): %s",
                    state.attempt + 1,
                    step.error.reason,
                )
                raise step.error

            assert step.next_state is not None
            logger.info(
                "Telegram %s attempt %s failed (%s); retrying as %s in %.1fs",
                state.method.value,
                state.attempt + 1,
                step.reason,
                step.next_state.method.value,
                step.delay,
            )
            if step.delay > 0:
                await self._sleep(step.delay)
            state = step.next_state

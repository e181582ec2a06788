"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and
infrastructure exceptions to HTTP responses with the body {"error": message}.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.domain.exceptions import ImgBedException
from app.shared.telemetry.tracing import get_trace_id

logger = logging.getLogger(__name__)

# Map error_code to HTTP status; unlisted codes are 500.
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "EMPTY_PAYLOAD": 400,
    "FETCH_TIMEOUT": 408,
    "PAYLOAD_TOO_LARGE": 413,
    "RELAY_PAYLOAD_REJECTED": 413,
    "UPSTREAM_UNREACHABLE": 502,
    "UPSTREAM_ERROR": 502,
    "GUEST_QUOTA_DENIED": 403,
    "BACKEND_NOT_CONFIGURED": 500,
    "STORAGE_UPLOAD_ERROR": 500,
    "RELAY_RATE_LIMITED": 500,
    "RELAY_REJECTED": 500,
    "RELAY_TIMEOUT": 500,
    "RELAY_NETWORK_ERROR": 500,
    "RELAY_MISSING_FILE_ID": 500,
    "INDEX_UNAVAILABLE": 500,
    "INDEX_ERROR": 500,
}


def status_for(exc: ImgBedException) -> int:
    """HTTP status for exc: its own status_code if set, else by error_code."""
    if exc.status_code is not None:
        return exc.status_code
    return _ERROR_CODE_STATUS.get(exc.error_code, 500)


def _imgbed_exception_handler(request: Request, exc: ImgBedException) -> JSONResponse:
    """Return JSON from ImgBedException.to_dict() with the mapped status code."""
    status = status_for(exc)
    if status >= 500:
        logger.error("%s: %s %s", exc.error_code, exc.message, exc.details)
    else:
        logger.info("%s: %s", exc.error_code, exc.message)
    return JSONResponse(status_code=status, content=exc.to_dict())


# Body field -> message used when that field fails validation.
_FIELD_MESSAGES: dict[str, str] = {"url": "Please provide a valid URL"}


def _validation_message(errors: list[dict[str, Any]]) -> str:
    for error in errors:
        if error.get("type") == "json_invalid":
            return "Request body must be valid JSON"
        for part in error.get("loc") or ():
            if part in _FIELD_MESSAGES:
                return _FIELD_MESSAGES[part]
    return "Request validation failed"


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 400 with validation error details."""
    errors = exc.errors()
    return JSONResponse(
        status_code=400,
        content={
            "error": _validation_message(errors),
            "details": jsonable_encoder(errors),
        },
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception(
        "Unhandled exception on %s %s (trace_id=%s): %s",
        request.method,
        request.url.path,
        get_trace_id(),
        exc,
    )
    settings = get_settings()
    detail: Any = f"Internal server error: {exc}" if settings.debug else "Internal server error"
    return JSONResponse(status_code=500, content={"error": detail})


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: ImgBedException (and
    subclasses), RequestValidationError, StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(ImgBedException, _imgbed_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)

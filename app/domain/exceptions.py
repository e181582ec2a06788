"""Domain exceptions for the image-bed ingestion service.

Defines domain-level exceptions that represent rule violations on input,
configuration and quota. These exceptions are independent of infrastructure
concerns. Presentation layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class ImgBedException(Exception):
    """Base exception for all application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, backend).
        status_code: Optional HTTP status override; None means map by error_code.
    """

    status_code: int | None = None

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Response body for this error: {"error": message}."""
        return {"error": self.message}


class ValidationException(ImgBedException):
    """Raised when request input is invalid (missing url, bad scheme, bad storage mode)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class BackendNotConfiguredException(ImgBedException):
    """Raised when the selected storage backend lacks its required configuration."""

    def __init__(self, backend: str, missing: list[str] | None = None) -> None:
        """Initialize with backend name and the settings that are missing.

        Args:
            backend: Storage mode that was requested (e.g. 'r2').
            missing: Names of the absent settings, for logs.
        """
        super().__init__(
            f"Storage backend '{backend}' is not configured; upload is not possible",
            "BACKEND_NOT_CONFIGURED",
            {"backend": backend, "missing": missing or []},
        )


class GuestQuotaDeniedException(ImgBedException):
    """Raised when a guest upload is refused by the quota collaborator.

    The HTTP status is the one stated by the quota check (default 403).
    """

    def __init__(self, reason: str, status_code: int | None = None) -> None:
        """Initialize with the quota collaborator's reason and status.

        Args:
            reason: Human-readable reason returned to the caller.
            status_code: HTTP status to respond with; 403 when not given.
        """
        super().__init__(reason, "GUEST_QUOTA_DENIED", {"reason": reason})
        self.status_code = status_code or 403

"""Authentication collaborator: a single shared auth code."""

import secrets

from app.application.dtos.upload import CallerContext
from app.core.config import Settings, get_settings


class AuthService:
    """Callers presenting the configured auth code are privileged (no guest quota)."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def _configured_code(self) -> str | None:
        code = self.settings.auth_code
        return code.get_secret_value() if code and code.get_secret_value() else None

    def is_auth_required(self) -> bool:
        return self._configured_code() is not None

    def check_authentication(self, caller: CallerContext) -> bool:
        """Constant-time compare of the presented code with the configured one."""
        expected = self._configured_code()
        if expected is None or not caller.presented_code:
            return False
        return secrets.compare_digest(
            caller.presented_code.encode("utf-8"), expected.encode("utf-8")
        )

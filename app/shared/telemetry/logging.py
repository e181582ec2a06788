"""Logging configuration for the application."""

import logging
import sys

from app.core.config import Settings, get_settings

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers that are chatty at INFO (one line per outbound request).
_QUIET_LOGGERS = ("httpx", "httpcore", "botocore", "urllib3")


def setup_logging(settings: Settings | None = None) -> None:
    """Configure application-wide logging once.

    Level is DEBUG when settings.debug is True, otherwise INFO.
    Output goes to stdout. Outbound HTTP client loggers are kept at WARNING
    unless debugging, since relay URLs embed the bot token.
    """
    s = settings or get_settings()
    log_level = logging.DEBUG if s.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format=_LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    if not s.debug:
        for name in _QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name.

    Args:
        name: Usually __name__ of the calling module.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)

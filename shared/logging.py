"""
Centralized structured logging for the watch shop auth service.

Provides:
- get_logger(): Get a configured structlog logger instance
- setup_logging(): Configure stdlib logging + structlog from LoggingSettings

JSON output in production, pretty console output in development. Secrets and
verification codes are redacted before rendering.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import structlog
from structlog.stdlib import BoundLogger
from structlog.types import EventDict, Processor

# Sensitive fields to redact from logs
REDACTED_FIELDS = {
    "password",
    "token",
    "api_key",
    "authorization",
    "cookie",
    "refresh_token",
    "access_token",
    "secret",
    "session_secret",
    "code",
    "pending_code",
    "otp_code",
    "candidate",
}

_SENSITIVE_SUBSTRINGS = ("password", "token", "secret")
_ALWAYS_KEPT = {"level", "event", "timestamp", "logger"}


def get_logger(name: str) -> BoundLogger:
    """
    Get a configured logger instance.

    Example:
        >>> log = get_logger(__name__)
        >>> log.info("user_login", user_id="123", provider="google")
    """
    return structlog.get_logger(name)


def redact_sensitive_fields(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Redact sensitive fields from logs."""
    for key in list(event_dict.keys()):
        if key in _ALWAYS_KEPT:
            continue
        lowered = key.lower()
        if lowered in REDACTED_FIELDS or any(
            sensitive in lowered for sensitive in _SENSITIVE_SUBSTRINGS
        ):
            event_dict[key] = "***REDACTED***"
    return event_dict


def configure_structlog(log_format: str = "console") -> None:
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        redact_sensitive_fields,
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True, pad_event=15)

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def setup_logging(settings: Optional[object] = None, env: str = "development") -> None:
    """
    Initialize logging for the application.

    Accepts a LoggingSettings instance (from config.py); falls back to INFO
    and console output when none is given. Called once from create_app().
    """
    level = getattr(settings, "log_level", "INFO")
    log_format = getattr(settings, "log_format", "console")

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, str(level).upper(), logging.INFO),
    )
    configure_structlog(log_format)

    get_logger(__name__).info(
        "logging_initialized", env=env, log_level=level, log_format=log_format
    )

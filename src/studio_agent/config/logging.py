# studio_agent/config/logging.py
"""
Logging setup for studio-agent.

Every handler installed here carries the secret redaction filter, so the
auth token never reaches the console or the optional rotating log file.
"""

from __future__ import annotations

import logging
import re
import sys
from enum import Enum
from logging.handlers import RotatingFileHandler
from pathlib import Path


class LogFormat(str, Enum):
    """Console log layouts accepted by :func:`setup_logging`."""

    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"


_CONSOLE_FORMATS: dict[LogFormat, str] = {
    LogFormat.SIMPLE: "%(levelname)-8s %(message)s",
    LogFormat.DETAILED: "%(asctime)s [%(levelname)-8s] %(name)s:%(lineno)d - %(message)s",
    LogFormat.JSON: (
        '{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
        '"message": "%(message)s", "logger": "%(name)s"}'
    ),
}

_FILE_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
    '"logger": "%(name)s", "line": %(lineno)d, "message": "%(message)s"}'
)

# Only raised to DEBUG together with our own loggers
_NOISY_LOGGERS = ("httpx", "httpcore", "asyncio")


# ── Secret redaction ─────────────────────────────────────────────────────────

_SECRET_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    # "Bearer <token>" wherever it appears
    (re.compile(r"(Bearer\s+)\S+", re.IGNORECASE), r"\1[REDACTED]"),
    # Serialized settings or payloads: "auth_token": "..."
    (
        re.compile(r'("(?:auth|access)_token"\s*:\s*")[^"]+(")', re.IGNORECASE),
        r"\1[REDACTED]\2",
    ),
    # Header dumps: "Authorization: Basic xyz", "authorization=xyz"
    (
        re.compile(r"(Authorization\s*[=:]\s*)\S+(?:\s+\S+)?", re.IGNORECASE),
        r"\1[REDACTED]",
    ),
]


def redact(text: str) -> str:
    """Return ``text`` with every known secret shape masked."""
    for pattern, replacement in _SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class SecretRedactingFilter(logging.Filter):
    """Masks auth tokens in log records before any handler formats them."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.args:
            # Interpolate first so secrets passed as %-args are caught too
            record.msg = redact(record.getMessage())
            record.args = None
        elif isinstance(record.msg, str):
            record.msg = redact(record.msg)
        return True


secret_filter = SecretRedactingFilter()


# ── Setup ────────────────────────────────────────────────────────────────────


def _resolve_level(level: str, quiet: bool, verbose: bool) -> int:
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    return numeric_level


def setup_logging(
    level: str = "WARNING",
    quiet: bool = False,
    verbose: bool = False,
    format_style: str | LogFormat = LogFormat.SIMPLE,
    log_file: str | None = None,
) -> None:
    """
    Replace the root handlers with a redacting stderr handler.

    Args:
        level: Base logging level name (DEBUG, INFO, WARNING, ...)
        quiet: Only show errors; wins over ``verbose`` and ``level``
        verbose: Show debug output, including httpx traffic
        format_style: One of :class:`LogFormat`
        log_file: Optional path for a rotating JSON debug log

    Raises:
        ValueError: For an unknown level name or format style
    """
    log_level = _resolve_level(level, quiet, verbose)
    console_format = _CONSOLE_FORMATS[LogFormat(format_style)]

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(console_format))
    console_handler.setLevel(log_level)
    console_handler.addFilter(secret_filter)

    root_logger.setLevel(log_level)
    root_logger.addHandler(console_handler)

    if log_file:
        _add_file_handler(root_logger, log_file)

    noisy_level = logging.DEBUG if log_level <= logging.DEBUG else logging.ERROR
    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(noisy_level)

    logging.getLogger("studio_agent").setLevel(log_level)


def _add_file_handler(root_logger: logging.Logger, log_file: str) -> None:
    from studio_agent.config.defaults import (
        DEFAULT_LOG_BACKUP_COUNT,
        DEFAULT_LOG_MAX_BYTES,
    )

    path = Path(log_file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        str(path),
        maxBytes=DEFAULT_LOG_MAX_BYTES,
        backupCount=DEFAULT_LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
    file_handler.addFilter(secret_filter)

    # The file always records DEBUG, so the root must let it through
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ``studio_agent`` namespace."""
    return logging.getLogger(f"studio_agent.{name}")

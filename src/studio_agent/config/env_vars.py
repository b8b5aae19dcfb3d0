"""Environment variables read by studio-agent - one enum, no magic strings.

Values are only ever read here; ``ClientSettings.from_env`` and the CLI
are the callers. A variable that is set but blank counts as unset.
"""

from __future__ import annotations

import logging
import os
from enum import Enum

logger = logging.getLogger(__name__)

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off"})


class EnvVar(str, Enum):
    """Every ``STUDIO_AGENT_*`` variable the client understands."""

    # ================================================================
    # Agent Service
    # ================================================================
    API_URL = "STUDIO_AGENT_API_URL"
    AUTH_TOKEN = "STUDIO_AGENT_AUTH_TOKEN"
    STRICT_CORRELATION = "STUDIO_AGENT_STRICT_CORRELATION"

    # ================================================================
    # Timeouts (seconds)
    # ================================================================
    REQUEST_TIMEOUT = "STUDIO_AGENT_REQUEST_TIMEOUT"
    CONNECT_TIMEOUT = "STUDIO_AGENT_CONNECT_TIMEOUT"
    RESPONSE_TIMEOUT = "STUDIO_AGENT_RESPONSE_TIMEOUT"

    # ================================================================
    # Logging
    # ================================================================
    LOG_LEVEL = "STUDIO_AGENT_LOG_LEVEL"
    LOG_FILE = "STUDIO_AGENT_LOG_FILE"


def get_env(var: EnvVar, default: str | None = None) -> str | None:
    """Read ``var``, falling back to ``default`` when unset or blank.

    Example:
        >>> url = get_env(EnvVar.API_URL, "http://localhost:8000")
    """
    value = os.environ.get(var.value)
    if value is None or not value.strip():
        return default
    return value.strip()


def get_env_float(var: EnvVar, default: float | None = None) -> float | None:
    """Read ``var`` as a float; malformed values log a warning and fall back."""
    value = get_env(var)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Ignoring {var.value}={value!r}: not a number")
        return default


def get_env_bool(var: EnvVar, default: bool = False) -> bool:
    """Read ``var`` as a flag (1/true/yes/on or 0/false/no/off, any case)."""
    value = get_env(var)
    if value is None:
        return default
    lowered = value.lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    logger.warning(f"Ignoring {var.value}={value!r}: not a boolean")
    return default

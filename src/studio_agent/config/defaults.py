"""Default configuration values - no more magic numbers!

All default values should be defined here, not hardcoded in the code.
"""

from __future__ import annotations

from studio_agent.constants.timeouts import (
    DEFAULT_HTTP_CONNECT_TIMEOUT,
    DEFAULT_HTTP_REQUEST_TIMEOUT,
    DEFAULT_RESPONSE_TIMEOUT,
)


# ================================================================
# Agent Service Defaults
# ================================================================

DEFAULT_API_URL = "http://localhost:8000"
"""Base URL of the agent service."""

DEFAULT_STRICT_CORRELATION = True
"""Reject chained confirmations whose conversation id does not match."""


# ================================================================
# Timeout Defaults (in seconds)
# ================================================================
# DEFAULT_HTTP_CONNECT_TIMEOUT, DEFAULT_HTTP_REQUEST_TIMEOUT and
# DEFAULT_RESPONSE_TIMEOUT are re-exported from constants.timeouts.


# ================================================================
# Timeline Text Defaults
# ================================================================

PLACEHOLDER_TEXT = "..."
"""Text of the assistant turn shown while a response is outstanding."""

CONFIRMATION_PROMPT_TEXT = "Tool execution requires confirmation."
"""Prompt text for the first confirmation of an episode."""

CHAINED_CONFIRMATION_PROMPT_TEXT = "Another tool requires confirmation."
"""Prompt text when the agent chains to a further tool."""

ASK_COMPLETED_TEXT = "Request completed."
"""Fallback final text for a completed /ask with no response body."""

CONFIRM_COMPLETED_TEXT = "Tools executed successfully."
"""Fallback final text for a completed /tool_confirm with no response body."""

CANCELLED_TEXT = "Operation cancelled."
"""Final text when the agent reports the operation was cancelled."""

SEND_FAILED_TEXT = "Failed to send message. Please try again."
"""User-visible text when a message dispatch fails."""

CONFIRM_FAILED_TEXT = "Failed to confirm tool execution. Please try again."
"""User-visible text when a decision dispatch fails."""


# ================================================================
# Logging Defaults
# ================================================================

DEFAULT_LOG_LEVEL = "WARNING"
"""Default console log level."""

DEFAULT_LOG_MAX_BYTES = 10 * 1024 * 1024
"""Rotate the log file after 10 MiB."""

DEFAULT_LOG_BACKUP_COUNT = 3
"""Number of rotated log files to keep."""


__all__ = [
    "DEFAULT_API_URL",
    "DEFAULT_STRICT_CORRELATION",
    "DEFAULT_HTTP_CONNECT_TIMEOUT",
    "DEFAULT_HTTP_REQUEST_TIMEOUT",
    "DEFAULT_RESPONSE_TIMEOUT",
    "PLACEHOLDER_TEXT",
    "CONFIRMATION_PROMPT_TEXT",
    "CHAINED_CONFIRMATION_PROMPT_TEXT",
    "ASK_COMPLETED_TEXT",
    "CONFIRM_COMPLETED_TEXT",
    "CANCELLED_TEXT",
    "SEND_FAILED_TEXT",
    "CONFIRM_FAILED_TEXT",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_LOG_MAX_BYTES",
    "DEFAULT_LOG_BACKUP_COUNT",
]

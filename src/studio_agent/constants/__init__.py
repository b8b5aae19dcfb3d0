"""Constants module - all enums, constants, and magic string replacements."""

from importlib.metadata import PackageNotFoundError, version

from studio_agent.constants.enums import (
    ConfirmAction,
    Decision,
    ExportFormat,
    FailureKind,
    OrchestrationState,
    ResponseStatus,
    TurnRole,
)
from studio_agent.constants.timeouts import (
    DEFAULT_HTTP_CONNECT_TIMEOUT,
    DEFAULT_HTTP_REQUEST_TIMEOUT,
    DEFAULT_RESPONSE_TIMEOUT,
)

# Agent service endpoints
ASK_ENDPOINT = "/ask"
TOOL_CONFIRM_ENDPOINT = "/tool_confirm"

# Application constants
APP_NAME = "studio-agent"

try:
    APP_VERSION = version("studio-agent")
except PackageNotFoundError:
    APP_VERSION = "0.0.0-dev"

__all__ = [
    # Enums
    "ConfirmAction",
    "Decision",
    "ExportFormat",
    "FailureKind",
    "OrchestrationState",
    "ResponseStatus",
    "TurnRole",
    # Timeouts
    "DEFAULT_HTTP_CONNECT_TIMEOUT",
    "DEFAULT_HTTP_REQUEST_TIMEOUT",
    "DEFAULT_RESPONSE_TIMEOUT",
    # Endpoints
    "ASK_ENDPOINT",
    "TOOL_CONFIRM_ENDPOINT",
    # App constants
    "APP_NAME",
    "APP_VERSION",
]

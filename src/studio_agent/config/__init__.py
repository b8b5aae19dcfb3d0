"""
Configuration management for studio-agent.

Pydantic-based settings resolved from defaults, environment and CLI flags.
"""

from studio_agent.config.env_vars import (
    EnvVar,
    get_env,
    get_env_bool,
    get_env_float,
)
from studio_agent.config.logging import (
    LogFormat,
    SecretRedactingFilter,
    get_logger,
    redact,
    secret_filter,
    setup_logging,
)
from studio_agent.config.models import ClientSettings

__all__ = [
    "ClientSettings",
    # Environment
    "EnvVar",
    "get_env",
    "get_env_bool",
    "get_env_float",
    # Logging
    "LogFormat",
    "SecretRedactingFilter",
    "get_logger",
    "redact",
    "secret_filter",
    "setup_logging",
]

"""Clean Pydantic configuration models - type safe."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from studio_agent.config.defaults import (
    DEFAULT_API_URL,
    DEFAULT_HTTP_CONNECT_TIMEOUT,
    DEFAULT_HTTP_REQUEST_TIMEOUT,
    DEFAULT_RESPONSE_TIMEOUT,
    DEFAULT_STRICT_CORRELATION,
)
from studio_agent.config.env_vars import (
    EnvVar,
    get_env,
    get_env_bool,
    get_env_float,
)


class ClientSettings(BaseModel):
    """Settings for talking to the agent service.

    Resolution order is defaults < environment < explicit overrides
    (CLI flags). Immutable after creation.
    """

    api_url: str = Field(
        default=DEFAULT_API_URL, description="Base URL of the agent service"
    )
    auth_token: str | None = Field(
        default=None, description="Bearer token sent with every request"
    )
    request_timeout: float = Field(
        default=DEFAULT_HTTP_REQUEST_TIMEOUT,
        gt=0,
        description="HTTP read/write timeout",
    )
    connect_timeout: float = Field(
        default=DEFAULT_HTTP_CONNECT_TIMEOUT,
        gt=0,
        description="HTTP connection timeout",
    )
    response_timeout: float = Field(
        default=DEFAULT_RESPONSE_TIMEOUT,
        gt=0,
        description="Upper bound on one agent round-trip",
    )
    strict_correlation: bool = Field(
        default=DEFAULT_STRICT_CORRELATION,
        description="Fail chained confirmations with a foreign conversation id",
    )

    model_config = {"frozen": True}

    @field_validator("api_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("api_url must not be empty")
        return value

    @field_validator("auth_token")
    @classmethod
    def _blank_token_is_none(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @classmethod
    def from_env(cls, **overrides: Any) -> ClientSettings:
        """Build settings from the environment, then apply overrides.

        Overrides whose value is ``None`` are ignored so CLI options that
        were not given fall through to the environment.
        """
        values: dict[str, Any] = {
            "api_url": get_env(EnvVar.API_URL, DEFAULT_API_URL),
            "auth_token": get_env(EnvVar.AUTH_TOKEN),
            "request_timeout": get_env_float(
                EnvVar.REQUEST_TIMEOUT, DEFAULT_HTTP_REQUEST_TIMEOUT
            ),
            "connect_timeout": get_env_float(
                EnvVar.CONNECT_TIMEOUT, DEFAULT_HTTP_CONNECT_TIMEOUT
            ),
            "response_timeout": get_env_float(
                EnvVar.RESPONSE_TIMEOUT, DEFAULT_RESPONSE_TIMEOUT
            ),
            "strict_correlation": get_env_bool(
                EnvVar.STRICT_CORRELATION, DEFAULT_STRICT_CORRELATION
            ),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

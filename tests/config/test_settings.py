# tests/config/test_settings.py
"""Tests for ClientSettings resolution."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from studio_agent.config.defaults import (
    DEFAULT_API_URL,
    DEFAULT_HTTP_REQUEST_TIMEOUT,
    DEFAULT_RESPONSE_TIMEOUT,
)
from studio_agent.config.env_vars import EnvVar
from studio_agent.config.models import ClientSettings


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for var in EnvVar:
        monkeypatch.delenv(var.value, raising=False)
    return monkeypatch


class TestDefaults:
    def test_defaults(self, clean_env) -> None:
        settings = ClientSettings.from_env()
        assert settings.api_url == DEFAULT_API_URL
        assert settings.auth_token is None
        assert settings.request_timeout == DEFAULT_HTTP_REQUEST_TIMEOUT
        assert settings.response_timeout == DEFAULT_RESPONSE_TIMEOUT
        assert settings.strict_correlation is True

    def test_frozen(self) -> None:
        settings = ClientSettings()
        with pytest.raises(ValidationError):
            settings.api_url = "http://other"


class TestValidation:
    def test_trailing_slash_stripped(self) -> None:
        assert ClientSettings(api_url="http://agent.test/").api_url == "http://agent.test"

    def test_empty_url_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ClientSettings(api_url=" / ")

    def test_blank_token_is_none(self) -> None:
        assert ClientSettings(auth_token="  ").auth_token is None

    @pytest.mark.parametrize(
        "field", ["request_timeout", "connect_timeout", "response_timeout"]
    )
    def test_timeouts_positive(self, field: str) -> None:
        with pytest.raises(ValidationError):
            ClientSettings(**{field: 0})


class TestFromEnv:
    def test_environment_values(self, clean_env) -> None:
        clean_env.setenv(EnvVar.API_URL.value, "http://env.test/")
        clean_env.setenv(EnvVar.AUTH_TOKEN.value, "tok")
        clean_env.setenv(EnvVar.RESPONSE_TIMEOUT.value, "30")
        clean_env.setenv(EnvVar.STRICT_CORRELATION.value, "false")

        settings = ClientSettings.from_env()

        assert settings.api_url == "http://env.test"
        assert settings.auth_token == "tok"
        assert settings.response_timeout == 30.0
        assert settings.strict_correlation is False

    def test_overrides_win(self, clean_env) -> None:
        clean_env.setenv(EnvVar.API_URL.value, "http://env.test")

        settings = ClientSettings.from_env(api_url="http://flag.test", strict_correlation=False)

        assert settings.api_url == "http://flag.test"
        assert settings.strict_correlation is False

    def test_none_overrides_ignored(self, clean_env) -> None:
        clean_env.setenv(EnvVar.AUTH_TOKEN.value, "tok")

        settings = ClientSettings.from_env(auth_token=None, request_timeout=None)

        assert settings.auth_token == "tok"
        assert settings.request_timeout == DEFAULT_HTTP_REQUEST_TIMEOUT

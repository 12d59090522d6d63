"""Tests for SharedConfig and PolicyConfig."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from permcheck import (
    ConfigurationError,
    LogLevel,
    PolicyConfig,
    SharedConfig,
    load_policy_config_from_env,
    load_shared_config_from_env,
)


class TestPolicyConfig:
    """allow_by_default is explicit, required configuration."""

    def test_required(self) -> None:
        with pytest.raises(ValidationError):
            PolicyConfig()  # type: ignore[call-arg]

    def test_values(self) -> None:
        assert PolicyConfig(allow_by_default=True).allow_by_default is True
        assert PolicyConfig(allow_by_default=False).allow_by_default is False

    def test_extra_forbidden(self) -> None:
        with pytest.raises(ValidationError):
            PolicyConfig(allow_by_default=True, deny_all=True)  # type: ignore[call-arg]

    def test_frozen(self) -> None:
        config = PolicyConfig(allow_by_default=False)
        with pytest.raises(ValidationError):
            config.allow_by_default = True  # type: ignore[misc]


class TestLoadPolicyConfigFromEnv:
    """PERMCHECK_ALLOW_BY_DEFAULT parsing."""

    @pytest.mark.parametrize("raw", ["true", "1", "YES", " on "])
    def test_truthy(self, raw: str) -> None:
        with patch.dict(os.environ, {"PERMCHECK_ALLOW_BY_DEFAULT": raw}):
            assert load_policy_config_from_env().allow_by_default is True

    @pytest.mark.parametrize("raw", ["false", "0", "No", "off"])
    def test_falsy(self, raw: str) -> None:
        with patch.dict(os.environ, {"PERMCHECK_ALLOW_BY_DEFAULT": raw}):
            assert load_policy_config_from_env().allow_by_default is False

    def test_missing(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ConfigurationError, match="must be set explicitly"):
                load_policy_config_from_env()

    def test_blank(self) -> None:
        with patch.dict(os.environ, {"PERMCHECK_ALLOW_BY_DEFAULT": "  "}):
            with pytest.raises(ConfigurationError):
                load_policy_config_from_env()

    def test_garbage(self) -> None:
        with patch.dict(os.environ, {"PERMCHECK_ALLOW_BY_DEFAULT": "maybe"}):
            with pytest.raises(ConfigurationError, match="boolean") as exc_info:
                load_policy_config_from_env()
        assert exc_info.value.details["variable"] == "PERMCHECK_ALLOW_BY_DEFAULT"


class TestSharedConfig:
    """Tests for SharedConfig model."""

    def test_defaults(self) -> None:
        config = SharedConfig()
        assert config.log_level == LogLevel.INFO
        assert config.log_json is False
        assert config.service_name is None

    def test_log_level_from_string(self) -> None:
        assert SharedConfig(log_level="debug").log_level == LogLevel.DEBUG

    def test_log_level_invalid(self) -> None:
        with pytest.raises(ValueError, match="Invalid log level"):
            SharedConfig(log_level="INVALID")

    def test_extra_forbidden(self) -> None:
        with pytest.raises(ValidationError):
            SharedConfig(redis_url="redis://localhost")  # type: ignore[call-arg]

    def test_load_from_env(self) -> None:
        env = {"LOG_LEVEL": "WARNING", "LOG_JSON": "true", "SERVICE_NAME": "admin-api"}
        with patch.dict(os.environ, env, clear=True):
            config = load_shared_config_from_env()
        assert config.log_level == LogLevel.WARNING
        assert config.log_json is True
        assert config.service_name == "admin-api"

    def test_load_from_env_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            config = load_shared_config_from_env()
        assert config.log_level == LogLevel.INFO
        assert config.log_json is False

"""Configuration contract for permcheck.

This module provides Pydantic-validated configuration models:

- ``SharedConfig`` — ambient service settings (LOG_LEVEL, LOG_JSON, SERVICE_NAME).
- ``PolicyConfig`` — the access policy mode (``allow_by_default``).

``allow_by_default`` is deliberately required: the core never assumes
a default policy mode, integrators must choose one explicitly.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .exceptions import ConfigurationError

_TRUTHY = frozenset({"true", "1", "yes", "on"})
_FALSY = frozenset({"false", "0", "no", "off"})


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class PolicyConfig(BaseModel):
    """Controller-scoped access policy mode.

    Attributes:
        allow_by_default: When True, an action with no permission entry
            (and no ``setup`` fallback) is allowed. When False the same
            action is denied and reported as a misconfiguration.

    Environment variables (via ``load_policy_config_from_env``):
        PERMCHECK_ALLOW_BY_DEFAULT — true/false, required
    """

    model_config = {"frozen": True, "extra": "forbid"}

    allow_by_default: bool = Field(
        ...,
        description="Allow actions that have no permission requirement configured.",
    )


class SharedConfig(BaseModel):
    """Ambient settings shared by every service embedding permcheck."""

    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level for the service",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )
    service_name: Optional[str] = Field(
        default=None,
        description="Service name used as the logger prefix",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.strip().upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    model_config = {
        "use_enum_values": True,
        "extra": "forbid",
    }


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}", variable=name)


def load_shared_config_from_env() -> SharedConfig:
    """Load shared configuration from environment variables.

    Environment variables:
    - LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - LOG_JSON: Use JSON log format (true/false, default: false)
    - SERVICE_NAME: Service name for logging

    Returns:
        SharedConfig instance with values from environment or defaults.
    """
    import os

    return SharedConfig(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_json=_parse_bool("LOG_JSON", os.getenv("LOG_JSON", "false")),
        service_name=os.getenv("SERVICE_NAME"),
    )


def load_policy_config_from_env() -> PolicyConfig:
    """Load the policy mode from ``PERMCHECK_ALLOW_BY_DEFAULT``.

    Raises:
        ConfigurationError: If the variable is unset or not a boolean.
    """
    import os

    raw = os.getenv("PERMCHECK_ALLOW_BY_DEFAULT")
    if raw is None or not raw.strip():
        raise ConfigurationError(
            "PERMCHECK_ALLOW_BY_DEFAULT must be set explicitly (true or false)",
            variable="PERMCHECK_ALLOW_BY_DEFAULT",
        )
    return PolicyConfig(allow_by_default=_parse_bool("PERMCHECK_ALLOW_BY_DEFAULT", raw))


__all__ = [
    "LogLevel",
    "PolicyConfig",
    "SharedConfig",
    "load_policy_config_from_env",
    "load_shared_config_from_env",
]

"""Centralized logging utilities for permcheck.

This module provides:
- Logging configuration from SharedConfig
- Safe preview utilities for sensitive data
- Secret redaction
- Request-scoped logging (request_id / identity propagation)
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from .config import LogLevel, SharedConfig


# Patterns for detecting secrets (common patterns to redact)
SECRET_PATTERNS = [
    r'(?i)(?:password|passwd|pwd|secret|token|key|api[_-]?key|auth[_-]?token)\s*[:=]\s*["\']?([^"\'\s]+)',
    r'(?i)(?:bearer|basic)\s+([a-zA-Z0-9+/=]+)',
    r'(?i)(?:sk-|pk-)[a-zA-Z0-9]{32,}',
    r'(?i)(?:x-api-key|x-auth-token|x-access-token)\s*[:=]\s*["\']?([^"\'\s]+)',
]

# Standard LogRecord attributes, never copied as extra fields
_RECORD_ATTRS = frozenset({
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info",
    "taskName", "request_id", "identity",
})

# Audit fields carry permission tags (`token:issue`, `secret:read`) that
# look like secrets to SECRET_PATTERNS; they are copied verbatim
_NO_REDACT = frozenset({"event", "action", "required", "granted"})


def safe_preview(value: Any, limit: int = 240) -> str:
    """Create a safe, length-bounded, single-line preview of a value.

    Sets and frozensets are rendered sorted, so permission tags log in
    a stable order.
    """
    if value is None:
        return ""

    if isinstance(value, str):
        s = value
    elif isinstance(value, (set, frozenset)):
        s = ", ".join(sorted(str(v) for v in value))
    elif isinstance(value, (dict, list, tuple)):
        try:
            s = json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            s = str(value)
    else:
        s = str(value)

    s = " ".join(s.split())

    if len(s) > limit:
        return s[: limit - 1] + "…"
    return s


def redact_secrets(text: str, replacement: str = "[REDACTED]") -> str:
    """Redact secret patterns (API keys, tokens, passwords, auth headers) from text."""
    if not isinstance(text, str):
        return text

    result = text
    for pattern in SECRET_PATTERNS:
        result = re.sub(pattern, replacement, result, flags=re.IGNORECASE | re.DOTALL)
    return result


def safe_log_value(value: Any, limit: int = 240, redact: bool = True) -> str:
    """Combine safe_preview() and redact_secrets() for a single log value."""
    preview = safe_preview(value, limit=limit)
    if redact:
        preview = redact_secrets(preview)
    return preview


class PermCheckFormatter(logging.Formatter):
    """Formatter with request context and optional JSON output.

    - Includes ``request_id`` and ``identity`` when present on the record
    - Copies ``extra`` fields (e.g. ``event``, ``action``) as safe previews
    - Redacts secrets from the message and extras, except on audit events
    """

    def __init__(
        self,
        include_request_context: bool = True,
        json_format: bool = True,
        redact_secrets: bool = True,
        *args: Any,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.include_request_context = include_request_context
        self.json_format = json_format
        self.redact_secrets = redact_secrets

    def format(self, record: logging.LogRecord) -> str:
        request_id = getattr(record, "request_id", None)
        identity = getattr(record, "identity", None)

        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_request_context:
            if request_id:
                log_data["request_id"] = str(request_id)
            if identity:
                log_data["identity"] = str(identity)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS:
                log_data[key] = safe_log_value(
                    value, redact=self.redact_secrets and key not in _NO_REDACT
                )

        # Audit event messages are built from action names and tags only
        if self.redact_secrets and not getattr(record, "event", None):
            log_data["message"] = redact_secrets(log_data["message"])

        if self.json_format:
            return json.dumps(log_data, default=str, ensure_ascii=False)

        parts = [
            f"[{log_data['timestamp']}]",
            f"{log_data['level']}",
            f"{log_data['logger']}",
        ]
        if self.include_request_context and request_id:
            parts.append(f"request_id={log_data['request_id']}")
        parts.append(f": {log_data['message']}")
        return " ".join(parts)


class RequestLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds request_id and identity to every record.

    Usage:
        logger = get_request_logger(__name__, request_id="req-1", identity="alice")
        logger.info("Access denied", extra={"event": "AccessDenied"})
    """

    def __init__(
        self,
        logger: logging.Logger,
        request_id: Optional[str] = None,
        identity: Optional[str] = None,
    ):
        super().__init__(logger, {})
        self.request_id = request_id
        self.identity = identity

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        request_id = kwargs.pop("request_id", self.request_id)
        identity = kwargs.pop("identity", self.identity)

        extra = dict(kwargs.get("extra") or {})
        if request_id:
            extra["request_id"] = request_id
        if identity:
            extra["identity"] = identity
        kwargs["extra"] = extra

        return msg, kwargs


def setup_logging(
    config: Optional[SharedConfig] = None,
    json_format: Optional[bool] = None,
    redact_secrets: bool = True,
    service_name: Optional[str] = None,
) -> None:
    """Configure the root logger from SharedConfig.

    Args:
        config: SharedConfig instance (if None, loads from environment)
        json_format: Force JSON output on/off (default: ``config.log_json``)
        redact_secrets: Whether to redact secrets (default: True)
        service_name: Optional service logger to set to the same level
    """
    if config is None:
        from .config import load_shared_config_from_env
        config = load_shared_config_from_env()

    level_map = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARNING: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
        LogLevel.CRITICAL: logging.CRITICAL,
    }
    log_level = level_map.get(config.log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        PermCheckFormatter(
            include_request_context=True,
            json_format=config.log_json if json_format is None else json_format,
            redact_secrets=redact_secrets,
        )
    )
    root_logger.addHandler(console_handler)

    name = service_name or config.service_name
    if name:
        logging.getLogger(name).setLevel(log_level)


def get_request_logger(
    name: str,
    request_id: Optional[str] = None,
    identity: Optional[str] = None,
) -> RequestLoggerAdapter:
    """Get a logger adapter bound to one request."""
    return RequestLoggerAdapter(logging.getLogger(name), request_id=request_id, identity=identity)


__all__ = [
    "safe_preview",
    "redact_secrets",
    "safe_log_value",
    "PermCheckFormatter",
    "RequestLoggerAdapter",
    "setup_logging",
    "get_request_logger",
]

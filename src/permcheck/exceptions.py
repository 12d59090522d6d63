"""Exception hierarchy for permcheck.

Provides:
- Base exception hierarchy with stable error codes
- gRPC status mapping for denials raised at the dispatch boundary

Usage:
    from permcheck.exceptions import (
        ConfigurationError,
        PermissionDeniedError,
        get_grpc_status_code,
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .permissions.evaluator import Decision

__all__ = [
    # Base hierarchy
    "PermCheckError",
    "ConfigurationError",
    "DuplicateRegistrationError",
    "SecurityError",
    "PermissionDeniedError",
    # gRPC helpers
    "get_grpc_status_code",
]


# ---- Exception Hierarchy ----------------------------------------------------


class PermCheckError(Exception):
    """Base exception for permcheck.

    Attributes:
        code: Stable error code string for protocol mapping (e.g. "PERMISSION_DENIED").
        message: Human-readable error description.
        details: Additional context as keyword arguments.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(PermCheckError):
    """Invalid or missing configuration."""

    code: str = "CONFIGURATION_ERROR"


class DuplicateRegistrationError(ConfigurationError):
    """An action was registered twice in the same PermissionRegistry."""

    code: str = "DUPLICATE_REGISTRATION"


class SecurityError(PermCheckError):
    """Authorization failure."""

    code: str = "SECURITY_ERROR"


class PermissionDeniedError(SecurityError):
    """Raised to short-circuit dispatch after a denied access decision.

    Attributes:
        decision: The ``Decision`` that caused the denial.
    """

    code: str = "PERMISSION_DENIED"
    message: str = "Permission denied"

    def __init__(self, decision: Decision, message: str | None = None, **kwargs: Any) -> None:
        self.decision = decision
        reason = decision.reason.value if decision.reason is not None else None
        super().__init__(
            message or f"Permission denied for action '{decision.action}'",
            action=decision.action,
            reason=reason,
            **kwargs,
        )


# ---- gRPC Status Mapping ----------------------------------------------------


def get_grpc_status_code(error: PermCheckError) -> Any:
    """Map a PermCheckError to a ``grpc.StatusCode``.

    Import grpc locally to avoid a hard dependency at module level.
    """
    import grpc

    error_to_status = {
        "PERMISSION_DENIED": grpc.StatusCode.PERMISSION_DENIED,
        "SECURITY_ERROR": grpc.StatusCode.PERMISSION_DENIED,
        "CONFIGURATION_ERROR": grpc.StatusCode.FAILED_PRECONDITION,
        "DUPLICATE_REGISTRATION": grpc.StatusCode.FAILED_PRECONDITION,
    }
    return error_to_status.get(error.code, grpc.StatusCode.INTERNAL)

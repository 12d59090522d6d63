"""Structured log events for access decisions.

- ``ConfigurationError{action}`` — ERROR: an action reachable by users has
  no permission policy while ``allow_by_default`` is off.
- ``AccessDenied{action, required, granted, identity}`` — INFO: a legitimate
  refusal.
- Allowed requests are logged at DEBUG.
"""

from __future__ import annotations

from typing import Optional

from ..logging import get_request_logger, safe_preview
from ..permissions.constants import ANONYMOUS
from ..permissions.evaluator import Decision, DenyReason

CONFIGURATION_ERROR_EVENT = "ConfigurationError"
ACCESS_DENIED_EVENT = "AccessDenied"


def log_decision(
    decision: Decision,
    *,
    identity: Optional[str] = None,
    request_id: Optional[str] = None,
    logger_name: str = __name__,
) -> None:
    """Emit the log event matching ``decision``."""
    who = identity or ANONYMOUS
    logger = get_request_logger(logger_name, request_id=request_id, identity=who)

    if decision.allowed:
        logger.debug("Access allowed for user: %s, action %s", who, decision.action)
        return

    if decision.reason is DenyReason.MISCONFIGURED:
        logger.error(
            "Action misconfiguration! allow_by_default is off but this action (%s) "
            "has no permissions configured (nor a setup action)",
            decision.action,
            extra={"event": CONFIGURATION_ERROR_EVENT, "action": decision.action},
        )
        return

    required = decision.required or ()
    logger.info(
        "Access denied for user: %s, require permissions %s for action %s, only has: %s",
        who,
        " ".join(required),
        decision.action,
        safe_preview(decision.granted),
        extra={
            "event": ACCESS_DENIED_EVENT,
            "action": decision.action,
            "required": list(required),
            "granted": sorted(decision.granted),
        },
    )


__all__ = [
    "ACCESS_DENIED_EVENT",
    "CONFIGURATION_ERROR_EVENT",
    "log_decision",
]

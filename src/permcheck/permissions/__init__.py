"""Permission resolution and access decisions for chained actions.

Defines:
- PermissionRegistry: action → required permission tags
- OverrideResolver: action → ``{action}_{METHOD}`` → ``setup`` lookup
- AccessEvaluator: Allow / Deny(reason) decision with OR semantics
- AccessPolicy: registry + policy mode snapshot, swap-on-write
- HttpMethod, SETUP_ACTION, ANONYMOUS: dispatch constants
"""

from .constants import ANONYMOUS, SETUP_ACTION, HttpMethod, method_action, method_name
from .evaluator import AccessEvaluator, Decision, DenyReason, select_action
from .policy import AccessPolicy
from .registry import PermissionRegistry
from .resolver import OverrideResolver

__all__ = [
    "ANONYMOUS",
    "SETUP_ACTION",
    "AccessEvaluator",
    "AccessPolicy",
    "Decision",
    "DenyReason",
    "HttpMethod",
    "OverrideResolver",
    "PermissionRegistry",
    "method_action",
    "method_name",
    "select_action",
]

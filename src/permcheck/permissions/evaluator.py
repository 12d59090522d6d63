"""Access decision engine.

Provides:
- ``DenyReason`` — why a request was refused (misconfigured / insufficient).
- ``Decision`` — the Allow / Deny(reason) result of one evaluation.
- ``select_action()`` — namespace-local action selection from a chain.
- ``AccessEvaluator`` — resolves the effective requirement and decides.

The evaluator is a pure computation over (registry, request inputs): it
performs no I/O and keeps no state between calls. Acting on a denial
(short-circuiting, logging, 403) is the caller's job.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..config import PolicyConfig
from ..interfaces import ActionDescriptor
from .constants import HttpMethod
from .registry import PermissionRegistry
from .resolver import OverrideResolver


class DenyReason(str, Enum):
    """Why access was refused.

    - ``misconfigured`` — no requirement found and ``allow_by_default`` is off.
      An operator error, logged at ERROR.
    - ``insufficient_permissions`` — a requirement exists but the caller
      holds none of its tags. An expected outcome, logged at INFO.
    """

    MISCONFIGURED = "misconfigured"
    INSUFFICIENT_PERMISSIONS = "insufficient_permissions"


@dataclass(frozen=True)
class Decision:
    """Outcome of a single access evaluation.

    Attributes:
        allowed: True for Allow.
        reason: Set only for denials.
        action: The action name the requirement was resolved for.
        required: Effective requirement, or None when unconfigured.
        granted: The caller's permission tags at evaluation time.
    """

    allowed: bool
    reason: Optional[DenyReason] = None
    action: str = ""
    required: Optional[tuple[str, ...]] = None
    granted: frozenset[str] = frozenset()

    @property
    def denied(self) -> bool:
        return not self.allowed

    @property
    def misconfigured(self) -> bool:
        return self.reason is DenyReason.MISCONFIGURED

    @classmethod
    def allow(
        cls,
        action: str = "",
        required: tuple[str, ...] | None = None,
        granted: frozenset[str] = frozenset(),
    ) -> Decision:
        return cls(allowed=True, action=action, required=required, granted=granted)

    @classmethod
    def deny(
        cls,
        reason: DenyReason,
        action: str = "",
        required: tuple[str, ...] | None = None,
        granted: frozenset[str] = frozenset(),
    ) -> Decision:
        return cls(allowed=False, reason=reason, action=action, required=required, granted=granted)


def select_action(namespace: str, chain: Sequence[ActionDescriptor], fallback: str) -> str:
    """Pick the action whose requirement governs this request.

    Returns the name of the *last* chain entry in ``namespace``, or
    ``fallback`` (the dispatched action's own name) if none is in it.

    Only this single level is inspected: requirements of other chain
    entries in the same namespace are not combined.
    """
    in_namespace = [link for link in chain if link.namespace == namespace]
    return in_namespace[-1].name if in_namespace else fallback


class AccessEvaluator:
    """Decide whether a caller may run an action.

    Args:
        registry: Configured permission requirements.
        resolver: Lookup strategy; defaults to ``OverrideResolver``.

    Example::

        evaluator = AccessEvaluator(PermissionRegistry.from_mapping({"view": ["Admin"]}))
        decision = evaluator.evaluate(
            namespace="admin",
            action="view",
            method=HttpMethod.GET,
            chain=[ActionDescriptor("admin", "view")],
            granted={"Admin"},
            config=PolicyConfig(allow_by_default=False),
        )
        decision.allowed  # True
    """

    __slots__ = ("_registry", "_resolver")

    def __init__(self, registry: PermissionRegistry, resolver: OverrideResolver | None = None) -> None:
        self._registry = registry
        self._resolver = resolver or OverrideResolver()

    @property
    def registry(self) -> PermissionRegistry:
        return self._registry

    def evaluate(
        self,
        namespace: str,
        action: str,
        method: HttpMethod | str,
        chain: Sequence[ActionDescriptor],
        granted: Iterable[str],
        config: PolicyConfig,
    ) -> Decision:
        """Evaluate access for one request.

        Args:
            namespace: Namespace of the controller performing the check.
            action: Name of the dispatched action (fallback when no chain
                entry belongs to ``namespace``).
            method: Request method.
            chain: Ordered ancestor actions of the dispatched action.
            granted: Permission tags the caller holds.
            config: Policy mode.

        Returns:
            ``Decision``. Holding *any one* required tag is sufficient.
        """
        granted_tags = frozenset(granted)
        target = select_action(namespace, chain, action)
        required = self._resolver.resolve(target, method, self._registry)

        if required is None:
            if config.allow_by_default:
                return Decision.allow(target, None, granted_tags)
            return Decision.deny(DenyReason.MISCONFIGURED, target, None, granted_tags)

        if granted_tags.intersection(required):
            return Decision.allow(target, required, granted_tags)
        return Decision.deny(DenyReason.INSUFFICIENT_PERMISSIONS, target, required, granted_tags)


__all__ = [
    "AccessEvaluator",
    "Decision",
    "DenyReason",
    "select_action",
]

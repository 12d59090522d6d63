"""Process-wide access policy with swap-on-write reconfiguration.

Provides:
- ``AccessPolicy`` — holds the permission registry and ``PolicyConfig``
  as one immutable snapshot shared by all concurrent evaluations.

Each ``decide()`` call reads the snapshot reference once, so a
concurrent ``reconfigure()`` can never expose a half-updated registry:
evaluations see either the old snapshot or the new one.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping, Sequence
from typing import NamedTuple

from ..config import PolicyConfig
from ..interfaces import ActionDescriptor
from .constants import HttpMethod
from .evaluator import AccessEvaluator, Decision
from .registry import PermissionRegistry
from .resolver import OverrideResolver

logger = logging.getLogger(__name__)


class _Snapshot(NamedTuple):
    evaluator: AccessEvaluator
    config: PolicyConfig


class AccessPolicy:
    """Permission requirements plus policy mode for one controller/service.

    Args:
        permissions: ``{action: [tags]}`` mapping or an already built
            ``PermissionRegistry``. A mapping is frozen into a new registry.
        config: Policy mode. Required; there is no implicit default.
        resolver: Optional lookup strategy shared by every snapshot.

    Example::

        policy = AccessPolicy(
            {"view": ["Admin"], "setup": ["User"]},
            PolicyConfig(allow_by_default=False),
        )
        policy.decide("admin", "list", "GET", chain, {"User"}).allowed  # True
    """

    def __init__(
        self,
        permissions: Mapping[str, Iterable[str]] | PermissionRegistry,
        config: PolicyConfig,
        *,
        resolver: OverrideResolver | None = None,
    ) -> None:
        self._resolver = resolver or OverrideResolver()
        self._write_lock = threading.Lock()
        self._snapshot = _Snapshot(self._build_evaluator(permissions), config)

    def _build_evaluator(self, permissions: Mapping[str, Iterable[str]] | PermissionRegistry) -> AccessEvaluator:
        if isinstance(permissions, PermissionRegistry):
            registry = permissions
            registry.freeze()
        else:
            registry = PermissionRegistry.from_mapping(permissions)
        return AccessEvaluator(registry, self._resolver)

    @property
    def registry(self) -> PermissionRegistry:
        return self._snapshot.evaluator.registry

    @property
    def config(self) -> PolicyConfig:
        return self._snapshot.config

    @property
    def allow_by_default(self) -> bool:
        return self._snapshot.config.allow_by_default

    def decide(
        self,
        namespace: str,
        action: str,
        method: HttpMethod | str,
        chain: Sequence[ActionDescriptor],
        granted: Iterable[str],
    ) -> Decision:
        """Evaluate one request against the current snapshot."""
        evaluator, config = self._snapshot
        return evaluator.evaluate(namespace, action, method, chain, granted, config)

    def reconfigure(
        self,
        permissions: Mapping[str, Iterable[str]] | PermissionRegistry | None = None,
        config: PolicyConfig | None = None,
    ) -> None:
        """Replace requirements and/or policy mode.

        The new registry is fully built before the snapshot reference is
        swapped; in-flight evaluations finish against the old snapshot.
        """
        with self._write_lock:
            current = self._snapshot
            evaluator = current.evaluator if permissions is None else self._build_evaluator(permissions)
            snapshot = _Snapshot(evaluator, config if config is not None else current.config)
            self._snapshot = snapshot

        logger.info(
            "Access policy reconfigured: %d actions, allow_by_default=%s",
            len(snapshot.evaluator.registry),
            snapshot.config.allow_by_default,
        )


__all__ = ["AccessPolicy"]

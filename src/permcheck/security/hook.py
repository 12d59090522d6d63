"""Setup-hook permission interceptor.

Provides:
- ``ActionRequest`` — the per-request inputs a dispatcher hands over.
- ``PermissionCheck`` — wraps a ``SetupHookHandler`` and checks access
  right after its ``setup`` succeeds, before the action's main handler.

Flow for ``run_setup(request)``:
1. ``handler.setup(request)`` (exceptions propagate, no check runs)
2. Resolve the chain and namespace, evaluate against the ``AccessPolicy``
3. Log the decision (ERROR for misconfiguration, INFO for refusals)
4. On Deny: ``handler.permission_denied(request, decision)`` then raise
   ``PermissionDeniedError`` so the dispatcher stops processing the action
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from ..exceptions import PermissionDeniedError
from ..interfaces import (
    ActionDescriptor,
    ChainResolver,
    GrantedPermissionSource,
    MappingChainResolver,
    SetupHookHandler,
)
from ..permissions.constants import HttpMethod
from ..permissions.evaluator import Decision
from ..permissions.policy import AccessPolicy
from .audit import log_decision


_T = TypeVar("_T")


@dataclass(frozen=True)
class ActionRequest:
    """Inputs for one permission check.

    Attributes:
        action: The action being dispatched.
        method: Request method.
        granted: Source of the caller's permission tags.
        identity: Caller name for audit logs (None → ``anonymous``).
        request_id: Optional correlation id for logs.
    """

    action: ActionDescriptor
    method: HttpMethod | str
    granted: GrantedPermissionSource
    identity: Optional[str] = None
    request_id: Optional[str] = None


class PermissionCheck:
    """Per-action permission enforcement for a setup-hook controller.

    Args:
        handler: Controller exposing ``setup`` / ``permission_denied``.
        policy: Shared permission requirements and policy mode.
        chain_resolver: Expands the dispatched action into its chain.
            Defaults to a resolver that treats every action as unchained.

    Usage::

        check = PermissionCheck(
            AdminController(),
            AccessPolicy({"setup": ["User"], "edit": ["Admin"]},
                         PolicyConfig(allow_by_default=False)),
            chain_resolver=router,
        )
        result = check.dispatch(request, controller.edit)
    """

    def __init__(
        self,
        handler: SetupHookHandler,
        policy: AccessPolicy,
        chain_resolver: ChainResolver | None = None,
    ) -> None:
        if not isinstance(handler, SetupHookHandler):
            raise TypeError(
                f"{type(handler).__name__} must implement SetupHookHandler to be permission-checked"
            )
        self._handler = handler
        self._policy = policy
        self._chain_resolver = chain_resolver or MappingChainResolver()

    @property
    def policy(self) -> AccessPolicy:
        return self._policy

    def check(self, request: ActionRequest) -> Decision:
        """Evaluate and log access for ``request`` without side effects on it."""
        namespace = self._handler.action_namespace(request)
        chain = self._chain_resolver.expand(request.action)
        decision = self._policy.decide(
            namespace,
            request.action.name,
            request.method,
            chain,
            request.granted.permissions(),
        )
        log_decision(
            decision,
            identity=request.identity,
            request_id=request.request_id,
            logger_name=__name__,
        )
        return decision

    def run_setup(self, request: ActionRequest) -> Decision:
        """Run the handler's setup phase followed by the access check.

        Raises:
            PermissionDeniedError: Access was denied; ``permission_denied``
                has already been called on the handler.
        """
        self._handler.setup(request)

        decision = self.check(request)
        if decision.denied:
            self._handler.permission_denied(request, decision)
            raise PermissionDeniedError(decision)
        return decision

    def dispatch(self, request: ActionRequest, action_handler: Callable[[ActionRequest], _T]) -> _T:
        """Run setup, the access check and, if allowed, the action handler."""
        self.run_setup(request)
        return action_handler(request)


__all__ = [
    "ActionRequest",
    "PermissionCheck",
]

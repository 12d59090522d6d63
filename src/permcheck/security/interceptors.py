"""gRPC adapter for per-action permission checks.

Provides:
- ``ActionPermissionInterceptor`` — ``grpc.aio`` server interceptor that
  treats each RPC as an action (service = namespace, RPC = action name).
- ``_extract_rpc_name``, ``_extract_service_name``, ``_should_skip`` — helpers.

gRPC calls are always HTTP/2 POST, so the per-verb lookup is
``{Rpc}_POST`` and then ``setup``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import grpc

from ..exceptions import PermissionDeniedError, get_grpc_status_code
from ..interfaces import ActionDescriptor, GrantedPermissionSource
from ..permissions.constants import HttpMethod
from ..permissions.policy import AccessPolicy
from .audit import log_decision

logger = logging.getLogger(__name__)

GrantedSourceFactory = Callable[[grpc.HandlerCallDetails], GrantedPermissionSource]
IdentityResolver = Callable[[grpc.HandlerCallDetails], Optional[str]]

# Method prefixes that bypass permission checks
_SKIP_PREFIXES = (
    "/grpc.health.v1.",
    "/grpc.reflection.v1",
)


# ── Helpers ──────────────────────────────────────────────────────


def _extract_rpc_name(full_method: str) -> str:
    """Extract RPC name from fully-qualified method string.

    ``/admin.AdminService/Edit`` → ``Edit``
    """
    return full_method.rsplit("/", 1)[-1] if "/" in full_method else full_method


def _extract_service_name(full_method: str) -> str:
    """Extract the service (namespace) from a fully-qualified method string.

    ``/admin.AdminService/Edit`` → ``admin.AdminService``
    """
    parts = full_method.strip("/").rsplit("/", 1)
    return parts[0] if len(parts) == 2 else ""


def _should_skip(method: str) -> bool:
    """Check if this method should skip permission checks."""
    return method.startswith(_SKIP_PREFIXES)


# ── Interceptor ─────────────────────────────────────────────────


class ActionPermissionInterceptor(grpc.aio.ServerInterceptor):
    """Server interceptor enforcing an ``AccessPolicy`` per RPC.

    Sits before all handlers and:
    1. Maps ``/pkg.Service/Rpc`` to namespace ``pkg.Service`` / action ``Rpc``
    2. Collects the caller's tags via ``granted_source(handler_call_details)``
    3. Evaluates the policy (``Rpc`` → ``Rpc_POST`` → ``setup``)
    4. Logs the decision and aborts denied calls with ``PERMISSION_DENIED``

    Args:
        policy: Permission requirements and policy mode.
        granted_source: Builds the caller's permission source from the call
            details (typically from an already verified credential).
        identity_resolver: Optional caller name for audit logs.
        service_name: Human-readable service name for log messages.

    Usage::

        interceptor = ActionPermissionInterceptor(
            policy,
            granted_source=lambda details: StaticPermissions(roles_for(details)),
        )
        server = grpc.aio.server(interceptors=[interceptor])
    """

    def __init__(
        self,
        policy: AccessPolicy,
        *,
        granted_source: GrantedSourceFactory,
        identity_resolver: IdentityResolver | None = None,
        service_name: str = "Service",
    ) -> None:
        self._policy = policy
        self._granted_source = granted_source
        self._identity_resolver = identity_resolver
        self._service_name = service_name

        logger.info(
            "%s permission interceptor: %d actions, allow_by_default=%s",
            self._service_name,
            len(policy.registry),
            policy.allow_by_default,
        )

    async def intercept_service(
        self,
        continuation: Any,
        handler_call_details: grpc.HandlerCallDetails,
    ) -> grpc.RpcMethodHandler:
        """Intercept incoming gRPC calls for permission validation."""
        method = handler_call_details.method or ""

        if _should_skip(method):
            return await continuation(handler_call_details)

        action = ActionDescriptor(_extract_service_name(method), _extract_rpc_name(method))
        identity = self._identity_resolver(handler_call_details) if self._identity_resolver else None
        granted = self._granted_source(handler_call_details).permissions()

        decision = self._policy.decide(
            action.namespace,
            action.name,
            HttpMethod.POST,
            (action,),
            granted,
        )
        log_decision(decision, identity=identity, logger_name=__name__)

        if decision.allowed:
            return await continuation(handler_call_details)

        error = PermissionDeniedError(decision)
        deny_status = get_grpc_status_code(error)
        deny_msg = f"{self._service_name}: [{error.code}] {error.message}"

        async def _denied(request, context):
            context.set_trailing_metadata([("error-code", error.code)])
            await context.abort(deny_status, deny_msg)

        return grpc.unary_unary_rpc_method_handler(_denied)


__all__ = [
    "ActionPermissionInterceptor",
    "_extract_rpc_name",
    "_extract_service_name",
    "_should_skip",
]

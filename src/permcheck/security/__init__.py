"""Dispatch-side integration for permcheck.

This package wires the permission core into a host dispatcher:
1. **Setup hook** — ``PermissionCheck`` runs after a controller's ``setup``
2. **gRPC** — ``ActionPermissionInterceptor`` for ``grpc.aio`` servers
3. **Audit** — structured ConfigurationError / AccessDenied log events

Usage::

    from permcheck.security import PermissionCheck, get_security_interceptors

    server = grpc.aio.server(
        interceptors=get_security_interceptors(policy, granted_source=roles_from_metadata),
    )
"""

from __future__ import annotations

import grpc

from ..permissions.policy import AccessPolicy
from .audit import ACCESS_DENIED_EVENT, CONFIGURATION_ERROR_EVENT, log_decision
from .hook import ActionRequest, PermissionCheck
from .interceptors import (
    ActionPermissionInterceptor,
    GrantedSourceFactory,
    IdentityResolver,
    _extract_rpc_name,
    _extract_service_name,
    _should_skip,
)


def get_security_interceptors(
    policy: AccessPolicy,
    *,
    granted_source: GrantedSourceFactory,
    identity_resolver: IdentityResolver | None = None,
    service_name: str = "Service",
) -> list[grpc.aio.ServerInterceptor]:
    """Get gRPC server interceptors enforcing ``policy``.

    Returns a list to pass to ``grpc.aio.server(interceptors=...)``.
    """
    return [
        ActionPermissionInterceptor(
            policy,
            granted_source=granted_source,
            identity_resolver=identity_resolver,
            service_name=service_name,
        )
    ]


__all__ = [
    # Setup hook
    "ActionRequest",
    "PermissionCheck",
    # Audit
    "ACCESS_DENIED_EVENT",
    "CONFIGURATION_ERROR_EVENT",
    "log_decision",
    # Interceptors
    "ActionPermissionInterceptor",
    "GrantedSourceFactory",
    "IdentityResolver",
    "_extract_rpc_name",
    "_extract_service_name",
    "_should_skip",
    "get_security_interceptors",
]

"""Tests for the gRPC ActionPermissionInterceptor."""

from __future__ import annotations

import logging
from unittest.mock import AsyncMock, MagicMock

import grpc
import pytest

from permcheck import (
    AccessPolicy,
    ActionPermissionInterceptor,
    PolicyConfig,
    StaticPermissions,
    get_security_interceptors,
)
from permcheck.security import (
    CONFIGURATION_ERROR_EVENT,
    _extract_rpc_name,
    _extract_service_name,
    _should_skip,
)

STRICT = PolicyConfig(allow_by_default=False)


def _make_handler_call_details(method: str, metadata: list | None = None):
    """Create a mock HandlerCallDetails."""
    mock = MagicMock()
    mock.method = method
    mock.invocation_metadata = metadata or []
    return mock


def _roles_from_metadata(details) -> StaticPermissions:
    """Test-only source: roles listed in an ``x-roles`` header."""
    metadata = dict(details.invocation_metadata or [])
    raw = metadata.get("x-roles", "")
    return StaticPermissions(r.strip() for r in raw.split(",") if r.strip())


def _interceptor(permissions: dict, config: PolicyConfig = STRICT) -> ActionPermissionInterceptor:
    return ActionPermissionInterceptor(
        AccessPolicy(permissions, config),
        granted_source=_roles_from_metadata,
        identity_resolver=lambda details: dict(details.invocation_metadata or []).get("x-user"),
        service_name="Test",
    )


async def _continuation(details):
    return "handler"


class TestHelpers:
    """Method-name parsing helpers."""

    def test_extract_rpc_name(self) -> None:
        assert _extract_rpc_name("/admin.AdminService/Edit") == "Edit"
        assert _extract_rpc_name("Edit") == "Edit"

    def test_extract_service_name(self) -> None:
        assert _extract_service_name("/admin.AdminService/Edit") == "admin.AdminService"
        assert _extract_service_name("Edit") == ""

    def test_should_skip(self) -> None:
        assert _should_skip("/grpc.health.v1.Health/Check") is True
        assert _should_skip("/grpc.reflection.v1alpha.ServerReflection/ServerReflectionInfo") is True
        assert _should_skip("/admin.AdminService/Edit") is False


class TestActionPermissionInterceptor:
    """Decision → pass-through or aborting handler."""

    @pytest.mark.asyncio
    async def test_allowed_passes_through(self) -> None:
        interceptor = _interceptor({"Edit": ["Admin"]})
        details = _make_handler_call_details("/admin.AdminService/Edit", [("x-roles", "Admin")])
        assert await interceptor.intercept_service(_continuation, details) == "handler"

    @pytest.mark.asyncio
    async def test_any_one_role_suffices(self) -> None:
        interceptor = _interceptor({"Edit": ["Admin", "SuperAdmin"]})
        details = _make_handler_call_details("/admin.AdminService/Edit", [("x-roles", "User, SuperAdmin")])
        assert await interceptor.intercept_service(_continuation, details) == "handler"

    @pytest.mark.asyncio
    async def test_post_suffixed_entry(self) -> None:
        """gRPC is always POST, so ``Rpc_POST`` entries apply."""
        interceptor = _interceptor({"Create_POST": ["Editor"]})
        details = _make_handler_call_details("/admin.AdminService/Create", [("x-roles", "Editor")])
        assert await interceptor.intercept_service(_continuation, details) == "handler"

    @pytest.mark.asyncio
    async def test_setup_fallback(self) -> None:
        interceptor = _interceptor({"setup": ["User"]})
        details = _make_handler_call_details("/admin.AdminService/List", [("x-roles", "User")])
        assert await interceptor.intercept_service(_continuation, details) == "handler"

    @pytest.mark.asyncio
    async def test_allow_by_default(self) -> None:
        interceptor = _interceptor({}, PolicyConfig(allow_by_default=True))
        details = _make_handler_call_details("/admin.AdminService/List")
        assert await interceptor.intercept_service(_continuation, details) == "handler"

    @pytest.mark.asyncio
    async def test_health_check_skipped(self) -> None:
        interceptor = _interceptor({})
        details = _make_handler_call_details("/grpc.health.v1.Health/Check")
        assert await interceptor.intercept_service(_continuation, details) == "handler"

    @pytest.mark.asyncio
    async def test_insufficient_aborts_permission_denied(self) -> None:
        interceptor = _interceptor({"Edit": ["Admin"]})
        details = _make_handler_call_details("/admin.AdminService/Edit", [("x-roles", "User")])
        handler = await interceptor.intercept_service(_continuation, details)
        assert handler != "handler"

        context = MagicMock()
        context.abort = AsyncMock()
        await handler.unary_unary(None, context)

        context.set_trailing_metadata.assert_called_once_with([("error-code", "PERMISSION_DENIED")])
        status, message = context.abort.await_args.args
        assert status == grpc.StatusCode.PERMISSION_DENIED
        assert "Edit" in message
        assert message.startswith("Test: [PERMISSION_DENIED]")

    @pytest.mark.asyncio
    async def test_misconfigured_aborts_and_logs_error(self, caplog) -> None:
        interceptor = _interceptor({"Edit": ["Admin"]})
        details = _make_handler_call_details(
            "/admin.AdminService/Unmapped", [("x-roles", "Admin"), ("x-user", "bob")]
        )
        with caplog.at_level(logging.INFO, logger="permcheck"):
            handler = await interceptor.intercept_service(_continuation, details)
        assert handler != "handler"

        errors = [r for r in caplog.records if getattr(r, "event", None) == CONFIGURATION_ERROR_EVENT]
        assert len(errors) == 1
        assert errors[0].levelno == logging.ERROR
        assert errors[0].action == "Unmapped"
        assert errors[0].identity == "bob"


class TestFactory:
    """get_security_interceptors()."""

    def test_returns_single_interceptor(self) -> None:
        interceptors = get_security_interceptors(
            AccessPolicy({}, STRICT),
            granted_source=_roles_from_metadata,
        )
        assert len(interceptors) == 1
        assert isinstance(interceptors[0], ActionPermissionInterceptor)
        assert isinstance(interceptors[0], grpc.aio.ServerInterceptor)

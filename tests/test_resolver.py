"""Tests for OverrideResolver lookup order."""

from __future__ import annotations

import pytest

from permcheck import HttpMethod, OverrideResolver, PermissionRegistry, method_action, method_name


@pytest.fixture
def resolver() -> OverrideResolver:
    return OverrideResolver()


class TestMethodHelpers:
    """HttpMethod / method_action helpers."""

    def test_method_action(self) -> None:
        assert method_action("create", HttpMethod.POST) == "create_POST"
        assert method_action("create", "put") == "create_PUT"

    def test_coerce_case_insensitive(self) -> None:
        assert HttpMethod.coerce("delete") is HttpMethod.DELETE
        assert HttpMethod.coerce(HttpMethod.GET) is HttpMethod.GET

    def test_coerce_trace_and_connect(self) -> None:
        assert HttpMethod.coerce("trace") is HttpMethod.TRACE
        assert HttpMethod.coerce("CONNECT") is HttpMethod.CONNECT

    def test_method_name_unlisted_verb(self) -> None:
        assert method_name("propfind") == "PROPFIND"
        assert method_name(HttpMethod.TRACE) == "TRACE"
        assert method_action("list", " mkcol ") == "list_MKCOL"


class TestResolutionOrder:
    """action → action_METHOD (non-GET only) → setup → None."""

    def test_action_entry(self, resolver: OverrideResolver) -> None:
        registry = PermissionRegistry.from_mapping({"view": ["Admin"]})
        assert resolver.resolve("view", HttpMethod.GET, registry) == ("Admin",)

    def test_action_entry_beats_setup(self, resolver: OverrideResolver) -> None:
        registry = PermissionRegistry.from_mapping({"edit": ["Admin"], "setup": ["User"]})
        assert resolver.resolve("edit", HttpMethod.GET, registry) == ("Admin",)
        assert resolver.resolve("edit", HttpMethod.POST, registry) == ("Admin",)

    def test_action_entry_beats_method_entry(self, resolver: OverrideResolver) -> None:
        registry = PermissionRegistry.from_mapping({"create": ["User"], "create_POST": ["Editor"]})
        assert resolver.resolve("create", HttpMethod.POST, registry) == ("User",)

    def test_method_suffixed_entry(self, resolver: OverrideResolver) -> None:
        registry = PermissionRegistry.from_mapping({"create_POST": ["Editor"], "setup": ["User"]})
        assert resolver.resolve("create", HttpMethod.POST, registry) == ("Editor",)

    def test_method_suffix_skipped_for_get(self, resolver: OverrideResolver) -> None:
        registry = PermissionRegistry.from_mapping({"create_GET": ["Editor"], "setup": ["User"]})
        assert resolver.resolve("create", HttpMethod.GET, registry) == ("User",)

    def test_method_suffix_skipped_for_get_without_setup(self, resolver: OverrideResolver) -> None:
        registry = PermissionRegistry.from_mapping({"create_POST": ["Editor"]})
        assert resolver.resolve("create", HttpMethod.GET, registry) is None

    def test_head_uses_method_suffix(self, resolver: OverrideResolver) -> None:
        """Only GET skips the per-verb lookup."""
        registry = PermissionRegistry.from_mapping({"list_HEAD": ["Viewer"]})
        assert resolver.resolve("list", HttpMethod.HEAD, registry) == ("Viewer",)

    def test_other_method_suffix_not_used(self, resolver: OverrideResolver) -> None:
        registry = PermissionRegistry.from_mapping({"item_PUT": ["Editor"], "setup": ["User"]})
        assert resolver.resolve("item", HttpMethod.DELETE, registry) == ("User",)

    def test_setup_fallback(self, resolver: OverrideResolver) -> None:
        registry = PermissionRegistry.from_mapping({"setup": ["User"]})
        assert resolver.resolve("list", HttpMethod.GET, registry) == ("User",)

    def test_nothing_configured(self, resolver: OverrideResolver) -> None:
        assert resolver.resolve("list", HttpMethod.POST, PermissionRegistry()) is None

    def test_empty_entry_wins_over_setup(self, resolver: OverrideResolver) -> None:
        registry = PermissionRegistry.from_mapping({"ping": [], "setup": ["User"]})
        assert resolver.resolve("ping", HttpMethod.GET, registry) == ()

    def test_string_method_accepted(self, resolver: OverrideResolver) -> None:
        registry = PermissionRegistry.from_mapping({"create_PATCH": ["Editor"]})
        assert resolver.resolve("create", "patch", registry) == ("Editor",)

    def test_unlisted_verb_uses_method_entry_then_setup(self, resolver: OverrideResolver) -> None:
        """Verbs outside HttpMethod still get the per-verb lookup."""
        registry = PermissionRegistry.from_mapping({"list_PROPFIND": ["Dav"], "setup": ["User"]})
        assert resolver.resolve("list", "PROPFIND", registry) == ("Dav",)
        assert resolver.resolve("list", "propfind", registry) == ("Dav",)
        assert resolver.resolve("list", "MKCOL", registry) == ("User",)

    @pytest.mark.parametrize("verb", ["TRACE", "CONNECT", "PROPFIND", HttpMethod.TRACE])
    def test_rare_verbs_fall_back_to_setup(self, resolver: OverrideResolver, verb) -> None:
        registry = PermissionRegistry.from_mapping({"setup": ["User"]})
        assert resolver.resolve("list", verb, registry) == ("User",)

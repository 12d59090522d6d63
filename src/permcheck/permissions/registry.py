"""Action → required-permission registry.

Provides:
- ``PermissionRegistry`` — configuration-time mapping from action name to
  an ordered set of permission tags, read-only once frozen.

An explicit empty entry (``register("ping", [])``) is *configured*: it
resolves to ``()`` and denies everyone. Only a missing entry resolves to
``None`` and counts as unconfigured.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from ..exceptions import ConfigurationError, DuplicateRegistrationError


def _normalize_tags(action: str, permissions: Iterable[str]) -> tuple[str, ...]:
    """Validate tags and collapse duplicates, keeping first-seen order."""
    if isinstance(permissions, (str, bytes)):
        raise ConfigurationError(
            f"Permissions for action '{action}' must be a sequence of tags, not a single string",
            action=action,
        )
    try:
        tags = list(permissions)
    except TypeError:
        raise ConfigurationError(
            f"Permissions for action '{action}' must be iterable, got {type(permissions).__name__}",
            action=action,
        ) from None

    for tag in tags:
        if not isinstance(tag, str) or not tag:
            raise ConfigurationError(
                f"Invalid permission tag {tag!r} for action '{action}'",
                action=action,
            )
    return tuple(dict.fromkeys(tags))


class PermissionRegistry:
    """Mapping of action name → required permission tags.

    Registration happens at controller configuration time; ``freeze()``
    ends that phase. Lookups are plain dict reads and take no lock, so
    concurrent requests may read freely once configuration is done.

    Registering the same action twice raises ``DuplicateRegistrationError``
    rather than silently replacing the first entry.

    Example::

        registry = PermissionRegistry.from_mapping({
            "view": ["Admin"],
            "edit": ["Admin", "SuperAdmin"],
            "create_POST": ["Editor"],
        })
        registry.lookup("edit")     # ("Admin", "SuperAdmin")
        registry.lookup("missing")  # None
    """

    __slots__ = ("_entries", "_frozen", "_lock")

    def __init__(self) -> None:
        self._entries: dict[str, tuple[str, ...]] = {}
        self._frozen = False
        self._lock = threading.Lock()

    @classmethod
    def from_mapping(cls, permissions: Mapping[str, Iterable[str]]) -> PermissionRegistry:
        """Build and freeze a registry from a ``{action: [tags]}`` mapping."""
        registry = cls()
        for action, tags in permissions.items():
            registry.register(action, tags)
        registry.freeze()
        return registry

    # ── Configuration ──────────────────────────────────

    def register(self, action: str, permissions: Iterable[str]) -> None:
        """Register the permission tags required for ``action``.

        Raises:
            DuplicateRegistrationError: ``action`` already has an entry.
            ConfigurationError: The registry is frozen, or the action
                name / tags are malformed.
        """
        if not isinstance(action, str) or not action:
            raise ConfigurationError(f"Action name must be a non-empty string, got {action!r}")
        tags = _normalize_tags(action, permissions)

        with self._lock:
            if self._frozen:
                raise ConfigurationError(
                    f"Cannot register action '{action}': registry is frozen",
                    action=action,
                )
            if action in self._entries:
                raise DuplicateRegistrationError(
                    f"Action '{action}' is already registered",
                    action=action,
                )
            self._entries[action] = tags

    def freeze(self) -> None:
        """End the configuration phase; later ``register`` calls fail."""
        with self._lock:
            self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ── Lookup ─────────────────────────────────────────

    def lookup(self, action: str) -> tuple[str, ...] | None:
        """Return the tags configured for ``action``, or None if unconfigured."""
        return self._entries.get(action)

    def has_permissions(self) -> bool:
        """True if at least one action has a configured requirement."""
        return bool(self._entries)

    def actions(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def as_dict(self) -> Mapping[str, tuple[str, ...]]:
        """Read-only view of the configured entries."""
        return MappingProxyType(self._entries)

    def __contains__(self, action: object) -> bool:
        return action in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._entries))

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return f"PermissionRegistry({len(self._entries)} actions, {state})"


__all__ = ["PermissionRegistry"]

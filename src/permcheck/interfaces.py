"""Boundary types between permcheck and the host dispatcher.

The core never inspects dispatcher internals. Hosts supply:
- a ``ChainResolver`` that expands an action into its ancestor chain,
- a ``GrantedPermissionSource`` per request,
- a ``SetupHookHandler`` (the controller) exposing the setup hook.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, AbstractSet, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .permissions.evaluator import Decision


@dataclass(frozen=True)
class ActionDescriptor:
    """A dispatch action: a name unique within its namespace."""

    namespace: str
    name: str

    @property
    def path(self) -> str:
        return f"{self.namespace}/{self.name}" if self.namespace else self.name


@runtime_checkable
class ChainResolver(Protocol):
    """Expands an action into its ordered chain (root first, action last)."""

    def expand(self, action: ActionDescriptor) -> Sequence[ActionDescriptor]: ...


@runtime_checkable
class GrantedPermissionSource(Protocol):
    """Yields the permission tags held by the current request's caller."""

    def permissions(self) -> AbstractSet[str]: ...


class MappingChainResolver:
    """ChainResolver backed by a static ``{path: chain}`` table.

    Actions not in the table expand to a one-element chain holding
    only themselves.
    """

    def __init__(self, chains: Mapping[str, Sequence[ActionDescriptor]] | None = None) -> None:
        self._chains = {path: tuple(chain) for path, chain in (chains or {}).items()}

    def expand(self, action: ActionDescriptor) -> Sequence[ActionDescriptor]:
        return self._chains.get(action.path, (action,))


class StaticPermissions:
    """GrantedPermissionSource over a fixed set of tags."""

    __slots__ = ("_tags",)

    def __init__(self, tags: Iterable[str] = ()) -> None:
        self._tags = frozenset(tags)

    def permissions(self) -> AbstractSet[str]:
        return self._tags

    def __repr__(self) -> str:
        return f"StaticPermissions({sorted(self._tags)!r})"


class ContextPermissions:
    """GrantedPermissionSource reading a request-scoped context mapping.

    An upstream action stores the caller's permissions under
    ``context[key]``, either as a mapping (tag → anything) or as an
    iterable of tags. Only the tag names are used; the context is
    never written to.
    """

    __slots__ = ("_context", "_key")

    def __init__(self, context: Mapping[str, Any], key: str = "permissions") -> None:
        self._context = context
        self._key = key

    def permissions(self) -> AbstractSet[str]:
        held = self._context.get(self._key)
        if not held:
            return frozenset()
        if isinstance(held, str):
            return frozenset((held,))
        # Iterating a mapping yields its keys.
        return frozenset(held)


class SetupHookHandler(ABC):
    """Interface a controller must implement to be permission-checked.

    ``PermissionCheck`` runs the access check right after ``setup``
    succeeds and calls ``permission_denied`` when the check fails.
    """

    namespace: str = ""

    def action_namespace(self, request: Any) -> str:
        """Namespace this controller's actions live in."""
        return self.namespace

    @abstractmethod
    def setup(self, request: Any) -> None:
        raise NotImplementedError

    @abstractmethod
    def permission_denied(self, request: Any, decision: Decision) -> None:
        """Render the 403-equivalent response for a denied request."""
        raise NotImplementedError


__all__ = [
    "ActionDescriptor",
    "ChainResolver",
    "ContextPermissions",
    "GrantedPermissionSource",
    "MappingChainResolver",
    "SetupHookHandler",
    "StaticPermissions",
]

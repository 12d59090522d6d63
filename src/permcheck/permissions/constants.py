"""Dispatch constants shared by the permission core.

Provides:
- ``HttpMethod`` — common request verbs as seen by the dispatcher.
- ``SETUP_ACTION`` — the conventional chain-wide fallback entry.
- ``ANONYMOUS`` — identity logged when the caller is unknown.
- ``method_name()`` — upper-case wire name of any verb, listed or not.
- ``method_action()`` — REST-style per-verb action name (``create_POST``).
"""

from __future__ import annotations

from enum import Enum


class HttpMethod(str, Enum):
    """Common HTTP request methods.

    The set is open-ended: the resolver works on plain verb strings, so
    extension methods (``PROPFIND``, ``MKCOL``) need no member here.
    """

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    CONNECT = "CONNECT"

    @classmethod
    def coerce(cls, value: HttpMethod | str) -> HttpMethod:
        """Normalize a listed method name (case-insensitive) to ``HttpMethod``."""
        if isinstance(value, cls):
            return value
        try:
            return cls(method_name(value))
        except ValueError:
            raise ValueError(f"Unknown HTTP method: {value!r}") from None


SETUP_ACTION = "setup"
ANONYMOUS = "anonymous"


def method_name(method: HttpMethod | str) -> str:
    """Return the upper-case wire name for ``method``.

    Example::

        method_name(HttpMethod.POST)  # "POST"
        method_name("propfind")       # "PROPFIND"
    """
    if isinstance(method, HttpMethod):
        return method.value
    return str(method).strip().upper()


def method_action(action: str, method: HttpMethod | str) -> str:
    """Build the per-verb action name used by REST-style controllers.

    Example::

        method_action("create", HttpMethod.POST)  # "create_POST"
    """
    return f"{action}_{method_name(method)}"


__all__ = [
    "ANONYMOUS",
    "SETUP_ACTION",
    "HttpMethod",
    "method_action",
    "method_name",
]

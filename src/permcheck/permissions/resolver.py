"""Effective-requirement lookup with method and ``setup`` fallbacks."""

from __future__ import annotations

import logging

from .constants import SETUP_ACTION, HttpMethod, method_action, method_name
from .registry import PermissionRegistry

logger = logging.getLogger(__name__)


class OverrideResolver:
    """Resolve the permission requirement that applies to an action.

    Checks in order (first hit wins):
    1. ``{action}`` — the action's own entry.
    2. ``{action}_{METHOD}`` — only for non-GET requests, mirroring the
       per-verb action names of REST controllers (``create_POST``).
    3. ``setup`` — the chain-wide default requirement.

    Returns None if all three miss; the caller treats that as unconfigured.
    """

    def resolve(
        self,
        action: str,
        method: HttpMethod | str,
        registry: PermissionRegistry,
    ) -> tuple[str, ...] | None:
        verb = method_name(method)

        required = registry.lookup(action)
        if required is not None:
            return required

        if verb != HttpMethod.GET.value:
            suffixed = method_action(action, verb)
            required = registry.lookup(suffixed)
            logger.debug("Nothing on top level for '%s', checking request method: %s", action, suffixed)
            if required is not None:
                return required

        required = registry.lookup(SETUP_ACTION)
        if required is not None:
            logger.debug("Falling back to '%s' permissions for action '%s'", SETUP_ACTION, action)
        return required


__all__ = ["OverrideResolver"]

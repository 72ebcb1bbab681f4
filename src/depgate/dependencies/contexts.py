"""Dependency contexts and handler id conventions."""

from __future__ import annotations

from enum import Enum

__all__ = ["DependencyContext", "get_handler_id"]


class DependencyContext(str, Enum):
    """Why a component's dependencies are being checked.

    Values:
        ACTIVE: May the component activate at all.
        DISABLED: Should an otherwise active component be force-disabled.
    """

    ACTIVE = "active"
    DISABLED = "disabled"


def get_handler_id(component_id: str, context: DependencyContext | None = None) -> str:
    """Build the conventional handler id for a component and context.

    Args:
        component_id: Identity of the owning component (e.g., "shop").
        context: Optional context tag.

    Returns:
        ``<component_id>_<context>``, or the bare component id without context.

    Example:
        >>> get_handler_id("shop", DependencyContext.ACTIVE)
        'shop_active'
    """
    if context is None:
        return component_id
    return f"{component_id}_{context.value}"

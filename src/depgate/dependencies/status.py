"""Fulfillment status variants and the reducer that collapses them.

A handler answers "are my dependencies fulfilled?" with one of three shapes:

- SingleStatus: a plain boolean (the null handler)
- FlatStatus: ``checker_id -> bool`` (a single-checker handler)
- GroupedStatus: ``kind -> FlatStatus`` (a multi-checker handler)

``reduce_status`` turns any of them into one go/no-go boolean. Failing
entries whose checker is optional do not block; a single failing required
entry fails its whole group, and any failing group fails the result.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TypeAlias

from depgate.dependencies.checkers import is_optional_identity

__all__ = [
    "SingleStatus",
    "FlatStatus",
    "GroupedStatus",
    "FulfillmentStatus",
    "StatusTransform",
    "RawStatus",
    "reduce_status",
    "require_all",
    "status_to_boolean",
    "coerce_status",
]


@dataclass(frozen=True, slots=True)
class SingleStatus:
    """A fulfillment answer that is already a single boolean."""

    fulfilled: bool

    def __bool__(self) -> bool:
        return reduce_status(self)


@dataclass(frozen=True, slots=True)
class FlatStatus:
    """Per-checker fulfillment flags for one group.

    Attributes:
        results: Mapping of checker identity to whether it is fulfilled.
        optional: Identities whose failures do not block.

    Example:
        >>> status = FlatStatus(
        ...     results={"shop_modules": True, "shop_optional_settings": False},
        ...     optional=frozenset({"shop_optional_settings"}),
        ... )
        >>> bool(status)
        True
    """

    results: Mapping[str, bool] = field(default_factory=dict)
    optional: frozenset[str] = frozenset()

    @classmethod
    def from_mapping(cls, results: Mapping[str, bool]) -> FlatStatus:
        """Build a flat status, marking optional entries by naming convention.

        Args:
            results: Mapping of checker identity to fulfillment flag.

        Returns:
            FlatStatus whose optional set holds every key containing
            the "optional" marker.
        """
        return cls(
            results=dict(results),
            optional=frozenset(key for key in results if is_optional_identity(key)),
        )

    def failing(self) -> tuple[str, ...]:
        """Identities of the entries that are not fulfilled."""
        return tuple(key for key, ok in self.results.items() if not ok)

    def __bool__(self) -> bool:
        return reduce_status(self)


@dataclass(frozen=True, slots=True)
class GroupedStatus:
    """Fulfillment flags grouped by dependency kind.

    Attributes:
        groups: Mapping of kind value to that kind's FlatStatus.
    """

    groups: Mapping[str, FlatStatus] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return reduce_status(self)


FulfillmentStatus: TypeAlias = SingleStatus | FlatStatus | GroupedStatus

# Legacy shapes: a bool, a flat mapping, or a mapping of flat mappings
RawStatus: TypeAlias = bool | Mapping[str, bool] | Mapping[str, Mapping[str, bool]]

# Receives the boolean of a SingleStatus or one FlatStatus group
StatusTransform: TypeAlias = Callable[[bool | FlatStatus], bool]


def _reduce_flat(status: FlatStatus) -> bool:
    failing = status.failing()
    if not failing:
        return True
    return all(key in status.optional for key in failing)


def require_all(status: bool | FlatStatus) -> bool:
    """Strict transform: every entry must be fulfilled, optional or not.

    Used when deciding whether a component should be force-disabled.
    """
    if isinstance(status, FlatStatus):
        return not status.failing()
    return status


def reduce_status(
    status: FulfillmentStatus,
    transform: StatusTransform | None = None,
) -> bool:
    """Collapse a fulfillment status into a single boolean.

    Args:
        status: The status returned by a handler.
        transform: Optional policy replacing the default rule. It receives
            the boolean of a SingleStatus, or each FlatStatus group in turn.

    Returns:
        True if the status counts as fulfilled.

    Raises:
        TypeError: If ``status`` is not one of the status variants.

    Example:
        >>> reduce_status(FlatStatus.from_mapping({"a": True, "optional_b": False}))
        True
        >>> reduce_status(GroupedStatus({}))
        True
    """
    if isinstance(status, SingleStatus):
        return transform(status.fulfilled) if transform else status.fulfilled

    if isinstance(status, FlatStatus):
        return transform(status) if transform else _reduce_flat(status)

    if isinstance(status, GroupedStatus):
        for group in status.groups.values():
            fulfilled = transform(group) if transform else _reduce_flat(group)
            if not fulfilled:
                return False
        return True

    raise TypeError(f"Unsupported fulfillment status: {type(status).__name__}")


def coerce_status(
    raw: FulfillmentStatus | RawStatus,
) -> FulfillmentStatus:
    """Convert a legacy raw status into its explicit variant.

    Accepts a bool, a flat mapping of identity to bool, or a mapping of kind
    to such flat mappings. Optional entries are recognised by the "optional"
    marker in their key. Variants are returned unchanged.

    Raises:
        TypeError: If the value has none of the accepted shapes.
    """
    if isinstance(raw, SingleStatus | FlatStatus | GroupedStatus):
        return raw
    if isinstance(raw, bool):
        return SingleStatus(raw)
    if isinstance(raw, Mapping):
        values = list(raw.values())
        if values and all(isinstance(value, Mapping) for value in values):
            return GroupedStatus(
                groups={
                    kind: FlatStatus.from_mapping(group) for kind, group in raw.items()
                }
            )
        if all(isinstance(value, bool) for value in values):
            return FlatStatus.from_mapping(raw)
    raise TypeError(f"Unsupported fulfillment status: {raw!r}")


def status_to_boolean(
    raw: FulfillmentStatus | RawStatus,
    transform: StatusTransform | None = None,
) -> bool:
    """Reduce a raw or explicit status to a boolean.

    Example:
        >>> status_to_boolean({"required_a": False, "optional_b": False})
        False
        >>> status_to_boolean(
        ...     {"python_modules": {"required_a": False},
        ...      "active_components": {"optional_x": False}}
        ... )
        False
    """
    return reduce_status(coerce_status(raw), transform)

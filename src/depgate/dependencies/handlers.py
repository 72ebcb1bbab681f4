"""Dependency handlers: the aggregation units callers query.

- SingleCheckerHandler wraps one checker and keys every answer by its id
- MultiCheckerHandler wraps many checkers and groups answers by kind, then id
- NullHandler has nothing to check and is always fulfilled

Handlers are append-only: checkers and declarations can be added after
construction but never removed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from typing import Any, Self, TypeVar

from depgate.constants import NULL_HANDLER_ID
from depgate.dependencies.checkers import DependenciesChecker
from depgate.dependencies.models import Declaration, MissingDependency
from depgate.dependencies.status import (
    FlatStatus,
    FulfillmentStatus,
    GroupedStatus,
    SingleStatus,
    StatusTransform,
    reduce_status,
)
from depgate.logging import get_logger

__all__ = [
    "DependenciesHandler",
    "SingleCheckerHandler",
    "MultiCheckerHandler",
    "NullHandler",
    "NULL_HANDLER",
]

logger = get_logger(__name__)

T = TypeVar("T")


class DependenciesHandler(ABC):
    """Base class for dependency handlers.

    Attributes:
        id: Identifier the handler is registered under in the service.
    """

    def __init__(self, handler_id: str) -> None:
        self._id = handler_id

    @property
    def id(self) -> str:
        return self._id

    @abstractmethod
    def get_checkers(self) -> tuple[DependenciesChecker, ...]:
        """Get the checkers this handler aggregates."""

    @abstractmethod
    def get_dependencies(self) -> dict[str, Any]:
        """Get the registered declarations, shaped like the handler."""

    @abstractmethod
    def get_missing_dependencies(self) -> dict[str, Any]:
        """Get the unmet declarations, shaped like the handler."""

    @abstractmethod
    def are_dependencies_fulfilled(self) -> FulfillmentStatus:
        """Get per-checker fulfillment, shaped like the handler."""

    def is_fulfilled(self, transform: StatusTransform | None = None) -> bool:
        """Reduce this handler's fulfillment status to one boolean."""
        return reduce_status(self.are_dependencies_fulfilled(), transform)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self._id!r})"


class SingleCheckerHandler(DependenciesHandler):
    """Handler for a component with one homogeneous group of dependencies.

    Every answer is a one-entry mapping keyed by the checker id, so callers
    can treat single and multi handlers alike.

    Example:
        ```python
        handler = SingleCheckerHandler(
            "shop_active",
            ModulesChecker("shop_modules", ["sqlite3"]),
        )
        handler.get_missing_dependencies()  # {"shop_modules": ()}
        handler.are_dependencies_fulfilled()  # FlatStatus({"shop_modules": True})
        ```
    """

    def __init__(self, handler_id: str, checker: DependenciesChecker) -> None:
        super().__init__(handler_id)
        self._checker = checker

    @property
    def checker(self) -> DependenciesChecker:
        return self._checker

    def get_checkers(self) -> tuple[DependenciesChecker, ...]:
        return (self._checker,)

    def register_dependency(self, dependency: Any) -> bool:
        """Register an additional declaration with the wrapped checker."""
        return self._checker.register_dependency(dependency)

    def get_dependencies(self) -> dict[str, tuple[Declaration, ...]]:
        return {self._checker.id: self._checker.get_declarations()}

    def get_missing_dependencies(self) -> dict[str, tuple[MissingDependency, ...]]:
        return {self._checker.id: self._checker.get_missing()}

    def are_dependencies_fulfilled(self) -> FlatStatus:
        return _flat_status(self.get_checkers())


class MultiCheckerHandler(DependenciesHandler):
    """Handler aggregating checkers of possibly different kinds.

    Answers are grouped as ``kind -> checker_id -> result``.

    Example:
        ```python
        handler = MultiCheckerHandler(
            "shop_active",
            [
                ModulesChecker("shop_modules", ["sqlite3"]),
                FunctionsChecker("shop_functions", ["os.fork"]),
            ],
        )
        handler.get_dependencies()
        # {"python_modules": {"shop_modules": (...)},
        #  "python_functions": {"shop_functions": (...)}}
        ```
    """

    def __init__(
        self,
        handler_id: str,
        checkers: Iterable[DependenciesChecker] = (),
    ) -> None:
        super().__init__(handler_id)
        self._checkers: list[DependenciesChecker] = []
        for checker in checkers:
            self.register_checker(checker)

    def get_checkers(self) -> tuple[DependenciesChecker, ...]:
        return tuple(self._checkers)

    def register_checker(self, checker: DependenciesChecker) -> Self:
        """Append a checker.

        Values that are not checkers, and checkers whose id is already
        registered on this handler, are logged and ignored.

        Returns:
            The handler, for chaining.
        """
        if not isinstance(checker, DependenciesChecker):
            logger.warning(
                "Ignored non-checker passed to handler",
                handler_id=self._id,
                value=repr(checker),
            )
            return self
        if any(registered.id == checker.id for registered in self._checkers):
            logger.warning(
                "Ignored checker with an already registered id",
                handler_id=self._id,
                checker_id=checker.id,
                kind=checker.kind.value,
            )
            return self

        self._checkers.append(checker)
        logger.debug(
            "Registered dependencies checker",
            handler_id=self._id,
            checker_id=checker.id,
            kind=checker.kind.value,
        )
        return self

    def get_dependencies(self) -> dict[str, dict[str, tuple[Declaration, ...]]]:
        return self._walk_checkers(lambda checker: checker.get_declarations())

    def get_missing_dependencies(
        self,
    ) -> dict[str, dict[str, tuple[MissingDependency, ...]]]:
        return self._walk_checkers(lambda checker: checker.get_missing())

    def are_dependencies_fulfilled(self) -> GroupedStatus:
        by_kind: dict[str, list[DependenciesChecker]] = {}
        for checker in self._checkers:
            by_kind.setdefault(checker.kind.value, []).append(checker)
        return GroupedStatus(
            groups={kind: _flat_status(checkers) for kind, checkers in by_kind.items()}
        )

    def _walk_checkers(
        self, query: Callable[[DependenciesChecker], T]
    ) -> dict[str, dict[str, T]]:
        result: dict[str, dict[str, T]] = {}
        for checker in self._checkers:
            result.setdefault(checker.kind.value, {})[checker.id] = query(checker)
        return result


class NullHandler(DependenciesHandler):
    """Handler with no dependencies: always fulfilled, never missing anything.

    Returned by the service for identifiers that were never registered or
    whose factory failed, so callers never special-case "no handler".
    """

    def __init__(self, handler_id: str = NULL_HANDLER_ID) -> None:
        super().__init__(handler_id)

    def get_checkers(self) -> tuple[DependenciesChecker, ...]:
        return ()

    def get_dependencies(self) -> dict[str, Any]:
        return {}

    def get_missing_dependencies(self) -> dict[str, Any]:
        return {}

    def are_dependencies_fulfilled(self) -> SingleStatus:
        return SingleStatus(True)


def _flat_status(checkers: Iterable[DependenciesChecker]) -> FlatStatus:
    checkers = tuple(checkers)
    return FlatStatus(
        results={checker.id: checker.is_fulfilled() for checker in checkers},
        optional=frozenset(checker.id for checker in checkers if checker.optional),
    )


# Shared instance handed out for unknown identifiers
NULL_HANDLER = NullHandler()

"""Activation gating for components that declare dependencies.

A component asks the dependencies service about its own handler ids and
combines the answer with its other preconditions. It never looks at the
missing-dependency detail; that goes to the reporter.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from depgate.dependencies.contexts import DependencyContext, get_handler_id
from depgate.dependencies.service import DependenciesService
from depgate.dependencies.status import require_all

__all__ = [
    "ActiveDependenciesMixin",
    "DisabledDependenciesMixin",
    "DependentComponent",
]


class ActiveDependenciesMixin:
    """Adds ``is_active_dependencies`` to a class with a service and an id.

    Failing optional checkers do not prevent activation.
    """

    component_id: str
    dependencies_service: DependenciesService

    def is_active_dependencies(self) -> bool:
        handler_id = get_handler_id(self.component_id, DependencyContext.ACTIVE)
        return self.dependencies_service.is_fulfilled(handler_id)


class DisabledDependenciesMixin:
    """Adds ``is_disabled_dependencies`` to a class with a service and an id.

    Any failing checker in the disabled context disables the component,
    optional or not.
    """

    component_id: str
    dependencies_service: DependenciesService

    def is_disabled_dependencies(self) -> bool:
        handler_id = get_handler_id(self.component_id, DependencyContext.DISABLED)
        return not self.dependencies_service.is_fulfilled(
            handler_id, transform=require_all
        )


class DependentComponent(ActiveDependenciesMixin, DisabledDependenciesMixin):
    """A component whose activation is gated on its declared dependencies.

    Example:
        ```python
        component = DependentComponent(
            "shop",
            service,
            preconditions=[lambda: settings.shop_enabled],
        )
        if component.is_active() and not component.is_disabled():
            component_boot()
        ```
    """

    def __init__(
        self,
        component_id: str,
        dependencies_service: DependenciesService,
        *,
        preconditions: Iterable[Callable[[], bool]] = (),
    ) -> None:
        self.component_id = component_id
        self.dependencies_service = dependencies_service
        self._preconditions = tuple(preconditions)

    def is_active(self) -> bool:
        """Whether the component may activate.

        All preconditions and the active-context dependencies must hold.
        """
        return (
            all(precondition() for precondition in self._preconditions)
            and self.is_active_dependencies()
        )

    def is_disabled(self) -> bool:
        """Whether the component should be force-disabled."""
        return self.is_disabled_dependencies()

    def __repr__(self) -> str:
        return f"DependentComponent(id={self.component_id!r})"

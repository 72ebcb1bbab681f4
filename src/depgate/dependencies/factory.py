"""Build checkers, handlers and a populated service from configuration."""

from __future__ import annotations

import functools
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from depgate.dependencies.checkers import (
    ComponentsChecker,
    DependenciesChecker,
    FunctionsChecker,
    ModulesChecker,
    SettingsChecker,
)
from depgate.dependencies.handlers import (
    DependenciesHandler,
    MultiCheckerHandler,
    SingleCheckerHandler,
)
from depgate.dependencies.models import DependencyKind
from depgate.dependencies.service import DependenciesService
from depgate.logging import get_logger

if TYPE_CHECKING:
    from depgate.config import DepgateConfig, HandlerConfig

__all__ = [
    "CHECKER_TYPES",
    "create_checker",
    "create_handler",
    "build_service",
]

logger = get_logger(__name__)

CHECKER_TYPES: dict[DependencyKind, type[DependenciesChecker]] = {
    DependencyKind.MODULES: ModulesChecker,
    DependencyKind.FUNCTIONS: FunctionsChecker,
    DependencyKind.SETTINGS: SettingsChecker,
    DependencyKind.COMPONENTS: ComponentsChecker,
}


def create_checker(
    kind: DependencyKind | str,
    checker_id: str,
    dependencies: Iterable[Any] | Mapping[str, Any] = (),
    *,
    optional: bool | None = None,
) -> DependenciesChecker:
    """Create a checker for a kind and register raw declarations with it.

    Declarations the checker rejects are dropped and logged; the checker is
    still returned.

    Args:
        kind: Declaration kind (enum member or its string value).
        checker_id: Checker identity.
        dependencies: Raw declarations, as a list or keyed mapping.
        optional: Explicit optional flag (None infers it from the id).

    Returns:
        The populated checker.

    Raises:
        ValueError: If ``kind`` is not a known dependency kind.
    """
    checker = CHECKER_TYPES[DependencyKind(kind)](checker_id, optional=optional)

    if isinstance(dependencies, Mapping):
        entries: Iterable[Any] = (
            {checker.dependency_key: key, **config}
            if isinstance(config, Mapping)
            else config
            for key, config in dependencies.items()
        )
    else:
        entries = dependencies

    for dependency in entries:
        if not checker.register_dependency(dependency):
            logger.warning(
                "Dropped invalid dependency declaration",
                checker_id=checker_id,
                kind=checker.kind.value,
                dependency=repr(dependency),
            )

    return checker


def create_handler(
    handler_id: str, handler_config: HandlerConfig
) -> DependenciesHandler:
    """Create the handler described by a HandlerConfig.

    Returns:
        A SingleCheckerHandler for exactly one checker, else a
        MultiCheckerHandler.
    """
    checkers = [
        create_checker(
            checker_config.kind,
            checker_config.id,
            checker_config.dependencies,
            optional=checker_config.optional,
        )
        for checker_config in handler_config.checkers
    ]

    if len(checkers) == 1:
        return SingleCheckerHandler(handler_id, checkers[0])
    return MultiCheckerHandler(handler_id, checkers)


def build_service(
    config: DepgateConfig, service: DependenciesService | None = None
) -> DependenciesService:
    """Register a lazy factory for every configured handler.

    Args:
        config: Loaded configuration.
        service: Service to populate. A new one is created when None.

    Returns:
        The populated service.
    """
    service = service or DependenciesService()
    for handler_id, handler_config in config.handlers.items():
        service.register_factory(
            handler_id, functools.partial(create_handler, handler_id, handler_config)
        )
    return service

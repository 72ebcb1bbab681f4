"""Dependency verification engine.

Checkers evaluate declarations of one kind, handlers aggregate checkers
under an identifier, and the service resolves identifiers to handlers.

Example:
    ```python
    from depgate.dependencies import (
        DependenciesService,
        ModulesChecker,
        SingleCheckerHandler,
    )

    service = DependenciesService()
    service.register_handler(
        "shop_active",
        SingleCheckerHandler(
            "shop_active", ModulesChecker("shop_modules", ["sqlite3"])
        ),
    )
    service.is_fulfilled("shop_active")
    ```
"""

from __future__ import annotations

from depgate.dependencies.checkers import (
    ComponentsChecker,
    DependenciesChecker,
    FunctionsChecker,
    ModulesChecker,
    SettingsChecker,
    is_optional_identity,
)
from depgate.dependencies.contexts import DependencyContext, get_handler_id
from depgate.dependencies.factory import (
    CHECKER_TYPES,
    build_service,
    create_checker,
    create_handler,
)
from depgate.dependencies.handlers import (
    NULL_HANDLER,
    DependenciesHandler,
    MultiCheckerHandler,
    NullHandler,
    SingleCheckerHandler,
)
from depgate.dependencies.models import (
    Comparison,
    ComponentDependency,
    Declaration,
    DependencyKind,
    FunctionDependency,
    MissingDependency,
    ModuleDependency,
    SettingDependency,
)
from depgate.dependencies.service import DependenciesService, HandlerFactory
from depgate.dependencies.states import (
    ActiveDependenciesMixin,
    DependentComponent,
    DisabledDependenciesMixin,
)
from depgate.dependencies.status import (
    FlatStatus,
    FulfillmentStatus,
    GroupedStatus,
    RawStatus,
    SingleStatus,
    StatusTransform,
    coerce_status,
    reduce_status,
    require_all,
    status_to_boolean,
)

__all__ = [
    # Models
    "Comparison",
    "ComponentDependency",
    "Declaration",
    "DependencyKind",
    "FunctionDependency",
    "MissingDependency",
    "ModuleDependency",
    "SettingDependency",
    # Checkers
    "ComponentsChecker",
    "DependenciesChecker",
    "FunctionsChecker",
    "ModulesChecker",
    "SettingsChecker",
    "is_optional_identity",
    # Status
    "FlatStatus",
    "FulfillmentStatus",
    "GroupedStatus",
    "RawStatus",
    "SingleStatus",
    "StatusTransform",
    "coerce_status",
    "reduce_status",
    "require_all",
    "status_to_boolean",
    # Handlers
    "DependenciesHandler",
    "MultiCheckerHandler",
    "NULL_HANDLER",
    "NullHandler",
    "SingleCheckerHandler",
    # Service
    "DependenciesService",
    "HandlerFactory",
    # Contexts and gating
    "ActiveDependenciesMixin",
    "DependencyContext",
    "DependentComponent",
    "DisabledDependenciesMixin",
    "get_handler_id",
    # Factory
    "CHECKER_TYPES",
    "build_service",
    "create_checker",
    "create_handler",
]

"""Dependency checkers, one per declaration kind.

A checker owns an ordered set of declarations of a single kind and reports
which of them are unmet right now. Declarations are validated when they are
registered: invalid ones are dropped and ``register_dependency`` returns
False, so building a checker never raises over a bad entry.

Checker Catalog:
- ModulesChecker: importable Python modules
- FunctionsChecker: callables reachable through a dotted path
- SettingsChecker: environment settings, exact or minimum comparison
- ComponentsChecker: sibling components, presence and minimum version
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping
from typing import Any, ClassVar

from packaging.utils import canonicalize_name
from packaging.version import InvalidVersion, Version

from depgate.constants import DEFAULT_COMPONENT_VERSION, OPTIONAL_MARKER
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
from depgate.dependencies.probes import (
    installed_components,
    is_callable_available,
    is_module_available,
    read_component_version,
    read_environment_setting,
)
from depgate.dependencies.sizes import is_size_value, parse_size
from depgate.logging import get_logger

__all__ = [
    "DependenciesChecker",
    "ModulesChecker",
    "FunctionsChecker",
    "SettingsChecker",
    "ComponentsChecker",
    "is_optional_identity",
]

logger = get_logger(__name__)


def is_optional_identity(identity: str) -> bool:
    """Check whether an identity string follows the optional naming convention.

    Args:
        identity: Checker or status key (e.g., "shop_optional_modules").

    Returns:
        True if the identity contains the "optional" marker.
    """
    return OPTIONAL_MARKER in identity


class DependenciesChecker(ABC):
    """Base class for all dependency checkers.

    Subclasses set ``kind`` and implement ``parse_dependency`` (raw value to
    declaration, or None when invalid) and ``get_missing``.

    Attributes:
        kind: The declaration kind this checker owns.

    Example:
        ```python
        checker = ModulesChecker("shop_modules", ["sqlite3", "lxml"])
        checker.register_dependency("zlib")  # True
        checker.register_dependency(42)  # False, dropped

        if not checker.is_fulfilled():
            for missing in checker.get_missing():
                print(missing.key)
        ```
    """

    kind: ClassVar[DependencyKind]

    # Raw mapping key that names a declaration in keyed construction
    dependency_key: ClassVar[str] = "name"

    def __init__(
        self,
        checker_id: str,
        dependencies: Iterable[Any] | Mapping[str, Any] = (),
        *,
        optional: bool | None = None,
    ) -> None:
        """Initialize the checker and register its initial declarations.

        Args:
            checker_id: Identity used to group results and key reports.
            dependencies: Declarations or raw values. A mapping of
                ``natural key -> raw mapping`` is also accepted.
            optional: Whether failures of this checker must not block
                activation. When None, inferred from the "optional" marker
                in ``checker_id``.
        """
        self._id = checker_id
        self._optional = (
            is_optional_identity(checker_id) if optional is None else optional
        )
        self._dependencies: dict[str, Declaration] = {}

        if isinstance(dependencies, Mapping):
            for key, config in dependencies.items():
                if isinstance(key, str) and isinstance(config, Mapping):
                    self.register_dependency({self.dependency_key: key, **config})
                else:
                    self.register_dependency(config)
        else:
            for dependency in dependencies:
                self.register_dependency(dependency)

    @property
    def id(self) -> str:
        return self._id

    @property
    def optional(self) -> bool:
        return self._optional

    def get_declarations(self) -> tuple[Declaration, ...]:
        """Get all registered declarations in registration order."""
        return tuple(self._dependencies.values())

    def register_dependency(self, dependency: Any) -> bool:
        """Validate and register a declaration.

        Args:
            dependency: A declaration of this checker's kind or a raw value.

        Returns:
            True if the declaration is valid (a duplicate natural key is
            accepted but the first registration wins), False if it was dropped.
        """
        declaration = self.parse_dependency(dependency)
        if declaration is None:
            logger.debug(
                "Dropped invalid dependency",
                checker_id=self._id,
                kind=self.kind.value,
                dependency=repr(dependency),
            )
            return False

        self._dependencies.setdefault(declaration.key, declaration)
        return True

    def is_dependency_valid(self, dependency: Any) -> bool:
        """Check whether a value would be accepted by ``register_dependency``."""
        return self.parse_dependency(dependency) is not None

    def is_fulfilled(self) -> bool:
        """Check that no declaration is currently missing."""
        return not self.get_missing()

    @abstractmethod
    def parse_dependency(self, dependency: Any) -> Declaration | None:
        """Turn a declaration or raw value into a valid declaration.

        Returns:
            The declaration, or None if the value is malformed.
        """

    @abstractmethod
    def get_missing(self) -> tuple[MissingDependency, ...]:
        """Evaluate every declaration against the live environment.

        Returns:
            The unmet declarations, in registration order.
        """

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(id={self._id!r}, "
            f"dependencies={len(self._dependencies)}, optional={self._optional})"
        )


class ModulesChecker(DependenciesChecker):
    """Checks that named Python modules can be imported."""

    kind = DependencyKind.MODULES

    def __init__(
        self,
        checker_id: str,
        dependencies: Iterable[Any] | Mapping[str, Any] = (),
        *,
        optional: bool | None = None,
        probe: Callable[[str], bool] = is_module_available,
    ) -> None:
        self._probe = probe
        super().__init__(checker_id, dependencies, optional=optional)

    def parse_dependency(self, dependency: Any) -> ModuleDependency | None:
        if isinstance(dependency, ModuleDependency):
            declaration = dependency
        elif isinstance(dependency, Mapping):
            declaration = ModuleDependency(name=dependency.get("name"))
        else:
            declaration = ModuleDependency(name=dependency)
        if not isinstance(declaration.name, str) or not declaration.name:
            return None
        return declaration

    def get_missing(self) -> tuple[MissingDependency, ...]:
        return tuple(
            MissingDependency(declaration=declaration)
            for declaration in self.get_declarations()
            if not self._probe(declaration.key)
        )


class FunctionsChecker(DependenciesChecker):
    """Checks that dotted paths resolve to callables."""

    kind = DependencyKind.FUNCTIONS

    def __init__(
        self,
        checker_id: str,
        dependencies: Iterable[Any] | Mapping[str, Any] = (),
        *,
        optional: bool | None = None,
        probe: Callable[[str], bool] = is_callable_available,
    ) -> None:
        self._probe = probe
        super().__init__(checker_id, dependencies, optional=optional)

    def parse_dependency(self, dependency: Any) -> FunctionDependency | None:
        if isinstance(dependency, FunctionDependency):
            declaration = dependency
        elif isinstance(dependency, Mapping):
            declaration = FunctionDependency(name=dependency.get("name"))
        else:
            declaration = FunctionDependency(name=dependency)
        if not isinstance(declaration.name, str) or not declaration.name:
            return None
        return declaration

    def get_missing(self) -> tuple[MissingDependency, ...]:
        return tuple(
            MissingDependency(declaration=declaration)
            for declaration in self.get_declarations()
            if not self._probe(declaration.key)
        )


class SettingsChecker(DependenciesChecker):
    """Checks live configuration values against expected values.

    A setting that cannot be read (unset or empty) is not checkable and is
    never reported missing. Integer expectations accept size-suffixed live
    values, which are converted to a byte count before comparing.
    """

    kind = DependencyKind.SETTINGS
    dependency_key = "key"

    def __init__(
        self,
        checker_id: str,
        dependencies: Iterable[Any] | Mapping[str, Any] = (),
        *,
        optional: bool | None = None,
        reader: Callable[[str], str | None] = read_environment_setting,
    ) -> None:
        self._reader = reader
        super().__init__(checker_id, dependencies, optional=optional)

    def parse_dependency(self, dependency: Any) -> SettingDependency | None:
        if isinstance(dependency, SettingDependency):
            declaration = dependency
        elif isinstance(dependency, Mapping):
            key = dependency.get("key", dependency.get("option_name"))
            expected = dependency.get("expected", dependency.get("expected_value"))
            comparison = dependency.get("comparison", dependency.get("type"))
            if comparison == "min":
                comparison = Comparison.MINIMUM
            try:
                declaration = SettingDependency(
                    key=key,
                    expected=expected,
                    comparison=Comparison(comparison) if comparison else None,
                )
            except ValueError:
                return None
        else:
            return None

        if not isinstance(declaration.key, str) or not declaration.key:
            return None
        # bool is an int subclass but never a meaningful expectation
        if isinstance(declaration.expected, bool) or not isinstance(
            declaration.expected, int | str
        ):
            return None
        if declaration.mode is Comparison.MINIMUM and not isinstance(
            declaration.expected, int
        ):
            return None
        return declaration

    def get_missing(self) -> tuple[MissingDependency, ...]:
        missing: list[MissingDependency] = []

        for declaration in self.get_declarations():
            live_value = self._reader(declaration.key)
            if live_value is None or str(live_value).strip() == "":
                continue

            result = self._compare(declaration, str(live_value).strip())
            if result is not None:
                missing.append(result)

        return tuple(missing)

    def _compare(
        self, declaration: SettingDependency, live_value: str
    ) -> MissingDependency | None:
        if not isinstance(declaration.expected, int):
            if live_value == declaration.expected:
                return None
            return MissingDependency(declaration=declaration, observed=live_value)

        is_size = is_size_value(live_value)
        try:
            observed = parse_size(live_value)
        except ValueError:
            logger.debug(
                "Setting value is not checkable",
                checker_id=self._id,
                key=declaration.key,
                value=live_value,
            )
            return None

        if declaration.mode is Comparison.MINIMUM:
            satisfied = observed >= declaration.expected
        else:
            satisfied = observed == declaration.expected

        if satisfied:
            return None
        return MissingDependency(
            declaration=declaration,
            observed=observed,
            details={"is_size": is_size},
        )


class ComponentsChecker(DependenciesChecker):
    """Checks that sibling components are active and recent enough.

    Presence comes from the declaration's ``presence_probe`` when given,
    else from membership in the active set. When a minimum version is
    declared and the component is present, the version comes from the
    declaration's ``version_probe`` when given, else from the version reader
    (which defaults to installed distribution metadata and "0.0.0").
    """

    kind = DependencyKind.COMPONENTS
    dependency_key = "identifier"

    def __init__(
        self,
        checker_id: str,
        dependencies: Iterable[Any] | Mapping[str, Any] = (),
        *,
        optional: bool | None = None,
        active_components: Callable[[], Iterable[str]] = installed_components,
        version_reader: Callable[[str], str] = read_component_version,
    ) -> None:
        self._active_components = active_components
        self._version_reader = version_reader
        super().__init__(checker_id, dependencies, optional=optional)

    def parse_dependency(self, dependency: Any) -> ComponentDependency | None:
        if isinstance(dependency, ComponentDependency):
            declaration = dependency
        elif isinstance(dependency, str):
            declaration = ComponentDependency(identifier=dependency)
        elif isinstance(dependency, Mapping):
            declaration = ComponentDependency(
                identifier=dependency.get("identifier", dependency.get("plugin")),
                name=dependency.get("name"),
                minimum_version=dependency.get(
                    "minimum_version", dependency.get("min_version")
                ),
                presence_probe=dependency.get(
                    "presence_probe", dependency.get("active_checker")
                ),
                version_probe=dependency.get(
                    "version_probe", dependency.get("version_checker")
                ),
            )
        else:
            return None

        if not isinstance(declaration.identifier, str) or not declaration.identifier:
            return None
        if declaration.name is not None and not isinstance(declaration.name, str):
            return None
        if declaration.minimum_version is not None and not isinstance(
            declaration.minimum_version, str
        ):
            return None
        for probe in (declaration.presence_probe, declaration.version_probe):
            if probe is not None and not callable(probe):
                return None
        return declaration

    def get_missing(self) -> tuple[MissingDependency, ...]:
        missing: list[MissingDependency] = []
        active: set[str] | None = None

        for declaration in self.get_declarations():
            if declaration.presence_probe is not None:
                is_active = bool(declaration.presence_probe())
            else:
                if active is None:
                    active = set(self._active_components())
                is_active = (
                    declaration.identifier in active
                    or canonicalize_name(declaration.identifier) in active
                )

            if not is_active:
                missing.append(MissingDependency(declaration=declaration))
                continue

            if declaration.minimum_version is None:
                continue

            version = self._read_version(declaration)
            if _parse_version(version) < _parse_version(declaration.minimum_version):
                missing.append(
                    MissingDependency(declaration=declaration, observed=version)
                )

        return tuple(missing)

    def _read_version(self, declaration: ComponentDependency) -> str:
        if declaration.version_probe is not None:
            version = declaration.version_probe()
        else:
            version = self._version_reader(declaration.identifier)
        return str(version) if version else DEFAULT_COMPONENT_VERSION


def _parse_version(version: str) -> Version:
    try:
        return Version(version)
    except InvalidVersion:
        logger.debug(f"Unparseable version '{version}', comparing as 0.0.0")
        return Version(DEFAULT_COMPONENT_VERSION)

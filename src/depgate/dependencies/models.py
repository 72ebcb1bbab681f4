"""Dataclass models for the dependency verification engine.

This module defines the core data structures:
- DependencyKind: The fixed set of prerequisite kinds a checker can own
- ModuleDependency / FunctionDependency / SettingDependency /
  ComponentDependency: One declaration per kind (the Declaration union)
- MissingDependency: An unmet declaration plus what was observed instead
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, TypeAlias

__all__ = [
    "DependencyKind",
    "Comparison",
    "ModuleDependency",
    "FunctionDependency",
    "SettingDependency",
    "ComponentDependency",
    "Declaration",
    "MissingDependency",
]


class DependencyKind(str, Enum):
    """Kinds of prerequisites a component can declare.

    Values double as the group keys of a multi-checker handler's results.

    Values:
        MODULES: Importable Python modules (runtime capabilities).
        FUNCTIONS: Callables reachable through a dotted path.
        SETTINGS: Environment configuration values.
        COMPONENTS: Sibling components (installed distributions by default).
    """

    MODULES = "python_modules"
    FUNCTIONS = "python_functions"
    SETTINGS = "environment_settings"
    COMPONENTS = "active_components"


class Comparison(str, Enum):
    """How a live setting value is compared against its expectation."""

    EXACT = "exact"
    MINIMUM = "minimum"


@dataclass(frozen=True, slots=True)
class ModuleDependency:
    """An importable module that must be present.

    Attributes:
        name: Fully qualified module name (e.g., "sqlite3", "lxml.etree").
    """

    kind: ClassVar[DependencyKind] = DependencyKind.MODULES

    name: str

    @property
    def key(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class FunctionDependency:
    """A callable that must be resolvable.

    Attributes:
        name: Dotted path to the callable. Either "package.module.attr" or
            "package.module:attr.sub". A bare name resolves against builtins.
    """

    kind: ClassVar[DependencyKind] = DependencyKind.FUNCTIONS

    name: str

    @property
    def key(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class SettingDependency:
    """An environment configuration value with an expected value.

    Attributes:
        key: Name of the setting (an environment variable by default).
        expected: Expected value. Integers may be compared as a minimum and
            accept size-suffixed live values ("128M").
        comparison: Explicit comparison mode. When None, integers compare as
            a minimum and strings compare exactly.

    Example:
        >>> dep = SettingDependency(
        ...     key="UPLOAD_LIMIT",
        ...     expected=134217728,
        ...     comparison=Comparison.MINIMUM,
        ... )
        >>> dep.mode
        <Comparison.MINIMUM: 'minimum'>
    """

    kind: ClassVar[DependencyKind] = DependencyKind.SETTINGS

    key: str
    expected: int | str
    comparison: Comparison | None = None

    @property
    def mode(self) -> Comparison:
        """The comparison actually applied to this declaration."""
        if self.comparison is not None:
            return self.comparison
        if isinstance(self.expected, int):
            return Comparison.MINIMUM
        return Comparison.EXACT


@dataclass(frozen=True, slots=True)
class ComponentDependency:
    """A sibling component that must be active, optionally at a minimum version.

    Attributes:
        identifier: Component identifier (a distribution name by default).
        name: Display name used when reporting. Falls back to identifier.
        minimum_version: Lowest acceptable version, or None for presence only.
        presence_probe: Replaces the active-set membership test.
        version_probe: Replaces the metadata version lookup.

    Example:
        >>> dep = ComponentDependency(
        ...     identifier="shop-payments",
        ...     name="Shop Payments",
        ...     minimum_version="2.0.0",
        ... )
    """

    kind: ClassVar[DependencyKind] = DependencyKind.COMPONENTS

    identifier: str
    name: str | None = None
    minimum_version: str | None = None
    presence_probe: Callable[[], Any] | None = field(default=None, compare=False)
    version_probe: Callable[[], str] | None = field(default=None, compare=False)

    @property
    def key(self) -> str:
        return self.identifier

    @property
    def display_name(self) -> str:
        return self.name or self.identifier


Declaration: TypeAlias = (
    ModuleDependency | FunctionDependency | SettingDependency | ComponentDependency
)


@dataclass(frozen=True, slots=True)
class MissingDependency:
    """A declaration that is not satisfied in the current environment.

    Attributes:
        declaration: The unmet declaration, echoed back for reporting.
        observed: What the environment actually has. The live setting value
            (a byte count for sizes) or the installed component version.
            None when the prerequisite is simply absent.
        details: Optional structured context (e.g., {"is_size": True}).

    Example:
        >>> missing = MissingDependency(
        ...     declaration=ComponentDependency("shop-payments", minimum_version="2.0.0"),
        ...     observed="1.9.9",
        ... )
        >>> missing.key
        'shop-payments'
    """

    declaration: Declaration
    observed: int | str | None = None
    details: dict[str, Any] | None = None

    @property
    def kind(self) -> DependencyKind:
        return self.declaration.kind

    @property
    def key(self) -> str:
        return self.declaration.key

    @property
    def is_size(self) -> bool:
        """Whether the observed value was read from a size-suffixed setting."""
        return bool(self.details and self.details.get("is_size"))

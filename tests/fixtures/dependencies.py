"""Fake environment fixtures for checker tests.

Checkers accept probe, reader and active-set replacements; FakeEnvironment
bundles in-memory versions of all of them.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from depgate.dependencies.checkers import (
    ComponentsChecker,
    FunctionsChecker,
    ModulesChecker,
    SettingsChecker,
)


@dataclass
class FakeEnvironment:
    """In-memory environment for checkers.

    Attributes:
        modules: Importable module names.
        functions: Resolvable callable paths.
        settings: Live setting values.
        components: Active component identifiers mapped to their version.
    """

    modules: set[str] = field(default_factory=set)
    functions: set[str] = field(default_factory=set)
    settings: dict[str, str] = field(default_factory=dict)
    components: dict[str, str] = field(default_factory=dict)

    def has_module(self, name: str) -> bool:
        return name in self.modules

    def has_function(self, name: str) -> bool:
        return name in self.functions

    def read_setting(self, key: str) -> str | None:
        return self.settings.get(key)

    def active_components(self) -> set[str]:
        return set(self.components)

    def component_version(self, identifier: str) -> str:
        return self.components.get(identifier, "0.0.0")

    def modules_checker(self, checker_id: str, *args, **kwargs) -> ModulesChecker:
        return ModulesChecker(checker_id, *args, probe=self.has_module, **kwargs)

    def functions_checker(
        self, checker_id: str, *args, **kwargs
    ) -> FunctionsChecker:
        return FunctionsChecker(checker_id, *args, probe=self.has_function, **kwargs)

    def settings_checker(self, checker_id: str, *args, **kwargs) -> SettingsChecker:
        return SettingsChecker(checker_id, *args, reader=self.read_setting, **kwargs)

    def components_checker(
        self, checker_id: str, *args, **kwargs
    ) -> ComponentsChecker:
        return ComponentsChecker(
            checker_id,
            *args,
            active_components=self.active_components,
            version_reader=self.component_version,
            **kwargs,
        )


@pytest.fixture
def fake_environment() -> FakeEnvironment:
    """Provide an empty FakeEnvironment."""
    return FakeEnvironment()

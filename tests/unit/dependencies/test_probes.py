"""Tests for the default environment probes."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from depgate.dependencies.checkers import FunctionsChecker, ModulesChecker
from depgate.dependencies.probes import (
    installed_components,
    is_callable_available,
    is_module_available,
    read_component_version,
    read_environment_setting,
)


class TestIsModuleAvailable:
    """Tests for is_module_available."""

    def test_stdlib_module(self) -> None:
        assert is_module_available("json") is True

    def test_submodule(self) -> None:
        assert is_module_available("os.path") is True

    def test_missing_module(self) -> None:
        assert is_module_available("depgate_test_missing_module") is False

    def test_missing_parent_package(self) -> None:
        assert is_module_available("depgate_test_missing_pkg.child") is False


class TestIsCallableAvailable:
    """Tests for is_callable_available."""

    def test_dotted_function(self) -> None:
        assert is_callable_available("os.path.join") is True

    def test_colon_form(self) -> None:
        assert is_callable_available("os.path:join") is True

    def test_builtin(self) -> None:
        assert is_callable_available("len") is True

    def test_missing_attribute(self) -> None:
        assert is_callable_available("os.path.depgate_missing") is False

    def test_non_callable_attribute(self) -> None:
        assert is_callable_available("os.sep") is False

    def test_missing_module(self) -> None:
        assert is_callable_available("depgate_test_missing_module.run") is False

    def test_missing_builtin(self) -> None:
        assert is_callable_available("depgate_missing_builtin") is False


class TestReadEnvironmentSetting:
    """Tests for read_environment_setting."""

    def test_reads_set_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEPGATE_TEST_SETTING", "128M")
        assert read_environment_setting("DEPGATE_TEST_SETTING") == "128M"

    def test_unset_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("DEPGATE_TEST_SETTING", raising=False)
        assert read_environment_setting("DEPGATE_TEST_SETTING") is None


class TestComponentMetadata:
    """Tests for installed distribution probes."""

    def test_installed_components_are_canonical(self) -> None:
        components = installed_components()
        assert "pytest" in components
        assert all(name == name.lower() for name in components)

    def test_reads_installed_version(self) -> None:
        import pytest as pytest_module

        assert read_component_version("pytest") == pytest_module.__version__

    def test_missing_component_defaults(self) -> None:
        assert read_component_version("depgate-test-missing-dist") == "0.0.0"


@pytest.fixture
def failing_modules(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Put a module and a package whose imports raise RuntimeError on sys.path."""
    (tmp_path / "depgate_broken_module.py").write_text('raise RuntimeError("boom")\n')
    package = tmp_path / "depgate_broken_pkg"
    package.mkdir()
    (package / "__init__.py").write_text('raise RuntimeError("boom")\n')
    (package / "child.py").write_text("def thing():\n    return 1\n")

    monkeypatch.syspath_prepend(str(tmp_path))
    for name in ("depgate_broken_module", "depgate_broken_pkg"):
        monkeypatch.delitem(sys.modules, name, raising=False)
    return tmp_path


class TestFailingImports:
    """Modules that raise while importing count as unavailable."""

    def test_child_of_failing_package(self, failing_modules: Path) -> None:
        assert is_module_available("depgate_broken_pkg.child") is False

    def test_callable_in_failing_module(self, failing_modules: Path) -> None:
        assert is_callable_available("depgate_broken_module.thing") is False
        assert is_callable_available("depgate_broken_module:thing") is False

    def test_callable_under_failing_package(self, failing_modules: Path) -> None:
        assert is_callable_available("depgate_broken_pkg.child.thing") is False

    def test_functions_checker_reports_missing(self, failing_modules: Path) -> None:
        checker = FunctionsChecker(
            "shop_functions", ["json.dumps", "depgate_broken_module.thing"]
        )

        assert checker.is_fulfilled() is False
        assert [m.key for m in checker.get_missing()] == [
            "depgate_broken_module.thing"
        ]

    def test_modules_checker_reports_missing(self, failing_modules: Path) -> None:
        checker = ModulesChecker("shop_modules", ["json", "depgate_broken_pkg.child"])

        assert checker.is_fulfilled() is False
        assert [m.key for m in checker.get_missing()] == ["depgate_broken_pkg.child"]

"""Tests for building checkers, handlers and services from configuration."""

from __future__ import annotations

import pytest

from depgate.config import CheckerConfig, DepgateConfig, HandlerConfig
from depgate.dependencies.checkers import ComponentsChecker, SettingsChecker
from depgate.dependencies.factory import (
    build_service,
    create_checker,
    create_handler,
)
from depgate.dependencies.handlers import (
    NULL_HANDLER,
    MultiCheckerHandler,
    SingleCheckerHandler,
)
from depgate.dependencies.models import DependencyKind


class TestCreateChecker:
    """Tests for create_checker."""

    def test_kind_by_value(self) -> None:
        checker = create_checker("environment_settings", "shop_settings")
        assert isinstance(checker, SettingsChecker)

    def test_kind_by_member(self) -> None:
        checker = create_checker(DependencyKind.COMPONENTS, "shop_components")
        assert isinstance(checker, ComponentsChecker)

    def test_unknown_kind_raises(self) -> None:
        with pytest.raises(ValueError):
            create_checker("php_extensions", "shop")

    def test_invalid_entries_dropped(self) -> None:
        checker = create_checker("python_modules", "shop_modules", ["json", 5])
        assert [d.key for d in checker.get_declarations()] == ["json"]

    def test_keyed_mapping(self) -> None:
        checker = create_checker(
            "active_components",
            "shop_components",
            {"shop-payments": {"name": "Shop Payments", "minimum_version": "2.0"}},
        )

        (declaration,) = checker.get_declarations()
        assert declaration.identifier == "shop-payments"
        assert declaration.minimum_version == "2.0"

    def test_explicit_optional(self) -> None:
        checker = create_checker("python_modules", "shop_modules", optional=True)
        assert checker.optional is True


class TestCreateHandler:
    """Tests for create_handler."""

    def test_one_checker_builds_single_handler(self) -> None:
        config = HandlerConfig(
            checkers=[
                CheckerConfig(id="m", kind="python_modules", dependencies=["json"])
            ]
        )

        handler = create_handler("shop_active", config)

        assert isinstance(handler, SingleCheckerHandler)
        assert handler.id == "shop_active"
        assert handler.checker.id == "m"

    def test_many_checkers_build_multi_handler(self) -> None:
        config = HandlerConfig(
            checkers=[
                CheckerConfig(id="m", kind="python_modules"),
                CheckerConfig(id="f", kind="python_functions", optional=True),
            ]
        )

        handler = create_handler("shop_active", config)

        assert isinstance(handler, MultiCheckerHandler)
        assert [c.id for c in handler.get_checkers()] == ["m", "f"]
        assert handler.get_checkers()[1].optional is True

    def test_no_checkers_builds_empty_multi_handler(self) -> None:
        handler = create_handler("shop_active", HandlerConfig())

        assert isinstance(handler, MultiCheckerHandler)
        assert handler.is_fulfilled() is True


class TestBuildService:
    """Tests for build_service."""

    def test_registers_factories_lazily(self, clean_env: None) -> None:
        config = DepgateConfig(
            handlers={
                "shop_active": HandlerConfig(
                    checkers=[CheckerConfig(id="m", kind="python_modules")]
                )
            }
        )

        service = build_service(config)

        assert service.list_ids() == ["shop_active"]
        handler = service.get_handler("shop_active")
        assert isinstance(handler, SingleCheckerHandler)
        assert handler is not NULL_HANDLER

    def test_populates_given_service(self, clean_env: None) -> None:
        from depgate.dependencies.service import DependenciesService

        service = DependenciesService()
        config = DepgateConfig(handlers={"a": HandlerConfig()})

        assert build_service(config, service) is service
        assert service.has_handler("a") is True

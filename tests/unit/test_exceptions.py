"""Unit tests for the depgate exception hierarchy."""

from __future__ import annotations

import pytest

from depgate.exceptions import (
    ConfigError,
    DepgateError,
    HandlerResolutionError,
    UnsupportedDependencyKindError,
)


class TestDepgateError:
    """Tests for the base exception."""

    def test_message(self) -> None:
        error = DepgateError("Something went wrong")

        assert error.message == "Something went wrong"
        assert str(error) == "Something went wrong"


class TestConfigError:
    """Tests for ConfigError."""

    def test_message_only(self) -> None:
        error = ConfigError("Invalid configuration")

        assert error.message == "Invalid configuration"
        assert error.field is None
        assert error.value is None

    def test_field_and_value(self) -> None:
        error = ConfigError(
            "Invalid kind", field="handlers.a.checkers.0.kind", value="x"
        )

        assert error.field == "handlers.a.checkers.0.kind"
        assert error.value == "x"
        assert isinstance(error, DepgateError)


class TestHandlerResolutionError:
    """Tests for HandlerResolutionError."""

    def test_message_includes_id_and_reason(self) -> None:
        error = HandlerResolutionError("shop_active", "factory raised boom")

        assert error.handler_id == "shop_active"
        assert error.reason == "factory raised boom"
        assert error.message == (
            "Failed to resolve dependencies handler 'shop_active': factory raised boom"
        )


class TestUnsupportedDependencyKindError:
    """Tests for UnsupportedDependencyKindError."""

    def test_is_depgate_and_not_implemented(self) -> None:
        error = UnsupportedDependencyKindError("php_extensions")

        assert error.kind == "php_extensions"
        assert isinstance(error, DepgateError)
        assert isinstance(error, NotImplementedError)

    def test_catchable_as_not_implemented(self) -> None:
        with pytest.raises(NotImplementedError, match="php_extensions"):
            raise UnsupportedDependencyKindError("php_extensions")

"""Tests for the depgate.logging module."""

from __future__ import annotations

import logging
import os
from unittest.mock import patch

import structlog

from depgate.logging import (
    bind_context,
    bound_context,
    clear_context,
    configure_logging,
    get_logger,
)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_logging_default(self) -> None:
        configure_logging()

        log = structlog.get_logger()
        assert log is not None

    def test_configure_logging_json_via_env(self) -> None:
        """Test JSON logging when DEPGATE_LOG_FORMAT=json."""
        with patch.dict(os.environ, {"DEPGATE_LOG_FORMAT": "json"}):
            configure_logging()

            assert structlog.get_logger() is not None

    def test_configure_logging_custom_level(self) -> None:
        configure_logging(level=logging.DEBUG)

        assert logging.getLogger().level == logging.DEBUG

    def test_configure_logging_level_from_env(self) -> None:
        """Test log level from DEPGATE_LOG_LEVEL env var."""
        with patch.dict(os.environ, {"DEPGATE_LOG_LEVEL": "ERROR"}):
            configure_logging()

            assert logging.getLogger().level == logging.ERROR

    def test_unknown_level_name_falls_back_to_info(self) -> None:
        with patch.dict(os.environ, {"DEPGATE_LOG_LEVEL": "CHATTY"}):
            configure_logging()

            assert logging.getLogger().level == logging.INFO

    def test_single_root_handler(self) -> None:
        """Reconfiguring replaces the root handler instead of stacking."""
        configure_logging()
        configure_logging()

        assert len(logging.getLogger().handlers) == 1


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_with_name(self) -> None:
        log = get_logger("depgate.test")
        assert log is not None

    def test_get_logger_without_name(self) -> None:
        assert get_logger() is not None


class TestContextBinding:
    """Tests for context binding functions."""

    def test_bind_and_clear_context(self) -> None:
        clear_context()
        bind_context(component_id="shop", handler_id="shop_active")
        assert structlog.contextvars.get_contextvars() == {
            "component_id": "shop",
            "handler_id": "shop_active",
        }

        clear_context()
        assert structlog.contextvars.get_contextvars() == {}

    def test_bound_context_restores_outer_values(self) -> None:
        clear_context()
        with bound_context(handler_id="derived"):
            with bound_context(handler_id="base"):
                assert structlog.contextvars.get_contextvars() == {
                    "handler_id": "base"
                }
            assert structlog.contextvars.get_contextvars() == {
                "handler_id": "derived"
            }

        assert structlog.contextvars.get_contextvars() == {}

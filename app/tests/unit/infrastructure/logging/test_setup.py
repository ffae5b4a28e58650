"""Unit tests for infrastructure.logging.setup module."""

import logging

import pytest

from infrastructure.logging.setup import (
    _is_test_environment,
    configure_logging,
    get_module_logger,
)


@pytest.mark.unit
class TestConfigureLogging:
    def test_detects_pytest(self):
        assert _is_test_environment() is True

    def test_returns_logger(self):
        logger = configure_logging(log_level="DEBUG", is_production=False)

        assert hasattr(logger, "info")
        assert hasattr(logger, "error")

    def test_suppresses_output_during_tests(self):
        configure_logging(log_level="DEBUG", is_production=True)

        assert logging.root.level > logging.CRITICAL


@pytest.mark.unit
class TestGetLoggers:
    def test_get_module_logger_binds_module_context(self):
        logger = get_module_logger()

        assert logger is not None
        logger.info("module_logger_works")

"""Exception hierarchy and logging tests.

These tests verify:
- OpwireError is the base exception class
- Categorized failures and conversion errors inherit correctly
- Logging functions are callable and accept context
- configure_logging validates its level
"""

from __future__ import annotations

import logging

import pytest


class TestExceptionHierarchy:
    """Test exception class hierarchy."""

    def test_opwire_error_is_base(self):
        """Test OpwireError is the base class."""
        from opwire import (
            BadRequestError,
            ConfigurationError,
            ConversionError,
            DescriptorError,
            InternalServerError,
            NotFoundError,
            OperationFailure,
            OpwireError,
        )

        for exc_class in [
            DescriptorError,
            ConversionError,
            ConfigurationError,
            OperationFailure,
            NotFoundError,
            BadRequestError,
            InternalServerError,
        ]:
            assert issubclass(exc_class, OpwireError)

    def test_can_catch_by_base_class(self):
        """Test failures can be caught by base class."""
        from opwire import NotFoundError, OperationFailure

        with pytest.raises(OperationFailure):
            raise NotFoundError("Operation 'x' not found")

    def test_conversion_error_attributes(self):
        """Test ConversionError carries the parameter and raw value."""
        from opwire import ConversionError

        error = ConversionError("bad int", parameter="count", raw_value="ten")
        assert error.message == "bad int"
        assert error.parameter == "count"
        assert error.raw_value == "ten"
        assert str(error) == "bad int"


class TestLogging:
    """Test logging functions."""

    def test_log_info_callable(self):
        """Test log_info is callable without raising."""
        from opwire import log_info

        log_info("Test message")
        log_info("Test with fields", {"key": "value"})

    def test_log_error_callable(self):
        """Test log_error is callable without raising."""
        from opwire import log_error

        log_error("Error message")
        log_error("Error with context", {"correlation_id": "abc-123"})

    def test_log_warn_callable(self):
        from opwire import log_warn

        log_warn("Warning message")

    def test_log_debug_callable(self):
        from opwire import log_debug

        log_debug("Debug message", {"skipped": None})

    def test_log_trace_callable(self):
        from opwire import log_trace

        log_trace("Trace message")

    def test_log_with_log_context(self):
        """Test logging with LogContext model."""
        from opwire import LogContext, log_info

        context = LogContext(
            correlation_id="abc-123",
            service="Accounts",
            operation="lookup",
        )
        log_info("Test with context", context)

    def test_normalize_fields(self):
        """Test fields are stringified and None values dropped."""
        from opwire import LogContext
        from opwire.logging import _normalize_fields

        assert _normalize_fields(None) == {}
        assert _normalize_fields({"count": 3, "empty": None}) == {"count": "3"}
        assert _normalize_fields(LogContext(operation="lookup")) == {"operation": "lookup"}


class TestConfigureLogging:
    """Test configure_logging."""

    @pytest.fixture(autouse=True)
    def restore_logger(self):
        package_logger = logging.getLogger("opwire")
        handlers = list(package_logger.handlers)
        level = package_logger.level
        propagate = package_logger.propagate
        yield
        package_logger.handlers[:] = handlers
        package_logger.setLevel(level)
        package_logger.propagate = propagate

    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            ("trace", logging.DEBUG),
            ("debug", logging.DEBUG),
            ("INFO", logging.INFO),
            ("warn", logging.WARNING),
            ("error", logging.ERROR),
        ],
    )
    def test_levels(self, level, expected):
        from opwire import configure_logging

        configure_logging(level=level)
        package_logger = logging.getLogger("opwire")
        assert package_logger.level == expected
        assert len(package_logger.handlers) == 1
        assert package_logger.propagate is False

    def test_reconfigure_replaces_handler(self):
        from opwire import configure_logging

        configure_logging()
        configure_logging(json_output=True)
        assert len(logging.getLogger("opwire").handlers) == 1

    def test_unknown_level(self):
        from opwire import configure_logging

        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging(level="loud")

"""Custom exceptions for opwire.

This module provides the exceptions raised while describing service
classes and converting parameter text. The categorized failures that
callers branch on live in :mod:`opwire.errors`.
"""

from __future__ import annotations

from typing import Any


class OpwireError(Exception):
    """Base exception for all opwire errors.

    All exceptions raised by opwire inherit from this class,
    making it easy to catch all opwire-related errors.

    Example:
        >>> try:
        ...     dispatcher.invoke_operation("lookup", {"id": "7"})
        ... except OpwireError as e:
        ...     print(f"Dispatch error: {e}")
    """

    pass


class DescriptorError(OpwireError):
    """Raised when a service class cannot be described.

    Descriptors are built once, when a dispatcher is constructed, so
    this error surfaces at startup rather than on the first call.

    Common causes:
    - An annotation that cannot be resolved (forward reference typo)
    - ``WebParam`` used more than once on the same parameter

    Example:
        >>> try:
        ...     OperationDispatcher(BrokenService)
        ... except DescriptorError as e:
        ...     print(f"Cannot expose service: {e}")
    """

    pass


class ConversionError(OpwireError):
    """Raised when parameter text cannot be converted to its declared type.

    Attributes:
        parameter: External name of the parameter, when known.
        raw_value: The text that failed to convert.

    Example:
        >>> try:
        ...     converter.convert(int_descriptor, "thirty-four")
        ... except ConversionError as e:
        ...     print(f"Invalid data format: {e}")
    """

    def __init__(
        self,
        message: str,
        *,
        parameter: str | None = None,
        raw_value: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.parameter = parameter
        self.raw_value = raw_value


class ConfigurationError(OpwireError):
    """Raised when gateway or dispatch configuration is invalid.

    Example:
        >>> try:
        ...     config = load_gateway_config("missing.yaml")
        ... except ConfigurationError as e:
        ...     print(f"Bad configuration: {e}")
    """

    pass


__all__ = [
    "OpwireError",
    "DescriptorError",
    "ConversionError",
    "ConfigurationError",
]

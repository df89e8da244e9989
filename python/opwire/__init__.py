"""
opwire

This package exposes plain Python service classes as operations that
are invoked by name with string-valued parameters, split into header
and non-header groups. Results come back as the method's own return
value; failures come back as one of three categorized errors.

Example:
    >>> import opwire
    >>> opwire.version()
    '0.1.0'

    >>> # Expose a service class
    >>> from typing import Annotated
    >>> from opwire import OperationDispatcher, WebParam, web_method
    >>> class Accounts:
    ...     @web_method("getBalance")
    ...     def balance(self, account: Annotated[int, WebParam("accountId")]) -> int:
    ...         return 120
    >>> dispatcher = OperationDispatcher(Accounts)
    >>> dispatcher.invoke_operation("getBalance", {"accountId": "7"})
    120

    >>> # Serve it over HTTP
    >>> from opwire import GatewayBuilder, WsgiAdapter
    >>> app = WsgiAdapter(GatewayBuilder({"accounts": Accounts}).build())

    >>> # Use structured logging
    >>> opwire.configure_logging(level="debug")
    >>> opwire.log_info("Gateway started", {"service": "accounts"})
"""

from __future__ import annotations

from opwire.annotations import WebMethodOptions, WebParam, hidden_base, web_method
from opwire.client import OperationClient
from opwire.config import load_gateway_config, parse_gateway_config
from opwire.conversion import (
    JsonCodec,
    PydanticJsonCodec,
    TypeConverter,
    TypeDescriptor,
    TypeShape,
)
from opwire.dispatcher import OperationDispatcher
from opwire.errors import (
    BadRequestError,
    InternalServerError,
    NotFoundError,
    OperationFailure,
)
from opwire.errors.failure_classifier import (
    CallableExceptionMapper,
    ExceptionMapper,
    FailureClassifier,
)
from opwire.events import DispatchEvents, EventNames
from opwire.exceptions import (
    ConfigurationError,
    ConversionError,
    DescriptorError,
    OpwireError,
)
from opwire.gateway import (
    GatewayBuilder,
    ServiceGateway,
    WsgiAdapter,
    process_vendor_headers,
    simplify_query_parameters,
)
from opwire.logging import (
    configure_logging,
    log_debug,
    log_error,
    log_info,
    log_trace,
    log_warn,
)
from opwire.registry import (
    MethodResolver,
    OperationDescriptor,
    ParameterBinder,
    ParameterDescriptor,
    ServiceDescriptor,
    describe_service,
)
from opwire.types import (
    DispatchConfig,
    FailureKind,
    GatewayConfig,
    GatewayResponse,
    LogContext,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    "version",
    # Annotations
    "web_method",
    "WebMethodOptions",
    "WebParam",
    "hidden_base",
    # Dispatch
    "OperationDispatcher",
    "MethodResolver",
    "ParameterBinder",
    "describe_service",
    "ParameterDescriptor",
    "OperationDescriptor",
    "ServiceDescriptor",
    # Conversion
    "TypeConverter",
    "TypeDescriptor",
    "TypeShape",
    "JsonCodec",
    "PydanticJsonCodec",
    # Failures
    "FailureKind",
    "OperationFailure",
    "NotFoundError",
    "BadRequestError",
    "InternalServerError",
    "ExceptionMapper",
    "CallableExceptionMapper",
    "FailureClassifier",
    # Exceptions
    "OpwireError",
    "DescriptorError",
    "ConversionError",
    "ConfigurationError",
    # Events
    "DispatchEvents",
    "EventNames",
    # Configuration
    "DispatchConfig",
    "GatewayConfig",
    "load_gateway_config",
    "parse_gateway_config",
    # Gateway
    "GatewayBuilder",
    "ServiceGateway",
    "GatewayResponse",
    "WsgiAdapter",
    "process_vendor_headers",
    "simplify_query_parameters",
    # Client
    "OperationClient",
    # Logging
    "configure_logging",
    "log_error",
    "log_warn",
    "log_info",
    "log_debug",
    "log_trace",
    "LogContext",
]


def version() -> str:
    """Return the package version.

    Returns:
        The version string (e.g., "0.1.0")

    Example:
        >>> import opwire
        >>> opwire.version()
        '0.1.0'
    """
    return __version__

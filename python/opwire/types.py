"""Pydantic models for opwire.

This module provides type-safe data models shared across the dispatcher,
the gateway and the logging layer, using Pydantic v2 for validation.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field
from pydantic_core import from_json


class FailureKind(str, Enum):
    """Categories of failure a caller can branch on.

    These are the only outcomes, besides a result, that
    ``invoke_operation`` produces.
    """

    NOT_FOUND = "not_found"
    """No exposed operation matches the request."""

    BAD_REQUEST = "bad_request"
    """The request is ambiguous, misplaces a header, or has unconvertible parameters."""

    INTERNAL_SERVER_ERROR = "internal_server_error"
    """The invoked operation failed in a way the caller cannot correct."""


class LogContext(BaseModel):
    """Structured context attached to a log line.

    Example:
        >>> context = LogContext(operation="lookup", service="Accounts")
        >>> log_info("Invoking lookup", context)
    """

    correlation_id: str | None = Field(default=None, description="Request correlation ID.")
    service: str | None = Field(default=None, description="Service class name.")
    operation: str | None = Field(default=None, description="External operation name.")
    parameter: str | None = Field(default=None, description="Parameter being processed.")
    error_type: str | None = Field(default=None, description="Exception class name.")


class DispatchConfig(BaseModel):
    """Configuration for an operation dispatcher.

    Example:
        >>> config = DispatchConfig(date_formats=["%m/%d/%Y"])
        >>> dispatcher = OperationDispatcher(Accounts, config=config)
    """

    date_formats: list[str] = Field(
        default_factory=lambda: ["%d/%m/%Y"],
        description="strptime formats tried for dates after ISO-8601.",
    )
    log_parameters: bool = Field(
        default=True,
        description="Log the raw parameter maps at debug level before invoking.",
    )

    model_config = {"extra": "forbid"}


class GatewayConfig(BaseModel):
    """Configuration for the service gateway.

    Regular expressions for each HTTP verb are joined with ``|`` and
    matched case-insensitively against the operation name. POST is
    always supported.

    Example:
        >>> config = GatewayConfig(vendor="Acme", supported_get_operations=["get.*"])
    """

    vendor: str | None = Field(
        default=None,
        description="Vendor name used in X-<vendor>-<Object> headers.",
    )
    supported_get_operations: list[str] = Field(default_factory=list)
    supported_put_operations: list[str] = Field(default_factory=list)
    supported_delete_operations: list[str] = Field(default_factory=list)
    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)

    model_config = {"extra": "forbid"}


class GatewayResponse(BaseModel):
    """Transport-neutral response produced by the gateway.

    Example:
        >>> response = gateway.handle("POST", "accounts/lookup", body='{"id": "7"}')
        >>> response.status
        200
    """

    status: int = Field(description="HTTP status code.")
    body: str = Field(default="", description="JSON response body.")
    headers: dict[str, str] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the status is a 2xx code."""
        return 200 <= self.status < 300

    def json_body(self) -> Any:
        """Decode the body as JSON (``None`` for an empty body)."""
        return from_json(self.body) if self.body else None


__all__ = [
    "FailureKind",
    "LogContext",
    "DispatchConfig",
    "GatewayConfig",
    "GatewayResponse",
]

"""Fluent builder for ServiceGateway.

Services are given as a mapping from service path to either a service
class or a ready OperationDispatcher. Classes get a dispatcher built
with the builder's exception mapper, codec, dispatch config and events;
dispatchers are used as they are.

Example:
    >>> gateway = (
    ...     GatewayBuilder({"accounts": Accounts, "ledger": ledger_dispatcher})
    ...     .with_vendor("Acme")
    ...     .with_supported_get_operations("get.*", "find.*")
    ...     .with_supported_delete_operations("delete.*")
    ...     .with_exception_mapper(map_ledger_errors)
    ...     .build()
    ... )
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from ..conversion import JsonCodec, PydanticJsonCodec
from ..dispatcher import OperationDispatcher
from ..errors.failure_classifier import ExceptionMapperLike
from ..events import DispatchEvents
from ..exceptions import ConfigurationError
from ..logging import log_info
from ..types import DispatchConfig, GatewayConfig
from .service import ServiceGateway, compile_operation_pattern


class GatewayBuilder:
    """Builds a ServiceGateway step by step."""

    def __init__(self, services: Mapping[str, type | OperationDispatcher]) -> None:
        """Initialize the builder.

        Args:
            services: Service path to service class or dispatcher.

        Raises:
            ConfigurationError: If no services are given.
        """
        if not services:
            raise ConfigurationError("At least one service must be mapped")
        self._services = dict(services)
        self._vendor: str | None = None
        self._get_operations: tuple[str, ...] = ()
        self._put_operations: tuple[str, ...] = ()
        self._delete_operations: tuple[str, ...] = ()
        self._exception_mapper: ExceptionMapperLike | None = None
        self._json_codec: JsonCodec | None = None
        self._dispatch_config: DispatchConfig | None = None
        self._events: DispatchEvents | None = None

    @classmethod
    def from_config(
        cls,
        services: Mapping[str, type | OperationDispatcher],
        config: GatewayConfig,
    ) -> GatewayBuilder:
        """Create a builder preloaded from a GatewayConfig."""
        return cls(services).with_config(config)

    def with_config(self, config: GatewayConfig) -> GatewayBuilder:
        """Apply vendor, verb patterns and dispatch settings from config."""
        self._vendor = config.vendor
        self._get_operations = tuple(config.supported_get_operations)
        self._put_operations = tuple(config.supported_put_operations)
        self._delete_operations = tuple(config.supported_delete_operations)
        self._dispatch_config = config.dispatch
        return self

    def with_vendor(self, vendor: str | None) -> GatewayBuilder:
        """Vendor name for ``X-<vendor>-<Object>`` headers."""
        self._vendor = vendor
        return self

    def with_supported_get_operations(self, *regex: str) -> GatewayBuilder:
        """Operation name patterns that may also be invoked with GET."""
        self._get_operations = regex
        return self

    def with_supported_put_operations(self, *regex: str) -> GatewayBuilder:
        """Operation name patterns that may also be invoked with PUT."""
        self._put_operations = regex
        return self

    def with_supported_delete_operations(self, *regex: str) -> GatewayBuilder:
        """Operation name patterns that may also be invoked with DELETE."""
        self._delete_operations = regex
        return self

    def with_exception_mapper(self, mapper: ExceptionMapperLike | None) -> GatewayBuilder:
        self._exception_mapper = mapper
        return self

    def with_json_codec(self, codec: JsonCodec | None) -> GatewayBuilder:
        self._json_codec = codec
        return self

    def with_events(self, events: DispatchEvents | None) -> GatewayBuilder:
        self._events = events
        return self

    def build(self) -> ServiceGateway:
        """Build the gateway.

        Returns:
            The configured ServiceGateway.

        Raises:
            ConfigurationError: If a pattern does not compile or a service
                entry is neither a class nor a dispatcher.
            DescriptorError: If a service class cannot be described.
        """
        codec = self._json_codec or PydanticJsonCodec()
        dispatchers: dict[str, OperationDispatcher] = {}

        for path, service in self._services.items():
            key = path.strip("/")
            if isinstance(service, OperationDispatcher):
                dispatchers[key] = service
            elif isinstance(service, type):
                dispatchers[key] = OperationDispatcher(
                    service,
                    json_codec=codec,
                    exception_mapper=self._exception_mapper,
                    config=self._dispatch_config,
                    events=self._events,
                )
            else:
                raise ConfigurationError(
                    f"Service '{path}' must be a class or OperationDispatcher, "
                    f"got {type(service).__name__}"
                )

        try:
            patterns = {
                "supported_get_operations": compile_operation_pattern(self._get_operations),
                "supported_put_operations": compile_operation_pattern(self._put_operations),
                "supported_delete_operations": compile_operation_pattern(self._delete_operations),
            }
        except re.error as e:
            raise ConfigurationError(f"Invalid operation pattern: {e}") from e

        log_info(f"Built gateway for {sorted(dispatchers)}")
        return ServiceGateway(dispatchers, vendor=self._vendor, json_codec=codec, **patterns)


__all__ = ["GatewayBuilder"]

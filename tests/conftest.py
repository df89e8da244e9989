"""pytest configuration and fixtures for opwire tests.

This module provides shared fixtures for testing opwire, including
dispatchers over the sample services, an event bus, and gateways.
"""

from __future__ import annotations

from collections.abc import Generator
from typing import TYPE_CHECKING

import pytest

from tests.services.sample_services import (
    Ledger,
    MockedService,
    ValueService,
    map_sample_exceptions,
)

if TYPE_CHECKING:
    from opwire import DispatchEvents, OperationDispatcher, ServiceGateway


@pytest.fixture(scope="session")
def opwire_module():
    """Provide the opwire module as a fixture."""
    import opwire

    return opwire


@pytest.fixture
def mocked_dispatcher() -> OperationDispatcher:
    """Dispatcher over MockedService with no exception mapper."""
    from opwire import OperationDispatcher

    return OperationDispatcher.for_class(MockedService, MockedService)


@pytest.fixture
def value_dispatcher() -> OperationDispatcher:
    """Dispatcher over ValueService."""
    from opwire import OperationDispatcher

    return OperationDispatcher(ValueService)


@pytest.fixture
def events() -> Generator[DispatchEvents, None, None]:
    """Provide a fresh event bus, cleared after the test."""
    from opwire import DispatchEvents

    bus = DispatchEvents()
    yield bus
    bus.clear()


@pytest.fixture
def ledger_dispatcher(events: DispatchEvents) -> OperationDispatcher:
    """Dispatcher over Ledger with the sample exception mapper and events."""
    from opwire import OperationDispatcher

    return OperationDispatcher(
        Ledger,
        exception_mapper=map_sample_exceptions,
        events=events,
    )


@pytest.fixture
def gateway() -> ServiceGateway:
    """Gateway mapping the sample services under a vendor."""
    from opwire import GatewayBuilder

    return (
        GatewayBuilder(
            {
                "mocked": MockedService,
                "values": ValueService,
                "finance/ledger": Ledger,
            }
        )
        .with_vendor("Acme")
        .with_supported_get_operations("get.*", "mocked.*")
        .with_supported_put_operations("transfer")
        .with_supported_delete_operations("delete.*")
        .with_exception_mapper(map_sample_exceptions)
        .build()
    )

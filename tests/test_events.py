"""Tests for DispatchEvents."""

from __future__ import annotations

import pytest

from opwire import DispatchEvents, EventNames


class TestEventNames:
    """Tests for event name constants."""

    def test_names(self):
        assert EventNames.OPERATION_INVOKED == "operation.invoked"
        assert EventNames.OPERATION_COMPLETED == "operation.completed"
        assert EventNames.OPERATION_FAILED == "operation.failed"


class TestDispatchEvents:
    """Tests for subscribe, publish and unsubscribe."""

    @pytest.fixture
    def bus(self):
        return DispatchEvents()

    def test_publish_delivers_keyword_payload(self, bus):
        received = []

        def handler(**payload):
            received.append(payload)

        bus.subscribe(EventNames.OPERATION_INVOKED, handler)
        bus.publish(EventNames.OPERATION_INVOKED, service="Accounts", operation="lookup")

        assert received == [{"service": "Accounts", "operation": "lookup"}]

    def test_publish_without_listeners(self, bus):
        bus.publish(EventNames.OPERATION_COMPLETED, result=1)

    def test_only_matching_event_delivered(self, bus):
        received = []
        bus.subscribe(EventNames.OPERATION_FAILED, lambda **p: received.append(p))
        bus.publish(EventNames.OPERATION_COMPLETED, result=1)
        assert received == []

    def test_listener_count_and_unsubscribe(self, bus):
        def handler(**payload):
            pass

        bus.subscribe(EventNames.OPERATION_FAILED, handler)
        assert bus.listener_count(EventNames.OPERATION_FAILED) == 1

        bus.unsubscribe(EventNames.OPERATION_FAILED, handler)
        assert bus.listener_count(EventNames.OPERATION_FAILED) == 0

    def test_clear(self, bus):
        bus.subscribe(EventNames.OPERATION_INVOKED, lambda **p: None)
        bus.subscribe(EventNames.OPERATION_FAILED, lambda **p: None)
        bus.clear()

        assert bus.listener_count(EventNames.OPERATION_INVOKED) == 0
        assert bus.listener_count(EventNames.OPERATION_FAILED) == 0

    def test_raising_listener_propagates(self, bus):
        def handler(**payload):
            raise RuntimeError("listener failed")

        bus.subscribe(EventNames.OPERATION_INVOKED, handler)
        with pytest.raises(RuntimeError, match="listener failed"):
            bus.publish(EventNames.OPERATION_INVOKED)

"""In-process lifecycle events for operation dispatch.

This module provides the DispatchEvents class that wraps pyee's
EventEmitter so callers can observe invocations without touching the
dispatcher.

Events are delivered synchronously on the dispatching thread, with
keyword arguments only:

- operation.invoked: service, operation, parameters
- operation.completed: service, operation, result
- operation.failed: service, operation, failure

Example:
    >>> from opwire import DispatchEvents, EventNames, OperationDispatcher
    >>>
    >>> events = DispatchEvents()
    >>> def on_failed(*, service, operation, failure):
    ...     print(f"{service}.{operation} failed: {failure.kind.value}")
    ...
    >>> events.subscribe(EventNames.OPERATION_FAILED, on_failed)
    >>> dispatcher = OperationDispatcher(Accounts, events=events)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pyee.base import EventEmitter

from .logging import log_debug


class EventNames:
    """Constants for dispatch event names.

    Attributes:
        OPERATION_INVOKED: Emitted after binding, before the method runs.
        OPERATION_COMPLETED: Emitted with the method's return value.
        OPERATION_FAILED: Emitted with the categorized failure.
    """

    OPERATION_INVOKED = "operation.invoked"
    OPERATION_COMPLETED = "operation.completed"
    OPERATION_FAILED = "operation.failed"


class DispatchEvents:
    """Event bus shared by one or more dispatchers.

    A listener that raises propagates out of ``publish`` (pyee re-raises
    when no ``error`` listener is registered), so listeners should not
    raise.
    """

    def __init__(self) -> None:
        self._emitter = EventEmitter()

    def subscribe(self, event: str, handler: Callable[..., Any]) -> None:
        """Subscribe to an event.

        Args:
            event: Event name to subscribe to.
            handler: Callback invoked with the event's keyword arguments.
        """
        self._emitter.on(event, handler)
        handler_name = getattr(handler, "__name__", str(handler))
        log_debug(f"Subscribed to {event}: {handler_name}")

    def unsubscribe(self, event: str, handler: Callable[..., Any]) -> None:
        """Unsubscribe from an event.

        Args:
            event: Event name to unsubscribe from.
            handler: The handler callback to remove.
        """
        self._emitter.remove_listener(event, handler)
        handler_name = getattr(handler, "__name__", str(handler))
        log_debug(f"Unsubscribed from {event}: {handler_name}")

    def publish(self, event: str, **payload: Any) -> None:
        """Publish an event to all subscribers.

        Args:
            event: Event name to publish.
            **payload: Keyword arguments passed to handlers.
        """
        self._emitter.emit(event, **payload)

    def listener_count(self, event: str) -> int:
        """Get the number of listeners for an event."""
        return len(self._emitter.listeners(event))

    def clear(self) -> None:
        """Remove every listener."""
        self._emitter.remove_all_listeners()


__all__ = ["EventNames", "DispatchEvents"]

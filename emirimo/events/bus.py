"""In-process event bus.

Handlers are registered per event class and called synchronously in
subscription order. A failing handler is logged and does not stop the
remaining handlers or the publisher.
"""

import logging
from collections import defaultdict
from typing import Any, Callable, DefaultDict, List, Type

from emirimo.logging import get_logger

logger = get_logger(__name__, component="events")

Handler = Callable[[Any], Any]


class EventBus:
    """Maps event classes to handler callables."""

    def __init__(self, logger_instance: logging.Logger = None):
        self._handlers: DefaultDict[Type, List[Handler]] = defaultdict(list)
        self.logger = logger_instance or logger

    def subscribe(self, event_type: Type, handler: Handler) -> None:
        """Register a handler for one event class."""
        self._handlers[event_type].append(handler)
        self.logger.debug(
            f"Subscribed {getattr(handler, '__qualname__', handler)!s} to {event_type.__name__}"
        )

    def handlers_for(self, event_type: Type) -> List[Handler]:
        return list(self._handlers.get(event_type, []))

    def publish(self, event: Any) -> List[Exception]:
        """Deliver an event to every handler subscribed to its class.

        Args:
            event: Event instance

        Returns:
            Exceptions raised by handlers (empty when all succeeded)
        """
        event_name = type(event).__name__
        handlers = self.handlers_for(type(event))
        errors: List[Exception] = []

        self.logger.info(
            f"Publishing {event_name} to {len(handlers)} handlers",
            extra={
                "event": "events.published",
                "event_type": event_name,
                "handler_count": len(handlers),
            },
        )

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                errors.append(e)
                self.logger.error(
                    f"Handler for {event_name} failed: {e}",
                    exc_info=True,
                    extra={
                        "event": "events.handler.failed",
                        "event_type": event_name,
                        "error_type": type(e).__name__,
                    },
                )

        return errors

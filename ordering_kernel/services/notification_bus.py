"""
Notification bus (``ordering_kernel.services.notification_bus``).

Responsibility:
    Typed, synchronous observer registry that carries cross-module
    notifications (order delivered, order line received, product update
    approved) from the module that owns an entity to the modules that react
    to it.  Publishers never learn who is listening; subscribers never call
    back into the publisher.

Architecture position:
    Kernel > Services.  Knows nothing about the event classes it carries:
    handlers are registered per event type and dispatched on
    ``type(event)``.

Invariants enforced:
    - Handlers run synchronously, in subscription order, before ``publish``
      returns.  A reception call therefore returns only after its stock-in
      has landed.
    - A handler that raises does not stop later handlers and does not
      propagate into the publisher; the failure is logged with traceback.

Failure modes:
    - None raised to publishers.  ``handler_failed`` log records carry the
      exception details.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, TypeVar

from ordering_kernel.logging_config import get_logger

logger = get_logger("services.notification_bus")

E = TypeVar("E")


class NotificationBus:
    """In-process publish/subscribe channel keyed by event class."""

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable[[Any], None]]] = defaultdict(list)

    def subscribe(self, event_type: type[E], handler: Callable[[E], None]) -> None:
        """Register ``handler`` for events of exactly ``event_type``."""
        self._handlers[event_type].append(handler)
        logger.debug(
            "notification_handler_subscribed",
            extra={
                "event_type": event_type.__name__,
                "handler": getattr(handler, "__qualname__", repr(handler)),
            },
        )

    def unsubscribe(self, event_type: type[E], handler: Callable[[E], None]) -> None:
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def handler_count(self, event_type: type) -> int:
        return len(self._handlers.get(event_type, []))

    def publish(self, event: object) -> int:
        """
        Deliver ``event`` to every handler registered for its type.

        Returns:
            Number of handlers that completed without raising.
        """
        event_name = type(event).__name__
        handlers = list(self._handlers.get(type(event), []))
        delivered = 0
        for handler in handlers:
            try:
                handler(event)
                delivered += 1
            except Exception:
                logger.error(
                    "notification_handler_failed",
                    exc_info=True,
                    extra={
                        "event_type": event_name,
                        "handler": getattr(handler, "__qualname__", repr(handler)),
                    },
                )
        logger.debug(
            "notification_published",
            extra={
                "event_type": event_name,
                "handler_count": len(handlers),
                "delivered": delivered,
            },
        )
        return delivered

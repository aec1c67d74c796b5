"""
Tests for the notification bus.

Validates:
- Dispatch by exact event type, in subscription order
- Unsubscribe and handler counts
- A failing handler is logged and does not stop the others
"""

from dataclasses import dataclass

from ordering_kernel.services.notification_bus import NotificationBus


@dataclass(frozen=True)
class Ping:
    value: int


@dataclass(frozen=True)
class Pong:
    value: int


class TestPublish:
    def test_handlers_receive_event_in_order(self):
        bus = NotificationBus()
        seen = []
        bus.subscribe(Ping, lambda e: seen.append(("first", e.value)))
        bus.subscribe(Ping, lambda e: seen.append(("second", e.value)))

        delivered = bus.publish(Ping(7))

        assert delivered == 2
        assert seen == [("first", 7), ("second", 7)]

    def test_dispatch_is_by_type(self):
        bus = NotificationBus()
        seen = []
        bus.subscribe(Pong, seen.append)

        assert bus.publish(Ping(1)) == 0
        assert seen == []

    def test_no_subscribers(self):
        assert NotificationBus().publish(Ping(1)) == 0


class TestSubscriptionManagement:
    def test_unsubscribe(self):
        bus = NotificationBus()
        seen = []
        bus.subscribe(Ping, seen.append)
        bus.unsubscribe(Ping, seen.append)

        bus.publish(Ping(1))

        assert seen == []
        assert bus.handler_count(Ping) == 0

    def test_unsubscribe_unknown_handler_is_noop(self):
        bus = NotificationBus()
        bus.unsubscribe(Ping, print)
        assert bus.handler_count(Ping) == 0


class TestHandlerFailure:
    def test_failure_isolated_and_logged(self, captured_logs):
        bus = NotificationBus()
        seen = []

        def broken(event):
            raise RuntimeError("handler down")

        bus.subscribe(Ping, broken)
        bus.subscribe(Ping, seen.append)

        delivered = bus.publish(Ping(3))

        assert delivered == 1
        assert seen == [Ping(3)]
        failures = [r for r in captured_logs() if r["message"] == "notification_handler_failed"]
        assert len(failures) == 1
        assert failures[0]["exc_type"] == "RuntimeError"
        assert failures[0]["event_type"] == "Ping"

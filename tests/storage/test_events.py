"""Tests for the event system."""

from datetime import datetime
from unittest.mock import Mock

from dotcache.storage.events import Event, EventBus, EventPublisher, EventType


class TestEvent:
    """Test the Event data class."""

    def test_property_accessors(self):
        event = Event(
            type=EventType.KEY_SET,
            timestamp=datetime.now(),
            data={"namespace": "ns", "key": "a.b"},
        )

        assert event.namespace == "ns"
        assert event.key == "a.b"

    def test_event_without_key(self):
        event = Event(type=EventType.CACHE_CLEARED, timestamp=datetime.now(), data={})

        assert event.key is None
        assert event.namespace is None


class TestEventBus:
    """Test the event bus publish/subscribe system."""

    def _event(self, event_type=EventType.KEY_SET):
        return Event(type=event_type, timestamp=datetime.now(), data={})

    def test_subscribe_and_publish(self):
        bus = EventBus()
        handler = Mock()
        bus.subscribe(EventType.KEY_SET, handler)

        event = self._event()
        bus.publish(event)

        handler.assert_called_once_with(event)

    def test_handlers_only_get_their_type(self):
        bus = EventBus()
        handler = Mock()
        bus.subscribe(EventType.SYNC_FAILED, handler)

        bus.publish(self._event(EventType.KEY_SET))

        handler.assert_not_called()

    def test_unsubscribe(self):
        bus = EventBus()
        handler = Mock()
        bus.subscribe(EventType.KEY_SET, handler)
        bus.unsubscribe(EventType.KEY_SET, handler)

        bus.publish(self._event())

        handler.assert_not_called()

    def test_handler_errors_do_not_break_publishing(self):
        bus = EventBus()
        good = Mock()
        bus.subscribe(EventType.KEY_SET, Mock(side_effect=RuntimeError("boom")))
        bus.subscribe(EventType.KEY_SET, good)

        bus.publish(self._event())

        good.assert_called_once()

    def test_history_is_limited(self):
        bus = EventBus(history_limit=3)
        for _ in range(5):
            bus.publish(self._event())

        assert len(bus.get_history()) == 3

    def test_history_filter_and_clear(self):
        bus = EventBus()
        bus.publish(self._event(EventType.KEY_SET))
        bus.publish(self._event(EventType.CACHE_SYNCED))

        assert len(bus.get_history(EventType.CACHE_SYNCED)) == 1

        bus.clear_history()
        assert bus.get_history() == []


class TestEventPublisher:
    """Test the publisher mixin."""

    def test_publishes_to_bus(self):
        bus = EventBus()
        EventPublisher(bus)._publish_event(EventType.CACHE_CLEARED, namespace="ns")

        (event,) = bus.get_history()
        assert event.type is EventType.CACHE_CLEARED
        assert event.namespace == "ns"

    def test_without_bus_is_silent(self):
        EventPublisher()._publish_event(EventType.CACHE_CLEARED, namespace="ns")

"""
Unit tests for the Event Manager system.

Tests the publisher-subscriber bus that decouples the combat resolver, the
run manager and the log manager.
"""
from dataclasses import FrozenInstanceError
from unittest.mock import Mock

import pytest

from genesis.core.data import EncounterOutcome
from genesis.core.events import (
    EncounterEnded,
    EventManager,
    EventPriority,
    EventType,
    QueuedEvent,
    RunStarted,
    TurnStarted,
)


def turn_started(turn: int = 1) -> TurnStarted:
    return TurnStarted(turn=turn, encounter_id="enc", action_points=2)


class TestQueuedEvent:
    """Test QueuedEvent ordering."""

    def test_higher_priority_sorts_first(self):
        low = QueuedEvent(turn_started(), EventPriority.LOW, sequence=1)
        normal = QueuedEvent(turn_started(), EventPriority.NORMAL, sequence=2)
        critical = QueuedEvent(turn_started(), EventPriority.CRITICAL, sequence=3)

        assert sorted([low, normal, critical]) == [critical, normal, low]

    def test_same_priority_keeps_publication_order(self):
        first = QueuedEvent(turn_started(), EventPriority.NORMAL, sequence=1)
        second = QueuedEvent(turn_started(), EventPriority.NORMAL, sequence=2)

        assert first < second
        assert not second < first


class TestEventTypes:
    """Test that events set their own type."""

    def test_event_type_assigned(self):
        assert turn_started().event_type == EventType.TURN_STARTED
        assert RunStarted(turn=0, floor=1).event_type == EventType.RUN_STARTED

    def test_events_are_immutable(self):
        event = turn_started()
        with pytest.raises(FrozenInstanceError):
            event.turn = 5


class TestEventManager:
    """Test EventManager functionality."""

    def test_subscribe_and_process(self, event_manager):
        subscriber = Mock()
        event_manager.subscribe(EventType.TURN_STARTED, subscriber)

        event = turn_started()
        event_manager.publish(event)

        assert subscriber.call_count == 0
        assert event_manager.process_events() == 1
        subscriber.assert_called_once_with(event)

    def test_subscriber_only_sees_its_type(self, event_manager):
        subscriber = Mock()
        event_manager.subscribe(EventType.RUN_STARTED, subscriber)

        event_manager.publish(turn_started())
        event_manager.process_events()

        subscriber.assert_not_called()

    def test_universal_subscriber(self, event_manager):
        received = []
        event_manager.subscribe_all(received.append)

        event_manager.publish(turn_started())
        event_manager.publish(RunStarted(turn=0, floor=1))
        event_manager.process_events()

        assert [event.event_type for event in received] == [EventType.TURN_STARTED, EventType.RUN_STARTED]

    def test_publish_many_preserves_order(self, event_manager):
        received = []
        event_manager.subscribe_all(received.append)

        events = [turn_started(turn) for turn in range(1, 6)]
        event_manager.publish_many(events, source="test")
        event_manager.process_events()

        assert [event.turn for event in received] == [1, 2, 3, 4, 5]

    def test_priority_processing(self, event_manager):
        received = []
        event_manager.subscribe_all(received.append)

        event_manager.publish(turn_started(1), priority=EventPriority.LOW)
        event_manager.publish(turn_started(2), priority=EventPriority.HIGH)
        event_manager.process_events()

        assert [event.turn for event in received] == [2, 1]

    def test_process_events_with_limit(self, event_manager):
        for turn in range(3):
            event_manager.publish(turn_started(turn))

        assert event_manager.process_events(max_events=2) == 2
        assert event_manager.has_queued_events()
        assert event_manager.process_events() == 1

    def test_events_published_during_delivery(self, event_manager):
        received = []

        def relay(event):
            received.append(event)
            if event.event_type == EventType.TURN_STARTED:
                event_manager.publish(RunStarted(turn=0, floor=1))

        event_manager.subscribe_all(relay)
        event_manager.publish(turn_started())

        assert event_manager.process_events() == 2
        assert [event.event_type for event in received] == [EventType.TURN_STARTED, EventType.RUN_STARTED]

    def test_subscriber_failure_recorded(self, event_manager):
        def broken(event):
            raise ValueError("bad handler")

        event_manager.subscribe(EventType.ENCOUNTER_ENDED, broken, subscriber_name="broken")
        event_manager.publish(EncounterEnded(turn=3, encounter_id="enc", outcome=EncounterOutcome.VICTORY))
        event_manager.process_events()

        failure = event_manager.failures[-1]
        assert failure.event_name == "EncounterEnded"
        assert failure.subscriber == "broken"
        assert failure.error == "ValueError: bad handler"

    def test_trace_callback(self):
        lines = []
        manager = EventManager(trace=lines.append)

        manager.publish(turn_started(), source="test")

        assert lines == ["[EVENT] queued TurnStarted from test (NORMAL)"]

    def test_processed_counts_by_type(self, event_manager):
        event_manager.publish(turn_started())
        event_manager.publish(turn_started())
        event_manager.publish(RunStarted(turn=0, floor=1))
        event_manager.process_events()

        assert event_manager.get_statistics()['processed_by_type'] == {"TurnStarted": 2, "RunStarted": 1}

    def test_unsubscribe(self, event_manager):
        subscriber = Mock()
        event_manager.subscribe(EventType.TURN_STARTED, subscriber)

        assert event_manager.unsubscribe(EventType.TURN_STARTED, subscriber)
        assert not event_manager.unsubscribe(EventType.TURN_STARTED, subscriber)

    def test_subscriber_exception_is_counted(self, event_manager):
        failing = Mock(side_effect=RuntimeError("boom"))
        healthy = Mock()
        event_manager.subscribe(EventType.TURN_STARTED, failing)
        event_manager.subscribe(EventType.TURN_STARTED, healthy)

        event_manager.publish(turn_started())
        event_manager.process_events()

        healthy.assert_called_once()
        assert event_manager.get_statistics()['subscriber_errors'] == 1

    def test_clear_queue(self, event_manager):
        event_manager.publish(turn_started())
        event_manager.publish(turn_started())

        assert event_manager.clear_queue() == 2
        assert not event_manager.has_queued_events()

    def test_recent_events(self, event_manager):
        event_manager.publish(turn_started(7), source="test")
        event_manager.process_events()

        recent = event_manager.get_recent_events()

        assert recent[-1]['event_type'] == "TurnStarted"
        assert recent[-1]['turn'] == 7
        assert recent[-1]['source'] == "test"

    def test_shutdown(self, event_manager):
        event_manager.subscribe(EventType.TURN_STARTED, Mock())
        event_manager.publish(turn_started())

        event_manager.shutdown()

        stats = event_manager.get_statistics()
        assert stats['subscribers_count'] == 0
        assert stats['events_queued'] == 0

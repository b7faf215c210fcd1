"""
Event bus shared by the combat resolver, the run manager and the log manager.

Publishers queue events; nothing is delivered until process_events() drains
the queue, highest priority first and in publication order within a
priority. A subscriber that raises is recorded and skipped so the remaining
subscribers still see the event.
"""

import heapq
import threading
from collections import Counter, defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Iterable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .events import CombatEvent, EventType


class EventPriority(Enum):
    """Delivery priority; larger values are delivered first."""
    LOW = 0
    NORMAL = 1
    HIGH = 2
    CRITICAL = 3


@dataclass(order=True)
class QueuedEvent:
    """An event waiting for delivery, ordered by priority then sequence."""
    sort_key: tuple[int, int] = field(init=False, repr=False)
    event: "CombatEvent" = field(compare=False)
    priority: EventPriority = field(default=EventPriority.NORMAL, compare=False)
    sequence: int = field(default=0, compare=False)
    source: str = field(default="unknown", compare=False)
    timestamp: datetime = field(default_factory=datetime.now, compare=False)

    def __post_init__(self):
        self.sort_key = (-self.priority.value, self.sequence)


EventSubscriber = Callable[["CombatEvent"], None]


@dataclass(frozen=True)
class Subscription:
    callback: EventSubscriber
    name: str


@dataclass(frozen=True)
class SubscriberFailure:
    """A subscriber exception caught during delivery."""
    event_name: str
    subscriber: str
    error: str


class EventManager:
    """Queue-based publish/subscribe bus."""

    def __init__(self, history_size: int = 1000,
                 trace: Optional[Callable[[str], None]] = None):
        """Initialize the event manager.

        Args:
            history_size: Number of delivered events (and failures) kept
            trace: Optional callable receiving one line per bus operation
        """
        self._subscriptions: dict["EventType", list[Subscription]] = defaultdict(list)
        self._catch_all: list[Subscription] = []
        self._heap: list[QueuedEvent] = []
        self._sequence = 0

        self._delivered: deque[QueuedEvent] = deque(maxlen=history_size)
        self._delivered_by_type: Counter[str] = Counter()
        self.failures: deque[SubscriberFailure] = deque(maxlen=history_size)

        self._trace = trace
        self._lock = threading.RLock()

    def _log(self, message: str) -> None:
        if self._trace is not None:
            self._trace(f"[EVENT] {message}")

    @staticmethod
    def _name_of(callback: EventSubscriber, name: Optional[str]) -> str:
        return name or getattr(callback, "__qualname__", None) or repr(callback)

    def subscribe(self, event_type: "EventType", subscriber: EventSubscriber,
                  subscriber_name: Optional[str] = None) -> None:
        """Deliver every event of ``event_type`` to ``subscriber``."""
        subscription = Subscription(subscriber, self._name_of(subscriber, subscriber_name))
        with self._lock:
            self._subscriptions[event_type].append(subscription)
        self._log(f"{subscription.name} subscribed to {event_type.name}")

    def subscribe_all(self, subscriber: EventSubscriber,
                      subscriber_name: Optional[str] = None) -> None:
        """Deliver every event, whatever its type, to ``subscriber``."""
        subscription = Subscription(subscriber, self._name_of(subscriber, subscriber_name))
        with self._lock:
            self._catch_all.append(subscription)
        self._log(f"{subscription.name} subscribed to all events")

    def unsubscribe(self, event_type: "EventType", subscriber: EventSubscriber) -> bool:
        """Remove ``subscriber`` from ``event_type``.

        Returns:
            True if the subscriber was registered
        """
        with self._lock:
            subscriptions = self._subscriptions.get(event_type, [])
            for subscription in subscriptions:
                if subscription.callback is subscriber:
                    subscriptions.remove(subscription)
                    return True
        return False

    def publish(self, event: "CombatEvent", priority: EventPriority = EventPriority.NORMAL,
                source: Optional[str] = None) -> None:
        """Queue ``event`` for the next process_events() call."""
        with self._lock:
            self._sequence += 1
            queued = QueuedEvent(
                event=event,
                priority=priority,
                sequence=self._sequence,
                source=source or "unknown",
            )
            heapq.heappush(self._heap, queued)
        self._log(f"queued {type(event).__name__} from {queued.source} ({priority.name})")

    def publish_many(self, events: Iterable["CombatEvent"], source: Optional[str] = None) -> None:
        """Queue several events, preserving their order."""
        for event in events:
            self.publish(event, source=source)

    def process_events(self, max_events: Optional[int] = None) -> int:
        """Deliver queued events.

        Events published by subscribers during delivery are delivered in the
        same call, subject to ``max_events``.

        Returns:
            Number of events delivered
        """
        delivered = 0
        while max_events is None or delivered < max_events:
            with self._lock:
                if not self._heap:
                    break
                queued = heapq.heappop(self._heap)
            self._deliver(queued)
            delivered += 1
        return delivered

    def _deliver(self, queued: QueuedEvent) -> None:
        event = queued.event
        event_name = type(event).__name__
        with self._lock:
            self._delivered.append(queued)
            self._delivered_by_type[event_name] += 1
            targets = list(self._subscriptions.get(event.event_type, [])) + list(self._catch_all)

        for subscription in targets:
            try:
                subscription.callback(event)
            except Exception as e:
                failure = SubscriberFailure(event_name, subscription.name, f"{type(e).__name__}: {e}")
                with self._lock:
                    self.failures.append(failure)
                self._log(f"{subscription.name} failed on {event_name}: {failure.error}")

    def clear_queue(self) -> int:
        """Drop every queued event.

        Returns:
            Number of events dropped
        """
        with self._lock:
            count = len(self._heap)
            self._heap.clear()
        return count

    def has_queued_events(self) -> bool:
        with self._lock:
            return bool(self._heap)

    def get_statistics(self) -> dict[str, Any]:
        with self._lock:
            return {
                'events_published': self._sequence,
                'events_processed': sum(self._delivered_by_type.values()),
                'events_queued': len(self._heap),
                'subscriber_errors': len(self.failures),
                'subscribers_count': sum(len(subs) for subs in self._subscriptions.values()),
                'universal_subscribers_count': len(self._catch_all),
                'processed_by_type': dict(self._delivered_by_type),
            }

    def get_recent_events(self, count: int = 10) -> list[dict[str, Any]]:
        """Summaries of the last ``count`` delivered events, oldest first."""
        with self._lock:
            recent = list(self._delivered)[-count:]
        return [
            {
                'event_type': type(queued.event).__name__,
                'turn': queued.event.turn,
                'priority': queued.priority.name,
                'source': queued.source,
                'timestamp': queued.timestamp.isoformat(),
            }
            for queued in recent
        ]

    def shutdown(self) -> None:
        """Drop all subscribers, queued events and history."""
        with self._lock:
            self._subscriptions.clear()
            self._catch_all.clear()
            self._heap.clear()
            self._delivered.clear()
            self._delivered_by_type.clear()
            self.failures.clear()

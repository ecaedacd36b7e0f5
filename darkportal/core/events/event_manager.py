"""
Event management system for decoupled manager communication.

This module provides a central event bus that lets the combat core talk to its
own managers and to presentation sinks through events instead of direct
dependencies, following the publisher-subscriber pattern.
"""

import itertools
import threading
from collections import defaultdict, deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .events import GameEvent, EventType


class EventPriority(Enum):
    """Event processing priorities (higher value is processed first)."""
    LOW = 1
    NORMAL = 2
    HIGH = 3
    CRITICAL = 4


_sequence = itertools.count()


@dataclass
class QueuedEvent:
    """An event in the processing queue with metadata."""
    event: "GameEvent"
    priority: EventPriority = EventPriority.NORMAL
    source: Optional[str] = None  # For debugging
    sequence: int = field(default_factory=lambda: next(_sequence))

    def __lt__(self, other: "QueuedEvent") -> bool:
        """Compare events for priority queue ordering."""
        if self.priority.value != other.priority.value:
            return self.priority.value > other.priority.value
        # Same priority keeps emission order
        return self.sequence < other.sequence


EventSubscriber = Callable[["GameEvent"], None]


class EventManager:
    """Central event bus for managing game system communication."""

    def __init__(self, enable_debug_logging: bool = False):
        """Initialize the event manager.

        Args:
            enable_debug_logging: Whether to enable detailed event logging
        """
        self.enable_debug_logging = enable_debug_logging

        # Event subscribers by event type
        self._subscribers: dict["EventType", list[EventSubscriber]] = defaultdict(list)

        # Universal subscribers (receive all events)
        self._universal_subscribers: list[EventSubscriber] = []

        # Event processing queue
        self._event_queue: deque[QueuedEvent] = deque()

        # Statistics and debugging
        self._events_published = 0
        self._events_processed = 0
        self._subscriber_errors = 0
        self._event_history: deque[QueuedEvent] = deque(maxlen=1000)

        # Thread safety
        self._lock = threading.RLock()

        # Debug callback for logging
        self._debug_callback: Optional[Callable[[str], None]] = None

    def set_debug_callback(self, callback: Optional[Callable[[str], None]]) -> None:
        """Set a callback function for debug logging."""
        self._debug_callback = callback

    def _debug_log(self, message: str) -> None:
        if self.enable_debug_logging and self._debug_callback:
            self._debug_callback(f"[EVENT] {message}")

    def subscribe(
        self,
        event_type: "EventType",
        subscriber: EventSubscriber,
        subscriber_name: Optional[str] = None
    ) -> None:
        """Subscribe to events of a specific type.

        Args:
            event_type: The type of events to subscribe to
            subscriber: Callback function to handle events
            subscriber_name: Optional name for debugging
        """
        with self._lock:
            self._subscribers[event_type].append(subscriber)

            subscriber_display = subscriber_name or getattr(subscriber, '__name__', 'anonymous')
            self._debug_log(
                f"Subscribed {subscriber_display} to {event_type.name} events"
            )

    def subscribe_all(
        self,
        subscriber: EventSubscriber,
        subscriber_name: Optional[str] = None
    ) -> None:
        """Subscribe to all events (universal subscriber)."""
        with self._lock:
            self._universal_subscribers.append(subscriber)

            subscriber_display = subscriber_name or getattr(subscriber, '__name__', 'anonymous')
            self._debug_log(f"Subscribed {subscriber_display} to ALL events")

    def unsubscribe(
        self,
        event_type: "EventType",
        subscriber: EventSubscriber
    ) -> bool:
        """Unsubscribe from events of a specific type.

        Returns:
            True if subscriber was found and removed
        """
        with self._lock:
            try:
                self._subscribers[event_type].remove(subscriber)
                self._debug_log(f"Unsubscribed from {event_type.name} events")
                return True
            except ValueError:
                return False

    def unsubscribe_all(self, subscriber: EventSubscriber) -> bool:
        """Unsubscribe a universal subscriber.

        Returns:
            True if subscriber was found and removed
        """
        with self._lock:
            try:
                self._universal_subscribers.remove(subscriber)
                self._debug_log("Unsubscribed from ALL events")
                return True
            except ValueError:
                return False

    def publish(
        self,
        event: "GameEvent",
        priority: EventPriority = EventPriority.NORMAL,
        source: Optional[str] = None
    ) -> None:
        """Queue an event for processing.

        Args:
            event: The event to publish
            priority: Processing priority for the event
            source: Optional source identifier for debugging
        """
        with self._lock:
            queued_event = QueuedEvent(
                event=event,
                priority=priority,
                source=source or "unknown"
            )

            self._event_queue.append(queued_event)
            self._events_published += 1

            self._debug_log(
                f"Published {event.__class__.__name__} (priority: {priority.name}, source: {queued_event.source})"
            )

    def publish_immediate(
        self,
        event: "GameEvent",
        source: Optional[str] = None
    ) -> None:
        """Publish and immediately deliver an event, bypassing the queue.

        Only subscribers of the event type receive it. Universal subscribers
        (presentation sinks) see the queued stream in order and are skipped,
        so an immediate event can never overtake the queued events that led
        to it.
        """
        queued_event = QueuedEvent(
            event=event,
            priority=EventPriority.CRITICAL,
            source=source or "immediate"
        )

        with self._lock:
            self._events_published += 1

        self._process_event(queued_event, include_universal=False)

    def process_events(self, max_events: Optional[int] = None) -> int:
        """Process queued events.

        Events published by subscribers while processing are picked up in the
        same call, so the queue is empty on return unless max_events stopped it.

        Args:
            max_events: Maximum number of events to process (None for all)

        Returns:
            Number of events processed
        """
        processed_count = 0

        while True:
            with self._lock:
                if not self._event_queue:
                    break
                sorted_events = sorted(self._event_queue)
                self._event_queue.clear()

            for index, queued_event in enumerate(sorted_events):
                if max_events is not None and processed_count >= max_events:
                    # Put remaining events back in queue
                    with self._lock:
                        self._event_queue.extendleft(reversed(sorted_events[index:]))
                    return processed_count

                self._process_event(queued_event)
                processed_count += 1

        return processed_count

    def _process_event(self, queued_event: QueuedEvent, include_universal: bool = True) -> None:
        """Deliver a single event to its subscribers."""
        event = queued_event.event

        with self._lock:
            self._event_history.append(queued_event)
            self._events_processed += 1
            subscribers = list(self._subscribers.get(event.event_type, []))
            universal = list(self._universal_subscribers) if include_universal else []

        self._debug_log(
            f"Processing {event.__class__.__name__} from {queued_event.source} "
            f"(t={event.timeline_time}ms)"
        )

        for subscriber in subscribers + universal:
            try:
                subscriber(event)
            except Exception as e:
                self._subscriber_errors += 1
                self._debug_log(
                    f"Error in subscriber {getattr(subscriber, '__name__', 'anonymous')}: {e}"
                )

    def clear_queue(self) -> int:
        """Clear all queued events.

        Returns:
            Number of events that were cleared
        """
        with self._lock:
            count = len(self._event_queue)
            self._event_queue.clear()
            self._debug_log(f"Cleared {count} queued events")
            return count

    def get_statistics(self) -> dict[str, Any]:
        with self._lock:
            return {
                'events_published': self._events_published,
                'events_processed': self._events_processed,
                'events_queued': len(self._event_queue),
                'subscriber_errors': self._subscriber_errors,
                'subscribers_count': sum(len(subs) for subs in self._subscribers.values()),
                'universal_subscribers_count': len(self._universal_subscribers),
                'event_history_size': len(self._event_history)
            }

    def get_recent_events(self, count: int = 10) -> list[dict[str, Any]]:
        """Get recent events for debugging."""
        with self._lock:
            recent = list(self._event_history)[-count:]

            return [
                {
                    'event_type': queued.event.__class__.__name__,
                    'timeline_time': queued.event.timeline_time,
                    'priority': queued.priority.name,
                    'source': queued.source,
                }
                for queued in recent
            ]

    def has_queued_events(self) -> bool:
        with self._lock:
            return len(self._event_queue) > 0

    def shutdown(self) -> None:
        """Shutdown the event manager and clear all data."""
        with self._lock:
            self._subscribers.clear()
            self._universal_subscribers.clear()
            self._event_queue.clear()
            self._event_history.clear()

"""Event system for tracking refreshes and searches."""

import logging
import queue
import statistics
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Types of events that can be emitted."""

    # Refresh events
    REFRESH_STARTED = auto()
    REFRESH_COMPLETED = auto()
    REFRESH_FAILED = auto()
    REFRESH_SKIPPED = auto()
    MIRROR_FAILED = auto()
    CALLBACK_FAILED = auto()

    # Search events
    SEARCH_COMPLETED = auto()


@dataclass
class Event:
    """Event data structure."""

    type: EventType
    timestamp: datetime
    component: str
    description: Optional[str] = None
    duration_ms: Optional[float] = None
    success: bool = True
    error: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary."""
        return {
            "type": self.type.name,
            "timestamp": self.timestamp.isoformat(),
            "component": self.component,
            "description": self.description,
            "duration_ms": self.duration_ms,
            "success": self.success,
            "error": self.error,
            "metadata": self.metadata or {},
        }


class EventManager:
    """Manages event subscriptions with thread safety."""

    def __init__(self, max_events: int = 1000, max_queue_size: int = 1000):
        """Initialize event manager.

        Args:
            max_events: Maximum number of events to store in history
            max_queue_size: Maximum size of event queue
        """
        self._subscriber_callbacks: Dict[int, Callable[[Event], None]] = {}
        self._events: List[Event] = []
        self._max_events = max_events

        # Thread safety
        self._lock = threading.RLock()
        self._event_queue: "queue.Queue[Event]" = queue.Queue(maxsize=max_queue_size)
        self._worker_thread: Optional[threading.Thread] = None
        self._running = False

        self._start_worker()

    def _start_worker(self) -> None:
        """Start the event processing worker thread."""
        if self._worker_thread is not None:
            return

        self._running = True
        self._worker_thread = threading.Thread(
            target=self._process_events,
            name="EventProcessor",
            daemon=True,
        )
        self._worker_thread.start()

    def _process_events(self) -> None:
        """Process events from queue and notify subscribers."""
        while self._running:
            try:
                event = self._event_queue.get(timeout=0.1)
            except queue.Empty:
                continue
            try:
                self._handle_event(event)
            except Exception as e:
                logger.error(f"Error processing event: {e}")
            finally:
                self._event_queue.task_done()

    def _handle_event(self, event: Event) -> None:
        """Handle a single event."""
        with self._lock:
            self._events.append(event)
            if len(self._events) > self._max_events:
                self._events = self._events[-self._max_events:]

            dead_subscribers = set()
            for subscriber_id, callback in self._subscriber_callbacks.items():
                try:
                    callback(event)
                except Exception as e:
                    logger.error(f"Error in subscriber {subscriber_id}: {e}")
                    dead_subscribers.add(subscriber_id)

            for subscriber_id in dead_subscribers:
                self._subscriber_callbacks.pop(subscriber_id, None)

    def subscribe(self, callback: Callable[[Event], None]) -> int:
        """Subscribe to events.

        Args:
            callback: Function to call when events occur

        Returns:
            Subscriber ID for unsubscribing
        """
        with self._lock:
            subscriber_id = id(callback)
            self._subscriber_callbacks[subscriber_id] = callback
            return subscriber_id

    def unsubscribe(self, callback: Callable[[Event], None]) -> None:
        """Unsubscribe from events.

        Args:
            callback: Previously subscribed callback function
        """
        with self._lock:
            self._subscriber_callbacks.pop(id(callback), None)

    def emit(self, event: Event) -> None:
        """Emit an event to all subscribers.

        Args:
            event: Event to emit
        """
        try:
            self._event_queue.put_nowait(event)
        except queue.Full:
            logger.error("Event queue full, dropping event")

    def flush(self) -> None:
        """Block until every emitted event has been handled."""
        if self._running:
            self._event_queue.join()

    def get_recent_events(
        self, minutes: int = 5, event_type: Optional[EventType] = None
    ) -> List[Event]:
        """Get events from the last N minutes.

        Args:
            minutes: Number of minutes to look back
            event_type: Only return events of this type

        Returns:
            List of recent events
        """
        with self._lock:
            cutoff = datetime.now() - timedelta(minutes=minutes)
            return [
                e
                for e in self._events
                if e.timestamp >= cutoff and (event_type is None or e.type == event_type)
            ]

    def get_average_search_time(self) -> float:
        """Calculate average search time from recent events.

        Returns:
            Average search time in seconds
        """
        durations = [
            e.duration_ms / 1000.0
            for e in self.get_recent_events(event_type=EventType.SEARCH_COMPLETED)
            if e.duration_ms is not None
        ]
        return statistics.mean(durations) if durations else 0.0

    def shutdown(self) -> None:
        """Stop the worker thread."""
        self._running = False
        if self._worker_thread:
            self._worker_thread.join(timeout=1.0)
            self._worker_thread = None


__all__ = ["Event", "EventManager", "EventType"]

"""Monitoring package: metrics and events."""

from .events import Event, EventManager, EventType
from .metrics import MetricsManager

__all__ = ["Event", "EventManager", "EventType", "MetricsManager"]

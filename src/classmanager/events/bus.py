"""Synchronous event bus for stylesheet and editor events."""

from __future__ import annotations

import threading
from typing import Any, Callable


class EventBus:
    """Synchronous publish-subscribe event bus.

    Listeners subscribe to one event type or to every event. Events are
    dispatched on the emitting thread, in registration order, after the
    listener lists have been copied, so a listener may unsubscribe itself.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listeners: dict[type, list[Callable[[Any], None]]] = {}
        self._global_listeners: list[Callable[[Any], None]] = []

    def subscribe(self, event_type: type, callback: Callable[[Any], None]) -> Callable[[], None]:
        """Register *callback* for *event_type*; returns an unsubscribe function."""
        with self._lock:
            self._listeners.setdefault(event_type, []).append(callback)

        def unsubscribe() -> None:
            with self._lock:
                listeners = self._listeners.get(event_type, [])
                if callback in listeners:
                    listeners.remove(callback)

        return unsubscribe

    def on_all(self, callback: Callable[[Any], None]) -> None:
        """Register a callback that receives every event."""
        with self._lock:
            self._global_listeners.append(callback)

    def emit(self, event: Any) -> None:
        """Dispatch an event to all matching listeners."""
        with self._lock:
            listeners = list(self._global_listeners) + list(self._listeners.get(type(event), []))
        for cb in listeners:
            cb(event)

"""
Page notifications.

The change detector publishes PageContentChanged through an EventBus; the
session and CLI subscribe to it. Listeners are async callables registered per
event class. A listener that keeps failing is dropped so one broken
subscriber cannot stall the polling loop.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Tuple, Type

from .models import ChangeFingerprint, PageSnapshot

logger = logging.getLogger(__name__)

Listener = Callable[[Any], Awaitable[None]]


@dataclass(frozen=True)
class PageContentChanged:
    """Emitted when the page's URL or leading body text changed."""
    snapshot: PageSnapshot
    fingerprint: ChangeFingerprint


class EventBus:
    """
    Delivers events to the listeners registered for their exact class.

    Parameters:
        max_listener_errors (int): Consecutive failures after which a
            listener is unsubscribed.
    """

    def __init__(self, max_listener_errors: int = 5):
        self._listeners: Dict[type, List[Listener]] = defaultdict(list)
        self._failures: Dict[Tuple[type, int], int] = {}
        self._max_listener_errors = max_listener_errors

    def subscribe(self, event_type: Type[Any], listener: Listener) -> None:
        if listener not in self._listeners[event_type]:
            self._listeners[event_type].append(listener)

    def unsubscribe(self, event_type: Type[Any], listener: Listener) -> None:
        if listener in self._listeners.get(event_type, ()):
            self._listeners[event_type].remove(listener)
        self._failures.pop((event_type, id(listener)), None)

    def listeners(self, event_type: Type[Any]) -> List[Listener]:
        """Current listeners for ``event_type``, in subscription order."""
        return list(self._listeners.get(event_type, ()))

    async def emit(self, event: Any) -> None:
        """Await every listener of ``type(event)`` in turn; failures are logged, not raised."""
        event_type = type(event)
        for listener in self.listeners(event_type):
            key = (event_type, id(listener))
            try:
                await listener(event)
            except Exception as e:
                failures = self._failures.get(key, 0) + 1
                self._failures[key] = failures
                logger.error(f"{event_type.__name__} listener failed ({failures}/{self._max_listener_errors}): {e}")
                if failures >= self._max_listener_errors:
                    logger.warning(f"Dropping {event_type.__name__} listener after {failures} consecutive failures")
                    self.unsubscribe(event_type, listener)
            else:
                self._failures.pop(key, None)

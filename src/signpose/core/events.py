"""EventBus for sign playback notifications."""

import logging
from collections import defaultdict
from enum import Enum, auto
from typing import Any, Callable

logger = logging.getLogger(__name__)

Handler = Callable[..., None]


class EventType(Enum):
    # Sign playback
    SIGN_STARTED = auto()         # data: sign (Sign)
    SIGN_COMPLETED = auto()       # data: sign (Sign)
    QUEUE_EMPTY = auto()

    # Playback control
    PLAYBACK_PAUSED = auto()
    PLAYBACK_RESUMED = auto()
    QUEUE_CLEARED = auto()        # data: dropped (int)


class EventBus:
    """Synchronous publish/subscribe, delivered on the publisher's thread.

    Handlers receive the event data as keyword arguments and run in
    subscription order. A handler may unsubscribe itself while being called.
    Exceptions raised by handlers propagate to the publisher.
    """

    def __init__(self):
        self._handlers: dict[EventType, list[Handler]] = defaultdict(list)

    def subscribe(self, event_type: EventType, handler: Handler) -> Handler:
        """Register *handler* and return it."""
        self._handlers[event_type].append(handler)
        return handler

    def unsubscribe(self, event_type: EventType, handler: Handler) -> None:
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def subscriber_count(self, event_type: EventType) -> int:
        return len(self._handlers.get(event_type, ()))

    def publish(self, event_type: EventType, **data: Any) -> None:
        handlers = list(self._handlers.get(event_type, ()))
        logger.debug("%s -> %d handler(s)", event_type.name, len(handlers))
        for handler in handlers:
            handler(**data)

    def clear(self) -> None:
        self._handlers.clear()

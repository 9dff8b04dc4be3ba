from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

SessionHandler = Callable[..., Any]


class SessionEvent(Enum):
    """Lifecycle notifications published by GameSession."""

    STARTED = "session.started"
    # Player reached the cat
    WON = "session.won"
    # A monster caught the player
    LOST = "session.lost"
    RESET = "session.reset"


class EventBus:
    """Per-session dispatcher for ``SessionEvent`` notifications.

    Handlers run synchronously in subscription order and receive the event
    payload as keyword arguments. A failing handler is logged and never stops
    the remaining handlers or the simulation step that emitted the event.
    """

    def __init__(self) -> None:
        self._handlers: Dict[SessionEvent, List[SessionHandler]] = {event: [] for event in SessionEvent}

    def subscribe(self, event: SessionEvent, handler: SessionHandler) -> None:
        if not isinstance(event, SessionEvent):
            raise TypeError(f"expected a SessionEvent, got {event!r}")
        handlers = self._handlers[event]
        if handler in handlers:
            return
        handlers.append(handler)
        logger.debug("Subscribed %s to %s", handler, event.value)

    def emit(self, event: SessionEvent, **payload: Any) -> None:
        handlers = list(self._handlers[event])
        logger.debug("Emitting %s to %d handler(s): %s", event.value, len(handlers), payload)
        for handler in handlers:
            try:
                handler(**payload)
            except Exception:
                logger.exception("Handler %s failed for %s", handler, event.value)

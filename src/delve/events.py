from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, DefaultDict, Dict, List

logger = logging.getLogger(__name__)


MESSAGE = "message"
ENEMY_KILLED = "enemy_killed"
LEVEL_UP = "level_up"
FLOOR_CHANGED = "floor_changed"
GAME_OVER = "game_over"
VICTORY = "victory"
RESTART = "restart"


@dataclass(frozen=True)
class Event:
    """A named notification broadcast by the turn engine.

    Attributes:
        name: Event name, one of the module-level constants.
        payload: Event data; keys depend on the event name.
    """
    name: str
    payload: Dict[str, Any] = field(default_factory=dict)


class EventBus:
    """A small synchronous publish/subscribe bus.

    The presentation layer subscribes to engine events (messages, kills,
    floor changes) without the engine knowing who listens. Callbacks run in
    registration order on the caller's thread.
    """

    def __init__(self) -> None:
        self._subs: DefaultDict[str, List[Callable[[Event], None]]] = defaultdict(list)

    def subscribe(self, event_name: str, callback: Callable[[Event], None]) -> None:
        if not callable(callback):
            raise TypeError("callback must be callable")
        self._subs[event_name].append(callback)
        logger.debug("Subscribed %s to '%s'", getattr(callback, "__name__", str(callback)), event_name)

    def unsubscribe(self, event_name: str, callback: Callable[[Event], None]) -> None:
        """Remove a callback; silently ignores callbacks that were never registered."""
        if event_name in self._subs and callback in self._subs[event_name]:
            self._subs[event_name].remove(callback)
            logger.debug("Unsubscribed %s from '%s'", getattr(callback, "__name__", str(callback)), event_name)

    def publish(self, event_name: str, payload: Dict[str, Any] | None = None) -> None:
        event = Event(name=event_name, payload=dict(payload or {}))
        subs = list(self._subs.get(event_name, []))
        logger.debug("Publishing event '%s' to %d subscribers", event_name, len(subs))
        for cb in subs:
            try:
                cb(event)
            except Exception:  # noqa: BLE001 - log any exception from subscribers
                logger.exception("Unhandled exception in event subscriber for '%s'", event_name)


__all__ = [
    "Event",
    "EventBus",
    "MESSAGE",
    "ENEMY_KILLED",
    "LEVEL_UP",
    "FLOOR_CHANGED",
    "GAME_OVER",
    "VICTORY",
    "RESTART",
]

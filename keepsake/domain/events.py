"""Profile change notifications for live displays."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, DefaultDict, Iterable, Mapping

logger = logging.getLogger(__name__)

EventPayload = Mapping[str, Any]
EventListener = Callable[[EventPayload], Awaitable[None]]

SHARDS_CHANGED = "profile.shards.changed"
EXP_CHANGED = "profile.exp.changed"
LEVEL_UP = "profile.level.up"
INVENTORY_CHANGED = "profile.inventory.changed"
EQUIPMENT_CHANGED = "profile.equipment.changed"
WHEEL_SPUN = "wheel.spin.completed"
WHEEL_RESET = "wheel.cooldown.reset"
ARCADE_COMPLETED = "arcade.game.completed"
LETTER_OPENED = "letters.opened"


class EventBus:
    """Async pub-sub; a failing listener is logged and does not abort the publisher."""

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, list[EventListener]] = defaultdict(list)

    def subscribe(self, event_name: str, listener: EventListener) -> None:
        self._listeners[event_name].append(listener)

    def unsubscribe(self, event_name: str, listener: EventListener) -> None:
        listeners = self._listeners.get(event_name)
        if listeners and listener in listeners:
            listeners.remove(listener)

    async def publish(self, event_name: str, payload: EventPayload) -> None:
        for listener in list(self._listeners.get(event_name, ())):
            try:
                await listener(payload)
            except Exception:
                logger.exception("Listener for '%s' failed.", event_name)

    def listeners(self, event_name: str) -> Iterable[EventListener]:
        return tuple(self._listeners.get(event_name, ()))

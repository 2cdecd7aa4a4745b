"""Ordered fan-out of engine notifications to registered observers."""
from __future__ import annotations

from typing import List, Protocol

from samegame.events.bus import EventBus, EventKind, GameEvent


class GameObserver(Protocol):
    """Interface implemented by anything reacting to engine notifications."""

    def on_game_event(self, event: GameEvent) -> None:
        ...


class ObserverRegistry:
    """Delivers every engine event to observers in registration order.

    The registry holds a single bus subscription per event kind, so observers
    registered here see events in the order they were added. Plain bus
    subscribers keep receiving the same events independently.

    When ``owner`` is given, only events emitted with ``owner=`` that same
    object are delivered, so several engines can share one bus.
    """

    def __init__(self, event_bus: EventBus, owner: object | None = None) -> None:
        self.event_bus = event_bus
        self.owner = owner
        self._observers: List[GameObserver] = []
        for kind in EventKind:
            self.event_bus.subscribe(kind.value, self._on_event)

    def add(self, observer: GameObserver) -> None:
        if observer in self._observers:
            return
        self._observers.append(observer)

    def remove(self, observer: GameObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def observers(self) -> List[GameObserver]:
        return list(self._observers)

    def __len__(self) -> int:
        return len(self._observers)

    def _on_event(self, sender, **payload) -> None:
        event = payload.get("event")
        if not isinstance(event, GameEvent):
            return
        if self.owner is not None and payload.get("owner") is not self.owner:
            return
        # Iterate over a copy so an observer can detach itself while handling.
        for observer in list(self._observers):
            observer.on_game_event(event)

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from blinker import Signal


class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of unreferenced observers alive.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


class EventKind(Enum):
    """Closed vocabulary of notifications published by the engine."""
    ROUND_INITIALIZED = "round_initialized"
    ROUND_BEGUN = "round_begun"
    ROUND_RESET = "round_reset"
    ROUND_RESUMED = "round_resumed"
    MOVE_PREVIEWED = "move_previewed"
    NEXT_MOVE_READY = "next_move_ready"
    WON = "won"
    LOST = "lost"
    HINT_READY = "hint_ready"
    TEXT_MESSAGE = "text_message"
    INPUT_REQUESTED = "input_requested"
    LOAD_REQUESTED = "load_requested"
    SCOREBOARD_REQUESTED = "scoreboard_requested"
    SCOREBOARD_CLEAR_REQUESTED = "scoreboard_clear_requested"
    QUIT_REQUESTED = "quit_requested"
    MUTE_TOGGLED = "mute_toggled"


@dataclass(frozen=True, slots=True)
class GameEvent:
    """A notification kind plus its optional free-text payload."""
    kind: EventKind
    message: Optional[str] = None


# ============================================================================
# ROUND LIFECYCLE
# ============================================================================
EVENT_ROUND_INITIALIZED = EventKind.ROUND_INITIALIZED.value  # payload: event=GameEvent, message=None
EVENT_ROUND_BEGUN = EventKind.ROUND_BEGUN.value              # payload: event=GameEvent, message=None
EVENT_ROUND_RESET = EventKind.ROUND_RESET.value              # payload: event=GameEvent, message=None
EVENT_ROUND_RESUMED = EventKind.ROUND_RESUMED.value          # payload: event=GameEvent, message=None


# ============================================================================
# MOVES
# ============================================================================
EVENT_MOVE_PREVIEWED = EventKind.MOVE_PREVIEWED.value    # payload: event=GameEvent, message=None
EVENT_NEXT_MOVE_READY = EventKind.NEXT_MOVE_READY.value  # payload: event=GameEvent, message=None
EVENT_WON = EventKind.WON.value                          # payload: event=GameEvent, message=str
EVENT_LOST = EventKind.LOST.value                        # payload: event=GameEvent, message=str
EVENT_HINT_READY = EventKind.HINT_READY.value            # payload: event=GameEvent, message=None


# ============================================================================
# MENU & UI REQUESTS
# ============================================================================
EVENT_TEXT_MESSAGE = EventKind.TEXT_MESSAGE.value                              # payload: event=GameEvent, message=str
EVENT_INPUT_REQUESTED = EventKind.INPUT_REQUESTED.value                        # payload: event=GameEvent, message=str
EVENT_LOAD_REQUESTED = EventKind.LOAD_REQUESTED.value                          # payload: event=GameEvent, message=None
EVENT_SCOREBOARD_REQUESTED = EventKind.SCOREBOARD_REQUESTED.value              # payload: event=GameEvent, message=None
EVENT_SCOREBOARD_CLEAR_REQUESTED = EventKind.SCOREBOARD_CLEAR_REQUESTED.value  # payload: event=GameEvent, message=None
EVENT_QUIT_REQUESTED = EventKind.QUIT_REQUESTED.value                          # payload: event=GameEvent, message=None
EVENT_MUTE_TOGGLED = EventKind.MUTE_TOGGLED.value                              # payload: event=GameEvent, message=None

"""Text renderer drawing the grid and round information to a stream."""
from __future__ import annotations

import sys
from typing import List, Optional, TextIO

from samegame.components.game_state import LifecycleState
from samegame.constants import TILE_SYMBOLS
from samegame.events.bus import EventKind, GameEvent
from samegame.systems.game_engine import GameEngine

CLEAR_SCREEN = "\033[H\033[2J"


def _ruler(width: int) -> str:
    return "".join(f"{col % 10} " for col in range(width))


def _symbol(value: int) -> str:
    if 0 <= value < len(TILE_SYMBOLS):
        return TILE_SYMBOLS[value]
    return "?"


class ConsoleRenderer:
    """Observer turning engine events into text frames.

    Holds a non-owning reference to the engine and only reads its query
    surface. The last frame is kept in ``frame`` so callers can inspect it.
    """

    def __init__(self, engine: GameEngine, stream: TextIO | None = None, *, clear_screen: bool = False) -> None:
        self.engine = engine
        self.stream = stream if stream is not None else sys.stdout
        self.clear_screen = clear_screen
        self.frame: str = ""
        self._end_message: Optional[str] = None

    def on_game_event(self, event: GameEvent) -> None:
        match event.kind:
            case EventKind.NEXT_MOVE_READY | EventKind.HINT_READY | EventKind.MOVE_PREVIEWED:
                self.frame = self.build_board_frame(event.message)
            case EventKind.ROUND_BEGUN | EventKind.ROUND_RESET | EventKind.ROUND_RESUMED:
                # A new or reloaded round drops the previous outcome.
                self._end_message = None
                self.frame = self.build_board_frame(event.message)
            case EventKind.INPUT_REQUESTED:
                if self.engine.state == LifecycleState.PRESTART or not self.engine.has_grid:
                    # Start menu: no grid to show yet.
                    self.frame = event.message or ""
                else:
                    self.frame = self.build_board_frame(event.message)
            case EventKind.TEXT_MESSAGE:
                self.frame = event.message or ""
            case EventKind.WON | EventKind.LOST:
                self._end_message = event.message
                self.frame = self.build_board_frame(None)
            case _:
                return
        self._show()

    def build_board_frame(self, prompt: str | None) -> str:
        tiles = self.engine.tiles()
        height = self.engine.grid_height
        width = self.engine.grid_width
        score = self.engine.score
        pending = self.engine.pending_increment
        best_move = self.engine.best_move

        lines: List[str] = []
        gain = f" + {pending}" if pending > 0 else ""
        lines.append(f"    Score: {score}{gain}")
        lines.append("    " + _ruler(width))
        lines.append("  ┏" + "━━" * width + "━┓")
        for row in range(height):
            cells = tiles[row] if row < len(tiles) else []
            body = "".join(
                (_symbol(cells[col].value) if col < len(cells) else " ") + " "
                for col in range(width)
            )
            lines.append(f"{row % 10} ┃ {body}┃ {row}")
        lines.append("  ┗" + "━━" * width + "━┛")
        lines.append("    " + _ruler(width))
        if best_move is not None:
            lines.append(f"    Best hit: [{best_move[0]}, {best_move[1]}]")
        else:
            lines.append("")
        frame = "\n".join(lines) + "\n"
        frame += self._end_message if self._end_message is not None else "\n"
        if prompt:
            frame += prompt
        return frame

    def _show(self) -> None:
        if self.clear_screen:
            self.stream.write(CLEAR_SCREEN)
        self.stream.write(self.frame)
        if not self.frame.endswith("\n"):
            self.stream.write("\n")
        self.stream.flush()

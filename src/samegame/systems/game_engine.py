"""Round lifecycle, move protocol and hint search for grid puzzles."""
from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional, Tuple

from esper import World

from samegame.components.game_state import (
    NO_MOVE,
    Difficulty,
    GameState,
    LifecycleState,
)
from samegame.components.grid import Grid
from samegame.components.tile import TileView
from samegame.events.bus import EventBus, EventKind, GameEvent
from samegame.events.observers import GameObserver, ObserverRegistry
from samegame.rules.base import GameRules
from samegame.utils.game_state import get_game_state, set_lifecycle

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


class SnapshotError(ValueError):
    """Raised when a saved snapshot cannot be turned back into engine state."""


class GameEngine:
    """Owns the grid and round state and publishes what happened to observers.

    Every operation runs to completion, including the synchronous fan-out to
    observers, before returning. Malformed moves never raise: they leave the
    engine untouched and publish nothing, so callers look at
    ``selected_count`` or ``pending_increment`` to see that nothing happened.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        rules: GameRules,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.rules = rules
        self._rng = rng or getattr(world, "random", None) or random.Random()
        self._observers = ObserverRegistry(event_bus, owner=self)
        self._board_entity: int | None = None
        get_game_state(world)

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def add_observer(self, observer: GameObserver) -> None:
        self._observers.add(observer)

    def remove_observer(self, observer: GameObserver) -> None:
        self._observers.remove(observer)

    def observers(self) -> List[GameObserver]:
        return self._observers.observers()

    # ------------------------------------------------------------------
    # Round lifecycle
    # ------------------------------------------------------------------

    def new_game(self, difficulty: Difficulty | None = None) -> None:
        """Start a fresh round and publish ROUND_BEGUN."""
        self._start_round(difficulty)
        self._notify(EventKind.ROUND_BEGUN)

    def reset(self, difficulty: Difficulty | None = None) -> None:
        """Start a fresh round, optionally at a new difficulty, and publish ROUND_RESET."""
        self._start_round(difficulty)
        self._notify(EventKind.ROUND_RESET)

    def set_difficulty(self, difficulty: Difficulty) -> None:
        self._state().difficulty = difficulty

    def _start_round(self, difficulty: Difficulty | None) -> None:
        state = self._state()
        if difficulty is not None:
            state.difficulty = difficulty
        state.clear_round()
        self._install_grid(self.rules.generate_grid(state.difficulty, self._rng))
        set_lifecycle(self.world, LifecycleState.ONGOING)
        logger.debug("round started at %s difficulty", state.difficulty.name)

    # ------------------------------------------------------------------
    # Moves
    # ------------------------------------------------------------------

    def select_at(self, row: int, col: int) -> None:
        """Preview the group at (row, col); groups under two tiles are ignored."""
        grid = self._grid()
        if grid is None:
            return
        state = self._state()
        state.best_move = None
        count = grid.select_group(row, col)
        if count < 2:
            state.pending_increment = 0
            return
        state.pending_increment = self.rules.score_increment(count)
        self._notify(EventKind.MOVE_PREVIEWED)

    def validate_selection(self) -> None:
        """Commit the current selection, then publish exactly one of WON, LOST or NEXT_MOVE_READY."""
        grid = self._grid()
        if grid is None or grid.selected_count < 2:
            return
        state = self._state()
        state.score += max(state.pending_increment, 0)
        state.pending_increment = 0
        state.best_move = None
        removed = grid.remove_selected()
        logger.debug("removed %d tiles, score is now %d", removed, state.score)

        if self.rules.is_won(grid):
            set_lifecycle(self.world, LifecycleState.WON)
            self._notify(EventKind.WON, self.rules.win_message)
        elif self.rules.is_lost(grid):
            set_lifecycle(self.world, LifecycleState.LOST)
            self._notify(EventKind.LOST, self.rules.lose_message)
        else:
            self._notify(EventKind.NEXT_MOVE_READY)

    def find_best_move(self) -> Optional[Tuple[int, int]]:
        """Greedy single-move search over every coordinate in row-major order.

        The first coordinate reaching the highest increment wins. Leaves the
        grid unselected, stores the result as ``best_move`` and the increment
        (or ``NO_MOVE``) as ``pending_increment``, then publishes HINT_READY.
        """
        state = self._state()
        best_move: Optional[Tuple[int, int]] = None
        best_increment = NO_MOVE
        grid = self._grid()
        if grid is not None:
            grid.unselect_all()
            for row in range(grid.height):
                for col in range(grid.width):
                    count = grid.select_group(row, col)
                    if count < 2:
                        continue
                    increment = self.rules.score_increment(count)
                    if increment > best_increment:
                        best_increment = increment
                        best_move = (row, col)
            grid.unselect_all()
        state.best_move = best_move
        state.pending_increment = best_increment
        self._notify(EventKind.HINT_READY)
        return best_move

    # ------------------------------------------------------------------
    # Requests relayed to collaborators
    # ------------------------------------------------------------------

    def announce_start(self) -> None:
        self._notify(EventKind.ROUND_INITIALIZED)

    def announce_resume(self) -> None:
        self._notify(EventKind.ROUND_RESUMED)

    def send_text(self, text: str) -> None:
        self._notify(EventKind.TEXT_MESSAGE, text)

    def request_input(self, prompt: str | None) -> None:
        self._notify(EventKind.INPUT_REQUESTED, prompt)

    def request_load(self) -> None:
        self._notify(EventKind.LOAD_REQUESTED)

    def request_scoreboard(self) -> None:
        self._notify(EventKind.SCOREBOARD_REQUESTED)

    def request_scoreboard_clear(self) -> None:
        self._notify(EventKind.SCOREBOARD_CLEAR_REQUESTED)

    def request_quit(self) -> None:
        self._notify(EventKind.QUIT_REQUESTED)

    def toggle_mute(self) -> None:
        state = self._state()
        state.muted = not state.muted
        self._notify(EventKind.MUTE_TOGGLED)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def score(self) -> int:
        return self._state().score

    @property
    def pending_increment(self) -> int:
        return self._state().pending_increment

    @property
    def difficulty(self) -> Difficulty:
        return self._state().difficulty

    @property
    def state(self) -> LifecycleState:
        return self._state().lifecycle

    @property
    def best_move(self) -> Optional[Tuple[int, int]]:
        return self._state().best_move

    @property
    def muted(self) -> bool:
        return self._state().muted

    @property
    def rules_text(self) -> str:
        return self.rules.rules_text

    @property
    def has_grid(self) -> bool:
        return self._grid() is not None

    @property
    def grid_height(self) -> int:
        grid = self._grid()
        return grid.height if grid is not None else 0

    @property
    def grid_width(self) -> int:
        grid = self._grid()
        return grid.width if grid is not None else 0

    @property
    def selected_count(self) -> int:
        grid = self._grid()
        return grid.selected_count if grid is not None else 0

    def tiles(self) -> List[List[TileView]]:
        grid = self._grid()
        return grid.snapshot() if grid is not None else []

    def tiles_flat(self) -> List[TileView]:
        grid = self._grid()
        return grid.flat_snapshot() if grid is not None else []

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def snapshot(self) -> Dict[str, Any]:
        """Plain-data copy of the round; observers are not part of it."""
        state = self._state()
        grid = self._grid()
        return {
            "version": SNAPSHOT_VERSION,
            "state": {
                "lifecycle": state.lifecycle.name,
                "difficulty": state.difficulty.name,
                "score": state.score,
                "pending_increment": state.pending_increment,
                "best_move": list(state.best_move) if state.best_move is not None else None,
                "muted": state.muted,
            },
            "grid": None if grid is None else {
                "height": grid.height,
                "width": grid.width,
                "values": grid.values(),
            },
        }

    def restore(self, snapshot: Dict[str, Any]) -> None:
        """Replace the round with a snapshot; raises SnapshotError and changes nothing if it is malformed."""
        restored_state, restored_grid = _parse_snapshot(snapshot)
        state = self._state()
        state.difficulty = restored_state.difficulty
        state.score = restored_state.score
        state.pending_increment = restored_state.pending_increment
        state.best_move = restored_state.best_move
        state.muted = restored_state.muted
        if restored_grid is not None:
            self._install_grid(restored_grid)
        elif self._board_entity is not None:
            self.world.delete_entity(self._board_entity, immediate=True)
            self._board_entity = None
        set_lifecycle(self.world, restored_state.lifecycle)
        logger.debug("restored %s round with score %d", state.lifecycle.name, state.score)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _state(self) -> GameState:
        return get_game_state(self.world)

    def _grid(self) -> Grid | None:
        if self._board_entity is None:
            return None
        return self.world.component_for_entity(self._board_entity, Grid)

    def _install_grid(self, grid: Grid) -> None:
        if self._board_entity is None:
            self._board_entity = self.world.create_entity(grid)
        else:
            # Adding a component of the same type replaces the old grid.
            self.world.add_component(self._board_entity, grid)

    def _notify(self, kind: EventKind, message: str | None = None) -> None:
        event = GameEvent(kind, message)
        self.event_bus.emit(kind.value, event=event, message=message, owner=self)


def _parse_snapshot(snapshot: Dict[str, Any]) -> Tuple[GameState, Grid | None]:
    try:
        if snapshot.get("version") != SNAPSHOT_VERSION:
            raise SnapshotError(f"unsupported snapshot version {snapshot.get('version')!r}")
        raw_state = snapshot["state"]
        best_move = raw_state.get("best_move")
        state = GameState(
            lifecycle=LifecycleState[raw_state["lifecycle"]],
            difficulty=Difficulty[raw_state["difficulty"]],
            score=int(raw_state["score"]),
            pending_increment=int(raw_state.get("pending_increment", 0)),
            best_move=(int(best_move[0]), int(best_move[1])) if best_move is not None else None,
            muted=bool(raw_state.get("muted", False)),
        )
        raw_grid = snapshot.get("grid")
        grid = None
        if raw_grid is not None:
            grid = Grid.from_values(
                raw_grid["values"],
                height=int(raw_grid["height"]),
                width=int(raw_grid["width"]),
            )
    except SnapshotError:
        raise
    except (AttributeError, KeyError, IndexError, TypeError, ValueError) as exc:
        raise SnapshotError(f"malformed snapshot: {exc}") from exc
    if state.score < 0:
        raise SnapshotError("score cannot be negative")
    if state.pending_increment < 0 and state.pending_increment != NO_MOVE:
        raise SnapshotError(f"pending increment {state.pending_increment} is negative")
    if grid is not None:
        if len(grid.rows) > grid.height or any(len(row) > grid.width for row in grid.rows):
            raise SnapshotError("tile values exceed the grid bounds")
        if any(value < 0 for row in grid.values() for value in row):
            raise SnapshotError("tile values cannot be negative")
    if state.best_move is not None and (grid is None or not grid.in_bounds(*state.best_move)):
        raise SnapshotError(f"best move {state.best_move} lies outside the grid")
    return state, grid

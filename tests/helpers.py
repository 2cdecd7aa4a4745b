from __future__ import annotations

import random
from typing import List, Sequence

from samegame.components.game_state import Difficulty
from samegame.components.grid import Grid
from samegame.events.bus import EventBus, EventKind, GameEvent
from samegame.rules.samegame import SameGameRules
from samegame.systems.game_engine import GameEngine
from samegame.world import create_engine


class FixedGridRules(SameGameRules):
    """SameGame rules that always deal the same layout."""

    def __init__(
        self,
        values: Sequence[Sequence[int]],
        *,
        rows: int | None = None,
        cols: int | None = None,
    ) -> None:
        if rows is None:
            rows = len(values)
        if cols is None:
            cols = max((len(row) for row in values), default=0)
        super().__init__(rows=rows, cols=cols)
        self.values = [list(row) for row in values]

    def generate_grid(self, difficulty: Difficulty, rng: random.Random) -> Grid:
        return Grid.from_values(self.values, height=self.rows, width=self.cols)


class RecordingObserver:
    """Observer keeping every event it receives."""

    def __init__(self) -> None:
        self.events: List[GameEvent] = []

    def on_game_event(self, event: GameEvent) -> None:
        self.events.append(event)

    @property
    def kinds(self) -> List[EventKind]:
        return [event.kind for event in self.events]

    def clear(self) -> None:
        self.events.clear()


def make_engine(
    values: Sequence[Sequence[int]],
    *,
    start: bool = True,
    rows: int | None = None,
    cols: int | None = None,
) -> GameEngine:
    """Engine dealing ``values`` on every new round, started unless ``start`` is False."""
    rules = FixedGridRules(values, rows=rows, cols=cols)
    engine = create_engine(EventBus(), rules=rules, rng=random.Random(7))
    if start:
        engine.new_game()
    return engine


def checkerboard(rows: int, cols: int) -> List[List[int]]:
    return [[(row + col) % 2 for col in range(cols)] for row in range(rows)]


def uniform(rows: int, cols: int, value: int = 0) -> List[List[int]]:
    return [[value] * cols for _ in range(rows)]

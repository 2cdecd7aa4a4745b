from __future__ import annotations

import random
from typing import Protocol

from samegame.components.game_state import Difficulty
from samegame.components.grid import Grid


class GameRules(Protocol):
    """Interface a puzzle variant supplies to the engine.

    Covers grid generation, the scoring rule and the end-of-round predicates.
    Predicates may select tiles while scanning but must leave the grid
    unselected.
    """

    rules_text: str
    win_message: str
    lose_message: str

    def generate_grid(self, difficulty: Difficulty, rng: random.Random) -> Grid:
        ...

    def score_increment(self, selected_count: int) -> int:
        ...

    def is_won(self, grid: Grid) -> bool:
        ...

    def is_lost(self, grid: Grid) -> bool:
        ...

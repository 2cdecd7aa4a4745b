from __future__ import annotations

import random

from samegame.components.game_state import Difficulty
from samegame.components.grid import Grid
from samegame.constants import DEFAULT_PALETTE_SIZE, GRID_COLS, GRID_ROWS, PALETTE_SIZES

WIN_MESSAGE = "You won!\n"
LOSE_MESSAGE = "You lost ...\n"
RULES_TEXT = (
    "                SameGame Rules \n\n"
    "   Click on groups of 2+ same-colored tiles   \n"
    "   > Selected tiles will be removed   \n"
    "   > Remaining tiles collapse left    \n"
    "   > Remaining columns collapse up  \n"
    "   > Game ends when no moves remain   \n"
)


def palette_size_for(difficulty: Difficulty | None) -> int:
    if difficulty is None:
        return DEFAULT_PALETTE_SIZE
    return PALETTE_SIZES.get(difficulty.name, DEFAULT_PALETTE_SIZE)


def has_playable_group(grid: Grid) -> bool:
    """Return True if any coordinate selects at least two tiles.

    Stops at the first playable coordinate and leaves the grid unselected.
    """
    try:
        for row in range(grid.height):
            for col in range(grid.width):
                if grid.select_group(row, col) >= 2:
                    return True
        return False
    finally:
        grid.unselect_all()


class SameGameRules:
    """Rule set of the classic same-colour elimination puzzle."""

    rules_text = RULES_TEXT
    win_message = WIN_MESSAGE
    lose_message = LOSE_MESSAGE

    def __init__(self, rows: int = GRID_ROWS, cols: int = GRID_COLS) -> None:
        self.rows = rows
        self.cols = cols

    def generate_grid(self, difficulty: Difficulty, rng: random.Random) -> Grid:
        palette = list(range(palette_size_for(difficulty)))
        return Grid.generate(self.rows, self.cols, palette, rng)

    def score_increment(self, selected_count: int) -> int:
        # A pair is a legal move worth nothing.
        if selected_count < 3:
            return 0
        return (selected_count - 2) ** 2

    def is_won(self, grid: Grid) -> bool:
        return grid.is_empty()

    def is_lost(self, grid: Grid) -> bool:
        if grid.is_empty():
            return False
        return not has_playable_group(grid)

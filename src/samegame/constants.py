from pathlib import Path

GRID_ROWS = 10
GRID_COLS = 15

# Number of distinct tile values per difficulty tier; unknown tiers use the default.
PALETTE_SIZES = {
    "EASY": 2,
    "MEDIUM": 3,
    "HARD": 4,
}
DEFAULT_PALETTE_SIZE = 3

# Save files written by the persistence system.
SAVE_DIR = Path("tmp")
SAVE_FILENAME = "save.json"
SCORES_FILENAME = "scores.json"

# Console rendering: one symbol per tile value.
TILE_SYMBOLS = ("o", "x", "#", "$")

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from samegame.components.tile import Tile, TileView

Position = Tuple[int, int]

# Flood fill push order: up, down, left, right.
NEIGHBOUR_OFFSETS: Tuple[Position, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


@dataclass(slots=True)
class Grid:
    """Owned 2-D container of tiles with selection and removal operations.

    Rows are lists of tiles. After a removal, tiles left in a row shift toward
    column 0 and rows left without tiles are dropped, so later rows move up.
    ``height`` and ``width`` keep the bounds the grid was created with; rows
    may be shorter than ``width`` and there may be fewer than ``height`` rows.
    """
    height: int
    width: int
    rows: List[List[Tile]] = field(default_factory=list)
    _selected_count: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        # The grid always spans at least one cell.
        self.height = self.height if self.height > 0 else 1
        self.width = self.width if self.width > 0 else 1
        self._selected_count = sum(1 for row in self.rows for tile in row if tile.selected)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def generate(
        cls,
        height: int,
        width: int,
        palette: Sequence[int],
        rng: random.Random | None = None,
    ) -> "Grid":
        """Fill a ``height`` x ``width`` grid with values drawn uniformly from ``palette``."""
        if not palette:
            raise ValueError("palette must contain at least one value")
        rng = rng or random.Random()
        grid = cls(height=height, width=width)
        grid.rows = [
            [Tile(rng.choice(palette)) for _ in range(grid.width)]
            for _ in range(grid.height)
        ]
        return grid

    @classmethod
    def from_values(
        cls,
        values: Sequence[Sequence[int]],
        *,
        height: int | None = None,
        width: int | None = None,
    ) -> "Grid":
        """Build a grid from nested values; bounds default to the data's extent."""
        rows = [[Tile(int(value)) for value in row] for row in values if len(row) > 0]
        if height is None:
            height = len(rows)
        if width is None:
            width = max((len(row) for row in rows), default=0)
        return cls(height=height, width=width, rows=rows)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def selected_count(self) -> int:
        return self._selected_count

    def is_empty(self) -> bool:
        return not self.rows

    def tile_count(self) -> int:
        return sum(len(row) for row in self.rows)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def tile_at(self, row: int, col: int) -> Optional[Tile]:
        if row < 0 or col < 0:
            return None
        if row >= len(self.rows):
            return None
        tiles = self.rows[row]
        if col >= len(tiles):
            return None
        return tiles[col]

    def values(self) -> List[List[int]]:
        return [[tile.value for tile in row] for row in self.rows]

    def snapshot(self) -> List[List[TileView]]:
        """Deep copy of the tiles; the live rows never leave the grid."""
        return [[tile.view() for tile in row] for row in self.rows]

    def flat_snapshot(self) -> List[TileView]:
        return [tile.view() for row in self.rows for tile in row]

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select_group(self, row: int, col: int) -> int:
        """Select the connected same-value group containing (row, col).

        Returns the number of selected tiles, which is never 1: a lone tile
        is unselected again since a move needs at least two tiles.
        """
        self.unselect_all()
        target = self.tile_at(row, col)
        if target is None:
            return 0
        stack: List[Position] = [(row, col)]
        count = 0
        while stack:
            r, c = stack.pop()
            tile = self.tile_at(r, c)
            if tile is None:
                continue
            if tile.selected or not tile.same_value(target):
                continue
            tile.select()
            count += 1
            for dr, dc in NEIGHBOUR_OFFSETS:
                stack.append((r + dr, c + dc))
        if count == 1:
            target.unselect()
            count = 0
        self._selected_count = count
        return count

    def unselect_all(self) -> None:
        for row in self.rows:
            for tile in row:
                tile.unselect()
        self._selected_count = 0

    def selected_positions(self) -> List[Position]:
        return [
            (r, c)
            for r, row in enumerate(self.rows)
            for c, tile in enumerate(row)
            if tile.selected
        ]

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------

    def remove_selected(self) -> int:
        """Delete selected tiles and compact; returns how many were removed."""
        if not self._selected_count:
            return 0
        removed = 0
        compacted: List[List[Tile]] = []
        for row in self.rows:
            kept = [tile for tile in row if not tile.selected]
            removed += len(row) - len(kept)
            if kept:
                compacted.append(kept)
        self.rows = compacted
        self._selected_count = 0
        return removed

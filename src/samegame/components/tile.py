from dataclasses import dataclass
from typing import NamedTuple


class TileView(NamedTuple):
    """Read-only copy of a tile handed out to observers."""
    value: int
    selected: bool


@dataclass(slots=True)
class Tile:
    """Single grid cell: a colour class and a selection flag.

    ``value`` is fixed once the tile exists; only ``selected`` changes.
    """
    value: int
    selected: bool = False

    def __setattr__(self, name, value):
        if name == "value" and hasattr(self, "value"):
            raise AttributeError("tile value cannot change after creation")
        object.__setattr__(self, name, value)

    def select(self) -> None:
        self.selected = True

    def unselect(self) -> None:
        self.selected = False

    def same_value(self, other: "Tile") -> bool:
        return self.value == other.value

    def copy(self) -> "Tile":
        return Tile(self.value, self.selected)

    def view(self) -> TileView:
        return TileView(self.value, self.selected)

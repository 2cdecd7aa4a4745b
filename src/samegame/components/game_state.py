"""Game state resource describing the engine's lifecycle and score."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple

# Pending increment left behind by a hint request that found no move.
NO_MOVE = -1


class LifecycleState(Enum):
    """Coarse state machine of a round."""
    PRESTART = auto()
    ONGOING = auto()
    WON = auto()
    LOST = auto()

    @property
    def finished(self) -> bool:
        return self in (LifecycleState.WON, LifecycleState.LOST)


class Difficulty(Enum):
    """Difficulty tiers controlling grid generation."""
    EASY = auto()
    MEDIUM = auto()
    HARD = auto()

    @classmethod
    def parse(cls, text: str | None) -> Optional["Difficulty"]:
        """Accept a tier name or its first letter, case-insensitively."""
        if not text:
            return None
        key = text.strip().lower()
        for level in cls:
            name = level.name.lower()
            if key == name or key == name[0]:
                return level
        return None


@dataclass
class GameState:
    """Singleton component storing score, difficulty and lifecycle of the round."""
    lifecycle: LifecycleState = LifecycleState.PRESTART
    difficulty: Difficulty = Difficulty.EASY
    score: int = 0
    pending_increment: int = 0
    best_move: Optional[Tuple[int, int]] = None
    muted: bool = False

    def clear_round(self) -> None:
        self.score = 0
        self.pending_increment = 0
        self.best_move = None

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List

from samegame.constants import SAVE_DIR, SAVE_FILENAME, SCORES_FILENAME
from samegame.events.bus import EventKind, GameEvent
from samegame.systems.game_engine import GameEngine, SnapshotError

logger = logging.getLogger(__name__)


def build_scoreboard(scores: List[int]) -> str:
    lines = ["Scoreboard", ""]
    lines.extend(f"\t{rank}. {score}" for rank, score in enumerate(scores, start=1))
    return "\n".join(lines) + "\n"


class PersistenceSystem:
    """Saves the running round and keeps the scoreboard on disk.

    Reacts to engine events: saves after each committed move or new round,
    drops the save when a round ends, records winning scores, and answers
    load/scoreboard requests. File problems are reported to the player as
    text messages and never propagate into the engine.
    """

    def __init__(
        self,
        engine: GameEngine,
        *,
        save_path: Path | None = None,
        scores_path: Path | None = None,
    ) -> None:
        self.engine = engine
        self.save_path = Path(save_path) if save_path is not None else SAVE_DIR / SAVE_FILENAME
        self.scores_path = Path(scores_path) if scores_path is not None else SAVE_DIR / SCORES_FILENAME

    # Event handlers -----------------------------------------------------

    def on_game_event(self, event: GameEvent) -> None:
        match event.kind:
            case EventKind.ROUND_BEGUN | EventKind.ROUND_RESET | EventKind.NEXT_MOVE_READY:
                self.save_game()
            case EventKind.LOAD_REQUESTED:
                self.load_game()
            case EventKind.SCOREBOARD_REQUESTED:
                self.show_scores()
            case EventKind.SCOREBOARD_CLEAR_REQUESTED:
                self.clear_scores()
            case EventKind.LOST:
                self.delete_save()
            case EventKind.WON:
                self.delete_save()
                self.add_score(self.engine.score)
            case _:
                return

    # Saved round --------------------------------------------------------

    @property
    def has_save(self) -> bool:
        return self.save_path.exists()

    def save_game(self) -> bool:
        try:
            self.save_path.parent.mkdir(parents=True, exist_ok=True)
            with self.save_path.open("w", encoding="utf-8") as handle:
                json.dump(self.engine.snapshot(), handle, indent=2)
        except OSError as exc:
            logger.warning("could not save game to %s: %s", self.save_path, exc)
            self.engine.send_text("Failed to save the game.\n")
            return False
        return True

    def load_game(self) -> bool:
        if not self.save_path.exists():
            self.engine.send_text("No game to load.\n")
            return False
        try:
            with self.save_path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
            if not isinstance(payload, dict):
                raise SnapshotError("saved game is not an object")
            self.engine.restore(payload)
        except (OSError, json.JSONDecodeError, SnapshotError) as exc:
            logger.warning("could not load game from %s: %s", self.save_path, exc)
            self.engine.send_text("Error while loading game.\n")
            return False
        self.engine.send_text("Game loaded!\n")
        self.engine.announce_resume()
        return True

    def delete_save(self) -> None:
        try:
            self.save_path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("could not delete %s: %s", self.save_path, exc)

    # Scoreboard ---------------------------------------------------------

    def load_scores(self) -> List[int]:
        """Read saved scores, treating a missing or unreadable file as empty."""
        try:
            with self.scores_path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except FileNotFoundError:
            return []
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("ignoring unreadable scoreboard %s: %s", self.scores_path, exc)
            return []
        if not isinstance(payload, list):
            return []
        return [int(score) for score in payload if isinstance(score, int)]

    def add_score(self, score: int) -> None:
        scores = self.load_scores()
        scores.append(score)
        scores.sort(reverse=True)
        try:
            self.scores_path.parent.mkdir(parents=True, exist_ok=True)
            with self.scores_path.open("w", encoding="utf-8") as handle:
                json.dump(scores, handle)
        except OSError as exc:
            logger.warning("could not save scoreboard to %s: %s", self.scores_path, exc)
            self.engine.send_text("Failed to save the score.\n")

    def show_scores(self) -> None:
        if not self.scores_path.exists():
            self.engine.send_text("No scores to load.\n")
            return
        try:
            with self.scores_path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
            scores = [int(score) for score in payload]
        except (OSError, json.JSONDecodeError, TypeError, ValueError) as exc:
            logger.warning("could not read scoreboard %s: %s", self.scores_path, exc)
            self.engine.send_text("Error while loading scores.\n")
            return
        self.engine.send_text(build_scoreboard(scores))

    def clear_scores(self) -> None:
        if not self.scores_path.exists():
            self.engine.send_text("No scoreboard to clear!\n")
            return
        try:
            self.scores_path.unlink()
        except OSError as exc:
            logger.warning("could not delete %s: %s", self.scores_path, exc)
            self.engine.send_text("Failed to clear the scoreboard.\n")
            return
        self.engine.send_text("Scoreboard cleared!\n")

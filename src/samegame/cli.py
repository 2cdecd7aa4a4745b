"""Console entry point wiring the engine to its text collaborators."""
from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import Sequence, TextIO

from samegame.components.game_state import Difficulty
from samegame.constants import SAVE_DIR, SAVE_FILENAME, SCORES_FILENAME
from samegame.events.bus import EventBus
from samegame.rendering.console_renderer import ConsoleRenderer
from samegame.systems.console_controller import ConsoleController
from samegame.systems.game_engine import GameEngine
from samegame.systems.persistence_system import PersistenceSystem
from samegame.world import create_engine


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="samegame", description="Play SameGame in the terminal.")
    parser.add_argument(
        "--difficulty",
        choices=[level.name.lower() for level in Difficulty],
        default="easy",
        help="difficulty preselected before the first round",
    )
    parser.add_argument("--save-dir", type=Path, default=SAVE_DIR, help="directory for the save and scoreboard files")
    parser.add_argument("--seed", type=int, default=None, help="seed for grid generation")
    parser.add_argument("--log-level", default="WARNING", help="logging level (DEBUG, INFO, ...)")
    parser.add_argument("--no-clear", action="store_true", help="do not clear the terminal between frames")
    return parser


def build_game(
    *,
    difficulty: Difficulty = Difficulty.EASY,
    save_dir: Path = SAVE_DIR,
    seed: int | None = None,
    output: TextIO | None = None,
    clear_screen: bool = False,
) -> GameEngine:
    """Create an engine with persistence and console rendering attached."""
    engine = create_engine(EventBus(), difficulty=difficulty, rng=random.Random(seed))
    engine.add_observer(
        PersistenceSystem(
            engine,
            save_path=save_dir / SAVE_FILENAME,
            scores_path=save_dir / SCORES_FILENAME,
        )
    )
    engine.add_observer(ConsoleRenderer(engine, output, clear_screen=clear_screen))
    return engine


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    engine = build_game(
        difficulty=Difficulty[args.difficulty.upper()],
        save_dir=args.save_dir,
        seed=args.seed,
        clear_screen=not args.no_clear,
    )
    ConsoleController(engine, sys.stdin).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())

import random

from esper import World

from samegame.components.game_state import Difficulty, GameState
from samegame.events.bus import EventBus
from samegame.rules.base import GameRules
from samegame.rules.samegame import SameGameRules
from samegame.systems.game_engine import GameEngine


def create_world(
    *,
    difficulty: Difficulty = Difficulty.EASY,
    rng: random.Random | None = None,
) -> World:
    world = World()
    setattr(world, "random", rng or random.Random())
    # Global round state; the board entity is added once a round starts.
    world.create_entity(GameState(difficulty=difficulty))
    return world


def create_engine(
    event_bus: EventBus | None = None,
    *,
    rules: GameRules | None = None,
    difficulty: Difficulty = Difficulty.EASY,
    rng: random.Random | None = None,
) -> GameEngine:
    """Build a world and an engine in PRESTART, ready for ``new_game``."""
    world = create_world(difficulty=difficulty, rng=rng)
    return GameEngine(
        world,
        event_bus if event_bus is not None else EventBus(),
        rules if rules is not None else SameGameRules(),
        rng=getattr(world, "random", None),
    )

from __future__ import annotations

import logging

from esper import World

from samegame.components.game_state import GameState, LifecycleState

logger = logging.getLogger(__name__)


def get_game_state(world: World) -> GameState:
    """Return the singleton GameState, creating it in PRESTART when missing."""
    for _, state in world.get_component(GameState):
        return state
    state = GameState()
    world.create_entity(state)
    return state


def set_lifecycle(world: World, lifecycle: LifecycleState) -> LifecycleState:
    """Update the round lifecycle and return the previous value."""
    state = get_game_state(world)
    previous = state.lifecycle
    if previous != lifecycle:
        state.lifecycle = lifecycle
        logger.debug("lifecycle %s -> %s", previous.name, lifecycle.name)
    return previous

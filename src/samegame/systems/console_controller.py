"""Command loop driving the engine from a text stream."""
from __future__ import annotations

import logging
import sys
from typing import Iterator, Optional, TextIO

from samegame.components.game_state import Difficulty, LifecycleState
from samegame.rules.samegame import palette_size_for
from samegame.systems.game_engine import GameEngine

logger = logging.getLogger(__name__)

START_MENU_PROMPT = (
    "Type:\n"
    "\t`l` to load last game\n"
    "\t`p` to play a new game\n"
    "\t`sb` to see scoreboard\n"
    "\t`c` to clear scoreboard\n"
)
GAME_INPUT_PROMPT = (
    "Type:\n"
    "\t`s` to select a tile\n"
    "\t`h` to have an hint\n"
    "\t`g` for game rules\n"
    "\t`m` to toggle sound\n"
    "\t`e` to exit\n"
)
END_GAME_PROMPT = "Type `n` for a new game, or `e` to exit.\n"
TILE_INPUT_PROMPT = "Input a row, then a column.\n"


def difficulty_prompt() -> str:
    lines = ["Type:"]
    for level in Difficulty:
        name = level.name.lower()
        lines.append(f"\t`{name[0]}` for {name} difficulty ({palette_size_for(level)} colors)")
    return "\n".join(lines) + "\n"


class ConsoleController:
    """Reads whitespace-separated commands and calls the engine.

    Only the calls allowed in the current lifecycle state are made: the start
    menu offers load, new game and scoreboard actions; a running round offers
    moves, hints, rules and exit; a finished round offers a new round or exit.
    Unknown commands are ignored and the prompt is shown again.
    """

    def __init__(self, engine: GameEngine, input_stream: TextIO | None = None) -> None:
        self.engine = engine
        self.input_stream = input_stream if input_stream is not None else sys.stdin
        self._tokens = self._read_tokens()
        self.running = False

    def _read_tokens(self) -> Iterator[str]:
        for line in self.input_stream:
            for token in line.split():
                yield token.strip().lower()

    def _next_token(self) -> Optional[str]:
        return next(self._tokens, None)

    def _read_int(self) -> Optional[int]:
        token = self._next_token()
        if token is None:
            return None
        try:
            return int(token)
        except ValueError:
            # Unparseable coordinates fall outside the grid.
            return -1

    def _read_difficulty(self) -> Optional[Difficulty]:
        self.engine.request_input(difficulty_prompt())
        while True:
            token = self._next_token()
            if token is None:
                return None
            difficulty = Difficulty.parse(token)
            if difficulty is not None:
                return difficulty

    def run(self) -> None:
        """Loop until the player exits or the input is exhausted."""
        self.running = True
        self.engine.announce_start()
        while self.running:
            if not self.step():
                self.running = False

    def step(self) -> bool:
        """Handle one command; returns False once the loop should stop."""
        state = self.engine.state
        if state == LifecycleState.PRESTART:
            return self._start_menu()
        if state.finished:
            return self._end_menu()
        return self._play()

    def _start_menu(self) -> bool:
        self.engine.request_input(START_MENU_PROMPT)
        command = self._next_token()
        if command is None:
            return False
        match command:
            case "l":
                self.engine.request_load()
            case "p":
                difficulty = self._read_difficulty()
                if difficulty is None:
                    return False
                self.engine.new_game(difficulty)
            case "sb":
                self.engine.request_scoreboard()
            case "c":
                self.engine.request_scoreboard_clear()
            case _:
                logger.debug("ignored start menu command %r", command)
        return True

    def _play(self) -> bool:
        self.engine.request_input(GAME_INPUT_PROMPT)
        command = self._next_token()
        if command is None:
            return False
        match command:
            case "s":
                self.engine.request_input(TILE_INPUT_PROMPT)
                row = self._read_int()
                col = self._read_int()
                if row is None or col is None:
                    return False
                self.engine.select_at(row, col)
                self.engine.validate_selection()
            case "h":
                self.engine.find_best_move()
            case "g":
                self.engine.send_text(self.engine.rules_text)
            case "m":
                self.engine.toggle_mute()
            case "e":
                self.engine.request_quit()
                return False
            case _:
                logger.debug("ignored in-game command %r", command)
        return True

    def _end_menu(self) -> bool:
        self.engine.request_input(END_GAME_PROMPT)
        command = self._next_token()
        if command is None:
            return False
        match command:
            case "n":
                difficulty = self._read_difficulty()
                if difficulty is None:
                    return False
                self.engine.reset(difficulty)
            case "e":
                self.engine.request_quit()
                return False
            case _:
                logger.debug("ignored end menu command %r", command)
        return True

"""
Console driver: play a game in the terminal.

Each side is played by a human (moves typed as "e2e4"), a random mover, or
one of the search strategies. The driver owns the game loop: it checks for
the end of the game before every turn, collects human moves itself, asks
engine players for theirs, and commits both the same way.

Usage:
    python -m interface.cli --first human --second alphabeta --depth 2
    python -m interface.cli --first random --second minimax --seed 7
"""

import argparse
import logging
import sys
from typing import Callable, TextIO

from pydantic import ValidationError

from chesscore.config import GameConfig, PlayerConfig
from chesscore.constants import DEFAULT_DEPTH, START_LAYOUT
from chesscore.datatypes import Action
from chesscore.errors import InvalidMoveString, MoveError
from chesscore.notation import action_to_algebraic, algebraic_to_square
from chesscore.players import PlayerKind

_log = logging.getLogger(__name__)

QUIT_WORDS = ("quit", "exit", "resign")


class ConsoleGame:
    """
    One game between two configured players.

    Attributes:
        position: The live game position.
        players:  Player for each side.
    """

    def __init__(
        self,
        config: GameConfig,
        input_fn: Callable[[str], str] = input,
        out: TextIO | None = None,
    ) -> None:
        self.position = config.make_position()
        self.players = config.make_players()
        self._input = input_fn
        self._out = out or sys.stdout

    def _print(self, text: str = "") -> None:
        print(text, file=self._out)

    def read_human_action(self) -> Action | None:
        """
        Prompt until the human enters a legal move, or None to stop the game.

        "?e2" lists the legal destinations of the piece on e2.
        """
        while True:
            text = self._input(f"{self.position.turn.value} to move: ").strip()
            if text.lower() in QUIT_WORDS:
                return None
            if text.startswith("?"):
                self._show_destinations(text[1:])
                continue
            try:
                action = self.position.action_from_notation(text)
                self.position.check_action(action)
            except (MoveError, InvalidMoveString) as exc:
                self._print(f"Illegal move: {exc}")
                continue
            return action

    def _show_destinations(self, text: str) -> None:
        try:
            square = algebraic_to_square(text, self.position.size)
        except MoveError as exc:
            self._print(str(exc))
            return
        self.position.selected = square
        destinations = self.position.legal_destinations(square)
        self._print(" ".join(destinations) if destinations else "No legal moves from there")

    def play(self, max_plies: int | None = None) -> str:
        """
        Run the game loop until it ends.

        Returns:
            "first wins", "second wins", "stalemate", "aborted" (a human quit)
            or "unfinished" (``max_plies`` reached).
        """
        plies = 0
        while True:
            self._print(self.position.render())
            if not self.position.has_any_legal_move():
                if self.position.is_in_check(self.position.turn):
                    outcome = f"{self.position.turn.opponent.value} wins"
                else:
                    outcome = "stalemate"
                break
            if max_plies is not None and plies >= max_plies:
                outcome = "unfinished"
                break

            player = self.players[self.position.turn]
            action = self.read_human_action() if player.is_human else player.get_action(self.position)
            if action is None:
                outcome = "aborted"
                break

            self.position.commit_move(action)
            plies += 1
            self._print(f"{self.position.turn.opponent.value} plays {action_to_algebraic(action)}")
            self._print()

        self._print(f"Game over: {outcome}")
        _log.info("game finished after %d plies: %s", len(self.position.history), outcome)
        return outcome


def build_config(argv: list[str] | None = None) -> tuple[GameConfig, int | None]:
    kinds = [kind.value for kind in PlayerKind]
    parser = argparse.ArgumentParser(prog="chesscore-play", description="Play chess in the terminal.")
    parser.add_argument("--first", choices=kinds, default=PlayerKind.HUMAN.value)
    parser.add_argument("--second", choices=kinds, default=PlayerKind.ALPHA_BETA.value)
    parser.add_argument("--depth", type=int, default=DEFAULT_DEPTH, help="search depth for engine players")
    parser.add_argument("--layout", default=START_LAYOUT)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--max-plies", type=int, default=None)
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    try:
        config = GameConfig(
            first=PlayerConfig(kind=args.first, depth=args.depth),
            second=PlayerConfig(kind=args.second, depth=args.depth),
            layout=args.layout,
            seed=args.seed,
            log_level=args.log_level,
        )
    except ValidationError as exc:
        parser.error(str(exc))
    return config, args.max_plies


def main(argv: list[str] | None = None) -> None:
    config, max_plies = build_config(argv)
    logging.basicConfig(stream=sys.stderr, level=config.log_level)
    ConsoleGame(config).play(max_plies)


if __name__ == "__main__":
    main()

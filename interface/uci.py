"""
UCI (Universal Chess Interface) protocol handler.

UCI is the standard text-based protocol that lets chess GUIs and testing
tools talk to an engine over stdin/stdout. Every output line is flushed
immediately; GUIs read line by line.

Protocol subset:
    GUI -> Engine: uci, isready, ucinewgame, setoption, position, go, quit
    Engine -> GUI: id name, id author, option, uciok, readyok, info, bestmove

The engine searches to a fixed depth with no clock, so "go" is handled
synchronously: the search runs to completion on the main thread and the
reply is written before the next command is read. There is no background
search and therefore no "stop" handling; time-control parameters of "go"
are ignored.

Critical rule: NEVER print to stdout except for valid UCI responses.
Diagnostics go to the logger, which writes to stderr.
"""

import logging
import os
import sys
import time
from dataclasses import replace
from typing import TextIO

# ---------------------------------------------------------------------------
# Path setup: make 'chesscore' importable when this script is run directly
# as `python interface/uci.py` from the repo root.
# ---------------------------------------------------------------------------
_REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

from chesscore.constants import CENTIPAWNS_PER_PAWN, DEFAULT_DEPTH, MAX_DEPTH, UCI_MATE_CP
from chesscore.datatypes import ActionKind, PieceKind, Side
from chesscore.errors import LayoutError, MoveError
from chesscore.notation import action_to_algebraic
from chesscore.players import PlayerKind
from chesscore.position import Position
from chesscore.search import alphabeta_search, minimax_search

_log = logging.getLogger(__name__)


def _send(line: str, out: TextIO | None = None) -> None:
    """Write one UCI response line and flush it."""
    print(line, file=out or sys.stdout, flush=True)


def uci_score(value: float, turn: Side) -> int:
    """
    Convert a FIRST-relative value in pawns to UCI centipawns.

    UCI scores are from the side to move's point of view, so the value is
    negated when SECOND is on move. Checkmate (an infinite value) is clamped
    to +/-UCI_MATE_CP.
    """
    relative = value if turn is Side.FIRST else -value
    if relative == float("inf"):
        return UCI_MATE_CP
    if relative == float("-inf"):
        return -UCI_MATE_CP
    return round(relative * CENTIPAWNS_PER_PAWN)


class UciHandler:
    """
    Stateful handler for the UCI protocol.

    Attributes:
        position: Current game position, replaced by every "position" command.
        depth:    Default search depth for "go" without an explicit depth.
        strategy: Search strategy for "go": alphabeta or minimax.
        out:      Stream for protocol replies (stdout unless redirected).
    """

    def __init__(self, out: TextIO | None = None) -> None:
        self.position: Position = Position.starting()
        self.depth: int = DEFAULT_DEPTH
        self.strategy: PlayerKind = PlayerKind.ALPHA_BETA
        self.out = out

    def send(self, line: str) -> None:
        _send(line, self.out)

    # -----------------------------------------------------------------------
    # Command handlers
    # -----------------------------------------------------------------------

    def handle_uci(self) -> None:
        """Identify the engine and list its options, then send "uciok"."""
        self.send("id name chesscore")
        self.send("id author chesscore project")
        self.send(f"option name Depth type spin default {DEFAULT_DEPTH} min 1 max {MAX_DEPTH}")
        self.send("option name Strategy type combo default alphabeta var alphabeta var minimax")
        self.send("uciok")

    def handle_isready(self) -> None:
        self.send("readyok")

    def handle_ucinewgame(self) -> None:
        self.position = Position.starting()

    def handle_setoption(self, tokens: list[str]) -> None:
        """
        Apply "setoption name <Name> value <Value>".

        Supported options are Depth (1..MAX_DEPTH) and Strategy (alphabeta or
        minimax). Unknown options and bad values are logged and ignored.
        """
        if "name" not in tokens or "value" not in tokens:
            _log.warning("uci: malformed setoption: %s", " ".join(tokens))
            return
        name = " ".join(tokens[tokens.index("name") + 1 : tokens.index("value")]).lower()
        value = " ".join(tokens[tokens.index("value") + 1 :]).lower()

        if name == "depth" and value.isdigit() and 1 <= int(value) <= MAX_DEPTH:
            self.depth = int(value)
        elif name == "strategy" and value in (PlayerKind.ALPHA_BETA.value, PlayerKind.MINIMAX.value):
            self.strategy = PlayerKind(value)
        else:
            _log.warning("uci: ignoring option %r = %r", name, value)

    def handle_position(self, tokens: list[str]) -> None:
        """
        Parse and apply a "position" command.

        Command formats:
            position startpos [moves e2e4 e7e5 ...]
            position fen <FEN> [moves e2e4 e7e5 ...]

        Moves are replayed through ``commit_move``; replay stops at the first
        move the engine rejects, which is logged.

        Args:
            tokens: The command tokens with "position" already stripped.
        """
        if not tokens:
            return

        if "moves" in tokens:
            moves_idx = tokens.index("moves")
            setup, move_tokens = tokens[:moves_idx], tokens[moves_idx + 1 :]
        else:
            setup, move_tokens = tokens, []

        if setup[0] == "startpos":
            position = Position.starting()
        elif setup[0] == "fen":
            try:
                position = Position.from_fen(" ".join(setup[1:]))
            except LayoutError as exc:
                _log.error("uci: bad fen: %s", exc)
                return
        else:
            _log.error("uci: unknown position type: %s", setup[0])
            return

        for uci_move in move_tokens:
            try:
                action = position.action_from_notation(uci_move[:4])
                if len(uci_move) == 5 and action.kind is ActionKind.PROMOTION:
                    action = replace(action, promotion=PieceKind.from_letter(uci_move[4]))
                position.commit_move(action)
            except (MoveError, ValueError) as exc:
                _log.error("uci: illegal move in position command: %s (%s)", uci_move, exc)
                break

        self.position = position

    def handle_go(self, tokens: list[str]) -> None:
        """
        Search the current position and reply with "info" and "bestmove".

        Only "depth <n>" is honoured; any other parameter is ignored. When the
        side to move has no legal move the reply is "bestmove (none)".
        """
        depth = self.depth
        if "depth" in tokens:
            idx = tokens.index("depth")
            try:
                depth = max(1, int(tokens[idx + 1]))
            except (ValueError, IndexError):
                _log.warning("uci: bad depth in go command, using %d", depth)

        if not self.position.has_any_legal_move():
            self.send("bestmove (none)")
            return

        search = minimax_search if self.strategy is PlayerKind.MINIMAX else alphabeta_search
        start = time.monotonic()
        result = search(self.position, depth)
        elapsed_ms = max(1, int((time.monotonic() - start) * 1000))

        score = uci_score(result.value, self.position.turn)
        self.send(f"info depth {depth} score cp {score} nodes {result.stats.nodes} time {elapsed_ms}")
        self.send(f"bestmove {action_to_algebraic(result.action, self.position.size)}")


def run_uci_loop(stream: TextIO | None = None, out: TextIO | None = None) -> None:
    """
    Main UCI protocol loop.

    Reads lines from ``stream`` (stdin by default) and dispatches each command
    to a UciHandler until "quit" or end of input.

    Error handling:
        Each command is wrapped so that a failure in one handler does not
        end the session. Errors are logged and the loop continues.
    """
    handler = UciHandler(out)

    for raw_line in stream or sys.stdin:
        tokens = raw_line.split()
        if not tokens:
            continue
        command, args = tokens[0], tokens[1:]

        if command == "quit":
            break
        try:
            if command == "uci":
                handler.handle_uci()
            elif command == "isready":
                handler.handle_isready()
            elif command == "ucinewgame":
                handler.handle_ucinewgame()
            elif command == "setoption":
                handler.handle_setoption(args)
            elif command == "position":
                handler.handle_position(args)
            elif command == "go":
                handler.handle_go(args)
            else:
                # Unknown commands are ignored per the UCI specification.
                _log.info("uci: ignoring unknown command: %r", command)
        except Exception:
            _log.exception("uci: unhandled error for command %r", command)


def main() -> None:
    logging.basicConfig(stream=sys.stderr, level=logging.WARNING)
    run_uci_loop()


if __name__ == "__main__":
    main()

"""
Square and move notation.

Squares are written file letter then rank digit ("e4"); moves are two squares
concatenated ("e2e4"). Row 0 of the grid is the highest rank, so on an 8x8
board "a8" is Square(0, 0) and "h1" is Square(7, 7).

Square decoding distinguishes a wrong-length string from one with bad
characters, since a driver may want to report them differently. Move
decoding is strict: anything that is not exactly four valid characters is a
fatal InvalidMoveString.
"""

from chesscore.constants import BOARD_SIZE, FILES, RANKS
from chesscore.datatypes import Action, Square
from chesscore.errors import (
    InvalidLocationString,
    InvalidLocationStringLength,
    InvalidMoveString,
    NotationError,
)


def algebraic_to_square(text: str, size: int = BOARD_SIZE) -> Square:
    """
    Decode a two-character square such as "e4" (file case-insensitive).

    Args:
        text: Square text; surrounding whitespace is ignored.
        size: Board size; files and ranks beyond it are rejected.

    Returns:
        The decoded Square.

    Raises:
        InvalidLocationStringLength: If the text is not two characters long.
        InvalidLocationString: If the file or rank character is not valid.
    """
    text = text.strip()
    if len(text) != 2:
        raise InvalidLocationStringLength(f"Square must be 2 characters: {text!r}")

    file_char, rank_char = text[0].lower(), text[1]
    files, ranks = FILES[:size], RANKS[:size]
    if file_char not in files or rank_char not in ranks:
        raise InvalidLocationString(f"Invalid square: {text!r}")

    return Square(row=size - 1 - ranks.index(rank_char), col=files.index(file_char))


def square_to_algebraic(square: Square, size: int = BOARD_SIZE) -> str:
    """Encode a square as lowercase file letter plus rank digit."""
    return f"{FILES[square.col]}{RANKS[size - 1 - square.row]}"


def parse_move(text: str, size: int = BOARD_SIZE) -> tuple[Square, Square]:
    """
    Decode four-character move text into its start and end squares.

    Raises:
        InvalidMoveString: On any malformed input.
    """
    text = text.strip()
    if len(text) != 4:
        raise InvalidMoveString(f"Move must be 4 characters: {text!r}")
    try:
        return algebraic_to_square(text[:2], size), algebraic_to_square(text[2:], size)
    except NotationError as exc:
        raise InvalidMoveString(f"Invalid move: {text!r}") from exc


def action_to_algebraic(action: Action, size: int = BOARD_SIZE) -> str:
    """Encode an action as start + end squares, with a promotion letter if any."""
    text = square_to_algebraic(action.start, size) + square_to_algebraic(action.end, size)
    if action.promotion is not None:
        text += action.promotion.value
    return text


def actions_to_algebraic_ends(actions: list[Action], size: int = BOARD_SIZE) -> list[str]:
    """Destination squares of a list of actions, as text, in the same order."""
    return [square_to_algebraic(action.end, size) for action in actions]

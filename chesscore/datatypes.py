"""
Value types shared by every engine module.

Everything here is immutable. Pieces, squares and actions are plain frozen
dataclasses so they can be copied freely between search branches, used as
dict keys, and compared with ``==``.

Coordinate convention:
    Square(row=0, col=0) is the top-left corner of the layout encoding, which
    on a standard board is a8. Row numbers grow toward rank 1, so FIRST
    (uppercase, "white") pawns advance toward row 0 and SECOND pawns toward
    row ``size - 1``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class Side(str, Enum):
    FIRST = "first"
    SECOND = "second"

    @property
    def opponent(self) -> "Side":
        return Side.SECOND if self is Side.FIRST else Side.FIRST


class PieceKind(str, Enum):
    PAWN = "p"
    ROOK = "r"
    KNIGHT = "n"
    BISHOP = "b"
    QUEEN = "q"
    KING = "k"

    @classmethod
    def from_letter(cls, letter: str) -> "PieceKind":
        """Look up a kind by its layout letter, case-insensitively.

        Raises:
            ValueError: If the letter names no piece kind.
        """
        return cls(letter.lower())


class ActionKind(str, Enum):
    NORMAL = "normal"
    CAPTURE = "capture"
    EN_PASSANT = "en_passant"
    CASTLE_SHORT = "castle_short"
    CASTLE_LONG = "castle_long"
    PROMOTION = "promotion"

    @property
    def is_castling(self) -> bool:
        return self in (ActionKind.CASTLE_SHORT, ActionKind.CASTLE_LONG)


@dataclass(frozen=True)
class Square:
    row: int
    col: int

    def offset(self, drow: int, dcol: int) -> "Square":
        return Square(self.row + drow, self.col + dcol)

    def in_bounds(self, size: int) -> bool:
        return 0 <= self.row < size and 0 <= self.col < size


@dataclass(frozen=True)
class Piece:
    """
    A piece on the board.

    Attributes:
        kind:      What the piece is.
        side:      Who owns it.
        has_moved: Set the first time the piece is relocated and never
                   cleared. Gates castling eligibility for kings and rooks.
    """

    kind: PieceKind
    side: Side
    has_moved: bool = False

    @property
    def letter(self) -> str:
        """Layout letter: uppercase for FIRST, lowercase for SECOND."""
        return self.kind.value.upper() if self.side is Side.FIRST else self.kind.value

    def moved(self) -> "Piece":
        return self if self.has_moved else replace(self, has_moved=True)


@dataclass(frozen=True)
class Action:
    """
    One ply, described by its origin, destination and kind.

    A move with secondary effects (the rook hop of castling, the captured
    pawn of en passant, the piece swap of promotion) is still a single
    Action; ``kind`` tells the position how to apply it.

    Attributes:
        start:     Origin square of the moving piece (the king, for castling).
        end:       Destination square of the moving piece.
        kind:      How to apply the move.
        promotion: Target kind for PROMOTION actions, None otherwise.
    """

    start: Square
    end: Square
    kind: ActionKind = ActionKind.NORMAL
    promotion: PieceKind | None = None

    def __post_init__(self) -> None:
        if self.kind is ActionKind.PROMOTION and self.promotion is None:
            object.__setattr__(self, "promotion", PieceKind.QUEEN)

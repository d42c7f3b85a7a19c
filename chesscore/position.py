"""
Position model: the board grid, whose turn it is, and the move record.

A Position is the live game state a driver holds and the node state the
search explores. It is deliberately cheap to copy: the grid is a list of
rows of immutable Pieces, so ``copy()`` only has to slice each row. Every
search branch works on its own copy and nothing is shared between siblings.

Validation is two-stage. ``legality.is_valid_action`` answers the
geometry/occupancy question; the Position then plays the move on a scratch
copy and rejects it if the mover's own king is attacked afterwards. The
same scratch copy becomes the child position during move generation, and
is adopted wholesale by ``commit_move`` on success, so a rejected move can
never leave a half-applied board behind.
"""

from __future__ import annotations

import logging
import math
import random
from typing import Iterator

from chesscore import legality
from chesscore.constants import BOARD_SIZE, FILES, PIECE_VALUES, START_LAYOUT
from chesscore.datatypes import Action, ActionKind, Piece, PieceKind, Side, Square
from chesscore.errors import (
    InvalidAction,
    InvalidPieceColor,
    LayoutError,
    MoveError,
    RemainsInCheck,
    StartSquareEmpty,
)
from chesscore.notation import algebraic_to_square, parse_move, square_to_algebraic

_log = logging.getLogger(__name__)

Grid = list[list[Piece | None]]


class Position:
    """
    Board grid plus turn, last move and history.

    Attributes:
        size:        Board edge length (8 for standard chess).
        turn:        Side to move. Flips after every committed move, never
                     on a rejected one.
        last_action: The most recently committed action, or None at the start
                     of a game. En passant legality depends on it.
        selected:    Square a UI driver has highlighted. Purely cosmetic;
                     cleared by every successful commit.
    """

    def __init__(self, size: int = BOARD_SIZE) -> None:
        self.size: int = size
        self._grid: Grid = [[None] * size for _ in range(size)]
        self.turn: Side = Side.FIRST
        self.last_action: Action | None = None
        self._history: list[Action] = []
        self.selected: Square | None = None

    # -----------------------------------------------------------------------
    # Construction
    # -----------------------------------------------------------------------

    @classmethod
    def from_layout(cls, layout: str, size: int = BOARD_SIZE, turn: Side = Side.FIRST) -> "Position":
        position = cls(size)
        position.place_from_layout(layout)
        position.turn = turn
        return position

    @classmethod
    def starting(cls) -> "Position":
        return cls.from_layout(START_LAYOUT)

    @classmethod
    def from_fen(cls, fen: str) -> "Position":
        """
        Build a position from the first four fields of a FEN string.

        Only the layout is required. The side-to-move field defaults to FIRST.
        A castling field marks rooks (and kings with no right left) as moved
        so the castling rules see the same rights the FEN grants. An en
        passant target square is turned into the two-square pawn advance that
        would have produced it, stored as ``last_action``. Move counters are
        ignored.

        Raises:
            LayoutError: If any field is malformed.
        """
        fields = fen.split()
        if not fields:
            raise LayoutError("Empty FEN")
        position = cls.from_layout(fields[0])

        if len(fields) > 1:
            if fields[1] not in ("w", "b"):
                raise LayoutError(f"Invalid side to move: {fields[1]!r}")
            position.turn = Side.FIRST if fields[1] == "w" else Side.SECOND
        if len(fields) > 2:
            position._apply_castling_rights(fields[2])
        if len(fields) > 3 and fields[3] != "-":
            position._apply_en_passant_target(fields[3])
        return position

    def clear(self) -> None:
        self._grid = [[None] * self.size for _ in range(self.size)]

    def place_from_layout(self, layout: str) -> None:
        """
        Clear the board and place pieces from a rank-by-rank layout string.

        Ranks are separated by '/', highest rank first. A digit skips that
        many empty squares; a letter places a piece, uppercase for FIRST and
        lowercase for SECOND.

        Raises:
            LayoutError: On an unknown character or a rank that overflows the
                         board. The layout is trusted driver input, so this
                         is a configuration error rather than a move error.
        """
        self.clear()
        row, col = 0, 0
        for char in layout.strip():
            if char == "/":
                row, col = row + 1, 0
                continue
            if char in "123456789":
                col += int(char)
                continue
            try:
                kind = PieceKind.from_letter(char)
            except ValueError:
                raise LayoutError(f"Invalid piece letter {char!r} in layout {layout!r}") from None
            square = Square(row, col)
            if not square.in_bounds(self.size):
                raise LayoutError(f"Layout {layout!r} does not fit a {self.size}x{self.size} board")
            side = Side.FIRST if char.isupper() else Side.SECOND
            self.set_piece(square, Piece(kind, side))
            col += 1

    def _apply_castling_rights(self, rights: str) -> None:
        for side, short_letter, long_letter in ((Side.FIRST, "K", "Q"), (Side.SECOND, "k", "q")):
            lost = []
            if short_letter not in rights:
                lost.append(ActionKind.CASTLE_SHORT)
            if long_letter not in rights:
                lost.append(ActionKind.CASTLE_LONG)
            for kind in lost:
                square = legality.castling_rook_square(kind, side, self.size)
                rook = self.piece_at(square)
                if rook is not None and rook.kind is PieceKind.ROOK and rook.side is side:
                    self.set_piece(square, rook.moved())
            if len(lost) == 2:
                king_square = self.square_of_piece(PieceKind.KING, side)
                if king_square is not None:
                    self.set_piece(king_square, self.piece_at(king_square).moved())

    def _apply_en_passant_target(self, text: str) -> None:
        try:
            target = algebraic_to_square(text, self.size)
        except ValueError:
            raise LayoutError(f"Invalid en passant square: {text!r}") from None
        step = legality.pawn_direction(self.turn.opponent)
        self.last_action = Action(target.offset(-step, 0), target.offset(step, 0))

    def copy(self) -> "Position":
        """Fully independent clone: no mutable state is shared with ``self``."""
        clone = Position.__new__(Position)
        clone.size = self.size
        clone._grid = [row[:] for row in self._grid]
        clone.turn = self.turn
        clone.last_action = self.last_action
        clone._history = self._history[:]
        clone.selected = self.selected
        return clone

    # -----------------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------------

    @property
    def history(self) -> tuple[Action, ...]:
        """Every committed action, oldest first."""
        return tuple(self._history)

    @property
    def grid(self) -> tuple[tuple[Piece | None, ...], ...]:
        return tuple(tuple(row) for row in self._grid)

    def piece_at(self, square: Square) -> Piece | None:
        if not square.in_bounds(self.size):
            return None
        return self._grid[square.row][square.col]

    def set_piece(self, square: Square, piece: Piece) -> None:
        self._grid[square.row][square.col] = piece

    def clear_piece(self, square: Square) -> None:
        self._grid[square.row][square.col] = None

    def pieces(self, side: Side | None = None) -> Iterator[tuple[Square, Piece]]:
        """Yield ``(square, piece)`` for every piece, optionally of one side."""
        for row, rank in enumerate(self._grid):
            for col, piece in enumerate(rank):
                if piece is not None and (side is None or piece.side is side):
                    yield Square(row, col), piece

    def square_of_piece(self, kind: PieceKind, side: Side) -> Square | None:
        for square, piece in self.pieces(side):
            if piece.kind is kind:
                return square
        return None

    def material(self, side: Side) -> float:
        return math.fsum(PIECE_VALUES[piece.kind] for _, piece in self.pieces(side))

    def material_balance(self) -> float:
        """FIRST's material minus SECOND's, in pawns."""
        return self.material(Side.FIRST) - self.material(Side.SECOND)

    def is_square_attacked(self, square: Square, by_side: Side) -> bool:
        return legality.is_square_attacked(self, square, by_side)

    def is_in_check(self, side: Side) -> bool:
        """Whether ``side``'s king is attacked. A side without a king is never in check."""
        king = self.square_of_piece(PieceKind.KING, side)
        if king is None:
            return False
        return self.is_square_attacked(king, side.opponent)

    def has_any_legal_move(self) -> bool:
        return next(self.successors(), None) is not None

    def is_checkmate(self) -> bool:
        return self.is_in_check(self.turn) and not self.has_any_legal_move()

    def is_stalemate(self) -> bool:
        return not self.is_in_check(self.turn) and not self.has_any_legal_move()

    # -----------------------------------------------------------------------
    # Actions
    # -----------------------------------------------------------------------

    def action_from_squares(self, start: Square, end: Square) -> Action:
        """
        Infer the kind of the move from ``start`` to ``end`` from board context.

        This is how a driver turns a pair of clicked (or typed) squares into an
        Action. The inferred action is not validated; a nonsensical pair simply
        produces an action that ``commit_move`` will reject.

        Inference order:
            - king moving more than one file: castling toward that side
            - pawn reaching the far rank: promotion to a queen
            - pawn onto an occupied square: capture
            - pawn stepping diagonally beside an adjacent piece: en passant
            - any other piece onto an opposing piece: capture
            - otherwise: normal
        """
        piece = self.piece_at(start)
        target = self.piece_at(end)
        if piece is None:
            return Action(start, end)

        dcol = end.col - start.col
        if piece.kind is PieceKind.KING and abs(dcol) > 1:
            kind = ActionKind.CASTLE_SHORT if dcol > 0 else ActionKind.CASTLE_LONG
            return Action(start, end, kind)

        if piece.kind is PieceKind.PAWN:
            if end.row == legality.far_row(piece.side, self.size):
                return Action(start, end, ActionKind.PROMOTION, PieceKind.QUEEN)
            if target is not None:
                return Action(start, end, ActionKind.CAPTURE)
            if abs(dcol) == 1 and self.piece_at(Square(start.row, end.col)) is not None:
                return Action(start, end, ActionKind.EN_PASSANT)
            return Action(start, end)

        if target is not None and target.side is not piece.side:
            return Action(start, end, ActionKind.CAPTURE)
        return Action(start, end)

    def action_from_notation(self, text: str) -> Action:
        """
        Decode move text such as "e2e4" and infer its kind.

        Raises:
            InvalidMoveString: If the text is not two valid squares.
        """
        start, end = parse_move(text, self.size)
        return self.action_from_squares(start, end)

    def _after(self, action: Action) -> "Position":
        """The position reached by playing ``action``, without any checks."""
        child = self.copy()
        child._apply(action)
        child._record(action)
        return child

    def _apply(self, action: Action) -> None:
        start, end = action.start, action.end
        piece = self._grid[start.row][start.col].moved()
        self.clear_piece(start)

        if action.kind is ActionKind.EN_PASSANT:
            self.clear_piece(Square(start.row, end.col))
        elif action.kind is ActionKind.PROMOTION:
            piece = Piece(action.promotion, piece.side, has_moved=True)
        elif action.kind.is_castling:
            rook_square = legality.castling_rook_square(action.kind, piece.side, self.size)
            rook = self.piece_at(rook_square).moved()
            self.clear_piece(rook_square)
            # The rook lands on the square the king passed over.
            self.set_piece(Square(end.row, (start.col + end.col) // 2), rook)

        self.set_piece(end, piece)

    def _record(self, action: Action) -> None:
        self._history.append(action)
        self.last_action = action
        self.turn = self.turn.opponent
        self.selected = None

    def _validated_successor(self, action: Action) -> "Position":
        """
        Position after ``action``, or the first applicable MoveError.

        Raises:
            StartSquareEmpty, InvalidPieceColor, InvalidAction, RemainsInCheck
        """
        piece = self.piece_at(action.start)
        if piece is None:
            raise StartSquareEmpty(f"No piece on {self._describe(action.start)}")
        if piece.side is not self.turn:
            raise InvalidPieceColor(f"It is {self.turn.value}'s turn")
        if not legality.is_valid_action(self, action):
            raise InvalidAction(f"Illegal {action.kind.value} move {self._describe_action(action)}")

        child = self._after(action)
        if child.is_in_check(self.turn):
            raise RemainsInCheck(f"{self._describe_action(action)} leaves the king in check")
        return child

    def check_action(self, action: Action) -> None:
        """Raise the MoveError ``commit_move`` would raise, changing nothing."""
        self._validated_successor(action)

    def commit_move(self, action: Action) -> None:
        """
        Validate and play ``action`` on this position.

        On success the move's effects are applied, the turn flips, the action
        is appended to the history and becomes ``last_action``, and the UI
        selection is cleared.

        Raises:
            MoveError: The first failing check, in the order StartSquareEmpty,
                       InvalidPieceColor, InvalidAction, RemainsInCheck. The
                       position is unchanged when this is raised.
        """
        try:
            child = self._validated_successor(action)
        except MoveError as exc:
            _log.debug("Rejected %r: %s", action, exc)
            raise

        self._grid = child._grid
        self._history = child._history
        self.last_action = child.last_action
        self.turn = child.turn
        self.selected = child.selected

    def successors(self) -> Iterator[tuple[Action, "Position"]]:
        """
        Lazily yield ``(action, child)`` for every legal action.

        Candidates are generated by trying every square of the board as the
        destination of every piece of the side to move, so no special case
        can be missed. Each child is an independent copy.
        """
        mover = self.turn
        for start, _ in self.pieces(mover):
            for child_action, child in self._successors_from(start, mover):
                yield child_action, child

    def _successors_from(self, start: Square, mover: Side) -> Iterator[tuple[Action, "Position"]]:
        for row in range(self.size):
            for col in range(self.size):
                action = self.action_from_squares(start, Square(row, col))
                if not legality.is_valid_action(self, action):
                    continue
                child = self._after(action)
                if not child.is_in_check(mover):
                    yield action, child

    def legal_actions_from(self, square: Square) -> list[Action]:
        piece = self.piece_at(square)
        if piece is None or piece.side is not self.turn:
            return []
        return [action for action, _ in self._successors_from(square, self.turn)]

    def all_legal_actions(self) -> list[Action]:
        return [action for action, _ in self.successors()]

    def legal_destinations(self, square: Square) -> list[str]:
        """Algebraic destinations reachable from ``square``, for display."""
        return [square_to_algebraic(action.end, self.size) for action in self.legal_actions_from(square)]

    def random_action(self, rng: random.Random | None = None) -> Action:
        """
        A uniformly random legal action.

        Raises:
            IndexError: If there is no legal action.
        """
        return (rng or random).choice(self.all_legal_actions())

    # -----------------------------------------------------------------------
    # Display
    # -----------------------------------------------------------------------

    def layout(self) -> str:
        """Encode the grid in the same layout format ``place_from_layout`` reads."""
        ranks = []
        for rank in self._grid:
            text, empty = "", 0
            for piece in rank:
                if piece is None:
                    empty += 1
                    continue
                if empty:
                    text += str(empty)
                    empty = 0
                text += piece.letter
            if empty:
                text += str(empty)
            ranks.append(text)
        return "/".join(ranks)

    def render(self) -> str:
        """Text diagram with rank and file labels, highest rank on top."""
        lines = []
        for row, rank in enumerate(self._grid):
            cells = " ".join(piece.letter if piece else "." for piece in rank)
            lines.append(f"{self.size - row} {cells}")
        lines.append("  " + " ".join(FILES[: self.size]))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Position({self.layout()!r}, turn={self.turn.value})"

    def _describe(self, square: Square) -> str:
        if self.size > len(FILES) or not square.in_bounds(self.size):
            return f"({square.row}, {square.col})"
        return square_to_algebraic(square, self.size)

    def _describe_action(self, action: Action) -> str:
        return f"{self._describe(action.start)}-{self._describe(action.end)}"

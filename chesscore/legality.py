"""
Legality engine: piece geometry, path blocking, attacks and special moves.

Everything here answers "is this pseudo-legal?" for a position without
changing it. Whether a move leaves the mover's own king in check is decided
by the Position itself (it simulates the move on a scratch copy), so these
functions never need to make a move.

Two layers:

1. Translation predicates are pure functions of the row/column deltas of a
   move (plus the start row and side for pawns). They know nothing about the
   board.
2. Board predicates combine translations with occupancy: path blocking for
   sliding pieces, end-square blocking, pawn captures, en passant timing,
   promotion and castling.

The position argument only needs ``size``, ``turn``, ``last_action``,
``piece_at()`` and ``pieces()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from chesscore.constants import KING_HOME_COL, PROMOTION_KINDS
from chesscore.datatypes import Action, ActionKind, Piece, PieceKind, Side, Square

if TYPE_CHECKING:
    from chesscore.position import Position


# ---------------------------------------------------------------------------
# Side-relative rows
# ---------------------------------------------------------------------------


def pawn_direction(side: Side) -> int:
    """Row step of a forward pawn move: FIRST moves toward row 0."""
    return -1 if side is Side.FIRST else 1


def pawn_home_row(side: Side, size: int) -> int:
    return size - 2 if side is Side.FIRST else 1


def back_row(side: Side, size: int) -> int:
    return size - 1 if side is Side.FIRST else 0


def far_row(side: Side, size: int) -> int:
    """The rank on which this side's pawns promote."""
    return 0 if side is Side.FIRST else size - 1


def _sign(n: int) -> int:
    return (n > 0) - (n < 0)


# ---------------------------------------------------------------------------
# Translation geometry (no board access)
# ---------------------------------------------------------------------------


def is_valid_pawn_translation(size: int, start_row: int, drow: int, dcol: int, side: Side) -> bool:
    """One step forward, or two from the home row. Captures are separate."""
    if dcol != 0:
        return False
    direction = pawn_direction(side)
    if drow == direction:
        return True
    return start_row == pawn_home_row(side, size) and drow == 2 * direction


def is_valid_rook_translation(drow: int, dcol: int) -> bool:
    return (drow == 0) != (dcol == 0)


def is_valid_bishop_translation(drow: int, dcol: int) -> bool:
    return abs(drow) == abs(dcol) != 0


def is_valid_queen_translation(drow: int, dcol: int) -> bool:
    return is_valid_rook_translation(drow, dcol) or is_valid_bishop_translation(drow, dcol)


def is_valid_knight_translation(drow: int, dcol: int) -> bool:
    # The L-shape: three squares of total displacement, split across both axes.
    return abs(drow) + abs(dcol) == 3 and drow != 0 and dcol != 0


def is_valid_king_translation(drow: int, dcol: int) -> bool:
    return abs(drow) <= 1 and abs(dcol) <= 1 and (drow, dcol) != (0, 0)


_TRANSLATIONS: dict[PieceKind, Callable[[int, int], bool]] = {
    PieceKind.ROOK: is_valid_rook_translation,
    PieceKind.KNIGHT: is_valid_knight_translation,
    PieceKind.BISHOP: is_valid_bishop_translation,
    PieceKind.QUEEN: is_valid_queen_translation,
    PieceKind.KING: is_valid_king_translation,
}


def is_valid_translation(piece: Piece, start: Square, end: Square, size: int) -> bool:
    """Whether ``piece`` could geometrically travel from start to end on an empty board."""
    drow, dcol = end.row - start.row, end.col - start.col
    if piece.kind is PieceKind.PAWN:
        return is_valid_pawn_translation(size, start.row, drow, dcol, piece.side)
    return _TRANSLATIONS[piece.kind](drow, dcol)


# ---------------------------------------------------------------------------
# Occupancy
# ---------------------------------------------------------------------------


def is_path_blocked(position: Position, start: Square, end: Square) -> bool:
    """
    Whether any square strictly between start and end is occupied.

    Only straight and diagonal lines have a path; for any other geometry
    (knight jumps, non-moves) the path is never blocked. Occupancy of the
    destination itself is the caller's concern.
    """
    drow, dcol = end.row - start.row, end.col - start.col
    if not (is_valid_rook_translation(drow, dcol) or is_valid_bishop_translation(drow, dcol)):
        return False

    step_row, step_col = _sign(drow), _sign(dcol)
    square = start.offset(step_row, step_col)
    while square != end:
        if position.piece_at(square) is not None:
            return True
        square = square.offset(step_row, step_col)
    return False


def is_end_blocked(position: Position, start: Square, end: Square) -> bool:
    """A same-side piece on the destination, or any piece in front of a pawn."""
    mover = position.piece_at(start)
    target = position.piece_at(end)
    if mover is None or target is None:
        return False
    return target.side is mover.side or mover.kind is PieceKind.PAWN


# ---------------------------------------------------------------------------
# Pawn specials
# ---------------------------------------------------------------------------


def is_valid_pawn_capture(position: Position, start: Square, end: Square, side: Side) -> bool:
    """One square diagonally forward onto an opposing piece."""
    if abs(end.col - start.col) != 1 or end.row - start.row != pawn_direction(side):
        return False
    target = position.piece_at(end)
    return target is not None and target.side is not side


def is_valid_en_passant(position: Position, start: Square, end: Square, side: Side) -> bool:
    """
    Diagonal step onto an empty square, capturing the pawn beside the mover.

    Only legal as the immediate reply to that pawn's two-square advance: the
    position's ``last_action`` must be exactly the move that put the victim on
    the square beside us, starting two rows behind it.
    """
    direction = pawn_direction(side)
    if abs(end.col - start.col) != 1 or end.row - start.row != direction:
        return False
    if position.piece_at(end) is not None:
        return False

    victim_square = Square(start.row, end.col)
    victim = position.piece_at(victim_square)
    if victim is None or victim.kind is not PieceKind.PAWN or victim.side is side:
        return False

    last = position.last_action
    return (
        last is not None
        and last.end == victim_square
        and last.start == Square(victim_square.row + 2 * direction, victim_square.col)
    )


def is_valid_promotion(
    position: Position,
    start: Square,
    end: Square,
    side: Side,
    target: PieceKind | None,
) -> bool:
    """A pawn reaching the far rank by a normal step or a capture."""
    if end.row != far_row(side, position.size) or target not in PROMOTION_KINDS:
        return False
    if is_valid_pawn_capture(position, start, end, side):
        return True
    return (
        position.piece_at(end) is None
        and is_valid_pawn_translation(
            position.size, start.row, end.row - start.row, end.col - start.col, side
        )
        and not is_path_blocked(position, start, end)
    )


# ---------------------------------------------------------------------------
# Attacks and castling
# ---------------------------------------------------------------------------


def attacks(position: Position, start: Square, target: Square) -> bool:
    """
    Whether the piece on ``start`` attacks ``target``, occupied or not.

    Pawns attack diagonally forward even onto empty squares, which is what
    castling needs when it asks whether the king's transit squares are safe.
    """
    piece = position.piece_at(start)
    if piece is None:
        return False
    drow, dcol = target.row - start.row, target.col - start.col
    if piece.kind is PieceKind.PAWN:
        return abs(dcol) == 1 and drow == pawn_direction(piece.side)
    return is_valid_translation(piece, start, target, position.size) and not is_path_blocked(
        position, start, target
    )


def is_square_attacked(position: Position, square: Square, by_side: Side) -> bool:
    return any(attacks(position, start, square) for start, _ in position.pieces(by_side))


def castling_rook_square(kind: ActionKind, side: Side, size: int) -> Square:
    col = size - 1 if kind is ActionKind.CASTLE_SHORT else 0
    return Square(back_row(side, size), col)


def is_valid_castling(position: Position, action: Action, side: Side) -> bool:
    """
    King two files toward an unmoved rook, neither piece having moved.

    Every square between king and rook must be empty, and the king may not
    castle out of check, through an attacked square, or into check.
    """
    size = position.size
    row = back_row(side, size)
    step = 1 if action.kind is ActionKind.CASTLE_SHORT else -1
    king_home = Square(row, KING_HOME_COL)
    if action.start != king_home or action.end != Square(row, KING_HOME_COL + 2 * step):
        return False

    king = position.piece_at(king_home)
    if king is None or king.kind is not PieceKind.KING or king.side is not side or king.has_moved:
        return False
    rook_square = castling_rook_square(action.kind, side, size)
    rook = position.piece_at(rook_square)
    if rook is None or rook.kind is not PieceKind.ROOK or rook.side is not side or rook.has_moved:
        return False

    low, high = sorted((KING_HOME_COL, rook_square.col))
    if any(position.piece_at(Square(row, col)) is not None for col in range(low + 1, high)):
        return False

    enemy = side.opponent
    return not any(
        is_square_attacked(position, Square(row, KING_HOME_COL + i * step), enemy)
        for i in range(3)
    )


# ---------------------------------------------------------------------------
# Full pseudo-legal validation
# ---------------------------------------------------------------------------


def is_valid_action(position: Position, action: Action) -> bool:
    """
    Pseudo-legality of ``action`` for the side to move.

    Checks ownership, geometry, occupancy and the special-move rules for the
    action's kind. King safety is not checked here.
    """
    start, end = action.start, action.end
    if not end.in_bounds(position.size):
        return False
    mover = position.piece_at(start)
    if mover is None or mover.side is not position.turn:
        return False

    kind = action.kind
    side = mover.side
    is_pawn = mover.kind is PieceKind.PAWN

    if kind is ActionKind.NORMAL:
        if position.piece_at(end) is not None:
            return False
        if is_pawn and end.row == far_row(side, position.size):
            return False
        return (
            is_valid_translation(mover, start, end, position.size)
            and not is_path_blocked(position, start, end)
            and not is_end_blocked(position, start, end)
        )

    if kind is ActionKind.CAPTURE:
        target = position.piece_at(end)
        if target is None or target.side is side:
            return False
        if is_pawn:
            return end.row != far_row(side, position.size) and is_valid_pawn_capture(
                position, start, end, side
            )
        return is_valid_translation(mover, start, end, position.size) and not is_path_blocked(
            position, start, end
        )

    if kind is ActionKind.EN_PASSANT:
        return is_pawn and is_valid_en_passant(position, start, end, side)

    if kind is ActionKind.PROMOTION:
        return is_pawn and is_valid_promotion(position, start, end, side, action.promotion)

    # Castling
    return mover.kind is PieceKind.KING and is_valid_castling(position, action, side)

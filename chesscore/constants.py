"""
Engine constants: board geometry, piece values, and search parameters.

All numeric constants used throughout the engine are defined here so that
modules never need to introduce their own magic numbers.

Piece values are expressed in pawns (1 pawn = 1.0). The search compares
floats directly, and checkmate is scored as an infinity so that no material
total can ever outweigh a forced mate.
"""

import math

from chesscore.datatypes import PieceKind

# ---------------------------------------------------------------------------
# Board geometry
# ---------------------------------------------------------------------------
# The model is size-parametric, but castling and notation assume the
# standard 8x8 board unless a caller says otherwise.

BOARD_SIZE: int = 8

# Column of the king's home square on its back rank (the "e" file).
KING_HOME_COL: int = 4

# Layout encoding of the standard starting position, highest rank first.
START_LAYOUT: str = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"

FILES: str = "abcdefgh"
RANKS: str = "12345678"

# ---------------------------------------------------------------------------
# Piece values (pawns)
# ---------------------------------------------------------------------------
# The king carries a small value only so that it is never a zero-weighted
# term; a legal line can never capture it.

PAWN_VALUE: float = 1.0
KNIGHT_VALUE: float = 3.45
BISHOP_VALUE: float = 3.55
ROOK_VALUE: float = 5.25
QUEEN_VALUE: float = 10.0
KING_VALUE: float = 4.0

PIECE_VALUES: dict[PieceKind, float] = {
    PieceKind.PAWN:   PAWN_VALUE,
    PieceKind.KNIGHT: KNIGHT_VALUE,
    PieceKind.BISHOP: BISHOP_VALUE,
    PieceKind.ROOK:   ROOK_VALUE,
    PieceKind.QUEEN:  QUEEN_VALUE,
    PieceKind.KING:   KING_VALUE,
}

# Kinds a pawn may turn into on the far rank.
PROMOTION_KINDS: frozenset[PieceKind] = frozenset(
    {PieceKind.QUEEN, PieceKind.ROOK, PieceKind.BISHOP, PieceKind.KNIGHT}
)

# ---------------------------------------------------------------------------
# Special scores
# ---------------------------------------------------------------------------
# Scores are always from FIRST's point of view: FIRST maximizes, SECOND
# minimizes. A checkmated FIRST scores -CHECKMATE_SCORE.

CHECKMATE_SCORE: float = math.inf
DRAW_SCORE: float = 0.0

# ---------------------------------------------------------------------------
# Search parameters
# ---------------------------------------------------------------------------

DEFAULT_DEPTH: int = 2

# Deepest fixed depth a player config accepts. The full-width search has no
# time control, so anything past this is impractically slow.
MAX_DEPTH: int = 6

# ---------------------------------------------------------------------------
# UCI reporting
# ---------------------------------------------------------------------------
# UCI scores are integer centipawns; mate is reported as this sentinel.

CENTIPAWNS_PER_PAWN: int = 100
UCI_MATE_CP: int = 99_999

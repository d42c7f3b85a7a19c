"""
Static scoring of search leaves and terminal positions.

Scores are always from FIRST's point of view: positive means FIRST is ahead.
FIRST is the maximizing side and SECOND the minimizing side, so unlike a
negamax evaluation the sign does not depend on who is to move.

Three cases:
    - The side to move is checkmated: it has lost, so the score is
      -CHECKMATE_SCORE when FIRST is mated and +CHECKMATE_SCORE when SECOND is.
    - The side to move has no legal move but is not in check (stalemate):
      DRAW_SCORE.
    - Otherwise: the material balance.
"""

from chesscore.constants import CHECKMATE_SCORE, DRAW_SCORE
from chesscore.datatypes import Side
from chesscore.position import Position


def terminal_score(position: Position) -> float:
    """
    Score of a position already known to have no legal move.

    Args:
        position: A checkmate or stalemate position. Not modified.

    Returns:
        +/-CHECKMATE_SCORE for checkmate, DRAW_SCORE for stalemate.
    """
    if not position.is_in_check(position.turn):
        return DRAW_SCORE
    return -CHECKMATE_SCORE if position.turn is Side.FIRST else CHECKMATE_SCORE


def evaluate(position: Position) -> float:
    """
    Leaf score of ``position`` from FIRST's point of view.

    Checks for a terminal position first, so a mate or stalemate sitting
    exactly at the depth horizon is still recognized.

    Example:
        >>> evaluate(Position.starting())
        0.0
    """
    if not position.has_any_legal_move():
        return terminal_score(position)
    return position.material_balance()

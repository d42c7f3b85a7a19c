"""
Exceptions raised by the engine.

Three families, by who is at fault:

    MoveError         The proposed move (or square text) is not acceptable.
                      Always recoverable: the position is left untouched and
                      the driver may simply ask again.
    ValueError kinds  Malformed trusted input (a layout string, a move string
                      that should have been pre-validated). Fatal at the
                      boundary where it is detected.
    SearchError       The search or a player was asked for something it can
                      never provide. These are programmer errors.
"""


class MoveError(Exception):
    """Base class for every recoverable move rejection."""


class StartSquareEmpty(MoveError):
    pass


class InvalidPieceColor(MoveError):
    """The piece on the start square belongs to the side not on move."""


class InvalidAction(MoveError):
    """Fails piece geometry, path, occupancy, or special-move rules."""


class RemainsInCheck(MoveError):
    """Committing the move would leave the mover's own king attacked."""


class NotationError(MoveError, ValueError):
    """Square text could not be decoded."""


class InvalidLocationStringLength(NotationError):
    pass


class InvalidLocationString(NotationError):
    pass


class InvalidMoveString(ValueError):
    """Move text is not exactly two concatenated squares."""


class LayoutError(ValueError):
    """Board-layout encoding contains something other than digits, letters and '/'."""


class SearchError(RuntimeError):
    pass


class NoLegalMoveError(SearchError):
    """A move was requested for a position with no legal move."""


class HumanPlayerError(SearchError):
    """The engine was asked to move for a side the driver should play."""

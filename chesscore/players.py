"""
Player selector: binds a side to a way of choosing its moves.

A HUMAN player is a marker for the driver, which must collect that side's
move itself; asking a HUMAN player for an action is a programmer error. The
other kinds pick an action without any outside input.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from chesscore.constants import DEFAULT_DEPTH
from chesscore.datatypes import Action
from chesscore.errors import HumanPlayerError, NoLegalMoveError
from chesscore.position import Position
from chesscore.search import get_alphabeta_action, get_minimax_action

if TYPE_CHECKING:
    from chesscore.config import PlayerConfig

_log = logging.getLogger(__name__)


class PlayerKind(str, Enum):
    HUMAN = "human"
    RANDOM = "random"
    MINIMAX = "minimax"
    ALPHA_BETA = "alphabeta"


@dataclass
class Player:
    """
    A side's move-selection strategy.

    Attributes:
        kind:  Strategy to use.
        depth: Look-ahead in plies for MINIMAX and ALPHA_BETA.
        rng:   Random source for RANDOM moves and search tie-breaks. Inject a
               seeded ``random.Random`` for reproducible games.
    """

    kind: PlayerKind
    depth: int = DEFAULT_DEPTH
    rng: random.Random = field(default_factory=random.Random, repr=False)

    @classmethod
    def from_config(cls, config: PlayerConfig, rng: random.Random | None = None) -> "Player":
        return cls(kind=config.kind, depth=config.depth, rng=rng or random.Random())

    @property
    def is_human(self) -> bool:
        return self.kind is PlayerKind.HUMAN

    def get_action(self, position: Position) -> Action:
        """
        Pick an action for the side to move in ``position``.

        Raises:
            HumanPlayerError: For a HUMAN player; the driver supplies those moves.
            NoLegalMoveError: If the side to move has no legal action. Callers
                              are expected to check ``has_any_legal_move()``.
        """
        if self.kind is PlayerKind.HUMAN:
            raise HumanPlayerError("Human players choose their own moves")
        if not position.has_any_legal_move():
            raise NoLegalMoveError(f"No legal move for {position.turn.value}")

        if self.kind is PlayerKind.RANDOM:
            action = position.random_action(self.rng)
        elif self.kind is PlayerKind.MINIMAX:
            action = get_minimax_action(position, self.depth, self.rng)
        else:
            action = get_alphabeta_action(position, self.depth, self.rng)

        _log.info("%s player (depth %d) for %s chose %s", self.kind.value, self.depth, position.turn.value, action)
        return action

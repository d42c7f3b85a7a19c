"""
Game configuration models.

Drivers describe a game (who plays each side, the starting layout, the
random seed) with a GameConfig and build their players from it. Validation
happens when the model is created, so a bad depth or layout fails before
the first move rather than in the middle of a game.
"""

import logging
import random

from pydantic import BaseModel, Field, field_validator

from chesscore.constants import DEFAULT_DEPTH, MAX_DEPTH, START_LAYOUT
from chesscore.datatypes import Side
from chesscore.players import Player, PlayerKind
from chesscore.position import Position


class PlayerConfig(BaseModel):
    """
    How one side chooses its moves.

    Fields:
        kind:  human, random, minimax or alphabeta.
        depth: Search depth in plies, 1..MAX_DEPTH. Ignored by human and
               random players but still validated.
    """

    kind: PlayerKind = PlayerKind.HUMAN
    depth: int = DEFAULT_DEPTH

    @field_validator("depth")
    @classmethod
    def check_depth(cls, v: int) -> int:
        if not 1 <= v <= MAX_DEPTH:
            raise ValueError(f"depth must be between 1 and {MAX_DEPTH}")
        return v


class GameConfig(BaseModel):
    """
    A complete game setup.

    Fields:
        first:     Player for the side that moves first (uppercase pieces).
        second:    Player for the other side.
        layout:    Starting layout encoding, highest rank first.
        seed:      Seed for every random choice in the game; None for a
                   nondeterministic game.
        log_level: Name of the logging level drivers configure.
    """

    first: PlayerConfig = Field(default_factory=PlayerConfig)
    second: PlayerConfig = Field(default_factory=lambda: PlayerConfig(kind=PlayerKind.ALPHA_BETA))
    layout: str = START_LAYOUT
    seed: int | None = None
    log_level: str = "WARNING"

    @field_validator("layout")
    @classmethod
    def check_layout(cls, v: str) -> str:
        """Parse the layout once so a bad letter is reported as a config error."""
        Position.from_layout(v)
        return v

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {v!r}")
        return level

    def make_position(self) -> Position:
        return Position.from_layout(self.layout)

    def make_players(self) -> dict[Side, Player]:
        """Both players, sharing one generator seeded from ``seed``."""
        rng = random.Random(self.seed)
        return {
            Side.FIRST: Player.from_config(self.first, rng),
            Side.SECOND: Player.from_config(self.second, rng),
        }

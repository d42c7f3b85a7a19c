"""Pytest configuration and shared fixtures."""

import random

import pytest

from chesscore.position import Position

# Back-rank mate: Ra1-a8 is the only mating move.
MATE_IN_ONE_FEN = "6k1/5ppp/8/8/8/8/5PPP/R5K1 w - -"

# After 1.f3 e5 2.g4 Qh4 FIRST is checkmated.
FOOLS_MATE_MOVES = ("f2f3", "e7e5", "g2g4", "d8h4")

# SECOND to move, king boxed in but not attacked.
STALEMATE_FEN = "7k/5Q2/6K1/8/8/8/8/8 b - -"


@pytest.fixture
def start() -> Position:
    """The standard starting position, FIRST to move."""
    return Position.starting()


@pytest.fixture
def rng() -> random.Random:
    """A seeded generator so tie-breaks are reproducible."""
    return random.Random(1234)


@pytest.fixture
def mate_in_one() -> Position:
    return Position.from_fen(MATE_IN_ONE_FEN)


@pytest.fixture
def fools_mate() -> Position:
    position = Position.starting()
    for move in FOOLS_MATE_MOVES:
        position.commit_move(position.action_from_notation(move))
    return position


@pytest.fixture
def stalemate() -> Position:
    return Position.from_fen(STALEMATE_FEN)

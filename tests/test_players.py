"""Tests for the player selector."""

import random

import pytest

from chesscore.config import PlayerConfig
from chesscore.errors import HumanPlayerError, NoLegalMoveError
from chesscore.notation import action_to_algebraic
from chesscore.players import Player, PlayerKind
from chesscore.position import Position


class TestPlayer:
    def test_human_cannot_be_asked_for_a_move(self, start: Position) -> None:
        player = Player(PlayerKind.HUMAN)
        assert player.is_human
        with pytest.raises(HumanPlayerError):
            player.get_action(start)

    def test_random_player_picks_a_legal_move(self, start: Position, rng: random.Random) -> None:
        player = Player(PlayerKind.RANDOM, rng=rng)
        assert not player.is_human
        assert player.get_action(start) in start.all_legal_actions()

    def test_random_player_is_reproducible(self, start: Position) -> None:
        picks = [Player(PlayerKind.RANDOM, rng=random.Random(9)).get_action(start) for _ in range(2)]
        assert picks[0] == picks[1]

    @pytest.mark.parametrize("kind", [PlayerKind.MINIMAX, PlayerKind.ALPHA_BETA])
    @pytest.mark.parametrize("depth", [1, 2])
    def test_search_players_find_mate(self, mate_in_one: Position, kind: PlayerKind, depth: int) -> None:
        player = Player(kind, depth=depth, rng=random.Random(5))
        assert action_to_algebraic(player.get_action(mate_in_one)) == "a1a8"

    @pytest.mark.parametrize("kind", [PlayerKind.RANDOM, PlayerKind.MINIMAX, PlayerKind.ALPHA_BETA])
    def test_no_legal_move(self, fools_mate: Position, kind: PlayerKind) -> None:
        with pytest.raises(NoLegalMoveError):
            Player(kind, depth=1).get_action(fools_mate)

    @pytest.mark.parametrize("kind", [PlayerKind.RANDOM, PlayerKind.ALPHA_BETA])
    def test_position_is_left_alone(self, start: Position, kind: PlayerKind) -> None:
        Player(kind, depth=1).get_action(start)
        assert start.history == ()
        assert start.layout() == Position.starting().layout()

    def test_from_config(self) -> None:
        rng = random.Random(1)
        player = Player.from_config(PlayerConfig(kind="minimax", depth=3), rng)
        assert player.kind is PlayerKind.MINIMAX
        assert player.depth == 3
        assert player.rng is rng

    def test_kind_values(self) -> None:
        assert PlayerKind("alphabeta") is PlayerKind.ALPHA_BETA
        assert [kind.value for kind in PlayerKind] == ["human", "random", "minimax", "alphabeta"]

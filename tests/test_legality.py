"""Tests for piece geometry, blocking, attacks and the special moves."""

import pytest

from chesscore import legality
from chesscore.datatypes import Action, ActionKind, Piece, PieceKind, Side, Square
from chesscore.errors import InvalidAction, RemainsInCheck
from chesscore.notation import algebraic_to_square as sq
from chesscore.position import Position

CASTLING_FEN = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq -"


def play(position: Position, *moves: str) -> Position:
    for move in moves:
        position.commit_move(position.action_from_notation(move))
    return position


def is_legal(position: Position, move: str) -> bool:
    return position.action_from_notation(move) in position.all_legal_actions()


class TestTranslations:
    """Board-independent movement geometry."""

    @pytest.mark.parametrize(
        "drow, dcol, expected",
        [(2, 1, True), (-1, 2, True), (-2, -1, True), (2, 2, False), (0, 3, False), (1, 0, False)],
    )
    def test_knight(self, drow: int, dcol: int, expected: bool) -> None:
        assert legality.is_valid_knight_translation(drow, dcol) is expected

    def test_rook(self) -> None:
        assert legality.is_valid_rook_translation(0, 5)
        assert legality.is_valid_rook_translation(-3, 0)
        assert not legality.is_valid_rook_translation(1, 1)
        assert not legality.is_valid_rook_translation(0, 0)

    def test_bishop(self) -> None:
        assert legality.is_valid_bishop_translation(2, -2)
        assert not legality.is_valid_bishop_translation(2, 1)
        assert not legality.is_valid_bishop_translation(0, 0)

    def test_queen_is_rook_or_bishop(self) -> None:
        assert legality.is_valid_queen_translation(0, 7)
        assert legality.is_valid_queen_translation(-4, 4)
        assert not legality.is_valid_queen_translation(1, 2)

    def test_king(self) -> None:
        assert legality.is_valid_king_translation(1, 1)
        assert legality.is_valid_king_translation(0, -1)
        assert not legality.is_valid_king_translation(0, 2)
        assert not legality.is_valid_king_translation(0, 0)

    def test_pawn(self) -> None:
        assert legality.is_valid_pawn_translation(8, 6, -1, 0, Side.FIRST)
        assert legality.is_valid_pawn_translation(8, 6, -2, 0, Side.FIRST)
        assert not legality.is_valid_pawn_translation(8, 5, -2, 0, Side.FIRST)
        assert not legality.is_valid_pawn_translation(8, 6, 1, 0, Side.FIRST)
        assert not legality.is_valid_pawn_translation(8, 6, -1, 1, Side.FIRST)
        assert legality.is_valid_pawn_translation(8, 1, 2, 0, Side.SECOND)
        assert not legality.is_valid_pawn_translation(8, 1, -1, 0, Side.SECOND)

    def test_side_relative_rows(self) -> None:
        assert legality.pawn_home_row(Side.FIRST, 8) == 6
        assert legality.pawn_home_row(Side.SECOND, 8) == 1
        assert legality.far_row(Side.FIRST, 8) == 0
        assert legality.far_row(Side.SECOND, 5) == 4
        assert legality.back_row(Side.SECOND, 8) == 0


class TestBlocking:
    """Path and destination occupancy."""

    def test_path_blocked(self, start: Position) -> None:
        assert legality.is_path_blocked(start, sq("a1"), sq("a3"))
        assert legality.is_path_blocked(start, sq("c1"), sq("e3"))
        assert not legality.is_path_blocked(start, sq("e2"), sq("e4"))

    def test_knights_are_never_blocked(self, start: Position) -> None:
        assert not legality.is_path_blocked(start, sq("b1"), sq("c3"))
        assert is_legal(start, "b1c3")

    def test_end_blocked_by_own_piece(self, start: Position) -> None:
        assert legality.is_end_blocked(start, sq("d1"), sq("d2"))
        assert not legality.is_end_blocked(start, sq("e2"), sq("e4"))

    def test_sliders_stop_at_pieces(self, start: Position) -> None:
        with pytest.raises(InvalidAction):
            start.commit_move(start.action_from_notation("f1c4"))
        play(start, "e2e4", "e7e5")
        assert is_legal(start, "f1c4")
        assert is_legal(start, "d1h5")
        assert not is_legal(start, "d1d3")


class TestPawns:
    """Pawn steps, captures and promotion."""

    def test_double_step_blocked(self) -> None:
        position = Position.from_fen("4k3/8/8/8/8/4p3/4P3/4K3 w - -")
        with pytest.raises(InvalidAction):
            position.commit_move(position.action_from_notation("e2e4"))
        with pytest.raises(InvalidAction):
            position.commit_move(position.action_from_notation("e2e3"))

    def test_double_step_only_from_home_row(self, start: Position) -> None:
        play(start, "e2e3", "a7a6")
        with pytest.raises(InvalidAction):
            start.commit_move(start.action_from_notation("e3e5"))

    def test_no_forward_capture(self) -> None:
        position = Position.from_fen("4k3/8/8/4p3/4P3/8/8/4K3 w - -")
        with pytest.raises(InvalidAction):
            position.commit_move(position.action_from_notation("e4e5"))

    def test_diagonal_step_needs_a_victim(self, start: Position) -> None:
        with pytest.raises(InvalidAction):
            start.commit_move(Action(sq("e2"), sq("d3"), ActionKind.CAPTURE))
        with pytest.raises(InvalidAction):
            start.commit_move(start.action_from_notation("e2d3"))

    def test_diagonal_capture(self) -> None:
        position = Position.from_fen("4k3/8/8/3p4/4P3/8/8/4K3 w - -")
        play(position, "e4d5")
        assert position.piece_at(sq("d5")) == Piece(PieceKind.PAWN, Side.FIRST, has_moved=True)
        assert position.material(Side.SECOND) == pytest.approx(4.0)

    def test_promotion_to_queen(self) -> None:
        position = Position.from_fen("4k3/P7/8/8/8/8/8/4K3 w - -")
        play(position, "a7a8")
        assert position.piece_at(sq("a8")) == Piece(PieceKind.QUEEN, Side.FIRST, has_moved=True)
        assert position.piece_at(sq("a7")) is None

    def test_underpromotion(self) -> None:
        position = Position.from_fen("4k3/P7/8/8/8/8/8/4K3 w - -")
        position.commit_move(Action(sq("a7"), sq("a8"), ActionKind.PROMOTION, PieceKind.KNIGHT))
        assert position.piece_at(sq("a8")).kind is PieceKind.KNIGHT

    @pytest.mark.parametrize("target", [PieceKind.KING, PieceKind.PAWN])
    def test_promotion_target_must_be_an_officer(self, target: PieceKind) -> None:
        position = Position.from_fen("4k3/P7/8/8/8/8/8/4K3 w - -")
        with pytest.raises(InvalidAction):
            position.commit_move(Action(sq("a7"), sq("a8"), ActionKind.PROMOTION, target))

    def test_promotion_by_capture(self) -> None:
        position = Position.from_fen("1r2k3/P7/8/8/8/8/8/4K3 w - -")
        action = position.action_from_notation("a7b8")
        assert action.kind is ActionKind.PROMOTION
        position.commit_move(action)
        assert position.piece_at(sq("b8")) == Piece(PieceKind.QUEEN, Side.FIRST, has_moved=True)

    def test_normal_move_onto_far_rank_is_refused(self) -> None:
        position = Position.from_fen("4k3/P7/8/8/8/8/8/4K3 w - -")
        with pytest.raises(InvalidAction):
            position.commit_move(Action(sq("a7"), sq("a8")))

    def test_promotion_requires_far_rank(self, start: Position) -> None:
        with pytest.raises(InvalidAction):
            start.commit_move(Action(sq("e2"), sq("e3"), ActionKind.PROMOTION))

    def test_second_side_promotes_on_rank_one(self) -> None:
        position = Position.from_fen("4k3/8/8/8/8/8/p7/4K3 b - -")
        play(position, "a2a1")
        assert position.piece_at(sq("a1")) == Piece(PieceKind.QUEEN, Side.SECOND, has_moved=True)


class TestEnPassant:
    """Capturing a pawn that has just advanced two squares."""

    def test_immediate_reply(self, start: Position) -> None:
        play(start, "e2e4", "a7a6", "e4e5", "d7d5")
        action = start.action_from_notation("e5d6")
        assert action.kind is ActionKind.EN_PASSANT
        start.commit_move(action)
        assert start.piece_at(sq("d5")) is None
        assert start.piece_at(sq("d6")).side is Side.FIRST
        assert start.material(Side.SECOND) == pytest.approx(start.material(Side.FIRST) - 1.0)

    def test_expires_after_one_move(self, start: Position) -> None:
        play(start, "e2e4", "a7a6", "e4e5", "d7d5", "g1f3", "a6a5")
        with pytest.raises(InvalidAction):
            start.commit_move(start.action_from_notation("e5d6"))

    def test_single_step_does_not_allow_it(self, start: Position) -> None:
        play(start, "e2e4", "d7d6", "e4e5", "d6d5")
        assert not is_legal(start, "e5d6")

    def test_from_fen_target(self) -> None:
        position = Position.from_fen("rnbqkbnr/ppp1p1pp/8/3pPp2/8/8/PPPP1PPP/RNBQKBNR w KQkq f6 0 3")
        assert is_legal(position, "e5f6")
        assert not is_legal(position, "e5d6")

    def test_pinned_en_passant_is_refused(self) -> None:
        # Removing both pawns from the fifth rank would expose the king to the rook.
        position = Position.from_fen("4k3/8/8/K2pP2r/8/8/8/8 w - d6")
        with pytest.raises(RemainsInCheck):
            position.commit_move(position.action_from_notation("e5d6"))


class TestCastling:
    """King and rook moving together."""

    @pytest.fixture
    def castling(self) -> Position:
        return Position.from_fen(CASTLING_FEN)

    def test_king_moves_include_both_castles(self, castling: Position) -> None:
        actions = castling.legal_actions_from(sq("e1"))
        assert len(actions) == 7
        kinds = {action.kind for action in actions}
        assert {ActionKind.CASTLE_SHORT, ActionKind.CASTLE_LONG} <= kinds

    def test_short_castle(self, castling: Position) -> None:
        play(castling, "e1g1")
        assert castling.piece_at(sq("g1")) == Piece(PieceKind.KING, Side.FIRST, has_moved=True)
        assert castling.piece_at(sq("f1")) == Piece(PieceKind.ROOK, Side.FIRST, has_moved=True)
        assert castling.piece_at(sq("h1")) is None
        assert castling.piece_at(sq("e1")) is None

    def test_long_castle(self, castling: Position) -> None:
        play(castling, "e1c1")
        assert castling.piece_at(sq("c1")).kind is PieceKind.KING
        assert castling.piece_at(sq("d1")).kind is PieceKind.ROOK
        assert castling.piece_at(sq("a1")) is None

    def test_second_side_castles(self, castling: Position) -> None:
        play(castling, "a1b1", "e8g8")
        assert castling.piece_at(sq("g8")).kind is PieceKind.KING
        assert castling.piece_at(sq("f8")) == Piece(PieceKind.ROOK, Side.SECOND, has_moved=True)

    def test_refused_after_rook_has_moved(self, castling: Position) -> None:
        play(castling, "h1h2", "a8a7", "h2h1", "a7a8")
        with pytest.raises(InvalidAction):
            castling.commit_move(castling.action_from_notation("e1g1"))
        assert is_legal(castling, "e1c1")

    def test_refused_after_king_has_moved(self, castling: Position) -> None:
        play(castling, "e1e2", "a8a7", "e2e1", "a7a8")
        assert not is_legal(castling, "e1g1")
        assert not is_legal(castling, "e1c1")

    def test_rights_from_fen(self) -> None:
        position = Position.from_fen("r3k2r/8/8/8/8/8/8/R3K2R w Qkq -")
        assert not is_legal(position, "e1g1")
        assert is_legal(position, "e1c1")

    def test_refused_with_piece_between(self) -> None:
        position = Position.from_fen("r3k2r/8/8/8/8/8/8/RN2K2R w KQkq -")
        assert not is_legal(position, "e1c1")
        assert is_legal(position, "e1g1")

    def test_refused_out_of_check(self) -> None:
        position = Position.from_fen("4k3/4r3/8/8/8/8/8/R3K2R w KQ -")
        with pytest.raises(InvalidAction):
            position.commit_move(position.action_from_notation("e1g1"))
        assert not is_legal(position, "e1c1")

    def test_refused_through_check(self) -> None:
        position = Position.from_fen("4k3/5r2/8/8/8/8/8/R3K2R w KQ -")
        assert not is_legal(position, "e1g1")
        assert is_legal(position, "e1c1")

    def test_refused_into_check(self) -> None:
        position = Position.from_fen("4k3/6r1/8/8/8/8/8/R3K2R w KQ -")
        assert not is_legal(position, "e1g1")

    def test_long_castle_with_attacked_rook_path(self) -> None:
        # b1 is crossed by the rook only, so an attack on it does not matter.
        position = Position.from_fen("4k3/1r6/8/8/8/8/8/R3K2R w KQ -")
        assert is_legal(position, "e1c1")

    def test_pawn_attack_on_empty_transit_square(self) -> None:
        position = Position.from_fen("4k3/8/8/8/8/8/6p1/R3K2R w KQ -")
        assert not is_legal(position, "e1g1")
        assert is_legal(position, "e1c1")

    def test_rook_square(self) -> None:
        assert legality.castling_rook_square(ActionKind.CASTLE_SHORT, Side.FIRST, 8) == Square(7, 7)
        assert legality.castling_rook_square(ActionKind.CASTLE_LONG, Side.SECOND, 8) == Square(0, 0)


class TestAttacks:
    """Square attack detection."""

    def test_pawn_attacks_empty_diagonals(self) -> None:
        position = Position.from_layout("4k3/8/8/8/8/8/4P3/4K3")
        assert position.is_square_attacked(sq("d3"), Side.FIRST)
        assert position.is_square_attacked(sq("f3"), Side.FIRST)
        assert not position.is_square_attacked(sq("e3"), Side.FIRST)

    def test_slider_attack_stops_at_blocker(self) -> None:
        position = Position.from_layout("4k3/8/8/8/R2p4/8/8/4K3")
        assert position.is_square_attacked(sq("d4"), Side.FIRST)
        assert not position.is_square_attacked(sq("e4"), Side.FIRST)
        assert position.is_square_attacked(sq("a8"), Side.FIRST)

    def test_knight_and_king(self) -> None:
        position = Position.from_layout("4k3/8/8/8/3N4/8/8/4K3")
        assert position.is_square_attacked(sq("e6"), Side.FIRST)
        assert position.is_square_attacked(sq("f3"), Side.FIRST)
        assert not position.is_square_attacked(sq("d5"), Side.FIRST)
        assert position.is_square_attacked(sq("d7"), Side.SECOND)

"""Tests for Rules: checkmate, stalemate, draw detection."""

from rookery.core.enums import GameResult
from rookery.core.notation import position_from_fen
from rookery.core.position import Position
from rookery.core.rules import PositionStatus, Rules, classify
from rookery.core.transition import apply_move

FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"


class TestCheck:
    def test_starting_not_in_check(self, start: Position) -> None:
        assert not Rules.is_in_check(start)

    def test_fools_mate_in_check(self) -> None:
        # After 1.f3 e5 2.g4 Qh4#, white is in check
        assert Rules.is_in_check(position_from_fen(FOOLS_MATE))


class TestCheckmate:
    def test_fools_mate_played_out(self, start: Position) -> None:
        pos = start
        for origin, target in (("f2", "f3"), ("e7", "e5"), ("g2", "g4"), ("d8", "h4")):
            pos = apply_move(pos, origin, target).position
        assert pos.is_checkmate
        assert not pos.is_stalemate
        assert pos.fen() == FOOLS_MATE
        assert Rules.game_result(pos) == GameResult.BLACK_WINS

    def test_back_rank_mate(self) -> None:
        # R on a8 checks black king d8; white king d6 covers all escapes
        pos = position_from_fen("R2k4/8/3K4/8/8/8/8/8 b - - 0 1")
        assert Rules.is_checkmate(pos)
        assert Rules.game_result(pos) == GameResult.WHITE_WINS

    def test_not_checkmate_when_can_escape(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/r3K3 w - - 0 1")
        assert Rules.is_in_check(pos)
        assert not Rules.is_checkmate(pos)

    def test_not_checkmate_with_flight_square(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/5PPP/r3KR2 w - - 0 1")
        assert Rules.is_in_check(pos)
        assert not Rules.is_checkmate(pos)


class TestStalemate:
    def test_king_trapped(self) -> None:
        # Black king on h8, white K on f6, white Q on g6
        pos = position_from_fen("7k/8/5KQ1/8/8/8/8/8 b - - 0 1")
        assert Rules.is_stalemate(pos)
        assert not Rules.is_checkmate(pos)
        assert Rules.game_result(pos) == GameResult.DRAW

    def test_not_stalemate_when_has_moves(self) -> None:
        pos = position_from_fen("7k/8/5K2/8/8/8/8/8 b - - 0 1")
        assert not Rules.is_stalemate(pos)

    def test_stalemate_with_blocked_pawn(self) -> None:
        pos = position_from_fen("k7/P7/1K6/8/8/8/8/8 b - - 0 1")
        assert pos.is_stalemate


class TestClassify:
    def test_returns_status(self, start: Position) -> None:
        assert classify(start) == PositionStatus()

    def test_mate_and_stalemate_exclusive(self) -> None:
        for fen in (FOOLS_MATE, "7k/8/5KQ1/8/8/8/8/8 b - - 0 1"):
            status = classify(position_from_fen(fen))
            assert status.is_terminal
            assert not (status.is_checkmate and status.is_stalemate)

    def test_idempotent(self) -> None:
        pos = position_from_fen(FOOLS_MATE)
        assert classify(pos) == classify(pos) == pos.status


class TestInsufficientMaterial:
    def test_k_vs_k(self) -> None:
        pos = position_from_fen("8/8/4k3/8/8/4K3/8/8 w - - 0 1")
        assert Rules.is_insufficient_material(pos)
        assert Rules.game_result(pos) == GameResult.DRAW

    def test_k_bishop_vs_k(self) -> None:
        pos = position_from_fen("8/8/4k3/8/8/4K3/3B4/8 w - - 0 1")
        assert Rules.is_insufficient_material(pos)

    def test_k_knight_vs_k(self) -> None:
        pos = position_from_fen("8/8/4k3/8/8/4K3/3N4/8 w - - 0 1")
        assert Rules.is_insufficient_material(pos)

    def test_same_colour_bishops(self) -> None:
        pos = position_from_fen("5b2/8/4k3/8/8/4K3/8/2B5 w - - 0 1")
        assert Rules.is_insufficient_material(pos)

    def test_opposite_colour_bishops_sufficient(self) -> None:
        pos = position_from_fen("2b5/8/4k3/8/8/4K3/8/2B5 w - - 0 1")
        assert not Rules.is_insufficient_material(pos)

    def test_k_rook_vs_k_sufficient(self) -> None:
        pos = position_from_fen("8/8/4k3/8/8/4K3/3R4/8 w - - 0 1")
        assert not Rules.is_insufficient_material(pos)

    def test_kp_vs_k_sufficient(self) -> None:
        pos = position_from_fen("8/8/4k3/8/4P3/4K3/8/8 w - - 0 1")
        assert not Rules.is_insufficient_material(pos)


class TestFiftyMoveRule:
    def test_not_triggered_at_start(self) -> None:
        pos = position_from_fen("8/8/4k3/8/8/4K3/8/8 w - - 0 1")
        assert not Rules.is_fifty_move_rule(pos)

    def test_triggered_at_100_halfmoves(self) -> None:
        pos = position_from_fen("8/8/4k3/8/8/4K3/8/8 w - - 100 51")
        assert Rules.is_fifty_move_rule(pos)

    def test_reported_not_enforced(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/4K2R/7r w - - 100 51")
        assert Rules.is_fifty_move_rule(pos)
        assert Rules.game_result(pos) == GameResult.IN_PROGRESS


class TestGameResult:
    def test_in_progress_at_start(self, start: Position) -> None:
        assert Rules.game_result(start) == GameResult.IN_PROGRESS

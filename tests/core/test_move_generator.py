"""Perft tests — the gold standard for move-generator correctness.

Reference values: https://www.chessprogramming.org/Perft_Results
"""

import pytest

from rookery.core.enums import MoveFlag, PieceType
from rookery.core.move_generator import (
    MoveGenerator,
    has_legal_move,
    legal_destinations,
    legal_moves,
)
from rookery.core.notation import STARTING_FEN, position_from_fen
from rookery.core.position import Position
from rookery.core.transition import is_legal_move, make_move


def perft(position: Position, depth: int) -> int:
    """Count leaf nodes at *depth*; positions are immutable, so no unmake."""
    moves = MoveGenerator(position).generate_legal_moves()
    if depth == 1:
        return len(moves)
    return sum(perft(make_move(position, move), depth - 1) for move in moves)


# ── Starting position ────────────────────────────────────────────────────────


class TestPerftStarting:
    def test_depth_1(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert perft(pos, 1) == 20

    def test_depth_2(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert perft(pos, 2) == 400

    def test_depth_3(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert perft(pos, 3) == 8_902


# ── Kiwipete (rich in tactics: castling, ep, promotions) ─────────────────────

KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"


class TestPerftKiwipete:
    def test_depth_1(self) -> None:
        pos = position_from_fen(KIWIPETE)
        assert perft(pos, 1) == 48

    def test_depth_2(self) -> None:
        pos = position_from_fen(KIWIPETE)
        assert perft(pos, 2) == 2_039

    @pytest.mark.slow
    def test_depth_3(self) -> None:
        pos = position_from_fen(KIWIPETE)
        assert perft(pos, 3) == 97_862


# ── Position 3: en-passant + promotion edge cases ───────────────────────────

POS3 = "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1"


class TestPerftPos3:
    def test_depth_1(self) -> None:
        pos = position_from_fen(POS3)
        assert perft(pos, 1) == 14

    def test_depth_2(self) -> None:
        pos = position_from_fen(POS3)
        assert perft(pos, 2) == 191

    def test_depth_3(self) -> None:
        pos = position_from_fen(POS3)
        assert perft(pos, 3) == 2_812


# ── Position 4: mirrored, many promotions ────────────────────────────────────

POS4 = "r3k2r/Pppp1ppp/1b3nbN/nP6/BBP1P3/q4N2/Pp1P2PP/R2Q1RK1 w kq - 0 1"


class TestPerftPos4:
    def test_depth_1(self) -> None:
        pos = position_from_fen(POS4)
        assert perft(pos, 1) == 6

    def test_depth_2(self) -> None:
        pos = position_from_fen(POS4)
        assert perft(pos, 2) == 264

    @pytest.mark.slow
    def test_depth_3(self) -> None:
        pos = position_from_fen(POS4)
        assert perft(pos, 3) == 9_467


# ── Position 5 ───────────────────────────────────────────────────────────────

POS5 = "rnbq1k1r/pp1Pbppp/2p5/8/2B5/8/PPP1NnPP/RNBQK2R w KQ - 1 8"


class TestPerftPos5:
    def test_depth_1(self) -> None:
        pos = position_from_fen(POS5)
        assert perft(pos, 1) == 44

    def test_depth_2(self) -> None:
        pos = position_from_fen(POS5)
        assert perft(pos, 2) == 1_486

    @pytest.mark.slow
    def test_depth_3(self) -> None:
        pos = position_from_fen(POS5)
        assert perft(pos, 3) == 62_379


# ── Generator API ────────────────────────────────────────────────────────────


class TestGeneratorApi:
    def test_moves_from_square(self, start: Position) -> None:
        moves = MoveGenerator(start).generate_moves_from("b1")
        assert sorted(str(m) for m in moves) == ["b1a3", "b1c3"]

    def test_wrong_side_has_no_moves(self, start: Position) -> None:
        assert MoveGenerator(start).generate_moves_from("e7") == []

    def test_legal_destinations_sorted(self, start: Position) -> None:
        assert legal_destinations(start, "e2") == ["e3", "e4"]
        assert legal_destinations(start, "g1") == ["f3", "h3"]
        assert legal_destinations(start, "e4") == []

    def test_promotion_expands_to_four_pieces(self) -> None:
        pos = position_from_fen("8/P7/8/8/8/8/k7/7K w - - 0 1")
        promos = {
            m.promotion
            for m in MoveGenerator(pos).generate_moves_from("a7")
            if m.flag == MoveFlag.PROMOTION
        }
        assert promos == {
            PieceType.QUEEN,
            PieceType.ROOK,
            PieceType.BISHOP,
            PieceType.KNIGHT,
        }

    def test_pinned_piece_cannot_leave_line(self) -> None:
        pos = position_from_fen("4r1k1/8/8/8/8/8/4R3/4K3 w - - 0 1")
        assert legal_destinations(pos, "e2") == ["e3", "e4", "e5", "e6", "e7", "e8"]

    def test_generated_moves_pass_validator(self) -> None:
        pos = position_from_fen(KIWIPETE)
        for move in legal_moves(pos):
            assert is_legal_move(pos, move.from_sq, move.to_sq, move.promotion)

    def test_has_legal_move(self, start: Position) -> None:
        assert has_legal_move(start)
        mated = position_from_fen(
            "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
        )
        assert not has_legal_move(mated)

"""Tests for puzzle answer matching."""

import pytest

from rookery.core.enums import Color, PieceType
from rookery.core.move_generator import legal_moves
from rookery.core.notation import position_from_fen
from rookery.core.types import parse_square
from rookery.tactics.catalog import puzzle_from_san
from rookery.tactics.matcher import check_solution, encode_move_token
from rookery.tactics.models import Puzzle

# 1.e4 f6: the king's diagonal is open for Qh5+.
QH5_FEN = "rnbqkbnr/ppppp1pp/5p2/8/4P3/8/PPPP1PPP/RNBQKBNR w KQkq - 0 2"


@pytest.fixture
def qh5_puzzle() -> Puzzle:
    return puzzle_from_san("qh5", QH5_FEN, ["Qh5+"], theme="Check", rating=600)


class TestEncodeMoveToken:
    def test_plain(self) -> None:
        assert encode_move_token("e2", "e4") == "e2e4"

    def test_square_indexes(self) -> None:
        assert encode_move_token(parse_square("g1"), parse_square("f3")) == "g1f3"

    @pytest.mark.parametrize("promotion", ["q", "Q", "queen", PieceType.QUEEN])
    def test_promotion_letter_is_lowercase(self, promotion: str | PieceType) -> None:
        assert encode_move_token("e7", "e8", promotion) == "e7e8q"

    def test_knight_promotion(self) -> None:
        assert encode_move_token("a2", "a1", "knight") == "a2a1n"

    def test_invalid_square(self) -> None:
        with pytest.raises(ValueError):
            encode_move_token("e9", "e4")


class TestCheckSolution:
    def test_solution_from_san(self, qh5_puzzle: Puzzle) -> None:
        assert qh5_puzzle.solution == "d1h5"
        assert qh5_puzzle.side_to_move == Color.WHITE

    def test_matching_move_accepted(self, qh5_puzzle: Puzzle) -> None:
        assert check_solution(qh5_puzzle, "d1", "h5")

    def test_every_other_legal_move_refused(self, qh5_puzzle: Puzzle) -> None:
        pos = position_from_fen(qh5_puzzle.fen)
        others = [m for m in legal_moves(pos) if m.uci != "d1h5"]
        assert others
        for move in others:
            assert not check_solution(qh5_puzzle, move.from_sq, move.to_sq)

    def test_accepted_line_moves(self) -> None:
        puzzle = Puzzle(
            id="line",
            fen="4k3/1r6/8/8/2N5/8/8/4K3 w - - 0 1",
            solution="c4d6",
            moves=("c4d6", "e8d7", "d6b7"),
        )
        assert check_solution(puzzle, "d6", "b7")
        assert puzzle.accepted_moves == {"c4d6", "e8d7", "d6b7"}

    def test_promotion_must_match(self) -> None:
        puzzle = Puzzle(id="promo", fen="8/P7/8/8/8/8/k7/7K w - - 0 1", solution="a7a8q")
        assert check_solution(puzzle, "a7", "a8", "q")
        assert not check_solution(puzzle, "a7", "a8", "n")
        assert not check_solution(puzzle, "a7", "a8")

    def test_garbage_input_is_a_miss(self, qh5_puzzle: Puzzle) -> None:
        assert not check_solution(qh5_puzzle, "z1", "h5")
        assert not check_solution(qh5_puzzle, "d1", "h5", "dragon")


class TestPuzzleModel:
    def test_side_to_move_from_fen(self) -> None:
        puzzle = Puzzle(id="b", fen="4k3/8/8/8/8/8/8/4K3 b - - 0 1", solution="e8d8")
        assert puzzle.side_to_move == Color.BLACK

    def test_side_to_move_mismatch(self) -> None:
        with pytest.raises(ValueError):
            Puzzle(
                id="x",
                fen="4k3/8/8/8/8/8/8/4K3 b - - 0 1",
                solution="e8d8",
                side_to_move=Color.WHITE,
            )

    def test_invalid_fen(self) -> None:
        with pytest.raises(ValueError):
            Puzzle(id="x", fen="nonsense", solution="e2e4")

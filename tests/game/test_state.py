"""Tests for GameState."""

import pytest

from rookery.core.config import EngineSettings
from rookery.core.enums import Color, GameResult, PieceType
from rookery.core.errors import FenError, PgnError
from rookery.core.notation import STARTING_FEN, parse_pgn_game
from rookery.game.interfaces import GamePhase, MoveOutcome
from rookery.game.state import GameState

FOOLS_MATE_SANS = ("f3", "e5", "g4", "Qh4#")


def play_sans(gs: GameState, sans: tuple[str, ...]) -> MoveOutcome:
    outcome = MoveOutcome.rejected()
    for san in sans:
        outcome = gs.submit_san(san)
        assert outcome.success, san
    return outcome


class TestGameStateSetup:
    def test_position_is_available_before_setup(self) -> None:
        gs = GameState()
        assert gs.phase == GamePhase.NOT_STARTED
        assert gs.side_to_move == Color.WHITE

    def test_moves_refused_before_setup(self) -> None:
        gs = GameState()
        assert gs.submit_move("e2", "e4") == MoveOutcome.rejected()

    def test_setup_default(self, game: GameState) -> None:
        assert game.phase == GamePhase.AWAITING_MOVE
        assert game.result == GameResult.IN_PROGRESS
        assert game.side_to_move == Color.WHITE
        assert game.ply_count == 0
        assert game.start_fen == STARTING_FEN

    def test_setup_custom_fen(self) -> None:
        fen = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
        gs = GameState()
        gs.setup(fen)
        assert gs.side_to_move == Color.BLACK
        assert gs.start_fen == fen

    def test_setup_resets(self, game: GameState) -> None:
        game.submit_move("e2", "e4")
        assert game.ply_count == 1
        game.setup()
        assert game.ply_count == 0
        assert game.side_to_move == Color.WHITE

    @pytest.mark.parametrize(
        "fen",
        [
            "not a fen",
            "",
            "8/8/8/8/8/8/8/4K3 w - - 0 1",
            "4k3/8/8/8/8/8/8/3KK3 w - - 0 1",
        ],
    )
    def test_setup_rejects_unusable_fen(self, fen: str) -> None:
        gs = GameState()
        with pytest.raises(FenError):
            gs.setup(fen)
        assert gs.phase == GamePhase.NOT_STARTED

    def test_setup_on_finished_position(self) -> None:
        gs = GameState()
        gs.setup("rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3")
        assert gs.is_game_over
        assert gs.result == GameResult.BLACK_WINS


class TestGameStateMoves:
    def test_submit_move_records(self, game: GameState) -> None:
        outcome = game.submit_move("e2", "e4")
        assert outcome.success
        assert not outcome.in_check
        assert outcome.record is not None
        assert outcome.record.san == "e4"
        assert outcome.record.from_square == "e2"
        assert game.side_to_move == Color.BLACK
        assert game.move_history == (outcome.record,)

    def test_illegal_move_changes_nothing(self, game: GameState) -> None:
        fen_before = game.position.fen()
        for origin, target in (("e2", "e5"), ("e7", "e5"), ("e4", "e5"), ("q9", "e4")):
            assert game.submit_move(origin, target) == MoveOutcome.rejected()
        assert game.position.fen() == fen_before
        assert game.ply_count == 0

    def test_submit_san(self, game: GameState) -> None:
        assert game.submit_san("Nf3").success
        assert not game.submit_san("Nf3").success  # black has no knight that reaches f3
        assert game.ply_count == 1

    def test_check_is_reported(self) -> None:
        gs = GameState()
        gs.setup("4k3/8/8/8/8/8/8/R3K3 w - - 0 1")
        outcome = gs.submit_move("a1", "a8")
        assert outcome.in_check
        assert not outcome.is_checkmate

    def test_promotion_choice(self) -> None:
        gs = GameState()
        gs.setup("8/P7/8/8/8/8/k7/7K w - - 0 1")
        outcome = gs.submit_move("a7", "a8", "knight")
        assert outcome.record is not None
        assert outcome.record.promotion == PieceType.KNIGHT
        assert outcome.record.san == "a8=N"

    def test_promotion_required_by_settings(self) -> None:
        gs = GameState(settings=EngineSettings(default_promotion=None))
        gs.setup("8/P7/8/8/8/8/k7/7K w - - 0 1")
        assert not gs.submit_move("a7", "a8").success
        assert gs.submit_move("a7", "a8", "q").success

    def test_history_records_are_stable(self, game: GameState) -> None:
        first = game.submit_move("e2", "e4").record
        game.submit_move("e7", "e5")
        game.submit_move("g1", "f3")
        assert game.move_history[0] is first
        assert [r.san for r in game.move_history] == ["e4", "e5", "Nf3"]

    def test_legal_destinations(self, game: GameState) -> None:
        assert game.legal_destinations("b1") == ["a3", "c3"]
        assert game.legal_destinations("b8") == []


class TestGameStateUndo:
    def test_undo_restores(self, game: GameState) -> None:
        fen_before = game.position.fen()
        game.submit_move("e2", "e4")
        undone = game.undo_last_move()
        assert undone is not None
        assert undone.san == "e4"
        assert game.position.fen() == fen_before
        assert game.ply_count == 0

    def test_undo_keeps_earlier_moves(self, game: GameState) -> None:
        game.submit_move("e2", "e4")
        fen_after_e4 = game.position.fen()
        game.submit_move("e7", "e5")
        game.undo_last_move()
        assert game.position.fen() == fen_after_e4
        assert game.side_to_move == Color.BLACK

    def test_undo_empty_returns_none(self, game: GameState) -> None:
        assert game.undo_last_move() is None

    def test_undo_reopens_finished_game(self, game: GameState) -> None:
        play_sans(game, FOOLS_MATE_SANS)
        assert game.is_game_over
        game.undo_last_move()
        assert not game.is_game_over
        assert game.result == GameResult.IN_PROGRESS
        assert game.phase == GamePhase.AWAITING_MOVE


class TestGameStateTermination:
    def test_fools_mate_detected(self, game: GameState) -> None:
        """1.f3 e5 2.g4 Qh4# → checkmate detected automatically."""
        outcome = play_sans(game, FOOLS_MATE_SANS)
        assert outcome.is_checkmate
        assert outcome.in_check
        assert not outcome.is_stalemate
        assert game.result == GameResult.BLACK_WINS
        assert game.is_game_over

    def test_no_moves_after_game_over(self, game: GameState) -> None:
        play_sans(game, FOOLS_MATE_SANS)
        assert not game.submit_move("a2", "a3").success
        assert not game.submit_san("a3").success
        assert game.legal_destinations("a2") == []
        assert game.ply_count == 4

    def test_stalemate_detected(self) -> None:
        gs = GameState()
        gs.setup("7k/8/5K2/8/8/8/8/6Q1 w - - 0 1")
        outcome = gs.submit_move("g1", "g6")
        assert outcome.is_stalemate
        assert not outcome.is_checkmate
        assert gs.result == GameResult.DRAW
        assert gs.is_game_over


class TestGameStatePgn:
    def test_to_pgn(self, game: GameState) -> None:
        play_sans(game, ("e4", "e5"))
        text = game.to_pgn({"White": "Alice"})
        assert '[White "Alice"]' in text
        assert text.rstrip().endswith("1. e4 e5 *")
        assert "[FEN " not in text

    def test_to_pgn_records_custom_start(self) -> None:
        fen = "4k3/8/8/8/8/8/8/R3K3 w - - 0 1"
        gs = GameState()
        gs.setup(fen)
        gs.submit_move("a1", "a8")
        parsed = parse_pgn_game(gs.to_pgn())
        assert parsed.headers["SetUp"] == "1"
        assert parsed.headers["FEN"] == fen
        assert parsed.sans == ["Ra8+"]

    def test_finished_game_result(self, game: GameState) -> None:
        play_sans(game, FOOLS_MATE_SANS)
        text = game.to_pgn()
        assert '[Result "0-1"]' in text
        assert text.rstrip().endswith("2. g4 Qh4# 0-1")

    def test_roundtrip(self, game: GameState) -> None:
        play_sans(game, ("e4", "e5", "Nf3", "Nc6", "Bb5", "a6"))
        restored = GameState.from_pgn(game.to_pgn())
        assert restored.position == game.position
        assert [r.san for r in restored.move_history] == [
            r.san for r in game.move_history
        ]
        assert restored.phase == GamePhase.AWAITING_MOVE

    def test_from_pgn_with_custom_start(self) -> None:
        text = (
            '[SetUp "1"]\n[FEN "4k3/8/8/8/8/8/8/R3K3 w - - 0 1"]\n\n1. Ra8+ Kd7 *\n'
        )
        gs = GameState.from_pgn(text)
        assert gs.ply_count == 2
        assert gs.position.piece_at("d7") is not None

    def test_from_pgn_declared_result(self) -> None:
        gs = GameState.from_pgn("1. e4 e5 0-1")
        assert gs.result == GameResult.BLACK_WINS
        assert gs.is_game_over

    def test_from_pgn_unplayable_move(self) -> None:
        with pytest.raises(PgnError, match="ply 2"):
            GameState.from_pgn("1. e4 Ke7 2. Nf3 *")

"""High-level chess rules: check, checkmate, stalemate, draw helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from rookery.core.attacks import is_in_check
from rookery.core.enums import Color, GameResult, PieceType
from rookery.core.move_generator import has_legal_move
from rookery.core.types import file_of, rank_of

if TYPE_CHECKING:
    from rookery.core.position import Position


@dataclass(frozen=True, slots=True)
class PositionStatus:
    """Derived flags of a position. Checkmate and stalemate never coexist."""

    in_check: bool = False
    is_checkmate: bool = False
    is_stalemate: bool = False

    @property
    def is_terminal(self) -> bool:
        return self.is_checkmate or self.is_stalemate


def classify(position: Position) -> PositionStatus:
    """Check / checkmate / stalemate for the side to move.

    Pure: classifying the same position twice gives the same answer.
    """
    in_check = is_in_check(position, position.side_to_move)
    if has_legal_move(position):
        return PositionStatus(in_check=in_check)
    return PositionStatus(
        in_check=in_check,
        is_checkmate=in_check,
        is_stalemate=not in_check,
    )


class Rules:
    """Static rule-checker that operates on a :class:`Position`."""

    # Draw policy: this core only reports insufficient material and the
    # fifty-move counter; claiming and enforcing draws belongs to callers.

    @staticmethod
    def is_in_check(position: Position) -> bool:
        return position.status.in_check

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        return position.status.is_checkmate

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        return position.status.is_stalemate

    @staticmethod
    def is_insufficient_material(position: Position) -> bool:
        """K vs K, K+B vs K, K+N vs K, K+B vs K+B (same-color bishops)."""
        board = position.board
        white_occ = board.all_pieces_bitboard(Color.WHITE)
        black_occ = board.all_pieces_bitboard(Color.BLACK)
        total = (white_occ | black_occ).bit_count()

        # K vs K
        if total == 2:
            return True

        # K+minor vs K
        if total == 3:
            return (
                board.has_piece(Color.WHITE, PieceType.KNIGHT)
                or board.has_piece(Color.WHITE, PieceType.BISHOP)
                or board.has_piece(Color.BLACK, PieceType.KNIGHT)
                or board.has_piece(Color.BLACK, PieceType.BISHOP)
            )

        # K+B vs K+B with same-colour bishops
        if total == 4:
            wb = board.pieces(Color.WHITE, PieceType.BISHOP)
            bb = board.pieces(Color.BLACK, PieceType.BISHOP)
            if len(wb) == 1 and len(bb) == 1:
                w_color = (file_of(wb[0]) + rank_of(wb[0])) % 2
                b_color = (file_of(bb[0]) + rank_of(bb[0])) % 2
                return w_color == b_color

        return False

    @staticmethod
    def is_fifty_move_rule(position: Position) -> bool:
        return position.halfmove_clock >= 100  # 100 half-moves = 50 full moves

    @staticmethod
    def game_result(position: Position) -> GameResult:
        """Determine the current game result."""
        status = position.status
        if status.is_checkmate:
            return (
                GameResult.BLACK_WINS
                if position.side_to_move == Color.WHITE
                else GameResult.WHITE_WINS
            )
        if status.is_stalemate or Rules.is_insufficient_material(position):
            return GameResult.DRAW
        return GameResult.IN_PROGRESS

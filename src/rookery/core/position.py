"""Position — complete game state (board + metadata) as an immutable value."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from typing import TYPE_CHECKING

from rookery.core.board import Board
from rookery.core.enums import CastlingRights, Color
from rookery.core.piece import Piece
from rookery.core.types import Square, SquareLike, to_square

if TYPE_CHECKING:
    from rookery.core.rules import PositionStatus


@dataclass(frozen=True)
class Position:
    """Full chess position: board + side to move + castling + en passant + clocks.

    Positions are never changed in place. :func:`rookery.core.transition.apply_move`
    returns a fresh value, so anyone still holding an earlier position keeps
    seeing exactly what they saw before.

    Check / checkmate / stalemate are derived: they are computed on first
    access and cached on the instance.
    """

    board: Board = field(default_factory=Board.initial)
    side_to_move: Color = Color.WHITE
    castling: CastlingRights = CastlingRights.ALL
    en_passant: Square | None = None
    halfmove_clock: int = 0
    fullmove_number: int = 1

    @classmethod
    def initial(cls) -> Position:
        """Standard starting position."""
        return cls()

    # ── Queries ──────────────────────────────────────────────────────────

    def piece_at(self, square: SquareLike) -> Piece | None:
        return self.board[to_square(square)]

    @property
    def occupancy(self) -> dict[str, Piece]:
        """Square name → piece (a fresh dict; editing it changes nothing)."""
        return self.board.occupancy()

    def has_castling_right(self, right: CastlingRights) -> bool:
        return bool(self.castling & right)

    # ── Derived flags ────────────────────────────────────────────────────

    @cached_property
    def status(self) -> PositionStatus:
        from rookery.core.rules import classify

        return classify(self)

    @property
    def in_check(self) -> bool:
        return self.status.in_check

    @property
    def is_checkmate(self) -> bool:
        return self.status.is_checkmate

    @property
    def is_stalemate(self) -> bool:
        return self.status.is_stalemate

    def fen(self) -> str:
        from rookery.core.notation.fen import position_to_fen

        return position_to_fen(self)

    # ── Dunder helpers ───────────────────────────────────────────────────

    def __hash__(self) -> int:
        return hash(
            (
                tuple(self.board[sq] for sq in range(64)),
                self.side_to_move,
                self.castling,
                self.en_passant,
                self.halfmove_clock,
                self.fullmove_number,
            )
        )

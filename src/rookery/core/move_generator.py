"""Legal move enumeration."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from rookery.core.enums import MoveFlag, PieceType
from rookery.core.move import Move
from rookery.core.transition import leaves_king_in_check
from rookery.core.types import Square, SquareLike, square_name, to_square
from rookery.core.validator import move_flag, piece_reaches

if TYPE_CHECKING:
    from rookery.core.position import Position

_PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


class MoveGenerator:
    """Enumerates legal moves for a given :class:`Position`.

    Every piece of the side to move is tried against all 64 squares, filtered
    by the movement rules and then by king safety. The board is fixed-size, so
    this stays cheap without any pruning.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Public API ---------------------------------------------------------

    def generate_legal_moves(self) -> list[Move]:
        """All strictly legal moves for the side to move."""
        return list(self._iter_legal())

    def generate_moves_from(self, square: SquareLike) -> list[Move]:
        """Legal moves of the piece on *square* (empty for the wrong side)."""
        return list(self._iter_legal((to_square(square),)))

    def has_legal_move(self) -> bool:
        """Stops at the first legal move found."""
        return next(self._iter_legal(), None) is not None

    # -- Internals ------------------------------------------------------------

    def _iter_legal(self, origins: tuple[Square, ...] | None = None) -> Iterator[Move]:
        pos = self._pos
        board = self._board
        color = pos.side_to_move
        if origins is None:
            origins = tuple(board.all_pieces(color))

        for from_sq in origins:
            piece = board[from_sq]
            if piece is None or piece.color != color:
                continue
            for to_sq in range(64):
                if to_sq == from_sq:
                    continue
                target = board[to_sq]
                if target is not None and target.color == color:
                    continue
                if not piece_reaches(pos, piece, from_sq, to_sq):
                    continue
                for move in self._expand(from_sq, to_sq):
                    if not leaves_king_in_check(pos, move):
                        yield move

    def _expand(self, from_sq: Square, to_sq: Square) -> tuple[Move, ...]:
        flag = move_flag(self._pos, from_sq, to_sq)
        if flag == MoveFlag.PROMOTION:
            return tuple(Move(from_sq, to_sq, flag, pt) for pt in _PROMOTION_TYPES)
        return (Move(from_sq, to_sq, flag),)


def legal_moves(position: Position) -> list[Move]:
    return MoveGenerator(position).generate_legal_moves()


def legal_destinations(position: Position, square: SquareLike) -> list[str]:
    """Square names the piece on *square* can legally reach, sorted a1→h8."""
    moves = MoveGenerator(position).generate_moves_from(square)
    return [square_name(sq) for sq in sorted({m.to_sq for m in moves})]


def has_legal_move(position: Position) -> bool:
    return MoveGenerator(position).has_legal_move()

"""Geometric move validation.

Answers "may this piece go there" for the side to move, ignoring whether the
move exposes the mover's own king. Check filtering lives in
:mod:`rookery.core.transition`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rookery.core.attacks import KING_TARGETS, KNIGHT_TARGETS, board_square_attacked
from rookery.core.enums import CastleSide, CastlingRights, Color, MoveFlag, PieceType
from rookery.core.piece import Piece
from rookery.core.types import (
    Square,
    SquareLike,
    file_of,
    make_square,
    rank_of,
    to_square,
)

if TYPE_CHECKING:
    from rookery.core.board import Board
    from rookery.core.position import Position


def _build_between() -> tuple[tuple[tuple[Square, ...] | None, ...], ...]:
    """[from][to] -> squares strictly between, or None when not on a line."""
    table: list[tuple[tuple[Square, ...] | None, ...]] = []
    for from_sq in range(64):
        row: list[tuple[Square, ...] | None] = []
        for to_sq in range(64):
            df = file_of(to_sq) - file_of(from_sq)
            dr = rank_of(to_sq) - rank_of(from_sq)
            if from_sq == to_sq or not (df == 0 or dr == 0 or abs(df) == abs(dr)):
                row.append(None)
                continue
            step_f = (df > 0) - (df < 0)
            step_r = (dr > 0) - (dr < 0)
            squares: list[Square] = []
            f = file_of(from_sq) + step_f
            r = rank_of(from_sq) + step_r
            while (f, r) != (file_of(to_sq), rank_of(to_sq)):
                squares.append(make_square(f, r))
                f += step_f
                r += step_r
            row.append(tuple(squares))
        table.append(tuple(row))
    return tuple(table)


_BETWEEN = _build_between()

# Home squares and the rook corners / transit squares per castle side.
_KING_HOME: tuple[Square, Square] = (make_square(4, 0), make_square(4, 7))
_ROOK_FILE = {CastleSide.KINGSIDE: 7, CastleSide.QUEENSIDE: 0}
_ROOK_TARGET_FILE = {CastleSide.KINGSIDE: 5, CastleSide.QUEENSIDE: 3}


# -- Path helpers ------------------------------------------------------------


def squares_between(from_sq: Square, to_sq: Square) -> tuple[Square, ...] | None:
    """Squares strictly between two aligned squares (``None`` if unaligned)."""
    return _BETWEEN[from_sq][to_sq]


def is_path_clear(board: Board, from_sq: Square, to_sq: Square) -> bool:
    """Whether every square strictly between *from_sq* and *to_sq* is empty.

    Squares that share no rank, file or diagonal have no path at all.
    """
    between = _BETWEEN[from_sq][to_sq]
    if between is None:
        return False
    return all(board.is_empty(sq) for sq in between)


def _is_straight(from_sq: Square, to_sq: Square) -> bool:
    return from_sq != to_sq and (
        file_of(from_sq) == file_of(to_sq) or rank_of(from_sq) == rank_of(to_sq)
    )


def _is_diagonal(from_sq: Square, to_sq: Square) -> bool:
    return from_sq != to_sq and abs(file_of(to_sq) - file_of(from_sq)) == abs(
        rank_of(to_sq) - rank_of(from_sq)
    )


# -- Castling ----------------------------------------------------------------


def rook_squares(color: Color, side: CastleSide) -> tuple[Square, Square]:
    """(rook origin, rook destination) for a castling move."""
    rank = 0 if color == Color.WHITE else 7
    origin = make_square(_ROOK_FILE[side], rank)
    return origin, make_square(_ROOK_TARGET_FILE[side], rank)


def castle_side_of(from_sq: Square, to_sq: Square) -> CastleSide | None:
    """Castle side implied by a two-file king shift along its rank."""
    if rank_of(from_sq) != rank_of(to_sq):
        return None
    shift = file_of(to_sq) - file_of(from_sq)
    if shift == 2:
        return CastleSide.KINGSIDE
    if shift == -2:
        return CastleSide.QUEENSIDE
    return None


def can_castle(position: Position, king_sq: Square, to_sq: Square) -> bool:
    """Castling rule for a two-square king move.

    The right must still be held, the king must stand on its home square with
    its own rook in the corner, every square between them must be empty, and
    the king's origin, transit and destination squares must all be safe.
    """
    board = position.board
    king = board[king_sq]
    if king is None or king.piece_type != PieceType.KING:
        return False
    color = king.color
    if king_sq != _KING_HOME[int(color)]:
        return False

    side = castle_side_of(king_sq, to_sq)
    if side is None:
        return False
    if not position.castling & CastlingRights.for_side(color, side):
        return False

    rook_from, _ = rook_squares(color, side)
    if board[rook_from] != Piece(color, PieceType.ROOK):
        return False
    if not is_path_clear(board, king_sq, rook_from):
        return False

    opponent = color.opposite
    transit = _BETWEEN[king_sq][to_sq] or ()
    for sq in (king_sq, *transit, to_sq):
        if board_square_attacked(board, sq, opponent):
            return False
    return True


# -- Per-piece rules -----------------------------------------------------------


def _pawn_direction(color: Color) -> int:
    return 1 if color == Color.WHITE else -1


def _pawn_start_rank(color: Color) -> int:
    return 1 if color == Color.WHITE else 6


def is_en_passant_capture(position: Position, from_sq: Square, to_sq: Square) -> bool:
    """Pawn moving diagonally onto the recorded en-passant target."""
    pawn = position.board[from_sq]
    if pawn is None or pawn.piece_type != PieceType.PAWN:
        return False
    if position.en_passant is None or to_sq != position.en_passant:
        return False
    if abs(file_of(to_sq) - file_of(from_sq)) != 1:
        return False
    if rank_of(to_sq) - rank_of(from_sq) != _pawn_direction(pawn.color):
        return False
    victim = position.board[en_passant_victim_square(from_sq, to_sq)]
    return victim == Piece(pawn.color.opposite, PieceType.PAWN)


def en_passant_victim_square(from_sq: Square, to_sq: Square) -> Square:
    """The captured pawn sits beside the mover, one rank behind the target."""
    return make_square(file_of(to_sq), rank_of(from_sq))


def _pawn_legal(
    position: Position, pawn: Piece, from_sq: Square, to_sq: Square
) -> bool:
    board = position.board
    direction = _pawn_direction(pawn.color)
    df = file_of(to_sq) - file_of(from_sq)
    dr = rank_of(to_sq) - rank_of(from_sq)

    if df == 0:
        if not board.is_empty(to_sq):
            return False
        if dr == direction:
            return True
        if dr == 2 * direction and rank_of(from_sq) == _pawn_start_rank(pawn.color):
            return board.is_empty(from_sq + 8 * direction)
        return False

    if abs(df) == 1 and dr == direction:
        target = board[to_sq]
        if target is not None:
            return target.color != pawn.color
        return is_en_passant_capture(position, from_sq, to_sq)
    return False


def _king_legal(position: Position, from_sq: Square, to_sq: Square) -> bool:
    if to_sq in KING_TARGETS[from_sq]:
        return True
    return castle_side_of(from_sq, to_sq) is not None and can_castle(
        position, from_sq, to_sq
    )


def piece_reaches(
    position: Position, piece: Piece, from_sq: Square, to_sq: Square
) -> bool:
    """Movement rule for *piece* alone, without ownership or check checks."""
    board = position.board
    ptype = piece.piece_type
    if ptype == PieceType.PAWN:
        return _pawn_legal(position, piece, from_sq, to_sq)
    if ptype == PieceType.KNIGHT:
        return to_sq in KNIGHT_TARGETS[from_sq]
    if ptype == PieceType.BISHOP:
        return _is_diagonal(from_sq, to_sq) and is_path_clear(board, from_sq, to_sq)
    if ptype == PieceType.ROOK:
        return _is_straight(from_sq, to_sq) and is_path_clear(board, from_sq, to_sq)
    if ptype == PieceType.QUEEN:
        return (
            _is_straight(from_sq, to_sq) or _is_diagonal(from_sq, to_sq)
        ) and is_path_clear(board, from_sq, to_sq)
    return _king_legal(position, from_sq, to_sq)


# -- Public API ----------------------------------------------------------------


def is_geometrically_legal(
    position: Position, from_square: SquareLike, to_square_: SquareLike
) -> bool:
    """Whether the piece on *from_square* may move to *to_square_*, ignoring check.

    The origin must hold a piece of the side to move and the destination must
    not hold one of that side's own pieces; otherwise the answer is ``False``.
    """
    from_sq = to_square(from_square)
    to_sq = to_square(to_square_)
    if from_sq == to_sq:
        return False
    board = position.board
    piece = board[from_sq]
    if piece is None or piece.color != position.side_to_move:
        return False
    target = board[to_sq]
    if target is not None and target.color == piece.color:
        return False
    return piece_reaches(position, piece, from_sq, to_sq)


def move_flag(position: Position, from_sq: Square, to_sq: Square) -> MoveFlag:
    """Classify a geometrically legal move."""
    piece = position.board[from_sq]
    assert piece is not None
    if piece.piece_type == PieceType.KING:
        side = castle_side_of(from_sq, to_sq)
        if side == CastleSide.KINGSIDE:
            return MoveFlag.CASTLE_KINGSIDE
        if side == CastleSide.QUEENSIDE:
            return MoveFlag.CASTLE_QUEENSIDE
        return MoveFlag.NORMAL
    if piece.piece_type != PieceType.PAWN:
        return MoveFlag.NORMAL
    if rank_of(to_sq) in (0, 7):
        return MoveFlag.PROMOTION
    if abs(rank_of(to_sq) - rank_of(from_sq)) == 2:
        return MoveFlag.DOUBLE_PAWN
    if is_en_passant_capture(position, from_sq, to_sq):
        return MoveFlag.EN_PASSANT
    return MoveFlag.NORMAL

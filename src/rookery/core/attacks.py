"""Attack detection: is a square attacked, is a king in check."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rookery.core.enums import Color, PieceType
from rookery.core.types import Square, SquareLike, make_square, to_square

if TYPE_CHECKING:
    from rookery.core.board import Board
    from rookery.core.position import Position


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> tuple[frozenset[Square], ...]:
    targets: list[frozenset[Square]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        moves: set[Square] = set()
        for df, dr in offsets:
            af = file_idx + df
            ar = rank_idx + dr
            if 0 <= af < 8 and 0 <= ar < 8:
                moves.add(make_square(af, ar))
        targets.append(frozenset(moves))
    return tuple(targets)


def _build_attack_masks(targets: tuple[frozenset[Square], ...]) -> tuple[int, ...]:
    masks: list[int] = [0] * 64
    for sq in range(64):
        mask = 0
        for to_sq in targets[sq]:
            mask |= 1 << to_sq
        masks[sq] = mask
    return tuple(masks)


def _build_pawn_attacker_masks() -> tuple[tuple[int, ...], tuple[int, ...]]:
    """[color][sq] -> squares from which a *color* pawn attacks *sq*."""
    white_masks: list[int] = [0] * 64
    black_masks: list[int] = [0] * 64

    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3

        white_mask = 0
        if rank_idx > 0:
            if file_idx > 0:
                white_mask |= 1 << make_square(file_idx - 1, rank_idx - 1)
            if file_idx < 7:
                white_mask |= 1 << make_square(file_idx + 1, rank_idx - 1)

        black_mask = 0
        if rank_idx < 7:
            if file_idx > 0:
                black_mask |= 1 << make_square(file_idx - 1, rank_idx + 1)
            if file_idx < 7:
                black_mask |= 1 << make_square(file_idx + 1, rank_idx + 1)

        white_masks[sq] = white_mask
        black_masks[sq] = black_mask

    return (tuple(white_masks), tuple(black_masks))


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            af = file_idx + df
            ar = rank_idx + dr
            ray: list[Square] = []
            while 0 <= af < 8 and 0 <= ar < 8:
                ray.append(make_square(af, ar))
                af += df
                ar += dr
            square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
KING_TARGETS = _build_targets(KING_OFFSETS)
_KNIGHT_ATTACK_MASKS = _build_attack_masks(KNIGHT_TARGETS)
_KING_ATTACK_MASKS = _build_attack_masks(KING_TARGETS)
_PAWN_ATTACKER_MASKS = _build_pawn_attacker_masks()

BISHOP_RAYS = _build_rays(BISHOP_DIRS)
ROOK_RAYS = _build_rays(ROOK_DIRS)

_DIAGONAL_ATTACKERS = (PieceType.BISHOP, PieceType.QUEEN)
_STRAIGHT_ATTACKERS = (PieceType.ROOK, PieceType.QUEEN)


# -- Board-level checks ----------------------------------------------------


def _ray_attacked(
    board: Board,
    rays: tuple[tuple[Square, ...], ...],
    by_color: Color,
    attackers: tuple[PieceType, PieceType],
) -> bool:
    for ray in rays:
        for to_sq in ray:
            piece = board[to_sq]
            if piece is None:
                continue
            if piece.color == by_color and piece.piece_type in attackers:
                return True
            break
    return False


def board_square_attacked(board: Board, sq: Square, by_color: Color) -> bool:
    """Is *sq* attacked by any piece of *by_color* on *board*?

    Pawns count only their capture diagonals.
    """
    if (
        board.pieces_bitboard(by_color, PieceType.PAWN)
        & _PAWN_ATTACKER_MASKS[int(by_color)][sq]
    ):
        return True

    if board.pieces_bitboard(by_color, PieceType.KNIGHT) & _KNIGHT_ATTACK_MASKS[sq]:
        return True

    if board.pieces_bitboard(by_color, PieceType.KING) & _KING_ATTACK_MASKS[sq]:
        return True

    has_queen = board.has_piece(by_color, PieceType.QUEEN)

    if has_queen or board.has_piece(by_color, PieceType.BISHOP):
        if _ray_attacked(board, BISHOP_RAYS[sq], by_color, _DIAGONAL_ATTACKERS):
            return True

    if has_queen or board.has_piece(by_color, PieceType.ROOK):
        if _ray_attacked(board, ROOK_RAYS[sq], by_color, _STRAIGHT_ATTACKERS):
            return True

    return False


def board_in_check(board: Board, color: Color) -> bool:
    """Is *color*'s king attacked? A side without a king is never in check."""
    king_sq = board.find_king(color)
    if king_sq is None:
        return False
    return board_square_attacked(board, king_sq, color.opposite)


# -- Public API ------------------------------------------------------------


def is_square_attacked(position: Position, square: SquareLike, by_color: Color) -> bool:
    """Is *square* within reach of any piece of *by_color*?"""
    return board_square_attacked(position.board, to_square(square), by_color)


def is_in_check(position: Position, color: Color) -> bool:
    """Is *color*'s king attacked by the opponent?"""
    return board_in_check(position.board, color)

"""State transition: validate a move request and derive the next position."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rookery.core.config import DEFAULT_SETTINGS, EngineSettings
from rookery.core.attacks import board_in_check
from rookery.core.enums import CastlingRights, Color, MoveFlag, PieceType
from rookery.core.errors import IllegalMoveError, MoveRejection
from rookery.core.move import Move, MoveRecord, is_promotable
from rookery.core.piece import Piece, piece_type_from_name
from rookery.core.position import Position
from rookery.core.types import (
    Square,
    SquareLike,
    file_of,
    make_square,
    rank_of,
    square_name,
    to_square,
)
from rookery.core.validator import (
    en_passant_victim_square,
    move_flag,
    piece_reaches,
    rook_squares,
)

_LOGGER = logging.getLogger(__name__)

_ROOK_CORNERS: dict[Square, CastlingRights] = {
    make_square(0, 0): CastlingRights.WHITE_QUEENSIDE,
    make_square(7, 0): CastlingRights.WHITE_KINGSIDE,
    make_square(0, 7): CastlingRights.BLACK_QUEENSIDE,
    make_square(7, 7): CastlingRights.BLACK_KINGSIDE,
}


@dataclass(frozen=True, slots=True)
class Transition:
    """Outcome of a successful :func:`apply_move`."""

    position: Position
    record: MoveRecord


# ── Pure move application ────────────────────────────────────────────────────


def _next_castling(position: Position, move: Move, piece: Piece) -> CastlingRights:
    rights = position.castling
    if piece.piece_type == PieceType.KING:
        rights &= ~CastlingRights.both(piece.color)

    # A rook leaving its corner, or anything landing there, ends that right.
    for sq in (move.from_sq, move.to_sq):
        if sq in _ROOK_CORNERS:
            rights &= ~_ROOK_CORNERS[sq]
    return rights


def make_move(position: Position, move: Move) -> Position:
    """Return the position after *move*, assuming it is legal.

    *position* is left untouched; the new position gets its own board.
    """
    board = position.board.copy()
    piece = board[move.from_sq]
    if piece is None:
        raise ValueError(f"No piece on {square_name(move.from_sq)}")

    captured = board[move.to_sq]
    if move.flag == MoveFlag.EN_PASSANT:
        victim_sq = en_passant_victim_square(move.from_sq, move.to_sq)
        captured = board[victim_sq]
        board[victim_sq] = None

    board[move.from_sq] = None
    placed = piece
    if move.flag == MoveFlag.PROMOTION and move.promotion is not None:
        placed = Piece(piece.color, move.promotion)
    board[move.to_sq] = placed

    side = move.castle_side
    if side is not None:
        rook_from, rook_to = rook_squares(piece.color, side)
        board[rook_to] = board[rook_from]
        board[rook_from] = None

    en_passant: Square | None = None
    if move.flag == MoveFlag.DOUBLE_PAWN:
        en_passant = make_square(
            file_of(move.from_sq),
            (rank_of(move.from_sq) + rank_of(move.to_sq)) // 2,
        )

    if piece.piece_type == PieceType.PAWN or captured is not None:
        halfmove = 0
    else:
        halfmove = position.halfmove_clock + 1

    fullmove = position.fullmove_number
    if position.side_to_move == Color.BLACK:
        fullmove += 1

    return Position(
        board=board,
        side_to_move=position.side_to_move.opposite,
        castling=_next_castling(position, move, piece),
        en_passant=en_passant,
        halfmove_clock=halfmove,
        fullmove_number=fullmove,
    )


def leaves_king_in_check(position: Position, move: Move) -> bool:
    """Would *move* expose the mover's own king? Checked on a throwaway copy."""
    return board_in_check(make_move(position, move).board, position.side_to_move)


# ── Validation ───────────────────────────────────────────────────────────────


def _reject(message: str, reason: MoveRejection) -> IllegalMoveError:
    _LOGGER.debug("Move rejected (%s): %s", reason.name, message)
    return IllegalMoveError(message, reason)


def resolve_move(
    position: Position,
    from_square: SquareLike,
    to_square_: SquareLike,
    promotion: PieceType | str | None = None,
    *,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> Move:
    """Turn a move request into a fully legal :class:`Move`.

    Raises :class:`IllegalMoveError` for any reason the move is not allowed.
    A promotion piece supplied for a move that does not promote is ignored.
    """
    try:
        from_sq = to_square(from_square)
        to_sq = to_square(to_square_)
    except ValueError as exc:
        raise _reject(str(exc), MoveRejection.GEOMETRICALLY_ILLEGAL) from None

    board = position.board
    piece = board[from_sq]
    label = f"{square_name(from_sq)}{square_name(to_sq)}"
    if piece is None:
        raise _reject(f"{label}: origin is empty", MoveRejection.NO_PIECE)
    if piece.color != position.side_to_move:
        raise _reject(f"{label}: not {piece.color}'s turn", MoveRejection.WRONG_SIDE)

    target = board[to_sq]
    if (
        from_sq == to_sq
        or (target is not None and target.color == piece.color)
        or not piece_reaches(position, piece, from_sq, to_sq)
    ):
        raise _reject(
            f"{label}: illegal for {piece.piece_type}",
            MoveRejection.GEOMETRICALLY_ILLEGAL,
        )

    flag = move_flag(position, from_sq, to_sq)
    promo: PieceType | None = None
    if flag == MoveFlag.PROMOTION:
        try:
            promo = (
                piece_type_from_name(promotion)
                if promotion is not None
                else settings.default_promotion
            )
        except ValueError as exc:
            raise _reject(
                f"{label}: {exc}", MoveRejection.GEOMETRICALLY_ILLEGAL
            ) from None
        if promo is None or not is_promotable(promo):
            raise _reject(
                f"{label}: invalid promotion piece {promo!r}",
                MoveRejection.GEOMETRICALLY_ILLEGAL,
            )

    move = Move(from_sq, to_sq, flag, promo)
    if leaves_king_in_check(position, move):
        raise _reject(
            f"{label}: king would be in check", MoveRejection.LEAVES_KING_IN_CHECK
        )
    return move


def is_legal_move(
    position: Position,
    from_square: SquareLike,
    to_square_: SquareLike,
    promotion: PieceType | str | None = None,
    *,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> bool:
    """Boolean form of :func:`resolve_move`."""
    try:
        resolve_move(position, from_square, to_square_, promotion, settings=settings)
    except IllegalMoveError:
        return False
    return True


# ── Public transition ────────────────────────────────────────────────────────


def build_record(position: Position, move: Move, after: Position) -> MoveRecord:
    """History entry for *move* played from *position* into *after*."""
    from rookery.core.notation.fen import position_to_fen
    from rookery.core.notation.san import move_to_san

    piece = position.board[move.from_sq]
    assert piece is not None
    if move.flag == MoveFlag.EN_PASSANT:
        captured = PieceType.PAWN
    else:
        victim = position.board[move.to_sq]
        captured = victim.piece_type if victim is not None else None

    return MoveRecord(
        from_square=square_name(move.from_sq),
        to_square=square_name(move.to_sq),
        piece=piece.piece_type,
        san=move_to_san(position, move, after),
        fen=position_to_fen(after),
        captured=captured,
        promotion=move.promotion,
        castle=move.castle_side,
        en_passant=move.flag == MoveFlag.EN_PASSANT,
    )


def apply_move(
    position: Position,
    from_square: SquareLike,
    to_square_: SquareLike,
    promotion: PieceType | str | None = None,
    *,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> Transition:
    """Validate and play a move request, returning the new position and record.

    Validation is atomic: on :class:`IllegalMoveError` nothing was produced and
    *position* is unchanged (it always is).
    """
    move = resolve_move(position, from_square, to_square_, promotion, settings=settings)
    return play(position, move)


def play(position: Position, move: Move) -> Transition:
    """Play an already validated *move* and record it."""
    after = make_move(position, move)
    record = build_record(position, move, after)
    _LOGGER.debug("Applied %s (%s) -> %s", record.uci, record.san, record.fen)
    return Transition(position=after, record=record)

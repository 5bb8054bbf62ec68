"""SAN (Standard Algebraic Notation) conversion and parsing."""

from __future__ import annotations

from rookery.core.enums import MoveFlag, PieceType
from rookery.core.errors import IllegalMoveError, MoveRejection
from rookery.core.move import Move
from rookery.core.move_generator import MoveGenerator
from rookery.core.position import Position
from rookery.core.transition import make_move
from rookery.core.types import (
    FILE_NAMES,
    RANK_NAMES,
    file_of,
    parse_square,
    rank_of,
    square_name,
)

SAN_PIECE: dict[PieceType, str] = {
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}
_SAN_PIECE_REV: dict[str, PieceType] = {v: k for k, v in SAN_PIECE.items()}


def _disambiguation(position: Position, move: Move, piece_type: PieceType) -> str:
    board = position.board
    rivals = [
        m.from_sq
        for m in MoveGenerator(position).generate_legal_moves()
        if m.to_sq == move.to_sq
        and m.from_sq != move.from_sq
        and (rival := board[m.from_sq]) is not None
        and rival.piece_type == piece_type
    ]
    if not rivals:
        return ""
    if all(file_of(sq) != file_of(move.from_sq) for sq in rivals):
        return FILE_NAMES[file_of(move.from_sq)]
    if all(rank_of(sq) != rank_of(move.from_sq) for sq in rivals):
        return RANK_NAMES[rank_of(move.from_sq)]
    return square_name(move.from_sq)


def move_to_san(position: Position, move: Move, after: Position | None = None) -> str:
    """Convert a legal *move* to SAN given the *position* before the move.

    *after* may be passed when the caller already holds the resulting
    position; it is derived otherwise.
    """
    board = position.board
    piece = board[move.from_sq]
    assert piece is not None

    # Castling
    if move.flag == MoveFlag.CASTLE_KINGSIDE:
        san = "O-O"
    elif move.flag == MoveFlag.CASTLE_QUEENSIDE:
        san = "O-O-O"
    else:
        san = ""
        is_capture = board[move.to_sq] is not None or move.flag == MoveFlag.EN_PASSANT

        if piece.piece_type == PieceType.PAWN:
            if is_capture:
                san += FILE_NAMES[file_of(move.from_sq)]
        else:
            san += SAN_PIECE[piece.piece_type]
            san += _disambiguation(position, move, piece.piece_type)

        if is_capture:
            san += "x"

        san += square_name(move.to_sq)

        if move.flag == MoveFlag.PROMOTION and move.promotion is not None:
            san += "=" + SAN_PIECE[move.promotion]

    # Check / checkmate suffix; mate wins over plain check.
    if after is None:
        after = make_move(position, move)
    if after.is_checkmate:
        san += "#"
    elif after.in_check:
        san += "+"
    return san


def _illegal(san: str) -> IllegalMoveError:
    return IllegalMoveError(f"Illegal move: {san}", MoveRejection.GEOMETRICALLY_ILLEGAL)


def parse_san(position: Position, san: str) -> Move:
    """Parse a SAN string into a :class:`Move` given the current *position*."""
    legal = MoveGenerator(position).generate_legal_moves()

    clean = san.strip().rstrip("+#!?")

    # Castling
    if clean in ("O-O", "0-0"):
        for m in legal:
            if m.flag == MoveFlag.CASTLE_KINGSIDE:
                return m
        raise _illegal(san)

    if clean in ("O-O-O", "0-0-0"):
        for m in legal:
            if m.flag == MoveFlag.CASTLE_QUEENSIDE:
                return m
        raise _illegal(san)

    # Promotion ("e8=Q" or "e8Q")
    promotion: PieceType | None = None
    if len(clean) >= 3 and clean[-1] in _SAN_PIECE_REV:
        body = clean[:-1].removesuffix("=")
        if body and body[-1] in RANK_NAMES:
            promotion = _SAN_PIECE_REV[clean[-1]]
            clean = body

    # Destination (last two chars)
    try:
        to_sq = parse_square(clean[-2:])
    except ValueError:
        raise _illegal(san) from None
    clean = clean[:-2]

    # Capture marker
    if clean.endswith("x"):
        clean = clean[:-1]

    # Piece type
    if clean and clean[0] in _SAN_PIECE_REV:
        piece_type = _SAN_PIECE_REV[clean[0]]
        clean = clean[1:]
    else:
        piece_type = PieceType.PAWN

    # Disambiguation
    from_file: int | None = None
    from_rank: int | None = None
    for ch in clean:
        if ch in FILE_NAMES:
            from_file = FILE_NAMES.index(ch)
        elif ch in RANK_NAMES:
            from_rank = RANK_NAMES.index(ch)
        else:
            raise _illegal(san)
    if piece_type == PieceType.PAWN and from_file is None:
        # No file prefix: a straight push, never a capture.
        from_file = file_of(to_sq)

    # Find matching legal move
    candidates: list[Move] = []
    for m in legal:
        p = position.board[m.from_sq]
        if p is None or p.piece_type != piece_type:
            continue
        if m.to_sq != to_sq:
            continue
        # A bare "e8" is read as the default queen promotion.
        wanted = promotion
        if wanted is None and m.promotion is not None:
            wanted = PieceType.QUEEN
        if m.promotion != wanted:
            continue
        if from_file is not None and file_of(m.from_sq) != from_file:
            continue
        if from_rank is not None and rank_of(m.from_sq) != from_rank:
            continue
        candidates.append(m)

    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        raise _illegal(san)
    raise IllegalMoveError(
        f"Ambiguous move: {san} → {[str(c) for c in candidates]}",
        MoveRejection.GEOMETRICALLY_ILLEGAL,
    )

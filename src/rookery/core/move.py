"""Move value objects: the internal candidate and the immutable history record."""

from __future__ import annotations

from dataclasses import dataclass

from rookery.core.enums import CastleSide, MoveFlag, PieceType
from rookery.core.piece import PIECE_LETTERS, piece_type_from_name
from rookery.core.types import Square, parse_square, square_name

_PROMOTABLE: frozenset[PieceType] = frozenset(
    (PieceType.KNIGHT, PieceType.BISHOP, PieceType.ROOK, PieceType.QUEEN)
)


@dataclass(frozen=True, slots=True)
class Move:
    """Candidate move between two squares (UCI-style representation)."""

    from_sq: Square
    to_sq: Square
    flag: MoveFlag = MoveFlag.NORMAL
    promotion: PieceType | None = None

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.promotion is not None:
            base += PIECE_LETTERS[self.promotion]
        return base

    @property
    def uci(self) -> str:
        """UCI long-algebraic notation."""
        return str(self)

    @property
    def castle_side(self) -> CastleSide | None:
        if self.flag == MoveFlag.CASTLE_KINGSIDE:
            return CastleSide.KINGSIDE
        if self.flag == MoveFlag.CASTLE_QUEENSIDE:
            return CastleSide.QUEENSIDE
        return None


def is_promotable(piece_type: PieceType) -> bool:
    """Whether a pawn may become *piece_type*."""
    return piece_type in _PROMOTABLE


def parse_uci(text: str) -> tuple[Square, Square, PieceType | None]:
    """Split ``"e7e8q"`` into origin, destination and optional promotion."""
    if len(text) not in (4, 5):
        raise ValueError(f"Invalid UCI move: {text!r}")
    from_sq = parse_square(text[0:2])
    to_sq = parse_square(text[2:4])
    promotion: PieceType | None = None
    if len(text) == 5:
        promotion = piece_type_from_name(text[4])
        if not is_promotable(promotion):
            raise ValueError(f"Invalid UCI promotion piece: {text!r}")
    return from_sq, to_sq, promotion


@dataclass(frozen=True, slots=True)
class MoveRecord:
    """One applied move as exposed in the game history. Never mutated."""

    from_square: str
    to_square: str
    piece: PieceType
    san: str
    fen: str
    captured: PieceType | None = None
    promotion: PieceType | None = None
    castle: CastleSide | None = None
    en_passant: bool = False

    @property
    def uci(self) -> str:
        base = self.from_square + self.to_square
        if self.promotion is not None:
            base += PIECE_LETTERS[self.promotion]
        return base

"""Puzzle answer checking by move token."""

from __future__ import annotations

import logging

from rookery.core.enums import PieceType
from rookery.core.piece import PIECE_LETTERS, piece_type_from_name
from rookery.core.types import SquareLike, square_name, to_square
from rookery.tactics.models import Puzzle

_LOGGER = logging.getLogger(__name__)


def encode_move_token(
    from_square: SquareLike,
    to_square_: SquareLike,
    promotion: PieceType | str | None = None,
) -> str:
    """``from`` + ``to`` + optional promotion letter, e.g. ``"e7e8q"``."""
    token = square_name(to_square(from_square)) + square_name(to_square(to_square_))
    if promotion is not None:
        token += PIECE_LETTERS[piece_type_from_name(promotion)]
    return token


def check_solution(
    puzzle: Puzzle,
    from_square: SquareLike,
    to_square_: SquareLike,
    promotion: PieceType | str | None = None,
) -> bool:
    """Whether the played move matches the puzzle's solution or accepted line.

    Plain token equality: legality is the engine's job and must already have
    been checked by the caller.
    """
    try:
        token = encode_move_token(from_square, to_square_, promotion)
    except ValueError:
        return False
    matched = token == puzzle.solution or token in puzzle.moves
    _LOGGER.debug(
        "Puzzle %s: %s -> %s", puzzle.id, token, "solved" if matched else "miss"
    )
    return matched

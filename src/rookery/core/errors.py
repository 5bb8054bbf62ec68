"""Exception hierarchy for the rules engine.

Every error is a :class:`ValueError`, so callers that only care about "bad
input" can keep catching that.
"""

from __future__ import annotations

from enum import StrEnum


class RookeryError(ValueError):
    """Base class for all engine errors."""


class FenError(RookeryError):
    """Structurally invalid FEN text."""


class PgnError(RookeryError):
    """PGN text that cannot be parsed or replayed."""


class MoveRejection(StrEnum):
    """Diagnostic reason behind an illegal move.

    Callers see a single "move rejected" outcome; the reason exists for logs
    and tests.
    """

    NO_PIECE = "no piece on origin square"
    WRONG_SIDE = "piece belongs to the side not on move"
    GEOMETRICALLY_ILLEGAL = "piece cannot move that way"
    LEAVES_KING_IN_CHECK = "move leaves own king in check"


class IllegalMoveError(RookeryError):
    """A move request that the position does not allow."""

    def __init__(self, message: str, reason: MoveRejection) -> None:
        super().__init__(message)
        self.reason = reason

"""Puzzle reference data."""

from __future__ import annotations

from dataclasses import dataclass

from rookery.core.enums import Color
from rookery.core.notation.fen import position_from_fen


@dataclass(frozen=True, slots=True)
class Puzzle:
    """A tactics exercise. Read-only: the matcher never changes it.

    ``solution`` and ``moves`` hold move tokens (``"d1h5"``, ``"a7a8q"``).
    ``moves`` is the accepted line; the solution is accepted even when the
    line does not repeat it.
    """

    id: str
    fen: str
    solution: str
    moves: tuple[str, ...] = ()
    theme: str = ""
    rating: int = 0
    description: str = ""
    side_to_move: Color | None = None

    def __post_init__(self) -> None:
        position = position_from_fen(self.fen)
        if self.side_to_move is None:
            object.__setattr__(self, "side_to_move", position.side_to_move)
        elif self.side_to_move != position.side_to_move:
            raise ValueError(
                f"Puzzle {self.id!r}: side to move disagrees with its FEN"
            )
        object.__setattr__(self, "moves", tuple(self.moves))

    @property
    def accepted_moves(self) -> frozenset[str]:
        return frozenset((self.solution, *self.moves))

"""Bundled tactics exercises and lookup helpers."""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Iterator, Sequence

from rookery.core.errors import RookeryError
from rookery.core.notation.fen import position_from_fen
from rookery.core.notation.san import parse_san
from rookery.core.transition import make_move
from rookery.tactics.models import Puzzle

_LOGGER = logging.getLogger(__name__)

RATING_WINDOW = 200


def puzzle_from_san(
    puzzle_id: str,
    fen: str,
    san_line: Sequence[str],
    *,
    theme: str = "",
    rating: int = 0,
    description: str = "",
) -> Puzzle:
    """Build a :class:`Puzzle` from a SAN line played out from *fen*.

    The first move of the line becomes the canonical solution. Raises
    :class:`~rookery.core.errors.IllegalMoveError` if any move does not fit.
    """
    if not san_line:
        raise ValueError(f"Puzzle {puzzle_id!r} has an empty solution line")
    position = position_from_fen(fen)
    tokens: list[str] = []
    for san in san_line:
        move = parse_san(position, san)
        tokens.append(move.uci)
        position = make_move(position, move)
    return Puzzle(
        id=puzzle_id,
        fen=fen,
        solution=tokens[0],
        moves=tuple(tokens),
        theme=theme,
        rating=rating,
        description=description,
    )


_BUILTIN: tuple[dict, ...] = (
    {
        "puzzle_id": "opening-center",
        "fen": "r1bqkbnr/pppp1ppp/2n5/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R w KQkq - 2 3",
        "san_line": ("d4",),
        "theme": "Opening",
        "rating": 800,
        "description": "Best move to gain central control",
    },
    {
        "puzzle_id": "promotion-check",
        "fen": "8/P7/8/8/8/8/k7/7K w - - 0 1",
        "san_line": ("a8=Q+",),
        "theme": "Promotion",
        "rating": 900,
        "description": "Promote with check",
    },
    {
        "puzzle_id": "scholars-mate",
        "fen": "r1bqkb1r/pppp1ppp/2n2n2/4p2Q/2B1P3/8/PPPP1PPP/RNB1K1NR w KQkq - 4 4",
        "san_line": ("Qxf7#",),
        "theme": "Mate in 1",
        "rating": 1000,
        "description": "White to move and mate",
    },
    {
        "puzzle_id": "knight-fork",
        "fen": "4k3/1r6/8/8/2N5/8/8/4K3 w - - 0 1",
        "san_line": ("Nd6+", "Kd7", "Nxb7"),
        "theme": "Fork",
        "rating": 1100,
        "description": "Knight fork wins the rook",
    },
    {
        "puzzle_id": "back-rank",
        "fen": "6k1/5ppp/8/8/8/8/8/R5K1 w - - 0 1",
        "san_line": ("Ra8#",),
        "theme": "Mate in 1",
        "rating": 1200,
        "description": "Exploit the weak back rank",
    },
)


class PuzzleCatalog:
    """Read-only, ordered collection of puzzles."""

    __slots__ = ("_puzzles", "_by_id")

    def __init__(self, puzzles: Iterable[Puzzle]) -> None:
        self._puzzles: tuple[Puzzle, ...] = tuple(puzzles)
        self._by_id: dict[str, Puzzle] = {}
        for puzzle in self._puzzles:
            if puzzle.id in self._by_id:
                raise ValueError(f"Duplicate puzzle id: {puzzle.id!r}")
            self._by_id[puzzle.id] = puzzle

    @classmethod
    def builtin(cls) -> PuzzleCatalog:
        """The bundled exercises; entries that fail to replay are skipped."""
        puzzles: list[Puzzle] = []
        for entry in _BUILTIN:
            try:
                puzzles.append(puzzle_from_san(**entry))
            except RookeryError as exc:
                _LOGGER.warning("Skipping puzzle %s: %s", entry["puzzle_id"], exc)
        return cls(puzzles)

    # ── Lookup ───────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._puzzles)

    def __iter__(self) -> Iterator[Puzzle]:
        return iter(self._puzzles)

    def __contains__(self, puzzle_id: object) -> bool:
        return puzzle_id in self._by_id

    def get(self, puzzle_id: str) -> Puzzle:
        try:
            return self._by_id[puzzle_id]
        except KeyError:
            raise KeyError(f"Unknown puzzle: {puzzle_id!r}") from None

    def by_theme(self, theme: str) -> list[Puzzle]:
        """Puzzles tagged *theme*, case-insensitively."""
        wanted = theme.casefold()
        return [p for p in self._puzzles if p.theme.casefold() == wanted]

    def themes(self) -> list[str]:
        """Distinct themes in first-seen order."""
        return list(dict.fromkeys(p.theme for p in self._puzzles))

    def next_puzzle(
        self, player_rating: int, rng: random.Random | None = None
    ) -> Puzzle:
        """Random puzzle within ±200 of *player_rating*, else any puzzle."""
        if not self._puzzles:
            raise LookupError("Puzzle catalog is empty")
        chooser = rng or random
        low, high = player_rating - RATING_WINDOW, player_rating + RATING_WINDOW
        suitable = [p for p in self._puzzles if low <= p.rating <= high]
        return chooser.choice(suitable or list(self._puzzles))

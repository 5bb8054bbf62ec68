"""Engine policy settings.

Settings are plain immutable values handed to the functions that need them;
there is no process-wide mutable configuration.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import Any

from rookery.core.enums import PieceType
from rookery.core.move import is_promotable
from rookery.core.piece import piece_type_from_name


@dataclass(frozen=True, slots=True)
class EngineSettings:
    """All caller-tunable policy knobs."""

    # Moves
    # Piece a pawn becomes when the request names none. ``None`` makes the
    # promotion piece mandatory.
    default_promotion: PieceType | None = PieceType.QUEEN

    # PGN export
    event_name: str = "Casual Game"
    site_name: str = "Rookery"
    white_name: str = "Player 1"
    black_name: str = "Player 2"
    pgn_plies_per_line: int = 12  # 0 keeps all movetext on one line

    def __post_init__(self) -> None:
        if self.default_promotion is not None and not is_promotable(
            self.default_promotion
        ):
            raise ValueError(
                f"Invalid default promotion piece: {self.default_promotion!r}"
            )
        if self.pgn_plies_per_line < 0:
            raise ValueError("pgn_plies_per_line must be >= 0")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> EngineSettings:
        """Build settings from a plain dict (e.g. a parsed config file)."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown engine settings: {', '.join(unknown)}")

        kwargs = dict(values)
        promotion = kwargs.get("default_promotion")
        if isinstance(promotion, str):
            kwargs["default_promotion"] = piece_type_from_name(promotion)
        return cls(**kwargs)

    def with_overrides(self, **changes: Any) -> EngineSettings:
        return replace(self, **changes)


DEFAULT_SETTINGS = EngineSettings()

"""Session-level enums and the move-request boundary types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rookery.core.move import MoveRecord


class GamePhase(IntEnum):
    """Finite-state-machine states for a game session."""

    NOT_STARTED = auto()
    AWAITING_MOVE = auto()
    GAME_OVER = auto()


@dataclass(frozen=True, slots=True)
class MoveOutcome:
    """Answer to one move request.

    A rejected request carries no record and all flags are ``False``.
    """

    success: bool
    in_check: bool = False
    is_checkmate: bool = False
    is_stalemate: bool = False
    record: MoveRecord | None = None

    @classmethod
    def rejected(cls) -> MoveOutcome:
        return cls(success=False)

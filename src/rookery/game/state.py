"""Game session — owns the position, the move history and the game phase."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from rookery.core.config import DEFAULT_SETTINGS, EngineSettings
from rookery.core.enums import Color, GameResult, PieceType
from rookery.core.errors import FenError, IllegalMoveError, PgnError
from rookery.core.move import MoveRecord
from rookery.core.move_generator import legal_destinations
from rookery.core.notation import (
    STARTING_FEN,
    build_pgn,
    game_result_from_pgn,
    parse_pgn_game,
    parse_san,
    pgn_result_token,
    position_from_fen,
)
from rookery.core.position import Position
from rookery.core.rules import Rules
from rookery.core.transition import Transition, apply_move, play
from rookery.core.types import SquareLike
from rookery.game.interfaces import GamePhase, MoveOutcome

_LOGGER = logging.getLogger(__name__)


@dataclass
class GameState:
    """Manages one game: phase, result, position and move history.

    This is a pure data/logic class: no threading, no UI. Each accepted move
    replaces :attr:`position` with a new value and appends one record to the
    history; nothing already handed out is ever modified.
    """

    settings: EngineSettings = DEFAULT_SETTINGS
    position: Position = field(default_factory=Position.initial, init=False)
    phase: GamePhase = field(default=GamePhase.NOT_STARTED, init=False)
    result: GameResult = field(default=GameResult.IN_PROGRESS, init=False)
    start_fen: str = field(default=STARTING_FEN, init=False)
    _history: list[MoveRecord] = field(default_factory=list, init=False, repr=False)

    # ── Initialisation ───────────────────────────────────────────────────

    def setup(self, fen: str | None = None) -> None:
        """Initialise (or reset) the game.

        Raises :class:`~rookery.core.errors.FenError` for unusable FEN,
        including a setup without exactly one king per side.
        """
        start_fen = STARTING_FEN if fen is None else fen
        position = position_from_fen(start_fen)
        for color in (Color.WHITE, Color.BLACK):
            if position.board.king_count(color) != 1:
                raise FenError(f"Game needs exactly one {color} king: {start_fen!r}")

        self.start_fen = start_fen
        self.position = position
        self.phase = GamePhase.AWAITING_MOVE
        self.result = GameResult.IN_PROGRESS
        self._history.clear()
        self._check_game_over()
        _LOGGER.info("Game set up from %s", start_fen)

    # ── Move application ─────────────────────────────────────────────────

    def submit_move(
        self,
        from_square: SquareLike,
        to_square: SquareLike,
        promotion: PieceType | str | None = None,
    ) -> MoveOutcome:
        """Handle one move request from the UI.

        Illegal requests (including any request once the game is over) are
        answered with ``success=False`` and leave the session untouched.
        """
        if self.phase != GamePhase.AWAITING_MOVE:
            _LOGGER.debug(
                "Move %s%s refused in phase %s", from_square, to_square, self.phase.name
            )
            return MoveOutcome.rejected()
        try:
            step = apply_move(
                self.position, from_square, to_square, promotion, settings=self.settings
            )
        except IllegalMoveError:
            return MoveOutcome.rejected()
        return self._commit(step)

    def submit_san(self, san: str) -> MoveOutcome:
        """Same as :meth:`submit_move` for a SAN token."""
        if self.phase != GamePhase.AWAITING_MOVE:
            return MoveOutcome.rejected()
        try:
            move = parse_san(self.position, san)
        except IllegalMoveError:
            return MoveOutcome.rejected()
        return self._commit(play(self.position, move))

    def undo_last_move(self) -> MoveRecord | None:
        """Drop the last move by replaying the rest from the start position.

        Returns the removed record, or ``None`` if there is nothing to undo.
        """
        if not self._history:
            return None

        removed = self._history[-1]
        remaining = self._history[:-1]
        self.setup(self.start_fen)
        for record in remaining:
            self._commit(
                apply_move(
                    self.position,
                    record.from_square,
                    record.to_square,
                    record.promotion,
                    settings=self.settings,
                )
            )
        return removed

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def move_history(self) -> tuple[MoveRecord, ...]:
        """Append-only history, oldest first."""
        return tuple(self._history)

    @property
    def side_to_move(self) -> Color:
        return self.position.side_to_move

    @property
    def is_game_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    @property
    def ply_count(self) -> int:
        """Number of half-moves played."""
        return len(self._history)

    def legal_destinations(self, square: SquareLike) -> list[str]:
        """Squares the piece on *square* may move to (for highlighting)."""
        if self.is_game_over:
            return []
        return legal_destinations(self.position, square)

    # ── PGN ──────────────────────────────────────────────────────────────

    def to_pgn(self, headers: dict[str, str] | None = None) -> str:
        """Export the game; caller headers override the defaults."""
        merged = dict(headers or {})
        if self.start_fen != STARTING_FEN:
            merged.setdefault("SetUp", "1")
            merged.setdefault("FEN", self.start_fen)
        return build_pgn(
            merged,
            [record.san for record in self._history],
            pgn_result_token(self.result),
            settings=self.settings,
        )

    @classmethod
    def from_pgn(
        cls, pgn_text: str, settings: EngineSettings = DEFAULT_SETTINGS
    ) -> GameState:
        """Rebuild a session by replaying the PGN mainline."""
        parsed = parse_pgn_game(pgn_text)
        state = cls(settings=settings)
        state.setup(parsed.headers.get("FEN"))

        for ply, pgn_move in enumerate(parsed.moves, start=1):
            outcome = state.submit_san(pgn_move.san)
            if not outcome.success:
                raise PgnError(f"Unplayable PGN move at ply {ply}: {pgn_move.san!r}")

        declared = game_result_from_pgn(parsed.result_token)
        if state.result == GameResult.IN_PROGRESS and declared != GameResult.IN_PROGRESS:
            # Resignation, agreement or flag fall: recorded, not derived.
            state.result = declared
            state.phase = GamePhase.GAME_OVER
        _LOGGER.info(
            "Imported PGN game: %d plies, result %s", state.ply_count, parsed.result_token
        )
        return state

    # ── Internal ─────────────────────────────────────────────────────────

    def _commit(self, step: Transition) -> MoveOutcome:
        self.position = step.position
        self._history.append(step.record)
        self._check_game_over()
        status = self.position.status
        return MoveOutcome(
            success=True,
            in_check=status.in_check,
            is_checkmate=status.is_checkmate,
            is_stalemate=status.is_stalemate,
            record=step.record,
        )

    def _check_game_over(self) -> None:
        status = self.position.status
        if not status.is_terminal:
            return
        self.result = Rules.game_result(self.position)
        self.phase = GamePhase.GAME_OVER
        _LOGGER.info(
            "Game over after %d plies: %s",
            self.ply_count,
            "checkmate" if status.is_checkmate else "stalemate",
        )

"""Game management layer — one session's position, history and phase.

Quick start::

    from rookery.game import GameState

    game = GameState()
    game.setup()
    outcome = game.submit_move("e2", "e4")
"""

from rookery.game.interfaces import GamePhase, MoveOutcome
from rookery.game.state import GameState

__all__ = [
    "GamePhase",
    "GameState",
    "MoveOutcome",
]

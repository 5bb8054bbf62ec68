"""Core domain layer — pure chess rules with zero external dependencies.

Quick start::

    from rookery.core import Position, apply_move, position_to_fen

    pos = Position.initial()
    step = apply_move(pos, "e2", "e4")
    print(step.record.san, position_to_fen(step.position))
"""

from rookery.core.attacks import is_in_check, is_square_attacked
from rookery.core.board import Board
from rookery.core.config import DEFAULT_SETTINGS, EngineSettings
from rookery.core.enums import (
    CastleSide,
    CastlingRights,
    Color,
    GameResult,
    MoveFlag,
    PieceType,
)
from rookery.core.errors import (
    FenError,
    IllegalMoveError,
    MoveRejection,
    PgnError,
    RookeryError,
)
from rookery.core.move import Move, MoveRecord, parse_uci
from rookery.core.move_generator import (
    MoveGenerator,
    has_legal_move,
    legal_destinations,
    legal_moves,
)
from rookery.core.notation import (
    STARTING_FEN,
    build_pgn,
    move_to_san,
    parse_pgn_game,
    parse_san,
    position_from_fen,
    position_to_fen,
)
from rookery.core.piece import Piece, piece_type_from_name
from rookery.core.position import Position
from rookery.core.rules import PositionStatus, Rules, classify
from rookery.core.transition import (
    Transition,
    apply_move,
    is_legal_move,
    make_move,
    resolve_move,
)
from rookery.core.types import (
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
    to_square,
)
from rookery.core.validator import is_geometrically_legal, is_path_clear

__all__ = [
    # Enums / flags
    "CastleSide",
    "CastlingRights",
    "Color",
    "GameResult",
    "MoveFlag",
    "PieceType",
    # Errors
    "FenError",
    "IllegalMoveError",
    "MoveRejection",
    "PgnError",
    "RookeryError",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    "to_square",
    "piece_type_from_name",
    "parse_uci",
    # Domain objects
    "Board",
    "EngineSettings",
    "Move",
    "MoveGenerator",
    "MoveRecord",
    "Piece",
    "Position",
    "PositionStatus",
    "Rules",
    "Transition",
    # Operations
    "apply_move",
    "classify",
    "has_legal_move",
    "is_geometrically_legal",
    "is_in_check",
    "is_legal_move",
    "is_path_clear",
    "is_square_attacked",
    "legal_destinations",
    "legal_moves",
    "make_move",
    "resolve_move",
    "DEFAULT_SETTINGS",
    # Notation
    "STARTING_FEN",
    "build_pgn",
    "move_to_san",
    "parse_pgn_game",
    "parse_san",
    "position_from_fen",
    "position_to_fen",
]

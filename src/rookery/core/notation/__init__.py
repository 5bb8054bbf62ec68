"""Notation package: FEN / SAN / PGN parsing and serialization."""

from rookery.core.notation.fen import STARTING_FEN, position_from_fen, position_to_fen
from rookery.core.notation.models import ParsedPgn, PgnMove
from rookery.core.notation.pgn import (
    SEVEN_TAG_ROSTER,
    build_pgn,
    default_headers,
    game_result_from_pgn,
    parse_pgn,
    parse_pgn_game,
    pgn_movetext_from_moves,
    pgn_movetext_from_sans,
    pgn_result_token,
)
from rookery.core.notation.san import move_to_san, parse_san

__all__ = [
    "STARTING_FEN",
    "SEVEN_TAG_ROSTER",
    "PgnMove",
    "ParsedPgn",
    "position_from_fen",
    "position_to_fen",
    "move_to_san",
    "parse_san",
    "pgn_result_token",
    "game_result_from_pgn",
    "default_headers",
    "pgn_movetext_from_sans",
    "pgn_movetext_from_moves",
    "build_pgn",
    "parse_pgn_game",
    "parse_pgn",
]

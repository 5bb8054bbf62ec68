"""Tactics trainer support: puzzle records, catalog and answer matching."""

from rookery.tactics.catalog import PuzzleCatalog, puzzle_from_san
from rookery.tactics.matcher import check_solution, encode_move_token
from rookery.tactics.models import Puzzle

__all__ = [
    "Puzzle",
    "PuzzleCatalog",
    "check_solution",
    "encode_move_token",
    "puzzle_from_san",
]

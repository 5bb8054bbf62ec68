"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import pytest

from rookery.core.position import Position
from rookery.game.state import GameState
from rookery.tactics.catalog import PuzzleCatalog


@pytest.fixture
def start() -> Position:
    """Standard starting position."""
    return Position.initial()


@pytest.fixture
def game() -> GameState:
    """A session already set up from the starting position."""
    state = GameState()
    state.setup()
    return state


@pytest.fixture(scope="session")
def catalog() -> PuzzleCatalog:
    return PuzzleCatalog.builtin()

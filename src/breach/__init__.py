"""Breach Protocol puzzle solver."""

from __future__ import annotations

from .errors import (
    BreachError,
    CellOutOfRangeError,
    DimensionOverflowError,
    GridShapeError,
    MoveAlternationError,
    SearchBudgetExceeded,
)
from .grid import BLANK_TOKEN, CellCoord, Grid, Token
from .matching import COMPLETED, START, MatchState
from .model import Axis, Daemon, Move, MoveType, Puzzle, Solution, daemon_in_buffer, replay_coords
from .solver import BreachSolver, SearchMethod, SearchStats
from .state import SearchState

__all__ = [
    "Axis",
    "BLANK_TOKEN",
    "BreachError",
    "BreachSolver",
    "COMPLETED",
    "CellCoord",
    "CellOutOfRangeError",
    "Daemon",
    "DimensionOverflowError",
    "Grid",
    "GridShapeError",
    "MatchState",
    "Move",
    "MoveAlternationError",
    "MoveType",
    "Puzzle",
    "START",
    "SearchBudgetExceeded",
    "SearchMethod",
    "SearchState",
    "SearchStats",
    "Solution",
    "Token",
    "daemon_in_buffer",
    "replay_coords",
]

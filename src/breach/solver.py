"""Backtracking search for Breach Protocol move sequences."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .errors import SearchBudgetExceeded
from .grid import Grid
from .model import Puzzle, Solution
from .state import SearchState

_LOGGER = logging.getLogger(__name__)


class SearchMethod(str, Enum):
    """Query modes understood by the solver and its callers."""

    SHORTEST = "shortest"
    FIRST_MATCH = "first"
    ALL = "all"

    @classmethod
    def parse(cls, value: "str | SearchMethod") -> "SearchMethod":
        if isinstance(value, SearchMethod):
            return value
        normalised = str(value).strip().lower().replace("_", "-")
        aliases = {"first-match": "first", "firstmatch": "first", "solve-all": "all"}
        normalised = aliases.get(normalised, normalised)
        try:
            return cls(normalised)
        except ValueError as exc:
            raise ValueError(f"Unknown search method: {value!r}") from exc


@dataclass
class SearchStats:
    """Counters collected during one query."""

    nodes_visited: int = 0
    solutions_found: int = 0
    max_depth: int = 0
    elapsed_ms: int = 0

    def to_payload(self) -> dict:
        return {
            "nodes_visited": self.nodes_visited,
            "solutions_found": self.solutions_found,
            "max_depth": self.max_depth,
            "elapsed_ms": self.elapsed_ms,
        }


def _by_length(solution: Solution) -> int:
    return len(solution.moves)


class BreachSolver:
    """Depth-first solver over a single :class:`Puzzle`.

    The search starts from an implicit ``Row(0)`` move, so the first decision
    always selects a column. Candidates are tried in ascending index order and
    the resulting solution lists are stably sorted by length, which makes the
    output fully deterministic for a given puzzle.

    ``max_nodes`` bounds the number of candidate moves applied per query;
    ``None`` leaves the search unbounded.
    """

    def __init__(self, puzzle: Puzzle, *, max_nodes: int | None = None) -> None:
        self.puzzle = puzzle
        self.max_nodes = max_nodes if max_nodes else None
        self.last_stats = SearchStats()

    def solve(self, method: SearchMethod | str = SearchMethod.SHORTEST) -> Optional[Solution]:
        """Return the shortest solution found by ``method`` or ``None``."""

        method = SearchMethod.parse(method)
        first_only = method is SearchMethod.FIRST_MATCH
        solutions = sorted(self._run(first_only=first_only), key=_by_length)
        return solutions[0] if solutions else None

    def solve_all(self) -> List[Solution]:
        """Return every solution, shortest first, in discovery order within a length."""

        return sorted(self._run(first_only=False), key=_by_length)

    def to_grid(self, solution: Solution) -> Grid:
        """Blank copy of the puzzle grid with 1-based step numbers on visited cells."""

        source = self.puzzle.grid
        grid = Grid.blank(source.rows, source.cols)
        for step, (row, col) in enumerate(solution.to_coords(), start=1):
            grid.set_cell(row, col, str(step))
        return grid

    def _run(self, *, first_only: bool) -> List[Solution]:
        self.last_stats = SearchStats()
        grid = self.puzzle.grid
        if self.puzzle.buffer_size <= 0 or not grid.cells:
            return []

        start = time.perf_counter()
        state = SearchState.initial(self.puzzle)
        try:
            solutions = self._step(state, first_only)
        finally:
            self.last_stats.elapsed_ms = int((time.perf_counter() - start) * 1000)
        self.last_stats.solutions_found = len(solutions)
        _LOGGER.debug(
            "search finished: first_only=%s solutions=%d nodes=%d depth=%d elapsed_ms=%d",
            first_only,
            len(solutions),
            self.last_stats.nodes_visited,
            self.last_stats.max_depth,
            self.last_stats.elapsed_ms,
        )
        return solutions

    def _visit(self, depth: int) -> None:
        stats = self.last_stats
        stats.nodes_visited += 1
        if depth > stats.max_depth:
            stats.max_depth = depth
        if self.max_nodes is not None and stats.nodes_visited > self.max_nodes:
            raise SearchBudgetExceeded(self.max_nodes, stats.nodes_visited)

    def _step(self, state: SearchState, first_only: bool) -> List[Solution]:
        grid = self.puzzle.grid
        daemons = self.puzzle.daemons
        found: List[Solution] = []

        for move, coord in list(state.candidates()):
            applied = state.push(move, coord, grid.get_cell(*coord), daemons)
            stop = False
            try:
                self._visit(state.move_count)
                if state.completed:
                    found.append(state.to_solution())
                    stop = first_only
                elif state.move_count < self.puzzle.buffer_size:
                    found.extend(self._step(state, first_only))
            finally:
                state.pop(applied)
            if stop:
                break
        return found


__all__ = ["BreachSolver", "SearchMethod", "SearchStats"]

"""Mutable depth-first search frame with exact undo."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Sequence, Tuple

from .errors import MoveAlternationError
from .grid import CellCoord, Token
from .matching import START, MatchState, all_completed
from .model import INITIAL_MOVE, Daemon, Move, MoveType, Puzzle, Solution


@dataclass(frozen=True, slots=True)
class Applied:
    """Undo record returned by :meth:`SearchState.push`."""

    coord: CellCoord
    daemon_states: Tuple[MatchState, ...]


@dataclass
class SearchState:
    """The single in-flight search frame.

    One instance flows through the whole depth-first search. Every
    :meth:`push` is paired with exactly one :meth:`pop`, after which the frame
    is equal to what it was before the push. Used cells live in a flat
    ``bytearray`` indexed by ``row * cols + col``.
    """

    rows: int
    cols: int
    buffer: List[Token] = field(default_factory=list)
    moves: List[Move] = field(default_factory=list)
    move_count: int = 0
    daemon_states: List[MatchState] = field(default_factory=list)
    next_move_type: MoveType = MoveType.SELECT_COLUMN
    used_cells: bytearray = field(default_factory=bytearray)

    @classmethod
    def initial(cls, puzzle: Puzzle) -> "SearchState":
        grid = puzzle.grid
        return cls(
            rows=grid.rows,
            cols=grid.cols,
            daemon_states=[START] * len(puzzle.daemons),
            used_cells=bytearray(grid.rows * grid.cols),
        )

    @property
    def previous_move(self) -> Move:
        return self.moves[-1] if self.moves else INITIAL_MOVE

    def is_used(self, coord: CellCoord) -> bool:
        return bool(self.used_cells[coord[0] * self.cols + coord[1]])

    def _mark(self, coord: CellCoord, value: int) -> None:
        self.used_cells[coord[0] * self.cols + coord[1]] = value

    def candidates(self) -> Iterator[Tuple[Move, CellCoord]]:
        """Yield legal ``(move, coord)`` pairs in ascending index order."""

        previous = self.previous_move
        if self.next_move_type is MoveType.SELECT_COLUMN:
            if not previous.is_row:
                raise MoveAlternationError(f"column selection must follow a row move, got {previous}")
            fixed_row = previous.index
            for col in range(self.cols):
                coord = (fixed_row, col)
                if not self.is_used(coord):
                    yield Move.column(col), coord
        else:
            if not previous.is_column:
                raise MoveAlternationError(f"row selection must follow a column move, got {previous}")
            fixed_col = previous.index
            for row in range(self.rows):
                coord = (row, fixed_col)
                if not self.is_used(coord):
                    yield Move.row(row), coord

    def push(self, move: Move, coord: CellCoord, token: Token, daemons: Sequence[Daemon]) -> Applied:
        """Apply ``move`` and return the record needed to undo it."""

        applied = Applied(coord=coord, daemon_states=tuple(self.daemon_states))
        self._mark(coord, 1)
        self.buffer.append(token)
        self.moves.append(move)
        self.move_count += 1
        self.daemon_states = [
            state.advance(daemon.tokens, token) for state, daemon in zip(self.daemon_states, daemons)
        ]
        self.next_move_type = self.next_move_type.flipped()
        return applied

    def pop(self, applied: Applied) -> None:
        self.next_move_type = self.next_move_type.flipped()
        self.daemon_states = list(applied.daemon_states)
        self.move_count -= 1
        self.moves.pop()
        self.buffer.pop()
        self._mark(applied.coord, 0)

    @property
    def completed(self) -> bool:
        return all_completed(self.daemon_states)

    def to_solution(self) -> Solution:
        return Solution(moves=tuple(self.moves), buffer=tuple(self.buffer))

    def snapshot(self) -> tuple:
        """Comparable copy of every field, used to check undo exactness."""

        return (
            tuple(self.buffer),
            tuple(self.moves),
            self.move_count,
            tuple(self.daemon_states),
            self.next_move_type,
            bytes(self.used_cells),
        )


__all__ = ["Applied", "SearchState"]

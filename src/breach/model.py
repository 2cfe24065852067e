"""Value objects describing a Breach Protocol puzzle and its solutions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Sequence, Tuple

from .grid import CellCoord, Grid, Token


class Axis(str, Enum):
    """Axis fixed by a move. ``NONE`` is the pre-search placeholder only."""

    ROW = "row"
    COLUMN = "column"
    NONE = "none"

    @classmethod
    def from_value(cls, value: str) -> "Axis":
        try:
            return cls(value)
        except ValueError as exc:
            raise ValueError(f"Unsupported move axis: {value!r}") from exc


class MoveType(str, Enum):
    """Which selection the next move makes."""

    SELECT_COLUMN = "select_column"
    SELECT_ROW = "select_row"

    def flipped(self) -> "MoveType":
        if self is MoveType.SELECT_COLUMN:
            return MoveType.SELECT_ROW
        return MoveType.SELECT_COLUMN


@dataclass(frozen=True, slots=True)
class Move:
    """A single selection: ``Row(index)`` or ``Column(index)``."""

    axis: Axis
    index: int = 0

    @classmethod
    def row(cls, index: int) -> "Move":
        return cls(Axis.ROW, index)

    @classmethod
    def column(cls, index: int) -> "Move":
        return cls(Axis.COLUMN, index)

    @property
    def is_row(self) -> bool:
        return self.axis is Axis.ROW

    @property
    def is_column(self) -> bool:
        return self.axis is Axis.COLUMN

    def to_payload(self) -> dict:
        return {"axis": self.axis.value, "index": int(self.index)}

    def __str__(self) -> str:
        if self.axis is Axis.ROW:
            return f"Row({self.index})"
        if self.axis is Axis.COLUMN:
            return f"Column({self.index})"
        return "None"


NO_MOVE = Move(Axis.NONE)

# The player always starts by picking a cell in the first row.
INITIAL_MOVE = Move.row(0)


@dataclass(frozen=True)
class Daemon:
    """Target token sequence that must appear contiguously in the buffer."""

    tokens: Tuple[Token, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "tokens", tuple(str(token) for token in self.tokens))
        if not self.tokens:
            raise ValueError("daemon must contain at least one token")

    @classmethod
    def of(cls, tokens: Iterable[Token]) -> "Daemon":
        return cls(tuple(tokens))

    def __len__(self) -> int:
        return len(self.tokens)

    def __getitem__(self, index: int) -> Token:
        return self.tokens[index]

    def __iter__(self):
        return iter(self.tokens)


@dataclass(frozen=True)
class Puzzle:
    """Grid, daemons and move budget for a single solve request."""

    buffer_size: int
    grid: Grid
    daemons: Tuple[Daemon, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if isinstance(self.buffer_size, bool) or not isinstance(self.buffer_size, int):
            raise TypeError("buffer_size must be an integer")
        if self.buffer_size < 0:
            raise ValueError(f"buffer_size must be >= 0, got {self.buffer_size}")
        daemons = tuple(d if isinstance(d, Daemon) else Daemon.of(d) for d in self.daemons)
        object.__setattr__(self, "daemons", daemons)

    @classmethod
    def build(
        cls,
        buffer_size: int,
        rows: int,
        cols: int,
        cells: Iterable[Token],
        daemons: Iterable[Iterable[Token]] = (),
    ) -> "Puzzle":
        """Convenience constructor from plain lists."""

        return cls(
            buffer_size=buffer_size,
            grid=Grid.from_cells(rows, cols, cells),
            daemons=tuple(Daemon.of(tokens) for tokens in daemons),
        )


def replay_coords(moves: Iterable[Move]) -> List[CellCoord]:
    """Replay ``moves`` from the implicit ``(0, 0)`` reference.

    A ``Row`` move keeps the previous column, a ``Column`` move keeps the
    previous row. Replay stops at the first placeholder move.
    """

    last: CellCoord = (0, 0)
    coords: List[CellCoord] = []
    for move in moves:
        if move.axis is Axis.ROW:
            coord = (move.index, last[1])
        elif move.axis is Axis.COLUMN:
            coord = (last[0], move.index)
        else:
            break
        coords.append(coord)
        last = coord
    return coords


@dataclass(frozen=True)
class Solution:
    """A finished move sequence and the token buffer it collects."""

    moves: Tuple[Move, ...]
    buffer: Tuple[Token, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "moves", tuple(self.moves))
        object.__setattr__(self, "buffer", tuple(self.buffer))
        if len(self.moves) != len(self.buffer):
            raise ValueError("solution moves and buffer must have the same length")

    def __len__(self) -> int:
        return len(self.moves)

    def to_coords(self) -> List[CellCoord]:
        return replay_coords(self.moves)

    def axis_indices(self) -> List[int]:
        return [move.index for move in self.moves]

    def to_payload(self) -> dict:
        return {
            "type": "Solution",
            "moves": [move.to_payload() for move in self.moves],
            "buffer": list(self.buffer),
            "coords": [list(coord) for coord in self.to_coords()],
        }

    def __str__(self) -> str:
        buffer = ", ".join(repr(token) for token in self.buffer)
        moves = ", ".join(str(move) for move in self.moves)
        return f"buffer: [{buffer}]\nmoves: [{moves}]\n"


def daemon_in_buffer(daemon: Sequence[Token], buffer: Sequence[Token]) -> bool:
    """Return ``True`` when ``daemon`` is a contiguous window of ``buffer``."""

    size = len(daemon)
    target = tuple(daemon)
    return any(tuple(buffer[start:start + size]) == target for start in range(len(buffer) - size + 1))


__all__ = [
    "Axis",
    "Daemon",
    "INITIAL_MOVE",
    "Move",
    "MoveType",
    "NO_MOVE",
    "Puzzle",
    "Solution",
    "daemon_in_buffer",
    "replay_coords",
]

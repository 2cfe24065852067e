"""Row-major token grid shared by the solver and the renderer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from .errors import CellOutOfRangeError, DimensionOverflowError, GridShapeError

Token = str
CellCoord = Tuple[int, int]

MAX_DIMENSION = 2**32 - 1
BLANK_TOKEN: Token = ""
DEFAULT_CELL_SPAN = 5
ROW_SEPARATOR_CHAR = "—"
COL_SEPARATOR = "|"


def checked_dimension(value: int, name: str) -> int:
    """Return ``value`` as an index-safe dimension or raise.

    Grid dimensions are unsigned 32-bit quantities; anything negative or wider
    is rejected instead of being truncated.
    """

    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0 or value > MAX_DIMENSION:
        raise DimensionOverflowError(f"{name}={value} is outside [0, {MAX_DIMENSION}]")
    return value


@dataclass(eq=True)
class Grid:
    """A ``rows`` x ``cols`` array of tokens addressed by ``(row, col)``.

    The solver only ever reads from the grid it is given; ``set_cell`` exists
    for the step-number annotations written onto a fresh copy by
    :meth:`breach.solver.BreachSolver.to_grid`.
    """

    rows: int
    cols: int
    cells: List[Token] = field(default_factory=list)

    def __post_init__(self) -> None:
        checked_dimension(self.rows, "rows")
        checked_dimension(self.cols, "cols")
        self.cells = [str(cell) for cell in self.cells]
        if len(self.cells) != self.rows * self.cols:
            raise GridShapeError(
                f"grid {self.rows}x{self.cols} needs {self.rows * self.cols} cells, got {len(self.cells)}"
            )

    @classmethod
    def blank(cls, rows: int, cols: int) -> "Grid":
        checked_dimension(rows, "rows")
        checked_dimension(cols, "cols")
        return cls(rows, cols, [BLANK_TOKEN] * (rows * cols))

    @classmethod
    def from_cells(cls, rows: int, cols: int, cells: Iterable[Token]) -> "Grid":
        return cls(rows, cols, list(cells))

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def _offset(self, row: int, col: int) -> int:
        if not self.contains(row, col):
            raise CellOutOfRangeError(row, col, self.rows, self.cols)
        return row * self.cols + col

    def get_cell(self, row: int, col: int) -> Token:
        return self.cells[self._offset(row, col)]

    def set_cell(self, row: int, col: int, value: Token) -> None:
        self.cells[self._offset(row, col)] = str(value)

    def row(self, index: int) -> List[Token]:
        if not 0 <= index < self.rows:
            raise CellOutOfRangeError(index, 0, self.rows, self.cols)
        start = index * self.cols
        return self.cells[start:start + self.cols]

    def col(self, index: int) -> List[Token]:
        if not 0 <= index < self.cols:
            raise CellOutOfRangeError(0, index, self.rows, self.cols)
        return self.cells[index::self.cols]

    def copy(self) -> "Grid":
        return Grid(self.rows, self.cols, list(self.cells))

    def render(self, cell_span: int = DEFAULT_CELL_SPAN) -> str:
        """Return the grid as a text table with centred cells."""

        row_sep = ROW_SEPARATOR_CHAR * (1 + (cell_span + 1) * self.cols) + "\n"
        lines = []
        for index in range(self.rows):
            cells = (f"{cell:^{cell_span}}" for cell in self.row(index))
            lines.append(COL_SEPARATOR + COL_SEPARATOR.join(cells) + COL_SEPARATOR + "\n")
        return row_sep + row_sep.join(lines) + row_sep

    def __str__(self) -> str:
        return self.render()


__all__ = [
    "BLANK_TOKEN",
    "CellCoord",
    "DEFAULT_CELL_SPAN",
    "Grid",
    "MAX_DIMENSION",
    "Token",
    "checked_dimension",
]

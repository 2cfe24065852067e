"""Exception hierarchy for the Breach Protocol solver core."""

from __future__ import annotations


class BreachError(Exception):
    """Base class for programming-error conditions raised by the core."""


class CellOutOfRangeError(BreachError, IndexError):
    """Raised when a grid coordinate lies outside the grid."""

    def __init__(self, row: int, col: int, rows: int, cols: int) -> None:
        super().__init__(f"cell ({row}, {col}) is outside a {rows}x{cols} grid")
        self.row = row
        self.col = col


class GridShapeError(BreachError, ValueError):
    """Raised when the cell count does not match ``rows * cols``."""


class DimensionOverflowError(BreachError, OverflowError):
    """Raised when a grid dimension does not fit the index range."""


class MoveAlternationError(BreachError, RuntimeError):
    """Raised when a move does not alternate with its predecessor's axis."""


class SearchBudgetExceeded(BreachError, RuntimeError):
    """Raised when a search applies more candidate moves than allowed."""

    def __init__(self, max_nodes: int, observed: int) -> None:
        super().__init__(f"search budget of {max_nodes} nodes exceeded ({observed} visited)")
        self.max_nodes = max_nodes
        self.observed = observed


__all__ = [
    "BreachError",
    "CellOutOfRangeError",
    "DimensionOverflowError",
    "GridShapeError",
    "MoveAlternationError",
    "SearchBudgetExceeded",
]

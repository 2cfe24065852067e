"""Central registry of payload invariants."""

from __future__ import annotations


from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from breach.model import daemon_in_buffer

from .errors import ValidationIssue
from .profiles import ProfileConfig


@dataclass(frozen=True)
class InvariantRule:
    name: str
    check: Callable[[dict, Optional[dict], ProfileConfig], Iterable[ValidationIssue]]


def _grid_parts(puzzle: dict) -> Tuple[Optional[int], Optional[int], Optional[list]]:
    grid = puzzle.get("grid")
    if not isinstance(grid, dict):
        return None, None, None
    rows, cols, cells = grid.get("rows"), grid.get("cols"), grid.get("cells")
    if not isinstance(rows, int) or not isinstance(cols, int) or not isinstance(cells, list):
        return None, None, None
    return rows, cols, cells


def _daemon_list(puzzle: dict) -> List[list]:
    daemons = puzzle.get("daemons")
    if not isinstance(daemons, list):
        return []
    return [daemon for daemon in daemons if isinstance(daemon, list)]


def _grid_length(artifact: dict, _puzzle: Optional[dict], _profile: ProfileConfig) -> Iterable[ValidationIssue]:
    rows, cols, cells = _grid_parts(artifact)
    if cells is None:
        return [ValidationIssue.error("shape.missing_field", "grid.rows, grid.cols and grid.cells are required", "$.grid")]
    if len(cells) != rows * cols:
        return [
            ValidationIssue.error(
                "invariant.grid.length",
                f"grid {rows}x{cols} needs {rows * cols} cells, got {len(cells)}",
                "$.grid.cells",
            )
        ]
    return []


def _daemon_nonempty(artifact: dict, _puzzle: Optional[dict], _profile: ProfileConfig) -> Iterable[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for index, daemon in enumerate(_daemon_list(artifact)):
        if not daemon:
            issues.append(
                ValidationIssue.error("invariant.daemon.empty", "daemon must contain at least one token", f"$.daemons[{index}]")
            )
    return issues


def _daemon_fits_buffer(artifact: dict, _puzzle: Optional[dict], _profile: ProfileConfig) -> Iterable[ValidationIssue]:
    buffer_size = artifact.get("buffer_size")
    if not isinstance(buffer_size, int):
        return []
    issues: List[ValidationIssue] = []
    for index, daemon in enumerate(_daemon_list(artifact)):
        if len(daemon) > buffer_size:
            issues.append(
                ValidationIssue.warning(
                    "invariant.daemon.too_long",
                    f"daemon of length {len(daemon)} cannot fit a buffer of {buffer_size}",
                    f"$.daemons[{index}]",
                )
            )
    return issues


def _token_nonempty(artifact: dict, _puzzle: Optional[dict], _profile: ProfileConfig) -> Iterable[ValidationIssue]:
    issues: List[ValidationIssue] = []
    _, _, cells = _grid_parts(artifact)
    for index, token in enumerate(cells or []):
        if not isinstance(token, str) or not token.strip():
            issues.append(
                ValidationIssue.error("invariant.token.empty", "grid token must be a non-empty string", f"$.grid.cells[{index}]")
            )
    for d_index, daemon in enumerate(_daemon_list(artifact)):
        for t_index, token in enumerate(daemon):
            if not isinstance(token, str) or not token.strip():
                issues.append(
                    ValidationIssue.error(
                        "invariant.token.empty",
                        "daemon token must be a non-empty string",
                        f"$.daemons[{d_index}][{t_index}]",
                    )
                )
    return issues


def _solution_moves(artifact: dict) -> Optional[List[Tuple[str, int]]]:
    moves = artifact.get("moves")
    if not isinstance(moves, list):
        return None
    decoded: List[Tuple[str, int]] = []
    for move in moves:
        if not isinstance(move, dict):
            return None
        axis, index = move.get("axis"), move.get("index")
        if axis not in ("row", "column") or not isinstance(index, int):
            return None
        decoded.append((axis, index))
    return decoded


def _in_grid(coord: Tuple[int, int], rows: int, cols: int) -> bool:
    return 0 <= coord[0] < rows and 0 <= coord[1] < cols


def _solution_coords(artifact: dict) -> Optional[List[Tuple[int, int]]]:
    moves = _solution_moves(artifact)
    if moves is None:
        return None
    last = (0, 0)
    coords: List[Tuple[int, int]] = []
    for axis, index in moves:
        last = (index, last[1]) if axis == "row" else (last[0], index)
        coords.append(last)
    return coords


def _solution_lengths(artifact: dict, puzzle: Optional[dict], _profile: ProfileConfig) -> Iterable[ValidationIssue]:
    moves, buffer = artifact.get("moves"), artifact.get("buffer")
    if not isinstance(moves, list) or not isinstance(buffer, list):
        return [ValidationIssue.error("shape.missing_field", "moves and buffer must be arrays", "$")]
    issues: List[ValidationIssue] = []
    if len(moves) != len(buffer):
        issues.append(
            ValidationIssue.error(
                "invariant.solution.length_mismatch",
                f"{len(moves)} moves but {len(buffer)} buffer tokens",
                "$.buffer",
            )
        )
    buffer_size = puzzle.get("buffer_size") if puzzle else None
    if isinstance(buffer_size, int) and len(moves) > buffer_size:
        issues.append(
            ValidationIssue.error(
                "invariant.solution.over_budget",
                f"{len(moves)} moves exceed buffer size {buffer_size}",
                "$.moves",
            )
        )
    return issues


def _solution_alternation(artifact: dict, _puzzle: Optional[dict], _profile: ProfileConfig) -> Iterable[ValidationIssue]:
    moves = _solution_moves(artifact)
    if moves is None:
        return [ValidationIssue.error("type.mismatch", "moves must be {axis, index} objects", "$.moves")]
    for index, (axis, _) in enumerate(moves):
        expected = "column" if index % 2 == 0 else "row"
        if axis != expected:
            return [
                ValidationIssue.error(
                    "invariant.solution.alternation",
                    f"move {index} selects a {axis}, expected a {expected}",
                    f"$.moves[{index}].axis",
                )
            ]
    return []


def _solution_distinct_cells(artifact: dict, puzzle: Optional[dict], _profile: ProfileConfig) -> Iterable[ValidationIssue]:
    coords = _solution_coords(artifact)
    if coords is None:
        return []
    issues: List[ValidationIssue] = []
    rows, cols, _ = _grid_parts(puzzle) if puzzle else (None, None, None)
    seen: Dict[Tuple[int, int], int] = {}
    for index, coord in enumerate(coords):
        if rows is not None and not _in_grid(coord, rows, cols):
            issues.append(
                ValidationIssue.error(
                    "invariant.solution.out_of_range", f"cell {coord} is outside the grid", f"$.moves[{index}]"
                )
            )
        if coord in seen:
            issues.append(
                ValidationIssue.error(
                    "invariant.solution.repeated_cell",
                    f"cell {coord} visited by moves {seen[coord]} and {index}",
                    f"$.moves[{index}]",
                )
            )
        else:
            seen[coord] = index
    return issues


def _solution_buffer_tokens(artifact: dict, puzzle: Optional[dict], _profile: ProfileConfig) -> Iterable[ValidationIssue]:
    if not puzzle:
        return []
    rows, cols, cells = _grid_parts(puzzle)
    coords = _solution_coords(artifact)
    buffer = artifact.get("buffer")
    if cells is None or coords is None or not isinstance(buffer, list):
        return []
    for index, (coord, token) in enumerate(zip(coords, buffer)):
        if not _in_grid(coord, rows, cols) or coord[0] * cols + coord[1] >= len(cells):
            continue
        if cells[coord[0] * cols + coord[1]] != token:
            return [
                ValidationIssue.error(
                    "invariant.solution.buffer_mismatch",
                    f"buffer token {token!r} does not match grid cell {coord}",
                    f"$.buffer[{index}]",
                )
            ]
    return []


def _solution_daemons(artifact: dict, puzzle: Optional[dict], _profile: ProfileConfig) -> Iterable[ValidationIssue]:
    buffer = artifact.get("buffer")
    if not puzzle or not isinstance(buffer, list):
        return []
    issues: List[ValidationIssue] = []
    for index, daemon in enumerate(_daemon_list(puzzle)):
        if not daemon_in_buffer(daemon, buffer):
            issues.append(
                ValidationIssue.error(
                    "invariant.solution.daemon_missing",
                    f"daemon {daemon} is not a contiguous run of the buffer",
                    f"$.buffer (daemon {index})",
                )
            )
    return issues


_INVARIANTS: Dict[str, List[InvariantRule]] = {
    "Puzzle": [
        InvariantRule("grid_length", _grid_length),
        InvariantRule("daemon_nonempty", _daemon_nonempty),
        InvariantRule("daemon_fits_buffer", _daemon_fits_buffer),
        InvariantRule("token_nonempty", _token_nonempty),
    ],
    "Solution": [
        InvariantRule("solution_lengths", _solution_lengths),
        InvariantRule("solution_alternation", _solution_alternation),
        InvariantRule("solution_distinct_cells", _solution_distinct_cells),
        InvariantRule("solution_buffer_tokens", _solution_buffer_tokens),
        InvariantRule("solution_daemons", _solution_daemons),
    ],
}


def run_invariants(
    artifact: dict,
    artifact_type: str,
    puzzle: Optional[dict],
    profile: ProfileConfig,
) -> List[ValidationIssue]:
    """Run every enabled invariant registered for *artifact_type*."""

    issues: List[ValidationIssue] = []
    for rule in _INVARIANTS.get(artifact_type, []):
        if not profile.is_invariant_enabled(artifact_type, rule.name):
            continue
        issues.extend(rule.check(artifact, puzzle, profile))
    return issues


__all__ = ["InvariantRule", "run_invariants"]

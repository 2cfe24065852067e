from __future__ import annotations

import pytest

from breach import BreachSolver, Move, Puzzle, SearchMethod, Solution
from breach.errors import SearchBudgetExceeded


def _two_by_two(daemons, buffer_size: int = 2) -> Puzzle:
    return Puzzle.build(buffer_size, 2, 2, ["A", "B", "C", "D"], daemons)


def test_single_solution_and_search_stats():
    solver = BreachSolver(_two_by_two([["A", "C"]]))

    solutions = solver.solve_all()

    assert solutions == [Solution((Move.column(0), Move.row(1)), ("A", "C"))]
    assert solver.last_stats.nodes_visited == 4
    assert solver.last_stats.max_depth == 2
    assert solver.last_stats.solutions_found == 1


def test_empty_daemon_list_completes_after_first_move():
    solver = BreachSolver(_two_by_two([], buffer_size=1))

    solutions = solver.solve_all()

    assert [s.moves for s in solutions] == [(Move.column(0),), (Move.column(1),)]
    assert all(len(s) == 1 for s in solutions)


def test_first_match_stops_at_the_completing_node():
    solver = BreachSolver(_two_by_two([]))

    assert solver.solve(SearchMethod.FIRST_MATCH) == Solution((Move.column(0),), ("A",))
    assert solver.last_stats.solutions_found == 1
    assert len(solver.solve_all()) == 2


def test_zero_buffer_yields_nothing():
    solver = BreachSolver(_two_by_two([], buffer_size=0))
    assert solver.solve() is None
    assert solver.solve_all() == []


def test_budget_exhausted_branches_yield_no_solution():
    solver = BreachSolver(_two_by_two([["A", "C", "D"]], buffer_size=2))
    assert solver.solve_all() == []


def test_results_are_sorted_by_length_stably():
    # The column-0 branch is discovered first but needs one move more.
    puzzle = Puzzle.build(3, 3, 3, ["A", "B", "A", "B", "B", "A", "A", "A", "A"], [["B", "B"]])
    solver = BreachSolver(puzzle)

    assert [s.axis_indices() for s in solver.solve_all()] == [[1, 1], [0, 1, 1]]
    shortest = solver.solve(SearchMethod.SHORTEST)
    assert shortest is not None
    assert list(shortest.buffer) == ["B", "B"]


def test_method_strings_are_accepted():
    solver = BreachSolver(_two_by_two([["A", "C"]]))
    assert solver.solve("first-match") == solver.solve("shortest")
    with pytest.raises(ValueError):
        solver.solve("longest")


def test_node_budget_aborts_the_search():
    solver = BreachSolver(_two_by_two([["D", "A"]], buffer_size=2), max_nodes=2)
    with pytest.raises(SearchBudgetExceeded) as excinfo:
        solver.solve_all()
    assert excinfo.value.max_nodes == 2


def test_to_grid_is_a_fresh_blank_copy():
    puzzle = _two_by_two([["A", "C"]])
    solver = BreachSolver(puzzle)
    solution = solver.solve()
    assert solution is not None

    grid = solver.to_grid(solution)

    assert grid.cells == ["1", "", "2", ""]
    assert puzzle.grid.cells == ["A", "B", "C", "D"]


def test_solution_text_lists_buffer_and_moves():
    solution = Solution((Move.column(0), Move.row(1)), ("A", "C"))
    assert str(solution) == "buffer: ['A', 'C']\nmoves: [Column(0), Row(1)]\n"
    assert solution.to_coords() == [(0, 0), (1, 0)]

"""End-to-end scenarios for the exhaustive and shortest queries."""

from __future__ import annotations

from breach import BreachSolver, Puzzle, SearchMethod, daemon_in_buffer

SCENARIO_A_CELLS = [
    "55", "55", "1C", "55", "55",
    "55", "E9", "BD", "1C", "BD",
    "E9", "1C", "1C", "1C", "55",
    "E9", "1C", "BD", "1C", "BD",
    "55", "55", "BD", "55", "BD",
]
SCENARIO_A_DAEMONS = [["BD", "55", "1C"], ["E9", "BD", "1C"], ["1C", "55", "55", "BD"]]

SCENARIO_B_CELLS = [
    "1C", "1C", "1C", "1C", "55",
    "1C", "1C", "1C", "55", "55",
    "E9", "55", "1C", "BD", "1C",
    "55", "E9", "1C", "1C", "55",
    "1C", "55", "BD", "55", "1C",
]
SCENARIO_B_DAEMONS = [["1C", "55"], ["55", "55", "55"], ["1C", "1C", "BD"]]


def _scenario_a() -> Puzzle:
    return Puzzle.build(8, 5, 5, SCENARIO_A_CELLS, SCENARIO_A_DAEMONS)


def _scenario_b() -> Puzzle:
    return Puzzle.build(7, 5, 5, SCENARIO_B_CELLS, SCENARIO_B_DAEMONS)


def test_scenario_a_has_no_solution() -> None:
    solver = BreachSolver(_scenario_a())
    assert solver.solve(SearchMethod.FIRST_MATCH) is None
    assert solver.solve(SearchMethod.SHORTEST) is None
    assert solver.solve_all() == []


def test_scenario_b_shortest_solution() -> None:
    solution = BreachSolver(_scenario_b()).solve(SearchMethod.SHORTEST)

    assert solution is not None
    assert solution.axis_indices() == [0, 3, 4, 0, 2, 2, 3]
    assert list(solution.buffer) == ["1C", "55", "55", "55", "1C", "1C", "BD"]
    assert [str(move) for move in solution.moves] == [
        "Column(0)",
        "Row(3)",
        "Column(4)",
        "Row(0)",
        "Column(2)",
        "Row(2)",
        "Column(3)",
    ]


def test_scenario_b_enumerates_eighteen_solutions() -> None:
    solutions = BreachSolver(_scenario_b()).solve_all()

    assert len(solutions) == 18
    assert {len(solution) for solution in solutions} == {7}
    assert solutions[0].axis_indices() == [0, 3, 4, 0, 2, 2, 3]


def test_scenario_b_solutions_respect_move_rules() -> None:
    puzzle = _scenario_b()
    for solution in BreachSolver(puzzle).solve_all():
        assert len(solution.moves) == len(solution.buffer) <= puzzle.buffer_size
        for index, move in enumerate(solution.moves):
            assert move.is_column if index % 2 == 0 else move.is_row

        coords = solution.to_coords()
        assert len(set(coords)) == len(coords)
        assert [puzzle.grid.get_cell(r, c) for r, c in coords] == list(solution.buffer)
        for daemon in puzzle.daemons:
            assert daemon_in_buffer(daemon.tokens, solution.buffer)


def test_first_match_and_shortest_agree_with_exhaustive_search() -> None:
    solver = BreachSolver(_scenario_b())
    every = solver.solve_all()

    first = solver.solve(SearchMethod.FIRST_MATCH)
    shortest = solver.solve(SearchMethod.SHORTEST)

    assert first in every
    assert shortest is not None
    assert len(shortest) == min(len(solution) for solution in every)


def test_solve_all_is_deterministic() -> None:
    first = BreachSolver(_scenario_b()).solve_all()
    second = BreachSolver(_scenario_b()).solve_all()
    assert first == second


def test_to_grid_numbers_the_visited_cells() -> None:
    solver = BreachSolver(_scenario_b())
    solution = solver.solve()
    assert solution is not None

    grid = solver.to_grid(solution)

    assert (grid.rows, grid.cols) == (5, 5)
    expected = {(0, 0): "1", (3, 0): "2", (3, 4): "3", (0, 4): "4", (0, 2): "5", (2, 2): "6", (2, 3): "7"}
    for row in range(5):
        for col in range(5):
            assert grid.get_cell(row, col) == expected.get((row, col), "")
    assert _scenario_b().grid.get_cell(0, 0) == "1C"

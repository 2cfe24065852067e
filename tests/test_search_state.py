from __future__ import annotations

import pytest

from breach import BreachSolver, Move, MoveType, Puzzle, SearchState
from breach.errors import MoveAlternationError


def _puzzle() -> Puzzle:
    return Puzzle.build(4, 3, 3, ["A", "B", "C", "D", "E", "F", "G", "H", "I"], [["A", "D"], ["E"]])


def test_first_decision_selects_columns_of_row_zero():
    state = SearchState.initial(_puzzle())
    assert state.next_move_type is MoveType.SELECT_COLUMN
    assert list(state.candidates()) == [
        (Move.column(0), (0, 0)),
        (Move.column(1), (0, 1)),
        (Move.column(2), (0, 2)),
    ]


def test_used_cells_are_skipped():
    puzzle = _puzzle()
    state = SearchState.initial(puzzle)
    state.push(Move.column(1), (0, 1), "B", puzzle.daemons)
    assert state.next_move_type is MoveType.SELECT_ROW
    assert [coord for _, coord in state.candidates()] == [(1, 1), (2, 1)]


def test_push_then_pop_restores_every_field():
    puzzle = _puzzle()
    state = SearchState.initial(puzzle)
    state.push(Move.column(0), (0, 0), "A", puzzle.daemons)
    before = state.snapshot()

    applied = state.push(Move.row(1), (1, 0), "D", puzzle.daemons)
    assert state.move_count == 2
    assert state.daemon_states[0].completed
    state.pop(applied)

    assert state.snapshot() == before


def test_search_leaves_the_frame_untouched():
    puzzle = _puzzle()
    solver = BreachSolver(puzzle)
    state = SearchState.initial(puzzle)
    before = state.snapshot()

    solver._step(state, first_only=False)

    assert state.snapshot() == before


def test_alternation_violation_fails_fast():
    state = SearchState.initial(_puzzle())
    state.moves.append(Move.column(2))
    with pytest.raises(MoveAlternationError):
        list(state.candidates())

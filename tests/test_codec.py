from __future__ import annotations

import pytest

from breach import Move, Puzzle, Solution
from ports.codec import (
    canonicalize,
    compute_digest,
    ensure_move,
    puzzle_from_payload,
    puzzle_to_payload,
    solution_from_payload,
)


def test_puzzle_payload_conversion():
    payload = {
        "type": "Puzzle",
        "buffer_size": 3,
        "grid": {"rows": 1, "cols": 2, "cells": ["1C", "55"]},
        "daemons": [["1C"]],
    }
    puzzle = puzzle_from_payload(payload)

    assert isinstance(puzzle, Puzzle)
    assert puzzle.grid.get_cell(0, 1) == "55"
    assert puzzle.daemons[0].tokens == ("1C",)
    assert puzzle_to_payload(puzzle) == payload


def test_solution_payload_conversion():
    solution = Solution((Move.column(2), Move.row(1)), ("BD", "E9"))
    payload = solution.to_payload()

    assert payload["coords"] == [[0, 2], [1, 2]]
    assert solution_from_payload(payload) == solution


def test_ensure_move_rejects_bad_descriptors():
    assert ensure_move({"axis": "row", "index": 4}) == Move.row(4)
    with pytest.raises(ValueError):
        ensure_move({"axis": "diagonal", "index": 0})
    with pytest.raises(ValueError):
        ensure_move({"axis": "none", "index": 0})
    with pytest.raises(ValueError):
        ensure_move({"axis": "row"})
    with pytest.raises(TypeError):
        ensure_move(("row", 1))


def test_digest_ignores_key_order_and_own_field():
    first = {"b": [1, 2], "a": "x"}
    second = {"a": "x", "b": [1, 2], "digest": "sha256-old"}
    assert canonicalize(first) == b'{"a":"x","b":[1,2]}'
    assert compute_digest(first) == compute_digest(second)
    assert compute_digest(first).startswith("sha256-")

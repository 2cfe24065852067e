"""Conversions between JSON payloads and solver value objects."""

from __future__ import annotations

import hashlib
import json
import math
import unicodedata
from typing import Any, Dict, Mapping

from breach.grid import Grid
from breach.model import Axis, Daemon, Move, Puzzle, Solution

MoveLike = Move | Mapping[str, object]


def puzzle_from_payload(payload: Mapping[str, Any]) -> Puzzle:
    """Build a :class:`Puzzle` from a validated Puzzle payload."""

    grid = payload["grid"]
    return Puzzle(
        buffer_size=int(payload["buffer_size"]),
        grid=Grid(int(grid["rows"]), int(grid["cols"]), list(grid["cells"])),
        daemons=tuple(Daemon.of(tokens) for tokens in payload.get("daemons", [])),
    )


def puzzle_to_payload(puzzle: Puzzle) -> Dict[str, Any]:
    return {
        "type": "Puzzle",
        "buffer_size": puzzle.buffer_size,
        "grid": {
            "rows": puzzle.grid.rows,
            "cols": puzzle.grid.cols,
            "cells": list(puzzle.grid.cells),
        },
        "daemons": [list(daemon.tokens) for daemon in puzzle.daemons],
    }


def ensure_move(candidate: MoveLike) -> Move:
    """Normalise a move descriptor to :class:`Move`."""

    if isinstance(candidate, Move):
        return candidate
    if isinstance(candidate, Mapping):
        try:
            axis = candidate["axis"]
            index = candidate["index"]
        except KeyError as exc:
            raise ValueError("move mapping is missing 'axis' or 'index'") from exc
        move = Move(Axis.from_value(str(axis)), int(index))
        if move.axis is Axis.NONE:
            raise ValueError("placeholder moves cannot appear in a solution")
        return move
    raise TypeError(f"Unsupported move descriptor: {type(candidate)!r}")


def solution_from_payload(payload: Mapping[str, Any]) -> Solution:
    return Solution(
        moves=tuple(ensure_move(item) for item in payload["moves"]),
        buffer=tuple(str(token) for token in payload["buffer"]),
    )


def _normalize(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {str(k): _normalize(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_normalize(item) for item in obj]
    if isinstance(obj, str):
        return unicodedata.normalize("NFC", obj)
    if isinstance(obj, float) and not math.isfinite(obj):
        raise ValueError("Non-finite numbers are not allowed in payloads")
    return obj


def canonicalize(obj: Any) -> bytes:
    """Serialise *obj* into canonical JSON bytes (sorted keys, no whitespace)."""

    return json.dumps(_normalize(obj), sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def compute_digest(obj: Mapping[str, Any]) -> str:
    """``sha256-`` digest of *obj* without its own ``digest`` field."""

    base = {key: value for key, value in obj.items() if key != "digest"}
    return "sha256-" + hashlib.sha256(canonicalize(base)).hexdigest()


__all__ = [
    "canonicalize",
    "compute_digest",
    "ensure_move",
    "puzzle_from_payload",
    "puzzle_to_payload",
    "solution_from_payload",
]

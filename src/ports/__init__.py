"""Port facades around the Breach Protocol solver."""

from __future__ import annotations

from .codec import puzzle_from_payload, puzzle_to_payload, solution_from_payload
from .solver_port import SolverSettings, resolve_settings, solve_payload

__all__ = [
    "SolverSettings",
    "puzzle_from_payload",
    "puzzle_to_payload",
    "resolve_settings",
    "solution_from_payload",
    "solve_payload",
]

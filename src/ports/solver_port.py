"""Facade that validates, solves and reports Breach Protocol payloads."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional

import event_log
from breach.errors import BreachError
from breach.model import Solution
from breach.solver import BreachSolver, SearchMethod
from contracts import ManagedValidationError, ValidationIssue, validator
from project_config import get_section

from .codec import compute_digest, puzzle_from_payload

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolverSettings:
    """Finalised solver policy after precedence resolution."""

    method: SearchMethod
    max_nodes: int
    profile: str
    events_enabled: bool
    events_dir: str
    events_max_bytes: int
    cell_span: int

    def to_payload(self) -> Dict[str, Any]:
        return {
            "method": self.method.value,
            "max_nodes": self.max_nodes,
            "profile": self.profile,
            "events_enabled": self.events_enabled,
        }


_DEFAULTS = SolverSettings(
    method=SearchMethod.SHORTEST,
    max_nodes=0,
    profile="dev",
    events_enabled=False,
    events_dir="logs/events",
    events_max_bytes=100 * 1024 * 1024,
    cell_span=5,
)


def build_env(overrides: Mapping[str, str] | None = None) -> Dict[str, str]:
    """Merge process environment with optional overrides."""

    env: Dict[str, str] = {str(k): str(v) for k, v in os.environ.items()}
    if overrides:
        env.update({str(k): str(v) for k, v in overrides.items()})
    return env


def _parse_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalised = value.strip().lower()
        if normalised in {"1", "true", "yes", "on"}:
            return True
        if normalised in {"0", "false", "no", "off"}:
            return False
    return None


def _parse_int(value: Any) -> Optional[int]:
    try:
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, str) and value.strip():
            return int(value)
    except (TypeError, ValueError):
        return None
    return None


def _parse_method(value: Any) -> Optional[SearchMethod]:
    if value is None:
        return None
    try:
        return SearchMethod.parse(value)
    except ValueError:
        return None


def _apply_overrides(settings: SolverSettings, overrides: Mapping[str, Any]) -> SolverSettings:
    changes: Dict[str, Any] = {}

    if "method" in overrides:
        method = _parse_method(overrides["method"])
        if method is not None:
            changes["method"] = method
    if "max_nodes" in overrides:
        max_nodes = _parse_int(overrides["max_nodes"])
        if max_nodes is not None and max_nodes >= 0:
            changes["max_nodes"] = max_nodes
    if "profile" in overrides:
        value = overrides["profile"]
        if isinstance(value, str) and value:
            changes["profile"] = value
    if "events_enabled" in overrides:
        enabled = _parse_bool(overrides["events_enabled"])
        if enabled is not None:
            changes["events_enabled"] = enabled
    if "events_dir" in overrides:
        value = overrides["events_dir"]
        if isinstance(value, str) and value:
            changes["events_dir"] = value
    if "events_max_bytes" in overrides:
        max_bytes = _parse_int(overrides["events_max_bytes"])
        if max_bytes is not None and max_bytes > 0:
            changes["events_max_bytes"] = max_bytes
    if "cell_span" in overrides:
        span = _parse_int(overrides["cell_span"])
        if span is not None and span > 0:
            changes["cell_span"] = span

    return replace(settings, **changes) if changes else settings


def _config_overrides() -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    mapping = {
        "method": "solver.method",
        "max_nodes": "solver.max_nodes",
        "profile": "validation.profile",
        "events_enabled": "logging.events_enabled",
        "events_dir": "logging.events_dir",
        "events_max_bytes": "logging.max_bytes",
        "cell_span": "render.cell_span",
    }
    for field_name, path in mapping.items():
        value = get_section(path, None)
        if value is not None:
            payload[field_name] = value
    return payload


def _env_overrides(env: Mapping[str, str]) -> Dict[str, Any]:
    keys = {
        "method": "BREACH_SOLVER_METHOD",
        "max_nodes": "BREACH_MAX_NODES",
        "profile": "BREACH_VALIDATION_PROFILE",
        "events_enabled": "BREACH_EVENTS_ENABLED",
        "events_dir": "BREACH_EVENTS_DIR",
    }
    return {field_name: env[alias] for field_name, alias in keys.items() if alias in env}


def _cli_overrides(env: Mapping[str, str]) -> Dict[str, Any]:
    keys = {
        "method": "CLI_BREACH_METHOD",
        "max_nodes": "CLI_BREACH_MAX_NODES",
        "profile": "CLI_BREACH_PROFILE",
        "events_enabled": "CLI_BREACH_EVENTS_ENABLED",
        "events_dir": "CLI_BREACH_EVENTS_DIR",
    }
    return {field_name: env[alias] for field_name, alias in keys.items() if alias in env}


def resolve_settings(env: Mapping[str, str] | None = None) -> SolverSettings:
    """Resolve settings: defaults < config.toml < environment < CLI overrides."""

    env_map = build_env(env)
    settings = _apply_overrides(_DEFAULTS, _config_overrides())
    settings = _apply_overrides(settings, _env_overrides(env_map))
    settings = _apply_overrides(settings, _cli_overrides(env_map))
    return settings


def solution_payload(solution: Solution, solver: BreachSolver, *, cell_span: int = 5) -> Dict[str, Any]:
    """Solution payload with its annotated grid rendering and digest."""

    payload = solution.to_payload()
    payload["grid"] = solver.to_grid(solution).render(cell_span)
    payload["digest"] = compute_digest(payload)
    return payload


def solve_payload(
    payload: Mapping[str, Any],
    *,
    method: SearchMethod | str | None = None,
    profile: str | None = None,
    env: Mapping[str, str] | None = None,
) -> Dict[str, Any]:
    """Validate a Puzzle payload, solve it and return a result mapping.

    ``method`` and ``profile`` take precedence over every configured source.
    Raises :class:`contracts.ManagedValidationError` when the payload is
    rejected.
    """

    settings = resolve_settings(env)
    explicit: Dict[str, Any] = {}
    if method is not None:
        explicit["method"] = method.value if isinstance(method, SearchMethod) else method
    if profile:
        explicit["profile"] = profile
    settings = _apply_overrides(settings, explicit)

    puzzle_payload = dict(payload)
    report = validator.assert_valid(puzzle_payload, "Puzzle", profile=settings.profile)
    for warning in report.warnings:
        _LOGGER.warning("puzzle warning %s at %s: %s", warning.code, warning.path, warning.message)

    try:
        puzzle = puzzle_from_payload(puzzle_payload)
    except (KeyError, TypeError, ValueError, OverflowError, BreachError) as exc:
        issue = ValidationIssue.error("decode.invalid", f"puzzle payload could not be decoded: {exc!r}")
        raise ManagedValidationError.single("Puzzle", issue) from exc
    solver = BreachSolver(puzzle, max_nodes=settings.max_nodes or None)
    if settings.method is SearchMethod.ALL:
        solutions: List[Solution] = solver.solve_all()
    else:
        best = solver.solve(settings.method)
        solutions = [best] if best is not None else []

    result = {
        "status": "solved" if solutions else "no_solution",
        "method": settings.method.value,
        "solutions": [solution_payload(s, solver, cell_span=settings.cell_span) for s in solutions],
        "stats": solver.last_stats.to_payload(),
        "settings": settings.to_payload(),
        "warnings": [warning.code for warning in report.warnings],
    }
    _LOGGER.info(
        "solved puzzle: status=%s method=%s solutions=%d nodes=%d",
        result["status"],
        result["method"],
        len(solutions),
        solver.last_stats.nodes_visited,
    )

    if settings.events_enabled:
        event = event_log.SolveEvent.from_search(
            status=result["status"],
            method=result["method"],
            profile=settings.profile,
            puzzle_digest=compute_digest(puzzle_payload),
            solution_digests=[item["digest"] for item in result["solutions"]],
            stats=solver.last_stats,
            warnings=result["warnings"],
        )
        event_log.open_log(settings.events_dir, settings.events_max_bytes).record(event)
    return result


__all__ = ["SolverSettings", "build_env", "resolve_settings", "solution_payload", "solve_payload"]

from __future__ import annotations

import json
from pathlib import Path

import pytest

from breach.errors import SearchBudgetExceeded
from contracts import ManagedValidationError, ValidationReport
from ports import solver_port

FIXTURES = Path(__file__).resolve().parents[1] / "PuzzleContracts" / "fixtures" / "valid"


def _payload(name: str = "puzzle-scenario-b.json") -> dict:
    return json.loads((FIXTURES / name).read_text("utf-8"))


def test_settings_defaults_come_from_config() -> None:
    settings = solver_port.resolve_settings({})
    assert settings.method.value == "shortest"
    assert settings.max_nodes == 0
    assert settings.profile == "dev"
    assert settings.cell_span == 5


def test_environment_overrides_config() -> None:
    settings = solver_port.resolve_settings({"BREACH_SOLVER_METHOD": "first", "BREACH_MAX_NODES": "500"})
    assert settings.method.value == "first"
    assert settings.max_nodes == 500


def test_cli_overrides_environment() -> None:
    env = {
        "BREACH_SOLVER_METHOD": "first",
        "BREACH_VALIDATION_PROFILE": "ci",
        "CLI_BREACH_METHOD": "all",
        "CLI_BREACH_PROFILE": "lenient",
    }
    settings = solver_port.resolve_settings(env)
    assert settings.method.value == "all"
    assert settings.profile == "lenient"


def test_unparseable_overrides_are_ignored() -> None:
    settings = solver_port.resolve_settings({"BREACH_MAX_NODES": "lots", "CLI_BREACH_METHOD": "fastest"})
    assert settings.max_nodes == 0
    assert settings.method.value == "shortest"


def test_solve_payload_shortest() -> None:
    result = solver_port.solve_payload(_payload(), env={})

    assert result["status"] == "solved"
    assert result["method"] == "shortest"
    [solution] = result["solutions"]
    assert [move["index"] for move in solution["moves"]] == [0, 3, 4, 0, 2, 2, 3]
    assert solution["digest"].startswith("sha256-")
    assert "|  1  |" in solution["grid"]
    assert result["stats"]["solutions_found"] == 18


def test_solve_payload_all_is_stable() -> None:
    first = solver_port.solve_payload(_payload(), method="all", env={})
    second = solver_port.solve_payload(_payload(), method="all", env={})

    assert len(first["solutions"]) == 18
    assert [s["digest"] for s in first["solutions"]] == [s["digest"] for s in second["solutions"]]


def test_solve_payload_without_solution() -> None:
    result = solver_port.solve_payload(_payload("puzzle-scenario-a.json"), method="first", env={})
    assert result["status"] == "no_solution"
    assert result["solutions"] == []


def test_invalid_payload_raises() -> None:
    payload = _payload()
    payload["grid"]["cells"] = payload["grid"]["cells"][:-1]
    with pytest.raises(ManagedValidationError) as excinfo:
        solver_port.solve_payload(payload, env={})
    assert "invariant.grid.length" in excinfo.value.report.codes()


def test_node_budget_from_environment() -> None:
    with pytest.raises(SearchBudgetExceeded):
        solver_port.solve_payload(_payload(), env={"BREACH_MAX_NODES": "10"})


def test_solve_event_is_logged(tmp_path) -> None:
    env = {"CLI_BREACH_EVENTS_ENABLED": "1", "CLI_BREACH_EVENTS_DIR": str(tmp_path)}
    result = solver_port.solve_payload(_payload(), env=env)

    [log_file] = sorted(tmp_path.glob("*/solves_*.jsonl"))
    [line] = log_file.read_text("utf-8").splitlines()
    event = json.loads(line)
    assert event["event"] == "solve"
    assert event["status"] == "solved"
    assert event["solution_digests"] == [result["solutions"][0]["digest"]]
    assert event["puzzle_digest"].startswith("sha256-")
    assert event["nodes_visited"] == result["stats"]["nodes_visited"]
    assert event["profile"] == "dev"
    assert "ts" in event


def test_payload_that_fails_to_decode_is_rejected(monkeypatch) -> None:
    monkeypatch.setattr(solver_port.validator, "assert_valid", lambda *args, **kwargs: ValidationReport())
    payload = _payload()
    del payload["buffer_size"]

    with pytest.raises(ManagedValidationError) as excinfo:
        solver_port.solve_payload(payload, env={})
    assert excinfo.value.report.codes() == ["decode.invalid"]


@pytest.mark.parametrize(
    "change",
    [
        lambda p: p.pop("buffer_size"),
        lambda p: p.update(buffer_size=-3),
        lambda p: p.update(grid={"rows": -1, "cols": -1, "cells": ["A"]}),
    ],
)
def test_lenient_profile_still_checks_payload_shape(change) -> None:
    payload = _payload()
    change(payload)

    with pytest.raises(ManagedValidationError) as excinfo:
        solver_port.solve_payload(payload, profile="lenient", env={})
    assert "schema.violation" in excinfo.value.report.codes()

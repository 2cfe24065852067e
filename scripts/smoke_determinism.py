#!/usr/bin/env python3
"""Smoke-test deterministic output of the exhaustive search."""

from __future__ import annotations

import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from ports.solver_port import solve_payload

_ENV = {"CLI_BREACH_METHOD": "all", "CLI_BREACH_EVENTS_ENABLED": "0"}


def _digests(path: Path) -> list[str]:
    payload = json.loads(path.read_text("utf-8"))
    result = solve_payload(payload, env=_ENV)
    return [item["digest"] for item in result["solutions"]]


def main() -> int:
    fixtures = sorted((ROOT / "PuzzleContracts" / "fixtures" / "valid").glob("puzzle-*.json"))
    for path in fixtures:
        first = _digests(path)
        second = _digests(path)
        if first != second:
            print(f"determinism failed for {path.name}: {len(first)} vs {len(second)} solutions")
            return 1
        print(f"{path.name}: {len(first)} solutions, stable")

    print("Determinism smoke-test passed.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

#!/usr/bin/env python3
"""Validate contract fixtures offline."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from contracts import validator


def _load_json(path: Path) -> dict:
    return json.loads(path.read_text("utf-8"))


def _guess_type(path: Path, payload: dict) -> str:
    value = payload.get("type")
    if isinstance(value, str) and value:
        return value
    prefix = path.stem.split("-", 1)[0].lower()
    mapping = {"puzzle": "Puzzle", "solution": "Solution"}
    if prefix in mapping:
        return mapping[prefix]
    raise ValueError(f"Cannot infer payload type for {path.name}")


def _paired_puzzle(path: Path, valid_dir: Path) -> dict | None:
    """``solution-<name>.json`` is checked against ``valid/puzzle-<name>.json``."""

    stem = path.stem
    if not stem.startswith("solution-"):
        return None
    candidate = valid_dir / f"puzzle-{stem[len('solution-'):]}.json"
    if not candidate.exists():
        return None
    return _load_json(candidate)


def _validate(path: Path, *, profile: str, valid_dir: Path) -> validator.ValidationReport:
    payload = _load_json(path)
    expect_type = _guess_type(path, payload)
    puzzle = _paired_puzzle(path, valid_dir)
    return validator.validate(payload, expect_type=expect_type, profile=profile, puzzle=puzzle)


def main() -> int:
    fixtures_root = ROOT / "PuzzleContracts" / "fixtures"
    valid_dir = fixtures_root / "valid"
    invalid_dir = fixtures_root / "invalid"

    profile = os.environ.get("BREACH_VALIDATION_PROFILE", "dev")
    failures: list[str] = []

    for path in sorted(valid_dir.glob("*.json")):
        report = _validate(path, profile=profile, valid_dir=valid_dir)
        if not report.ok:
            failures.append(f"valid fixture failed: {path.name}: {', '.join(report.codes())}")

    for path in sorted(invalid_dir.glob("*.json")):
        report = _validate(path, profile=profile, valid_dir=valid_dir)
        if report.ok:
            failures.append(f"invalid fixture unexpectedly passed: {path.name}")
        else:
            print(f"{path.name}: {', '.join(report.codes())}")

    if failures:
        for line in failures:
            print(line)
        return 1

    print("All contract fixtures are valid.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

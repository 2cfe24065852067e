"""Command line entry point for solving Breach Protocol puzzle files."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Dict, List

from breach.errors import SearchBudgetExceeded
from contracts import ManagedValidationError, validate
from ports.codec import solution_from_payload
from ports.solver_port import resolve_settings, solve_payload
from project_config import get_section

EXIT_SOLVED = 0
EXIT_NO_SOLUTION = 1
EXIT_INVALID = 2
EXIT_BUDGET = 3


def _load_json(path: str) -> dict:
    return json.loads(Path(path).read_text("utf-8"))


def _configure_logging(level: str | None) -> None:
    name = (level or get_section("logging.level", "WARNING")).upper()
    logging.basicConfig(level=getattr(logging, name, logging.WARNING), format="%(levelname)s %(name)s: %(message)s")


def _build_cli_env(args: argparse.Namespace) -> Dict[str, str]:
    env: Dict[str, str] = {}
    if args.method:
        env["CLI_BREACH_METHOD"] = args.method
    if args.profile:
        env["CLI_BREACH_PROFILE"] = args.profile
    if args.max_nodes is not None:
        env["CLI_BREACH_MAX_NODES"] = str(args.max_nodes)
    if args.events_dir:
        env["CLI_BREACH_EVENTS_ENABLED"] = "1"
        env["CLI_BREACH_EVENTS_DIR"] = args.events_dir
    return env


def _print_issues(codes: List[str]) -> None:
    for code in codes:
        print(code)


def cmd_solve(args: argparse.Namespace) -> int:
    _configure_logging(args.log_level)
    payload = _load_json(args.file)
    try:
        result = solve_payload(payload, env=_build_cli_env(args))
    except ManagedValidationError as exc:
        print(str(exc))
        _print_issues(exc.report.codes())
        return EXIT_INVALID
    except SearchBudgetExceeded as exc:
        print(str(exc))
        return EXIT_BUDGET

    if args.json:
        print(json.dumps(result, indent=2, sort_keys=True))
    elif not result["solutions"]:
        print("No solution found")
    else:
        for item in result["solutions"]:
            print(item["grid"], end="")
            print(solution_from_payload(item), end="")
    return EXIT_SOLVED if result["solutions"] else EXIT_NO_SOLUTION


def cmd_validate(args: argparse.Namespace) -> int:
    payload = _load_json(args.file)
    puzzle = _load_json(args.puzzle) if args.puzzle else None
    expect_type = payload.get("type") if isinstance(payload, dict) else None
    settings = resolve_settings({"CLI_BREACH_PROFILE": args.profile} if args.profile else {})
    report = validate(payload, expect_type=str(expect_type or "Puzzle"), profile=settings.profile, puzzle=puzzle)
    _print_issues(report.codes())
    if report.ok:
        print("OK")
        return 0
    return 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Breach Protocol puzzle solver")
    sub = parser.add_subparsers(dest="command", required=True)

    solve = sub.add_parser("solve", help="Solve a Puzzle JSON file")
    solve.add_argument("file")
    solve.add_argument(
        "--method",
        choices=["shortest", "first", "all"],
        default=None,
        help="Search method (default from config.toml)",
    )
    solve.add_argument("--profile", default=None, help="Validation profile (dev, ci, lenient)")
    solve.add_argument("--max-nodes", type=int, default=None, help="Abort after N applied moves (0 = unbounded)")
    solve.add_argument("--events-dir", default=None, help="Append a JSONL solve event below this directory")
    solve.add_argument("--log-level", default=None)
    solve.add_argument("--json", action="store_true", help="Print the full result as JSON")
    solve.set_defaults(func=cmd_solve)

    check = sub.add_parser("validate", help="Validate a Puzzle or Solution JSON file")
    check.add_argument("file")
    check.add_argument("--puzzle", default=None, help="Puzzle file a Solution is checked against")
    check.add_argument("--profile", default=None)
    check.set_defaults(func=cmd_validate)

    return parser


def main(argv: List[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

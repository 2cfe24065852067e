"""Two-stage payload validation: JSON Schema shape, then rulebook invariants."""

from __future__ import annotations

import os
import time
from typing import Any, Dict, Iterable, List, Optional

import jsonschema

from . import loader, profiles, rulebook
from .errors import ManagedValidationError, ValidationIssue, ValidationReport
from .profiles import ProfileConfig

_PROFILE_ENV = "BREACH_VALIDATION_PROFILE"
_MAX_CODES_IN_MESSAGE = 5


def _choose_profile(profile: str | ProfileConfig | None) -> ProfileConfig:
    if isinstance(profile, ProfileConfig):
        return profile
    if not profile or profile == "auto":
        return profiles.get_profile(os.environ.get(_PROFILE_ENV))
    return profiles.get_profile(str(profile))


def _pointer(error: jsonschema.ValidationError) -> str:
    return "$" + "".join(f"[{part}]" if isinstance(part, int) else f".{part}" for part in error.absolute_path)


def _schema_issues(artifact: Any, expect_type: str, check_schema: bool) -> List[ValidationIssue]:
    if not isinstance(artifact, dict):
        return [ValidationIssue.error("type.mismatch", "Payload must be a JSON object", "$")]

    issues: List[ValidationIssue] = []
    if artifact.get("type") != expect_type:
        issues.append(
            ValidationIssue.error("type.mismatch", f"Expected type {expect_type!r}, got {artifact.get('type')!r}", "$.type")
        )
    if not check_schema:
        return issues

    try:
        schema = loader.compile_schema(loader.get_descriptor(expect_type))
    except KeyError:
        return issues + [ValidationIssue.error("schema.not_found", f"Unknown artifact type {expect_type}", "$.type")]
    except (OSError, ValueError, jsonschema.SchemaError) as exc:
        return issues + [ValidationIssue.error("schema.not_found", str(exc), "$.schema")]

    violations = sorted(schema.iter_errors(artifact), key=lambda e: [str(p) for p in e.absolute_path])
    issues.extend(ValidationIssue.error("schema.violation", error.message, _pointer(error)) for error in violations)
    return issues


class _Sink:
    """Sorts issues into errors and warnings after profile overrides."""

    def __init__(self, profile: ProfileConfig, artifact_type: str) -> None:
        self.profile = profile
        self.artifact_type = artifact_type
        self.errors: List[ValidationIssue] = []
        self.warnings: List[ValidationIssue] = []

    def add(self, issues: Iterable[ValidationIssue]) -> int:
        added = 0
        for issue in issues:
            issue = self.profile.apply_overrides(self.artifact_type, issue)
            if issue.is_warning:
                self.warnings.append(issue)
            else:
                self.errors.append(issue)
                added += 1
        return added


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def validate(
    artifact: Dict[str, Any],
    expect_type: str,
    profile: str | ProfileConfig | None = None,
    *,
    puzzle: Optional[Dict[str, Any]] = None,
) -> ValidationReport:
    """Validate *artifact* as *expect_type*.

    ``puzzle`` supplies the Puzzle payload a Solution is checked against;
    without it only the puzzle-independent Solution rules run.
    """

    cfg = _choose_profile(profile)
    sink = _Sink(cfg, expect_type)
    timings = {"schema": 0, "invariants": 0}

    started = time.perf_counter()
    shape_errors = sink.add(_schema_issues(artifact, expect_type, cfg.check_schema))
    timings["schema"] = _elapsed_ms(started)

    # Rules index into the payload, so they only run on a well-shaped one.
    if cfg.check_invariants and isinstance(artifact, dict) and not shape_errors:
        started = time.perf_counter()
        sink.add(rulebook.run_invariants(artifact, expect_type, puzzle, cfg))
        timings["invariants"] = _elapsed_ms(started)

    return ValidationReport(errors=tuple(sink.errors), warnings=tuple(sink.warnings), timings_ms=timings)


def assert_valid(
    artifact: Dict[str, Any],
    expect_type: str,
    profile: str | ProfileConfig | None = None,
    *,
    puzzle: Optional[Dict[str, Any]] = None,
) -> ValidationReport:
    """Validate and raise :class:`ManagedValidationError` on failure.

    Under a ``warn_as_error`` profile warnings fail the payload too.
    """

    cfg = _choose_profile(profile)
    report = validate(artifact, expect_type, profile=cfg, puzzle=puzzle)
    blocking = report.blocking(cfg.warn_as_error)
    if not blocking:
        return report
    codes = ", ".join(issue.code for issue in blocking[:_MAX_CODES_IN_MESSAGE])
    if len(blocking) > _MAX_CODES_IN_MESSAGE:
        codes += ", …"
    raise ManagedValidationError(f"Validation failed for {expect_type}: {codes}", report)


__all__ = ["ManagedValidationError", "assert_valid", "validate"]

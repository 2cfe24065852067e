"""Validation findings and the report/exception that carry them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Mapping, Tuple


class Severity(str, Enum):
    ERROR = "ERROR"
    WARN = "WARN"


SEVERITY_ERROR = Severity.ERROR
SEVERITY_WARN = Severity.WARN


@dataclass(frozen=True)
class ValidationIssue:
    """One finding, located by a ``$``-rooted pointer into the payload."""

    code: str
    message: str
    path: str = "$"
    severity: Severity = Severity.ERROR

    @classmethod
    def error(cls, code: str, message: str, path: str = "$") -> "ValidationIssue":
        return cls(code, message, path, Severity.ERROR)

    @classmethod
    def warning(cls, code: str, message: str, path: str = "$") -> "ValidationIssue":
        return cls(code, message, path, Severity.WARN)

    @property
    def is_warning(self) -> bool:
        return self.severity == Severity.WARN

    def __str__(self) -> str:
        return f"{self.code} at {self.path}: {self.message}"


@dataclass(frozen=True)
class ValidationReport:
    """Errors and warnings for one Puzzle or Solution payload.

    ``codes()`` lists error codes first, then warnings prefixed ``warn:``;
    the CLI prints exactly this list.
    """

    errors: Tuple[ValidationIssue, ...] = ()
    warnings: Tuple[ValidationIssue, ...] = ()
    timings_ms: Mapping[str, int] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    def blocking(self, warn_as_error: bool) -> List[ValidationIssue]:
        return list(self.errors) + (list(self.warnings) if warn_as_error else [])

    def codes(self) -> List[str]:
        return [issue.code for issue in self.errors] + [f"warn:{issue.code}" for issue in self.warnings]


class ManagedValidationError(ValueError):
    """A payload was rejected; ``report`` says why."""

    def __init__(self, message: str, report: ValidationReport) -> None:
        super().__init__(message)
        self.report = report

    @classmethod
    def single(cls, expect_type: str, issue: ValidationIssue) -> "ManagedValidationError":
        report = ValidationReport(errors=(issue,))
        return cls(f"Validation failed for {expect_type}: {issue.code}", report)


__all__ = [
    "SEVERITY_ERROR",
    "SEVERITY_WARN",
    "ManagedValidationError",
    "Severity",
    "ValidationIssue",
    "ValidationReport",
]

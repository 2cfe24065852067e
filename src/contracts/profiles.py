"""Validation severity profiles (dev/ci/lenient)."""

from __future__ import annotations


from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Mapping

from .errors import SEVERITY_WARN, ValidationIssue


@dataclass(frozen=True)
class ProfileConfig:
    """Profile toggles that govern which checks are executed."""

    name: str
    check_schema: bool = True
    check_invariants: bool = True
    warn_as_error: bool = False
    invariant_rules: Mapping[str, FrozenSet[str]] = field(default_factory=dict)
    severity_overrides: Mapping[str, Mapping[str, str]] = field(default_factory=dict)

    def is_invariant_enabled(self, artifact_type: str, rule_name: str) -> bool:
        rules = self.invariant_rules.get(artifact_type)
        return rules is None or rule_name in rules

    def apply_overrides(self, artifact_type: str, issue: ValidationIssue) -> ValidationIssue:
        overrides: Dict[str, str] = {}
        overrides.update(self.severity_overrides.get("*", {}))
        overrides.update(self.severity_overrides.get(artifact_type, {}))
        desired = overrides.get(issue.code)
        if desired and desired != issue.severity:
            return replace(issue, severity=desired)
        return issue


_ALL_RULES = {
    "Puzzle": frozenset({"grid_length", "daemon_nonempty", "daemon_fits_buffer", "token_nonempty"}),
    "Solution": frozenset(
        {
            "solution_lengths",
            "solution_alternation",
            "solution_distinct_cells",
            "solution_buffer_tokens",
            "solution_daemons",
        }
    ),
}

_PROFILES: Dict[str, ProfileConfig] = {
    "dev": ProfileConfig(
        name="dev",
        invariant_rules=_ALL_RULES,
    ),
    "ci": ProfileConfig(
        name="ci",
        warn_as_error=True,
        invariant_rules=_ALL_RULES,
    ),
    "lenient": ProfileConfig(
        name="lenient",
        invariant_rules=_ALL_RULES,
        severity_overrides={
            "Puzzle": {"invariant.token.empty": SEVERITY_WARN},
        },
    ),
}


def get_profile(name: str | None) -> ProfileConfig:
    """Return the profile matching *name* (defaults to ``dev``)."""

    if not name:
        name = "dev"
    key = name.lower()
    if key not in _PROFILES:
        raise ValueError(f"Unknown validation profile: {name}")
    return _PROFILES[key]


__all__ = ["ProfileConfig", "get_profile"]

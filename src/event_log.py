"""Append-only JSONL record of solve requests.

Each :class:`SolveEvent` becomes one line in
``<root>/<YYYYMMDD>/solves_NN.jsonl``. A file is closed off once it reaches
``max_bytes`` and the next free ``NN`` is used.
"""

from __future__ import annotations

import json
import threading
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Sequence, Tuple

from breach.solver import SearchStats

DEFAULT_MAX_BYTES = 100 * 1024 * 1024


@dataclass(frozen=True)
class SolveEvent:
    """What one ``solve_payload`` call did, without the solutions themselves."""

    status: str
    method: str
    profile: str
    puzzle_digest: str
    solution_digests: Tuple[str, ...]
    nodes_visited: int
    max_depth: int
    elapsed_ms: int
    warnings: Tuple[str, ...] = ()

    @classmethod
    def from_search(
        cls,
        *,
        status: str,
        method: str,
        profile: str,
        puzzle_digest: str,
        solution_digests: Sequence[str],
        stats: SearchStats,
        warnings: Sequence[str] = (),
    ) -> "SolveEvent":
        return cls(
            status=status,
            method=method,
            profile=profile,
            puzzle_digest=puzzle_digest,
            solution_digests=tuple(solution_digests),
            nodes_visited=stats.nodes_visited,
            max_depth=stats.max_depth,
            elapsed_ms=stats.elapsed_ms,
            warnings=tuple(warnings),
        )

    def to_record(self, when: datetime) -> Dict[str, Any]:
        record: Dict[str, Any] = {"event": "solve", "ts": when.isoformat(timespec="milliseconds")}
        record.update(asdict(self))
        record["solution_digests"] = list(self.solution_digests)
        record["warnings"] = list(self.warnings)
        return record


class EventLog:
    """Writer for one events directory; safe to share between threads."""

    def __init__(self, root: str | Path, max_bytes: int = DEFAULT_MAX_BYTES) -> None:
        self.root = Path(root)
        self.max_bytes = max_bytes
        self._lock = threading.Lock()
        self._current: Path | None = None

    @property
    def current_path(self) -> Path | None:
        return self._current

    def _has_room(self, path: Path) -> bool:
        return not path.exists() or path.stat().st_size < self.max_bytes

    def _target(self, day: str) -> Path:
        directory = self.root / day
        current = self._current
        if current is not None and current.parent == directory and self._has_room(current):
            return current
        directory.mkdir(parents=True, exist_ok=True)
        number = 0
        while not self._has_room(directory / f"solves_{number:02d}.jsonl"):
            number += 1
        return directory / f"solves_{number:02d}.jsonl"

    def record(self, event: SolveEvent, *, when: datetime | None = None) -> Path:
        """Append ``event`` and return the file it landed in."""

        when = when or datetime.now(timezone.utc)
        line = json.dumps(event.to_record(when), sort_keys=True, ensure_ascii=False)
        with self._lock:
            path = self._target(when.strftime("%Y%m%d"))
            with path.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")
            self._current = path
        return path


_OPEN_LOGS: Dict[Tuple[Path, int], EventLog] = {}
_OPEN_LOCK = threading.Lock()


def open_log(root: str | Path, max_bytes: int = DEFAULT_MAX_BYTES) -> EventLog:
    """Shared :class:`EventLog` for ``root``, so rotation state survives between calls."""

    key = (Path(root).resolve(), max_bytes)
    with _OPEN_LOCK:
        if key not in _OPEN_LOGS:
            _OPEN_LOGS[key] = EventLog(key[0], max_bytes)
        return _OPEN_LOGS[key]


__all__ = ["DEFAULT_MAX_BYTES", "EventLog", "SolveEvent", "open_log"]

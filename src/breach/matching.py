"""Per-daemon contiguous match tracking."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .grid import Token


@dataclass(frozen=True, slots=True)
class MatchState:
    """Progress of one daemon: ``Partial(k)`` or ``Completed``.

    ``Partial(k)`` means the last ``k`` collected tokens equal the daemon's
    first ``k`` tokens. ``Completed`` is absorbing.
    """

    matched: int = 0
    completed: bool = False

    @classmethod
    def partial(cls, matched: int) -> "MatchState":
        return cls(matched, False)

    def advance(self, daemon: Sequence[Token], token: Token) -> "MatchState":
        """Return the state after observing ``token``.

        A mismatch resets to ``Partial(0)`` without re-checking ``token``
        against the daemon's first element.
        """

        if self.completed:
            return self
        if self.matched < len(daemon) and daemon[self.matched] == token:
            matched = self.matched + 1
            if matched == len(daemon):
                return COMPLETED
            return MatchState.partial(matched)
        return START

    def __str__(self) -> str:
        return "Completed" if self.completed else f"Partial({self.matched})"


START = MatchState.partial(0)
COMPLETED = MatchState(0, True)


def all_completed(states: Sequence[MatchState]) -> bool:
    """``True`` when every state is completed (vacuously for no daemons)."""

    return all(state.completed for state in states)


__all__ = ["COMPLETED", "MatchState", "START", "all_completed"]

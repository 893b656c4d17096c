"""
History store - append-only log of session results.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Optional

from quest_framework.components.modes import MiniGameType
from quest_framework.session.models import SessionResult


class HistoryStore:
    """
    Chronological, append-only sequence of SessionResults.

    Insertion order is chronological order. Results are immutable and
    are never removed or reordered, so readers need no coordination.
    """

    def __init__(self, results: Iterable[SessionResult] = ()):
        self._results: list[SessionResult] = []
        for result in results:
            self.append(result)

    def append(self, result: SessionResult) -> int:
        """Append a result. Returns its index."""
        if not isinstance(result, SessionResult):
            raise TypeError(f"Expected SessionResult, got {type(result).__name__}")
        self._results.append(result)
        return len(self._results) - 1

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[SessionResult]:
        return iter(tuple(self._results))

    def __getitem__(self, index: int) -> SessionResult:
        return self._results[index]

    def recent(self, count: int) -> list[SessionResult]:
        """Last ``count`` results, oldest first."""
        if count <= 0:
            return []
        return self._results[-count:]

    def last(self) -> Optional[SessionResult]:
        return self._results[-1] if self._results else None

    def by_mini_game(self, mini_game: MiniGameType) -> list[SessionResult]:
        return [r for r in self._results if r.mini_game == mini_game]

    def totals(self) -> dict[str, int]:
        """Lifetime sums for the history screen."""
        return {
            "sessions": len(self._results),
            "correct": sum(r.correct_count for r in self._results),
            "questions": sum(r.total_count for r in self._results),
            "exp": sum(r.exp_gained for r in self._results),
            "gold": sum(r.gold_delta for r in self._results),
        }

    # Persistence

    def to_records(self) -> list[dict[str, Any]]:
        return [r.to_dict() for r in self._results]

    @classmethod
    def from_records(cls, records: Iterable[dict[str, Any]]) -> HistoryStore:
        return cls(SessionResult.from_dict(r) for r in records)

"""
Weak-point analysis - per-category miss rates and a study plan.

Reads the most recent window of session results, maps attempted and
missed prompt ids to content categories, and ranks categories by
miss rate. Purely derived; nothing here is persisted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from quest_engine.resources.database import CategoryLookup
from quest_framework.components.modes import MiniGameType
from quest_framework.session.models import SessionResult

logger = logging.getLogger(__name__)

# Miss rate above which a category is weak
WEAK_MISS_RATE = 0.25
# Miss rate at or below which a category is strong...
STRONG_MISS_RATE = 0.15
# ...given at least this many attempts
MIN_STRONG_ATTEMPTS = 5
# Maximum number of plan entries
PLAN_LENGTH = 3


@dataclass(frozen=True)
class CategoryScore:
    """Aggregated performance for one content tag."""
    tag: str
    attempts: int
    misses: int

    @property
    def miss_rate(self) -> float:
        if self.attempts == 0:
            return 0.0
        return self.misses / self.attempts


@dataclass
class AnalysisReport:
    """
    Weak/strong categories and a recommended activity plan.

    Attributes:
        weak_categories: Ranked worst first
        strong_categories: Ranked best first
        recommended_plan: Mini-games to play next, in order
        mode_accuracy: Accuracy per mini-game across the window
        sessions_analyzed: Results in the window
    """
    weak_categories: list[CategoryScore] = field(default_factory=list)
    strong_categories: list[CategoryScore] = field(default_factory=list)
    recommended_plan: list[MiniGameType] = field(default_factory=list)
    mode_accuracy: dict[MiniGameType, float] = field(default_factory=dict)
    sessions_analyzed: int = 0

    @property
    def is_empty(self) -> bool:
        return not (self.weak_categories or self.strong_categories or self.recommended_plan)

    def to_dict(self) -> dict[str, object]:
        def score(s: CategoryScore) -> dict[str, object]:
            return {"tag": s.tag, "attempts": s.attempts, "misses": s.misses,
                    "miss_rate": round(s.miss_rate, 4)}

        return {
            "weak_categories": [score(s) for s in self.weak_categories],
            "strong_categories": [score(s) for s in self.strong_categories],
            "recommended_plan": [m.value for m in self.recommended_plan],
            "mode_accuracy": {m.value: round(a, 4) for m, a in self.mode_accuracy.items()},
            "sessions_analyzed": self.sessions_analyzed,
        }


@dataclass
class _Tally:
    attempts: int = 0
    misses: int = 0
    last_miss_index: int = -1
    last_miss_mode: Optional[MiniGameType] = None


class AnalysisEngine:
    """
    Aggregates history into an AnalysisReport.

    Usage:
        engine = AnalysisEngine(categories=content_db)
        report = engine.analyze(list(history), window_size=20)
    """

    def __init__(self, categories: CategoryLookup):
        self.categories = categories

    def analyze(self, history: Sequence[SessionResult], window_size: int) -> AnalysisReport:
        """
        Analyze the most recent ``window_size`` results.

        An empty window yields an empty report.
        """
        if window_size <= 0:
            return AnalysisReport()
        window = list(history)[-window_size:]
        if not window:
            return AnalysisReport()

        tallies = self._tally(window)
        scores = {tag: CategoryScore(tag, t.attempts, t.misses) for tag, t in tallies.items()}

        weak = [s for s in scores.values() if s.attempts > 0 and s.miss_rate > WEAK_MISS_RATE]
        weak.sort(key=lambda s: (-s.miss_rate, -tallies[s.tag].last_miss_index, s.tag))

        strong = [
            s for s in scores.values()
            if s.attempts >= MIN_STRONG_ATTEMPTS and s.miss_rate <= STRONG_MISS_RATE
        ]
        strong.sort(key=lambda s: (s.miss_rate, s.tag))

        plan: list[MiniGameType] = []
        for score in weak:
            mode = tallies[score.tag].last_miss_mode
            if mode is not None and mode not in plan:
                plan.append(mode)
            if len(plan) >= PLAN_LENGTH:
                break

        report = AnalysisReport(
            weak_categories=weak,
            strong_categories=strong,
            recommended_plan=plan,
            mode_accuracy=self._mode_accuracy(window),
            sessions_analyzed=len(window),
        )
        logger.debug(
            f"Analyzed {len(window)} sessions: {len(weak)} weak, {len(strong)} strong, plan={plan}"
        )
        return report

    def _tally(self, window: Sequence[SessionResult]) -> dict[str, _Tally]:
        tallies: dict[str, _Tally] = {}
        for index, result in enumerate(window):
            for prompt_id in result.attempted_prompt_ids:
                tag = self.categories.category_of(prompt_id)
                if tag is None:
                    continue
                tallies.setdefault(tag, _Tally()).attempts += 1

            for prompt_id in result.missed_prompt_ids:
                tag = self.categories.category_of(prompt_id)
                if tag is None:
                    continue
                tally = tallies.setdefault(tag, _Tally())
                if prompt_id not in result.attempted_prompt_ids:
                    # Older records may lack attempts; a miss is still an attempt
                    tally.attempts += 1
                tally.misses += 1
                tally.last_miss_index = index
                tally.last_miss_mode = result.mini_game
        return tallies

    @staticmethod
    def _mode_accuracy(window: Sequence[SessionResult]) -> dict[MiniGameType, float]:
        correct: dict[MiniGameType, int] = {}
        attempted: dict[MiniGameType, int] = {}
        for result in window:
            count = len(result.attempted_prompt_ids) or result.total_count
            correct[result.mini_game] = correct.get(result.mini_game, 0) + result.correct_count
            attempted[result.mini_game] = attempted.get(result.mini_game, 0) + count
        return {
            mode: (correct[mode] / attempted[mode]) if attempted[mode] else 0.0
            for mode in attempted
        }

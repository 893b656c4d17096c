"""
Session data - specs, per-answer outcomes, final results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Optional

from quest_engine.resources.database import Prompt
from quest_framework.components.modes import MiniGameType


class SessionOutcome(Enum):
    """How a session ended."""
    CLEARED = "cleared"          # All prompts answered
    VICTORY = "victory"          # Enemy defeated before prompts ran out
    KNOCKED_OUT = "knocked_out"  # Player hp ran out mid-session
    ABORTED = "aborted"          # Player quit


class AnswerGrade(Enum):
    """Grade for a single answer."""
    CORRECT = auto()
    NEAR_MISS = auto()
    MISS = auto()


@dataclass(frozen=True)
class SessionSpec:
    """
    Everything needed to run one mini-game instance.

    Attributes:
        mini_game: Which rules apply
        prompts: Ordered prompts (content supplied externally)
        enemy_max_hp: Enemy HP for Vocab Battle
        floors: Prompts played in Grammar Dungeon (None = all)
        turns: Prompts played in Conversation (None = all)
        difficulty: Content tier the prompts were drawn from
    """
    mini_game: MiniGameType
    prompts: tuple[Prompt, ...]
    enemy_max_hp: Optional[int] = None
    floors: Optional[int] = None
    turns: Optional[int] = None
    difficulty: int = 1


@dataclass(frozen=True)
class SessionHandle:
    """Opaque reference to a running or finished session."""
    session_id: str
    mini_game: MiniGameType


@dataclass(frozen=True)
class PromptOutcome:
    """Result of submitting one answer."""
    prompt_id: str
    grade: AnswerGrade
    expected: str
    combo: int
    damage_taken: int = 0
    enemy_damage: int = 0
    enemy_hp: Optional[int] = None
    gold_earned: int = 0
    session_ended: bool = False

    @property
    def correct(self) -> bool:
        return self.grade == AnswerGrade.CORRECT


@dataclass(frozen=True)
class SessionResult:
    """
    Immutable record of a finished session.

    Produced exactly once per session, on clear, early end or abort.
    0 <= correct_count <= total_count always holds.
    """
    mini_game: MiniGameType
    timestamp: datetime
    correct_count: int
    total_count: int
    max_combo: int
    exp_gained: int
    hp_delta: int
    gold_delta: int
    missed_prompt_ids: frozenset[str] = field(default_factory=frozenset)
    attempted_prompt_ids: tuple[str, ...] = field(default_factory=tuple)
    outcome: SessionOutcome = SessionOutcome.CLEARED

    def __post_init__(self):
        if not 0 <= self.correct_count <= self.total_count:
            raise ValueError(
                f"correct_count {self.correct_count} outside [0, {self.total_count}]"
            )

    @property
    def accuracy(self) -> float:
        """Correct answers over prompts attempted (0 when nothing was attempted)."""
        attempted = len(self.attempted_prompt_ids)
        if attempted == 0:
            return 0.0
        return self.correct_count / attempted

    def to_dict(self) -> dict[str, Any]:
        return {
            "mini_game": self.mini_game.value,
            "timestamp": self.timestamp.isoformat(),
            "correct_count": self.correct_count,
            "total_count": self.total_count,
            "max_combo": self.max_combo,
            "exp_gained": self.exp_gained,
            "hp_delta": self.hp_delta,
            "gold_delta": self.gold_delta,
            "missed_prompt_ids": sorted(self.missed_prompt_ids),
            "attempted_prompt_ids": list(self.attempted_prompt_ids),
            "outcome": self.outcome.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SessionResult:
        return cls(
            mini_game=MiniGameType(data["mini_game"]),
            timestamp=datetime.fromisoformat(data["timestamp"]),
            correct_count=data["correct_count"],
            total_count=data["total_count"],
            max_combo=data["max_combo"],
            exp_gained=data["exp_gained"],
            hp_delta=data["hp_delta"],
            gold_delta=data["gold_delta"],
            missed_prompt_ids=frozenset(data.get("missed_prompt_ids", ())),
            attempted_prompt_ids=tuple(data.get("attempted_prompt_ids", ())),
            outcome=SessionOutcome(data.get("outcome", SessionOutcome.CLEARED.value)),
        )

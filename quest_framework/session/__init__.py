"""
Session module - one engine for all five mini-games.

Provides:
- Session specs, handles and results
- Per-answer grading (with Spelling near misses)
- Per-mini-game rules (exp, damage, gold, enemy HP)
- Early endings (enemy defeated, player knocked out) and abort
"""

from quest_framework.session.models import (
    SessionSpec,
    SessionHandle,
    SessionResult,
    SessionOutcome,
    PromptOutcome,
    AnswerGrade,
)
from quest_framework.session.rules import (
    MiniGameRules,
    RULES,
    MISS_HP_COST,
    rules_for,
    grade_answer,
)
from quest_framework.session.engine import SessionEngine

__all__ = [
    # Models
    "SessionSpec",
    "SessionHandle",
    "SessionResult",
    "SessionOutcome",
    "PromptOutcome",
    "AnswerGrade",
    # Rules
    "MiniGameRules",
    "RULES",
    "MISS_HP_COST",
    "rules_for",
    "grade_answer",
    # Engine
    "SessionEngine",
]

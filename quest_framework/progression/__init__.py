"""
Progression module - exp, leveling, HP, gold, streaks, badges.

Provides:
- ProgressionEngine: applies session results to the player
- The shared leveling curve (re-exported from components)
- Badge catalogue
"""

from quest_framework.components.player import exp_to_next
from quest_framework.progression.leveling import (
    ProgressionEngine,
    ProgressionOutcome,
    FAINT_EXP_PENALTY,
    FAINT_RECOVERY_PERCENT,
    LEVEL_MAX_HP_GAIN,
    LEVEL_ATTACK_GAIN,
    LEVEL_DEFENSE_GAIN,
    apply_level_up,
    next_streak,
)
from quest_framework.progression.badges import (
    BadgeDefinition,
    BADGES,
    award_badges,
    badge_progress,
    get_badge,
)

__all__ = [
    # Leveling
    "ProgressionEngine",
    "ProgressionOutcome",
    "FAINT_EXP_PENALTY",
    "FAINT_RECOVERY_PERCENT",
    "LEVEL_MAX_HP_GAIN",
    "LEVEL_ATTACK_GAIN",
    "LEVEL_DEFENSE_GAIN",
    "apply_level_up",
    "next_streak",
    "exp_to_next",
    # Badges
    "BadgeDefinition",
    "BADGES",
    "award_badges",
    "badge_progress",
    "get_badge",
]

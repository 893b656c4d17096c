"""
Progression engine - applies a session result to the player.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from quest_framework.components.modes import MiniGameType
from quest_framework.components.player import PlayerState, exp_to_next
from quest_framework.progression.badges import award_badges
from quest_framework.session.models import SessionResult

logger = logging.getLogger(__name__)

# Per-level stat increments
LEVEL_MAX_HP_GAIN = 10
LEVEL_ATTACK_GAIN = 2
LEVEL_DEFENSE_GAIN = 1

# Exp lost when fainting, and HP restored afterwards
FAINT_EXP_PENALTY = 5
FAINT_RECOVERY_PERCENT = 0.5

# Mini-games whose correct answers count as mastered words
WORD_MODES = frozenset({MiniGameType.VOCAB_BATTLE, MiniGameType.SPELLING})


@dataclass
class ProgressionOutcome:
    """What changed when a result was applied."""
    leveled_up: bool = False
    fainted: bool = False
    levels_gained: int = 0
    badges_earned: list[str] = field(default_factory=list)


def apply_level_up(player: PlayerState) -> None:
    """Increment level and apply the fixed stat gains once."""
    player.level += 1
    player.max_hp += LEVEL_MAX_HP_GAIN
    player.attack += LEVEL_ATTACK_GAIN
    player.defense += LEVEL_DEFENSE_GAIN


def next_streak(streak_days: int, last: datetime | None, now: datetime) -> int:
    """
    Streak value after a session at ``now``.

    Same calendar day keeps the streak, the next day extends it, any
    longer gap restarts it at 1. Timestamps before ``last`` count as
    the same day.
    """
    if last is None:
        return 1
    gap = (now.date() - last.date()).days
    if gap <= 0:
        return max(streak_days, 1)
    if gap == 1:
        return streak_days + 1
    return 1


class ProgressionEngine:
    """
    Mutates PlayerState from session results.

    Order: exp and leveling, then HP (with faint penalty), gold,
    combo/session counters, streak, badges.
    """

    def apply_result(self, player: PlayerState, result: SessionResult) -> ProgressionOutcome:
        outcome = ProgressionOutcome()

        # Exp and leveling
        player.exp += max(0, result.exp_gained)
        while player.exp >= exp_to_next(player.level):
            player.exp -= exp_to_next(player.level)
            apply_level_up(player)
            outcome.levels_gained += 1
        outcome.leveled_up = outcome.levels_gained > 0
        if outcome.leveled_up:
            logger.info(f"{player.name} reached level {player.level} (+{outcome.levels_gained})")

        # HP
        player.hp = min(player.max_hp, max(0, player.hp + result.hp_delta))
        if player.hp == 0:
            outcome.fainted = True
            player.exp = max(0, player.exp - FAINT_EXP_PENALTY)
            player.hp = int(player.max_hp * FAINT_RECOVERY_PERCENT)
            logger.info(f"{player.name} fainted; recovered to {player.hp}/{player.max_hp}")

        # Gold
        player.gold = max(0, player.gold + result.gold_delta)

        # Counters
        player.best_combo = max(player.best_combo, result.max_combo)
        player.sessions_played += 1
        if result.mini_game in WORD_MODES:
            player.words_mastered += result.correct_count

        # Streak
        player.streak_days = next_streak(player.streak_days, player.last_session_at, result.timestamp)
        if player.last_session_at is None or result.timestamp > player.last_session_at:
            player.last_session_at = result.timestamp

        outcome.badges_earned = award_badges(player)
        return outcome

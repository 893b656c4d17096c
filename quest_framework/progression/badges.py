"""
Badge catalogue - one-time achievements checked after every session.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from quest_framework.components.player import PlayerState


@dataclass(frozen=True)
class BadgeDefinition:
    """An achievement and the condition that grants it."""
    id: str
    name: str
    description: str
    condition: Callable[[PlayerState], bool]


BADGES: tuple[BadgeDefinition, ...] = (
    BadgeDefinition(
        id="sharp_mind",
        name="Sharp Mind",
        description="Answer 10 questions in a row correctly.",
        condition=lambda p: p.best_combo >= 10,
    ),
    BadgeDefinition(
        id="consistency_medal",
        name="Consistency Medal",
        description="Play 7 days in a row.",
        condition=lambda p: p.streak_days >= 7,
    ),
    BadgeDefinition(
        id="vocabulary_knight",
        name="Vocabulary Knight",
        description="Master 50 words.",
        condition=lambda p: p.words_mastered >= 50,
    ),
)

_BY_ID = {badge.id: badge for badge in BADGES}


def get_badge(badge_id: str) -> BadgeDefinition | None:
    return _BY_ID.get(badge_id)


def award_badges(player: PlayerState) -> list[str]:
    """Grant every badge whose condition now holds. Returns newly earned ids."""
    earned = [
        badge.id for badge in BADGES
        if badge.id not in player.badges and badge.condition(player)
    ]
    if earned:
        player.badges = player.badges | set(earned)
    return earned


def badge_progress(player: PlayerState) -> list[dict[str, object]]:
    """Status-screen view: every badge with whether it is earned."""
    return [
        {"id": badge.id, "name": badge.name, "description": badge.description,
         "earned": badge.id in player.badges}
        for badge in BADGES
    ]

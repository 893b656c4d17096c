"""
Player components - classes, durable stats, leveling curve.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import Field

from quest_engine.core.component import Component, register_component
from quest_framework.components.equipment import EffectKind, ItemEffect
from quest_framework.components.modes import MiniGameType


class PlayerClass(Enum):
    """Class archetypes chosen at new-game start."""
    VOCABULARY_WARRIOR = "vocabulary_warrior"
    GRAMMAR_MAGE = "grammar_mage"
    CONVERSATION_BARD = "conversation_bard"

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()


@dataclass(frozen=True)
class ClassProfile:
    """Starting stats and intrinsic bonuses for a class."""
    max_hp: int
    attack: int
    defense: int
    bonuses: tuple[ItemEffect, ...] = field(default_factory=tuple)
    description: str = ""


CLASS_PROFILES: dict[PlayerClass, ClassProfile] = {
    PlayerClass.VOCABULARY_WARRIOR: ClassProfile(
        max_hp=100,
        attack=12,
        defense=1,
        bonuses=(
            ItemEffect(EffectKind.EXP_BONUS, MiniGameType.VOCAB_BATTLE, 0.10),
        ),
        description="Word-focused. Small attack and exp bonus in Vocab Battle.",
    ),
    PlayerClass.GRAMMAR_MAGE: ClassProfile(
        max_hp=90,
        attack=10,
        defense=2,
        bonuses=(
            ItemEffect(EffectKind.EXP_BONUS, MiniGameType.GRAMMAR_DUNGEON, 0.10),
            ItemEffect(EffectKind.DAMAGE_REDUCTION, MiniGameType.GRAMMAR_DUNGEON, 0.20),
        ),
        description="Grammar-focused. Damage reduction and exp bonus in Grammar Dungeon.",
    ),
    PlayerClass.CONVERSATION_BARD: ClassProfile(
        max_hp=95,
        attack=10,
        defense=1,
        bonuses=(
            ItemEffect(EffectKind.EXP_BONUS, MiniGameType.CONVERSATION, 0.25),
            ItemEffect(EffectKind.GOLD_BONUS, MiniGameType.CONVERSATION, 0.50),
        ),
        description="Conversation-focused. Large exp and gold bonus in the Tavern.",
    ),
}

# Class menu order on the new-game screen
CLASS_ORDER: tuple[PlayerClass, ...] = (
    PlayerClass.VOCABULARY_WARRIOR,
    PlayerClass.GRAMMAR_MAGE,
    PlayerClass.CONVERSATION_BARD,
)


def exp_to_next(level: int) -> int:
    """Exp needed to go from ``level`` to ``level + 1``."""
    return 50 + 15 * (max(1, level) - 1)


@register_component
class PlayerState(Component):
    """
    Durable player attributes.

    Mutated only by the progression engine (and equipment changes,
    which live on EquipmentSet). hp is kept within [0, max_hp] and exp
    below exp_to_next(level) by the engine.

    Attributes:
        name: Display name
        player_class: Class archetype
        level: Current level (>= 1)
        exp: Exp into the current level
        hp: Current HP
        max_hp: Maximum HP
        gold: Currency
        streak_days: Consecutive calendar days played
        attack: Damage stat for Vocab Battle
        defense: Flat stat shown on the status screen
        best_combo: Best combo across all sessions
        sessions_played: Completed or aborted sessions
        words_mastered: Correct Vocab Battle and Spelling answers, lifetime
        last_session_at: Timestamp of the most recent session
        badges: Earned badge ids
    """
    name: str
    player_class: PlayerClass
    level: int = Field(default=1, ge=1)
    exp: int = Field(default=0, ge=0)
    hp: int = Field(default=100, ge=0)
    max_hp: int = Field(default=100, ge=1)
    gold: int = Field(default=0, ge=0)
    streak_days: int = Field(default=0, ge=0)
    attack: int = Field(default=10, ge=0)
    defense: int = Field(default=0, ge=0)
    best_combo: int = Field(default=0, ge=0)
    sessions_played: int = Field(default=0, ge=0)
    words_mastered: int = Field(default=0, ge=0)
    last_session_at: Optional[datetime] = None
    badges: set[str] = Field(default_factory=set)

    def model_post_init(self, __context) -> None:
        """Ensure current HP doesn't exceed max."""
        if self.hp > self.max_hp:
            self.hp = self.max_hp

    @property
    def exp_to_next(self) -> int:
        return exp_to_next(self.level)

    @property
    def hp_percent(self) -> float:
        """Get HP as percentage (0-1)."""
        return self.hp / self.max_hp

    @property
    def class_bonuses(self) -> tuple[ItemEffect, ...]:
        return CLASS_PROFILES[self.player_class].bonuses

    def snapshot(self) -> dict[str, Any]:
        """Plain-data view for render state."""
        data = self.model_dump(mode="json")
        data["exp_to_next"] = self.exp_to_next
        data["badges"] = sorted(self.badges)
        return data


def new_player(name: str, player_class: PlayerClass) -> PlayerState:
    """Create a level-1 player with class base stats."""
    profile = CLASS_PROFILES[player_class]
    return PlayerState(
        name=name,
        player_class=player_class,
        hp=profile.max_hp,
        max_hp=profile.max_hp,
        attack=profile.attack,
        defense=profile.defense,
    )

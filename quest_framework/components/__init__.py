"""
Quest Components - durable game data.

Player and equipment are Pydantic models so they validate on
assignment and serialize straight into save files.
"""

from quest_framework.components.modes import MiniGameType
from quest_framework.components.equipment import (
    EquipmentSet,
    EquipmentSlot,
    EffectKind,
    Item,
    ItemEffect,
    damage_multiplier,
    sum_modifier,
)
from quest_framework.components.player import (
    PlayerState,
    PlayerClass,
    ClassProfile,
    CLASS_PROFILES,
    CLASS_ORDER,
    exp_to_next,
    new_player,
)

__all__ = [
    # Modes
    "MiniGameType",
    # Equipment
    "EquipmentSet",
    "EquipmentSlot",
    "EffectKind",
    "Item",
    "ItemEffect",
    "damage_multiplier",
    "sum_modifier",
    # Player
    "PlayerState",
    "PlayerClass",
    "ClassProfile",
    "CLASS_PROFILES",
    "CLASS_ORDER",
    "exp_to_next",
    "new_player",
]

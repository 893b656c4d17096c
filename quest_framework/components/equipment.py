"""
Equipment components - slots, items, bonus effects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Optional

from pydantic import Field

from quest_engine.core.component import Component, register_component
from quest_framework.components.modes import MiniGameType


class EquipmentSlot(Enum):
    """Equipment slot types."""
    WEAPON = "weapon"
    ARMOR = "armor"
    RING = "ring"
    CHARM = "charm"


class EffectKind(Enum):
    """What an item modifies."""
    EXP_BONUS = "exp_bonus"                 # +x% exp
    DAMAGE_REDUCTION = "damage_reduction"   # -x% hp lost per miss
    GOLD_BONUS = "gold_bonus"               # +x% gold


@dataclass(frozen=True)
class ItemEffect:
    """
    A typed modifier.

    Attributes:
        kind: What is modified
        target_mini_game: Mini-game the effect applies to (None = all)
        magnitude: Fraction, e.g. 0.2 for +20%
    """
    kind: EffectKind
    target_mini_game: Optional[MiniGameType] = None
    magnitude: float = 0.0

    def applies_to(self, kind: EffectKind, mini_game: MiniGameType) -> bool:
        return self.kind == kind and self.target_mini_game in (None, mini_game)


@dataclass(frozen=True)
class Item:
    """
    An equippable item. Created by the inventory collaborator.

    The slot is fixed at creation.
    """
    id: str
    name: str
    slot: EquipmentSlot
    effect: ItemEffect
    description: str = ""


def sum_modifier(
    effects: Iterable[ItemEffect],
    kind: EffectKind,
    mini_game: MiniGameType,
) -> float:
    """Sum the magnitudes of every effect of ``kind`` that applies to ``mini_game``."""
    return sum(e.magnitude for e in effects if e.applies_to(kind, mini_game))


def damage_multiplier(effects: Iterable[ItemEffect], mini_game: MiniGameType) -> float:
    """Combined DamageReduction multiplier (multiplicative, never negative)."""
    multiplier = 1.0
    for effect in effects:
        if effect.applies_to(EffectKind.DAMAGE_REDUCTION, mini_game):
            multiplier *= max(0.0, 1.0 - effect.magnitude)
    return multiplier


@register_component
class EquipmentSet(Component):
    """
    Equipped items on the player.

    Attributes:
        slots: Map of slot type to equipped item (None = empty)
    """
    slots: dict[EquipmentSlot, Optional[Item]] = Field(default_factory=dict)

    def model_post_init(self, __context) -> None:
        """Initialize all equipment slots."""
        for slot in EquipmentSlot:
            self.slots.setdefault(slot, None)

    def equip(self, item: Item) -> Optional[Item]:
        """
        Equip an item into its own slot.

        Returns:
            Previously equipped item (or None)
        """
        previous = self.slots.get(item.slot)
        self.slots[item.slot] = item
        return previous

    def unequip(self, slot: EquipmentSlot) -> Optional[Item]:
        """
        Unequip from a slot.

        Returns:
            Unequipped item (or None)
        """
        previous = self.slots.get(slot)
        self.slots[slot] = None
        return previous

    def get_equipped(self, slot: EquipmentSlot) -> Optional[Item]:
        """Get item in a slot."""
        return self.slots.get(slot)

    def is_equipped(self, item_id: str) -> bool:
        """Check if an item is equipped anywhere."""
        return any(item is not None and item.id == item_id for item in self.slots.values())

    def iter_equipped(self) -> Iterator[Item]:
        for slot in EquipmentSlot:
            item = self.slots.get(slot)
            if item is not None:
                yield item

    def effects(self) -> list[ItemEffect]:
        """Effects of all equipped items."""
        return [item.effect for item in self.iter_equipped()]

    def modifier(self, kind: EffectKind, mini_game: MiniGameType) -> float:
        """Summed magnitude of matching effects."""
        return sum_modifier(self.effects(), kind, mini_game)

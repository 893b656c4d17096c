"""
Save/Load system - game state persistence.

Provides:
- Save/load a GameState to JSON files
- Multiple save slots (10 by default)
- Save integrity validation (checksum)
- Slot metadata for a load menu
"""

from __future__ import annotations

import base64
import hashlib
import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum, auto
from pathlib import Path
from typing import Any, Optional

from quest_engine.core.clock import Clock, SystemClock
from quest_engine.core.component import get_component_type
from quest_engine.core.events import EventBus
from quest_framework.components.equipment import (
    EffectKind,
    EquipmentSet,
    EquipmentSlot,
    Item,
    ItemEffect,
)
from quest_framework.components.modes import MiniGameType
from quest_framework.history.store import HistoryStore
from quest_framework.navigation.machine import GameState

logger = logging.getLogger(__name__)


class SaveEvent(Enum):
    """Save system events."""
    SAVE_STARTED = auto()
    SAVE_COMPLETED = auto()
    SAVE_FAILED = auto()
    LOAD_STARTED = auto()
    LOAD_COMPLETED = auto()
    LOAD_FAILED = auto()


@dataclass
class SaveMetadata:
    """Metadata about a save file."""
    slot: int
    name: str
    timestamp: str
    player_name: str
    level: int
    sessions_played: int


def item_to_dict(item: Item) -> dict[str, Any]:
    effect = item.effect
    return {
        "id": item.id,
        "name": item.name,
        "slot": item.slot.value,
        "description": item.description,
        "effect": {
            "kind": effect.kind.value,
            "target_mini_game": effect.target_mini_game.value if effect.target_mini_game else None,
            "magnitude": effect.magnitude,
        },
    }


def item_from_dict(data: dict[str, Any]) -> Item:
    effect = data["effect"]
    target = effect.get("target_mini_game")
    return Item(
        id=data["id"],
        name=data["name"],
        slot=EquipmentSlot(data["slot"]),
        effect=ItemEffect(
            kind=EffectKind(effect["kind"]),
            target_mini_game=MiniGameType(target) if target else None,
            magnitude=float(effect.get("magnitude", 0.0)),
        ),
        description=data.get("description", ""),
    )


class SaveManager:
    """
    Manages saving and loading game state.

    Usage:
        save_mgr = SaveManager(save_path="saves", event_bus=event_bus)
        save_mgr.save_game(0, machine.state, name="Before the dungeon")
        state = save_mgr.load_game(0)
    """

    VERSION = "1.0"
    MAX_SLOTS = 10

    def __init__(
        self,
        save_path: str | Path = "saves",
        event_bus: Optional[EventBus] = None,
        clock: Optional[Clock] = None,
    ):
        self.save_path = Path(save_path)
        self.save_path.mkdir(parents=True, exist_ok=True)
        self.event_bus = event_bus
        self.clock = clock or SystemClock()
        self._current_slot: Optional[int] = None

    @property
    def current_slot(self) -> Optional[int]:
        return self._current_slot

    def _get_slot_path(self, slot: int) -> Path:
        """Get path for a save slot."""
        return self.save_path / f"save_{slot:02d}.json"

    def _get_metadata_path(self, slot: int) -> Path:
        """Get path for save metadata."""
        return self.save_path / f"save_{slot:02d}_meta.json"

    def get_save_slots(self) -> list[Optional[SaveMetadata]]:
        """Get metadata for all save slots (None = empty or unreadable)."""
        slots: list[Optional[SaveMetadata]] = []
        for i in range(self.MAX_SLOTS):
            meta_path = self._get_metadata_path(i)
            if not meta_path.exists():
                slots.append(None)
                continue
            try:
                with open(meta_path, 'r', encoding='utf-8') as f:
                    slots.append(SaveMetadata(**json.load(f)))
            except (OSError, ValueError, TypeError) as e:
                logger.warning(f"Unreadable save metadata {meta_path}: {e}")
                slots.append(None)
        return slots

    def save_game(self, slot: int, state: GameState, name: str = "Save") -> bool:
        """
        Save a game state.

        Args:
            slot: Save slot number (0-9)
            state: State to persist
            name: Display name for the save

        Returns:
            True if save was successful
        """
        if not 0 <= slot < self.MAX_SLOTS:
            raise ValueError(f"Save slot must be in [0, {self.MAX_SLOTS}), got {slot}")
        if state.player is None:
            logger.warning("Nothing to save: no player")
            return False

        self._publish(SaveEvent.SAVE_STARTED, slot=slot)
        try:
            save_dict = self._serialize_state(state)
            save_dict['checksum'] = self._calculate_checksum(save_dict)

            with open(self._get_slot_path(slot), 'w', encoding='utf-8') as f:
                json.dump(save_dict, f, indent=2)

            metadata = SaveMetadata(
                slot=slot,
                name=name,
                timestamp=self.clock.now().isoformat(),
                player_name=state.player.name,
                level=state.player.level,
                sessions_played=state.player.sessions_played,
            )
            with open(self._get_metadata_path(slot), 'w', encoding='utf-8') as f:
                json.dump(asdict(metadata), f, indent=2)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Save to slot {slot} failed: {e}")
            self._publish(SaveEvent.SAVE_FAILED, slot=slot, error=str(e))
            return False

        self._current_slot = slot
        logger.info(f"Saved '{name}' to slot {slot}")
        self._publish(SaveEvent.SAVE_COMPLETED, slot=slot)
        return True

    def load_game(self, slot: int, validate: bool = True) -> Optional[GameState]:
        """
        Load a saved game.

        Args:
            slot: Save slot number
            validate: Whether to validate checksum

        Returns:
            The restored GameState, or None if missing or corrupted
        """
        save_path = self._get_slot_path(slot)
        if not save_path.exists():
            return None

        self._publish(SaveEvent.LOAD_STARTED, slot=slot)
        try:
            with open(save_path, 'r', encoding='utf-8') as f:
                save_dict = json.load(f)

            if validate:
                checksum = save_dict.get('checksum')
                if not checksum or not self._verify_checksum(save_dict, checksum):
                    logger.error(f"Save slot {slot} corrupted: checksum mismatch")
                    self._publish(SaveEvent.LOAD_FAILED, slot=slot,
                                  error="Checksum validation failed")
                    return None

            state = self._deserialize_state(save_dict)
        except (OSError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Load from slot {slot} failed: {e}")
            self._publish(SaveEvent.LOAD_FAILED, slot=slot, error=str(e))
            return None

        self._current_slot = slot
        logger.info(f"Loaded slot {slot}")
        self._publish(SaveEvent.LOAD_COMPLETED, slot=slot)
        return state

    def delete_save(self, slot: int) -> bool:
        """Delete a save slot."""
        try:
            for path in (self._get_slot_path(slot), self._get_metadata_path(slot)):
                if path.exists():
                    path.unlink()
        except OSError as e:
            logger.error(f"Could not delete slot {slot}: {e}")
            return False
        if self._current_slot == slot:
            self._current_slot = None
        return True

    def validate_save(self, slot: int) -> bool:
        """
        Validate a save file's integrity.

        Returns:
            True if save is valid, False if corrupted or missing
        """
        save_path = self._get_slot_path(slot)
        if not save_path.exists():
            return False
        try:
            with open(save_path, 'r', encoding='utf-8') as f:
                save_dict = json.load(f)
        except (OSError, ValueError):
            return False
        checksum = save_dict.get('checksum')
        return bool(checksum) and self._verify_checksum(save_dict, checksum)

    # Serialization

    def _serialize_state(self, state: GameState) -> dict[str, Any]:
        player = state.player
        return {
            'version': self.VERSION,
            'player': {
                'type': player.get_type_name(),
                'data': player.model_dump(mode="json"),
            },
            'equipment': {
                slot.value: (item_to_dict(item) if item else None)
                for slot, item in state.equipment.slots.items()
            },
            'inventory': [item_to_dict(item) for item in state.inventory],
            'history': state.history.to_records(),
        }

    def _deserialize_state(self, data: dict[str, Any]) -> GameState:
        player_data = data['player']
        player_type = get_component_type(player_data['type'])
        if player_type is None:
            raise ValueError(f"Unknown player component type: {player_data['type']}")

        equipment = EquipmentSet()
        for slot_name, item_data in data.get('equipment', {}).items():
            if item_data is not None:
                item = item_from_dict(item_data)
                if item.slot != EquipmentSlot(slot_name):
                    raise ValueError(f"Item {item.id} saved in wrong slot {slot_name}")
                equipment.equip(item)

        return GameState(
            player=player_type.model_validate(player_data['data']),
            equipment=equipment,
            history=HistoryStore.from_records(data.get('history', [])),
            inventory=[item_from_dict(i) for i in data.get('inventory', [])],
        )

    # Checksum validation

    def _calculate_checksum(self, data: dict) -> str:
        """Calculate checksum for save data."""
        json_str = json.dumps(data, sort_keys=True, separators=(',', ':'))
        hash_bytes = hashlib.sha256(json_str.encode('utf-8')).digest()
        return base64.b64encode(hash_bytes).decode('ascii')

    def _verify_checksum(self, data: dict, expected_checksum: str) -> bool:
        """Verify save data checksum."""
        data_copy = data.copy()
        data_copy.pop('checksum', None)
        return self._calculate_checksum(data_copy) == expected_checksum

    def _publish(self, event_type: SaveEvent, **data: Any) -> None:
        if self.event_bus:
            self.event_bus.publish(event_type, **data)

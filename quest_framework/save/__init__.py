"""
Save module - game state persistence.

Provides:
- Save/load a GameState
- Multiple save slots (10 by default)
- Save metadata (player, level, sessions)
- Checksum validation
"""

from quest_framework.save.manager import (
    SaveManager,
    SaveMetadata,
    SaveEvent,
    item_to_dict,
    item_from_dict,
)

__all__ = [
    "SaveManager",
    "SaveMetadata",
    "SaveEvent",
    "item_to_dict",
    "item_from_dict",
]

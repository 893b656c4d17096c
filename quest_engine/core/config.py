"""
Game configuration.
"""

from __future__ import annotations

from typing import Any, Mapping


class GameConfig:
    """Configuration for session sizing and analysis."""

    def __init__(
        self,
        questions_per_session: int = 5,
        enemy_max_hp: int = 35,
        dungeon_floors: int = 5,
        conversation_turns: int = 5,
        difficulty: int = 1,
        analysis_window: int = 20,
        history_page_size: int = 10,
        default_player_name: str = "Hero",
    ):
        self.questions_per_session = questions_per_session
        self.enemy_max_hp = enemy_max_hp
        self.dungeon_floors = dungeon_floors
        self.conversation_turns = conversation_turns
        self.difficulty = difficulty
        self.analysis_window = analysis_window
        self.history_page_size = history_page_size
        self.default_player_name = default_player_name

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GameConfig:
        """Build a config from a mapping (e.g. parsed JSON). Unknown keys raise TypeError."""
        return cls(**dict(data))

    def to_dict(self) -> dict[str, Any]:
        return dict(vars(self))

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"GameConfig({fields})"

"""
Mini-game identifiers.
"""

from __future__ import annotations

from enum import Enum


class MiniGameType(Enum):
    """The five prompt-driven challenge types."""
    VOCAB_BATTLE = "vocab_battle"
    GRAMMAR_DUNGEON = "grammar_dungeon"
    CONVERSATION = "conversation"
    SPELLING = "spelling"
    LISTENING = "listening"

    @property
    def label(self) -> str:
        """Human-readable name."""
        return self.name.replace("_", " ").title()

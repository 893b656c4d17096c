"""
Screen identifiers and menu layout.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Union

from quest_framework.components.modes import MiniGameType


class Screen(Enum):
    """Every screen the navigation machine can be on."""
    TOP = auto()
    NEW_GAME = auto()
    HOME = auto()

    # Active mini-games
    VOCAB_BATTLE = auto()
    GRAMMAR_DUNGEON = auto()
    CONVERSATION = auto()
    SPELLING = auto()
    LISTENING = auto()

    # Mini-game results
    VOCAB_BATTLE_RESULT = auto()
    GRAMMAR_DUNGEON_RESULT = auto()
    CONVERSATION_RESULT = auto()
    SPELLING_RESULT = auto()
    LISTENING_RESULT = auto()

    # Menus and informational screens
    EQUIPMENT = auto()
    ANALYSIS = auto()
    STATUS = auto()
    HISTORY = auto()
    FAINTED = auto()
    LEVEL_UP = auto()


ACTIVE_SCREENS: dict[MiniGameType, Screen] = {
    MiniGameType.VOCAB_BATTLE: Screen.VOCAB_BATTLE,
    MiniGameType.GRAMMAR_DUNGEON: Screen.GRAMMAR_DUNGEON,
    MiniGameType.CONVERSATION: Screen.CONVERSATION,
    MiniGameType.SPELLING: Screen.SPELLING,
    MiniGameType.LISTENING: Screen.LISTENING,
}

RESULT_SCREENS: dict[MiniGameType, Screen] = {
    MiniGameType.VOCAB_BATTLE: Screen.VOCAB_BATTLE_RESULT,
    MiniGameType.GRAMMAR_DUNGEON: Screen.GRAMMAR_DUNGEON_RESULT,
    MiniGameType.CONVERSATION: Screen.CONVERSATION_RESULT,
    MiniGameType.SPELLING: Screen.SPELLING_RESULT,
    MiniGameType.LISTENING: Screen.LISTENING_RESULT,
}

# Screens left with a single Confirm/Back that return Home
ACKNOWLEDGE_SCREENS: frozenset[Screen] = frozenset(RESULT_SCREENS.values()) | {
    Screen.FAINTED,
    Screen.STATUS,
    Screen.HISTORY,
    Screen.ANALYSIS,
}

MenuEntry = Union[MiniGameType, Screen]

# Home menu, in display order
HOME_MENU: tuple[MenuEntry, ...] = (
    MiniGameType.VOCAB_BATTLE,
    MiniGameType.GRAMMAR_DUNGEON,
    MiniGameType.CONVERSATION,
    MiniGameType.SPELLING,
    MiniGameType.LISTENING,
    Screen.EQUIPMENT,
    Screen.ANALYSIS,
    Screen.HISTORY,
    Screen.STATUS,
)

# Top screen entries
TOP_CONTINUE = 0
TOP_NEW_GAME = 1


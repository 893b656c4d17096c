"""
Navigation module - screens and the top-level controller.
"""

from quest_framework.navigation.screens import (
    Screen,
    ACTIVE_SCREENS,
    RESULT_SCREENS,
    HOME_MENU,
)
from quest_framework.navigation.machine import (
    NavigationMachine,
    GameState,
    RenderState,
)

__all__ = [
    "Screen",
    "ACTIVE_SCREENS",
    "RESULT_SCREENS",
    "HOME_MENU",
    "NavigationMachine",
    "GameState",
    "RenderState",
]

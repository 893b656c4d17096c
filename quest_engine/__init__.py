"""
English Quest Engine

Headless core services for a terminal-styled English-learning RPG.
Rendering, audio and raw input live in the embedding application;
this package only knows about data, rules and screen state.

Quick Start:
    from quest_engine.core import GameConfig, InputEvent, SystemClock
    from quest_engine.resources import ContentDatabase
    from quest_framework.navigation import NavigationMachine, GameState

    content = ContentDatabase("game/data")
    content.load_all()

    machine = NavigationMachine(
        state=GameState(),
        content=content,
        categories=content,
        clock=SystemClock(),
        config=GameConfig(),
    )
    machine.dispatch_input(InputEvent.confirm())
    print(machine.get_render_state().screen)
"""

__version__ = "0.1.0"
__author__ = "Developer"

from quest_engine.core import (
    GameConfig,
    Component,
    register_component,
    EventBus,
    Event,
    Action,
    InputEvent,
    Clock,
    SystemClock,
    FixedClock,
    QuestError,
    InvalidStateError,
    InvalidSpecError,
    NotFoundError,
)

__all__ = [
    # Config
    "GameConfig",
    # Data
    "Component",
    "register_component",
    # Events
    "EventBus",
    "Event",
    # Input
    "Action",
    "InputEvent",
    # Time
    "Clock",
    "SystemClock",
    "FixedClock",
    # Errors
    "QuestError",
    "InvalidStateError",
    "InvalidSpecError",
    "NotFoundError",
]

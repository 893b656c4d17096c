"""
Core engine module.

Exports:
- GameConfig: Session sizing and analysis configuration
- Component, register_component: Pydantic data-model base and registration
- EventBus, Event: Event system
- Action, InputEvent: Semantic input events
- Clock, SystemClock, FixedClock: Injectable time source
- QuestError and subclasses: Error taxonomy
"""

from quest_engine.core.config import GameConfig
from quest_engine.core.component import Component, register_component, get_component_type
from quest_engine.core.events import EventBus, Event, GameEvent
from quest_engine.core.actions import Action, InputEvent
from quest_engine.core.clock import Clock, SystemClock, FixedClock
from quest_engine.core.errors import (
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
    "get_component_type",
    # Events
    "EventBus",
    "Event",
    "GameEvent",
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

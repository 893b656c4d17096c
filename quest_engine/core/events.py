"""
Typed event bus for decoupled communication.

Event types are Enums, so subscribers and publishers share names
instead of magic strings. The navigation machine publishes game events
here. A presentation layer can subscribe to play sounds or animations
without the core knowing about it.

Usage:
    event_bus.subscribe(GameEvent.LEVEL_UP, on_level_up)
    event_bus.publish(GameEvent.LEVEL_UP, level=3, levels_gained=1)
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable
from weakref import WeakMethod, ref

logger = logging.getLogger(__name__)


class GameEvent(Enum):
    """Events published by the game core."""
    # Navigation
    SCREEN_CHANGED = auto()

    # Sessions
    SESSION_STARTED = auto()
    SESSION_ENDED = auto()
    ANSWER_EVALUATED = auto()

    # Progression
    LEVEL_UP = auto()
    FAINTED = auto()
    BADGE_EARNED = auto()

    # Player
    PLAYER_CREATED = auto()
    ITEM_EQUIPPED = auto()
    ITEM_UNEQUIPPED = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: The event type (Enum member)
        data: Dictionary of event-specific data
        consumed: Whether the event has been handled
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)
    consumed: bool = False

    def consume(self) -> None:
        """Mark event as consumed (stops propagation)."""
        self.consumed = True

    def get(self, key: str, default: Any = None) -> Any:
        """Get event data by key."""
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        """Get event data by key (dict-style)."""
        return self.data[key]


# Type alias for event handlers
EventHandler = Callable[[Event], None]


@dataclass(eq=False)
class _Subscription:
    priority: int
    handler_ref: Any
    one_shot: bool = False
    weak: bool = True

    def resolve(self) -> EventHandler | None:
        if not self.weak:
            return self.handler_ref
        return self.handler_ref()


class EventBus:
    """
    Central event bus for publish/subscribe messaging.

    Features:
    - Typed events (Enum-based)
    - Priority ordering
    - Weak references (auto-cleanup when handlers are deleted)
    - One-shot handlers
    - Event consumption (stops propagation)
    - Re-entrant publishing (events raised by handlers are queued)
    """

    def __init__(self):
        self._subscriptions: dict[Enum, list[_Subscription]] = {}
        self._event_queue: deque[Event] = deque()
        self._is_publishing = False

    def subscribe(
        self,
        event_type: Enum,
        handler: EventHandler,
        priority: int = 0,
        one_shot: bool = False,
        weak: bool = True,
    ) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to listen for
            handler: Callback function(event: Event)
            priority: Higher priority handlers are called first (default 0)
            one_shot: If True, handler is removed after first call
            weak: If True, use weak reference (handler auto-removed if deleted)
        """
        if weak:
            handler_ref = WeakMethod(handler) if hasattr(handler, '__self__') else ref(handler)
        else:
            handler_ref = handler

        subscription = _Subscription(priority, handler_ref, one_shot, weak)
        subscriptions = self._subscriptions.setdefault(event_type, [])

        # Stable insert: after every handler with priority >= ours
        index = len(subscriptions)
        for i, existing in enumerate(subscriptions):
            if priority > existing.priority:
                index = i
                break
        subscriptions.insert(index, subscription)

    def unsubscribe(self, event_type: Enum, handler: EventHandler) -> None:
        """
        Unsubscribe from an event type.

        Args:
            event_type: The event type
            handler: The handler to remove
        """
        subscriptions = self._subscriptions.get(event_type)
        if not subscriptions:
            return
        self._subscriptions[event_type] = [
            s for s in subscriptions if s.resolve() != handler
        ]

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """
        Publish an event.

        Args:
            event_type: The event type
            **data: Event data as keyword arguments

        Returns:
            The Event object (check .consumed to see if it was handled)
        """
        event = Event(type=event_type, data=data)
        self.publish_event(event)
        return event

    def publish_event(self, event: Event) -> None:
        """
        Publish a pre-created event.

        Args:
            event: The event to publish
        """
        if self._is_publishing:
            self._event_queue.append(event)
            return

        self._is_publishing = True
        try:
            self._dispatch(event)
            while self._event_queue:
                self._dispatch(self._event_queue.popleft())
        finally:
            self._is_publishing = False

    def clear(self, event_type: Enum | None = None) -> None:
        """
        Clear handlers.

        Args:
            event_type: If specified, only clear handlers for this type.
                       If None, clear all handlers.
        """
        if event_type is None:
            self._subscriptions.clear()
        else:
            self._subscriptions.pop(event_type, None)

    def handler_count(self, event_type: Enum) -> int:
        """Number of live handlers for an event type."""
        return sum(1 for s in self._subscriptions.get(event_type, []) if s.resolve() is not None)

    def _dispatch(self, event: Event) -> None:
        """Dispatch event to handlers."""
        subscriptions = self._subscriptions.get(event.type)
        if not subscriptions:
            return

        dead: list[_Subscription] = []
        for subscription in list(subscriptions):
            handler = subscription.resolve()
            if handler is None:
                dead.append(subscription)
                continue

            try:
                handler(event)
            except Exception:
                # Log but don't crash
                logger.exception(f"Error in event handler for {event.type}")

            if subscription.one_shot:
                dead.append(subscription)

            if event.consumed:
                break

        for subscription in dead:
            if subscription in subscriptions:
                subscriptions.remove(subscription)

"""
Input action definitions.

Actions abstract raw input (keys, clicks) into semantic events. The
presentation layer translates its own key bindings into InputEvents and
hands them to the navigation machine; the core never sees raw keys.

Usage:
    machine.dispatch_input(InputEvent.select(2))
    machine.dispatch_input(InputEvent.answer("reduce"))
    machine.dispatch_input(InputEvent.back())
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class Action(Enum):
    """Semantic input actions accepted by the core."""
    SELECT = auto()     # Choose a menu entry by index
    CONFIRM = auto()    # Accept / continue
    CANCEL = auto()     # Abort the current activity
    ANSWER = auto()     # Submit free-form text
    BACK = auto()       # Leave the current screen


@dataclass(frozen=True)
class InputEvent:
    """
    A single input event.

    Attributes:
        action: The semantic action
        index: Menu index for SELECT
        value: Text for ANSWER
    """
    action: Action
    index: Optional[int] = None
    value: Optional[str] = None

    @classmethod
    def select(cls, index: int) -> InputEvent:
        return cls(Action.SELECT, index=index)

    @classmethod
    def confirm(cls) -> InputEvent:
        return cls(Action.CONFIRM)

    @classmethod
    def cancel(cls) -> InputEvent:
        return cls(Action.CANCEL)

    @classmethod
    def answer(cls, value: str) -> InputEvent:
        return cls(Action.ANSWER, value=value)

    @classmethod
    def back(cls) -> InputEvent:
        return cls(Action.BACK)

    @property
    def is_dismiss(self) -> bool:
        """Confirm or Back: acknowledges an informational screen."""
        return self.action in (Action.CONFIRM, Action.BACK)

    @property
    def is_leave(self) -> bool:
        """Cancel or Back: leaves the current screen."""
        return self.action in (Action.CANCEL, Action.BACK)

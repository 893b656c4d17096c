import os
import sys
from datetime import datetime

import pytest

# Ensure quest_engine / quest_framework can be imported
sys.path.append(os.getcwd())


class StubContent:
    """In-memory ContentProvider + CategoryLookup. Returns prompts in bank order."""

    def __init__(self, banks, categories=None):
        self.banks = banks
        self.categories = categories or {}
        self.requests = []

    def get_prompts_for(self, mini_game, difficulty):
        self.requests.append((mini_game, difficulty))
        return list(self.banks.get(mini_game, []))

    def category_of(self, prompt_id):
        return self.categories.get(prompt_id)


@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from quest_engine.core.events import EventBus
    return EventBus()


@pytest.fixture
def clock():
    """Clock pinned to a Monday morning."""
    from quest_engine.core.clock import FixedClock
    return FixedClock(datetime(2025, 12, 8, 9, 0))


@pytest.fixture
def sample_prompts():
    """Ten prompts: answers a0..a9, alternating categories."""
    from quest_engine.resources.database import Prompt
    return [
        Prompt(
            id=f"p{i}",
            question=f"question {i}",
            answer=f"a{i}",
            category="past_tense" if i % 2 == 0 else "articles",
        )
        for i in range(10)
    ]


@pytest.fixture
def content(sample_prompts):
    """Every mini-game gets the same ten prompts."""
    from quest_framework.components.modes import MiniGameType
    banks = {mode: sample_prompts for mode in MiniGameType}
    categories = {p.id: p.category for p in sample_prompts}
    return StubContent(banks, categories)


@pytest.fixture
def player():
    """Level-1 Vocabulary Warrior."""
    from quest_framework.components.player import PlayerClass, new_player
    return new_player("Alex", PlayerClass.VOCABULARY_WARRIOR)


@pytest.fixture
def equipment():
    from quest_framework.components.equipment import EquipmentSet
    return EquipmentSet()


@pytest.fixture
def make_result(clock):
    """Factory for SessionResults with sensible defaults."""
    from quest_framework.components.modes import MiniGameType
    from quest_framework.session.models import SessionResult

    def _make(**overrides):
        values = dict(
            mini_game=MiniGameType.LISTENING,
            timestamp=clock.now(),
            correct_count=0,
            total_count=0,
            max_combo=0,
            exp_gained=0,
            hp_delta=0,
            gold_delta=0,
        )
        values.update(overrides)
        return SessionResult(**values)

    return _make

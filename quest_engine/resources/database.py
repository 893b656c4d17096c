"""
Content Database.

Loads and validates the prompt banks that feed the mini-games, and
defines the collaborator interfaces the core consumes:

- ContentProvider: prompts for a mini-game at a difficulty
- CategoryLookup: content tag for a prompt id

ContentDatabase implements both from JSON files on disk. Each file in
``<data_path>/prompts`` holds a list of prompt objects (or a single
object) and every object is validated against PROMPT_SCHEMA.
"""

from __future__ import annotations

import json
import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Sequence

import jsonschema


PROMPT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["id", "mini_game", "question", "answer"],
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "mini_game": {
            "type": "string",
            "enum": ["vocab_battle", "grammar_dungeon", "conversation", "spelling", "listening"],
        },
        "question": {"type": "string"},
        "answer": {"type": "string", "minLength": 1},
        "accepted": {"type": "array", "items": {"type": "string"}},
        "category": {"type": "string"},
        "difficulty": {"type": "integer", "minimum": 1},
    },
    "additionalProperties": False,
}


@dataclass(frozen=True)
class Prompt:
    """
    One question/answer pair.

    Attributes:
        id: Stable prompt identifier (used for weak-point tagging)
        question: Text shown to the player
        answer: Answer key
        accepted: Alternative answers that also count as correct
        category: Content tag (e.g. "past_tense"), if known
    """
    id: str
    question: str
    answer: str
    accepted: tuple[str, ...] = field(default_factory=tuple)
    category: Optional[str] = None


def _mode_key(mini_game: Enum | str) -> str:
    return mini_game.value if isinstance(mini_game, Enum) else str(mini_game)


class ContentProvider(ABC):
    """Supplies prompt sequences for sessions."""

    @abstractmethod
    def get_prompts_for(self, mini_game: Enum | str, difficulty: int) -> Sequence[Prompt]:
        pass


class CategoryLookup(ABC):
    """Maps prompt ids to content tags."""

    @abstractmethod
    def category_of(self, prompt_id: str) -> Optional[str]:
        pass


class ContentDatabase(ContentProvider, CategoryLookup):
    """
    Central storage for prompt banks.

    Usage:
        db = ContentDatabase("game/data")
        db.load_all()
        prompts = db.get_prompts_for(MiniGameType.VOCAB_BATTLE, difficulty=1)
    """

    def __init__(
        self,
        data_path: Path | str,
        session_size: int = 5,
        rng: Optional[random.Random] = None,
    ):
        self._data_path = Path(data_path)
        self.session_size = session_size
        self._rng = rng or random.Random()

        # mode -> difficulty -> prompts
        self._banks: dict[str, dict[int, list[Prompt]]] = {}
        self._categories: dict[str, str] = {}
        self._prompts: dict[str, Prompt] = {}

        self.logger = logging.getLogger(__name__)

    def load_all(self) -> int:
        """Load every prompt file. Returns the number of prompts loaded."""
        prompt_dir = self._data_path / "prompts"
        if not prompt_dir.exists():
            self.logger.warning(f"Prompt directory not found: {prompt_dir}")
            return 0

        loaded = 0
        for file_path in sorted(prompt_dir.glob("*.json")):
            loaded += self._load_file(file_path)

        self.logger.info(
            f"Loaded {loaded} prompts across {len(self._banks)} mini-games, "
            f"{len(set(self._categories.values()))} categories."
        )
        return loaded

    def _load_file(self, file_path: Path) -> int:
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self.logger.error(f"Failed to load {file_path}: {e}")
            return 0

        entries = data if isinstance(data, list) else [data]
        loaded = 0
        for entry in entries:
            try:
                jsonschema.validate(instance=entry, schema=PROMPT_SCHEMA)
            except jsonschema.ValidationError as e:
                self.logger.error(f"Validation error in {file_path}: {e.message}")
                continue
            if entry['id'] in self._prompts:
                self.logger.warning(f"Duplicate prompt id '{entry['id']}' in {file_path}, skipping")
                continue
            self.register(entry)
            loaded += 1
        return loaded

    def register(self, entry: dict[str, Any]) -> Prompt:
        """Register one already-validated prompt object."""
        prompt = Prompt(
            id=entry['id'],
            question=entry['question'],
            answer=entry['answer'],
            accepted=tuple(entry.get('accepted', ())),
            category=entry.get('category'),
        )
        difficulty = entry.get('difficulty', 1)
        bank = self._banks.setdefault(entry['mini_game'], {})
        bank.setdefault(difficulty, []).append(prompt)
        self._prompts[prompt.id] = prompt
        if prompt.category:
            self._categories[prompt.id] = prompt.category
        return prompt

    def get_prompts_for(self, mini_game: Enum | str, difficulty: int) -> list[Prompt]:
        """
        Draw a session's worth of prompts.

        Falls back to the closest lower difficulty when the requested
        tier is empty. Returns an empty list if the mini-game has no bank.
        """
        bank = self._banks.get(_mode_key(mini_game), {})
        tiers = sorted((d for d in bank if d <= difficulty), reverse=True) or sorted(bank)
        for tier in tiers:
            pool = bank[tier]
            if pool:
                count = min(self.session_size, len(pool))
                return self._rng.sample(pool, count)
        return []

    def category_of(self, prompt_id: str) -> Optional[str]:
        return self._categories.get(prompt_id)

    def count(self, mini_game: Enum | str | None = None) -> int:
        """Number of prompts, optionally for one mini-game."""
        if mini_game is None:
            return sum(len(p) for bank in self._banks.values() for p in bank.values())
        return sum(len(p) for p in self._banks.get(_mode_key(mini_game), {}).values())

    def get_prompt(self, prompt_id: str) -> Prompt | None:
        return self._prompts.get(prompt_id)

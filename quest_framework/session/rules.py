"""
Mini-game rules - one strategy row per mini-game.

The session engine runs a single lifecycle for all five mini-games;
everything that differs (exp per correct answer, whether misses hurt,
gold, enemy HP) is looked up here.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional

from quest_engine.resources.database import Prompt
from quest_framework.components.equipment import ItemEffect, damage_multiplier
from quest_framework.components.modes import MiniGameType
from quest_framework.session.models import AnswerGrade

# HP lost per missed prompt before reductions
MISS_HP_COST = 10

# Floating-point slack before flooring reward/damage values
_EPSILON = 1e-9


@dataclass(frozen=True)
class MiniGameRules:
    """Static rules for a mini-game."""
    mini_game: MiniGameType
    base_exp: int
    damages_player: bool = False
    gold_per_correct: int = 0
    has_enemy: bool = False
    victory_gold: int = 0
    grades_near_miss: bool = False
    # SessionSpec attribute that caps how many prompts are played
    prompt_limit: Optional[str] = None


RULES: dict[MiniGameType, MiniGameRules] = {
    MiniGameType.VOCAB_BATTLE: MiniGameRules(
        mini_game=MiniGameType.VOCAB_BATTLE,
        base_exp=4,
        damages_player=True,
        has_enemy=True,
        victory_gold=5,
    ),
    MiniGameType.GRAMMAR_DUNGEON: MiniGameRules(
        mini_game=MiniGameType.GRAMMAR_DUNGEON,
        base_exp=3,
        damages_player=True,
        prompt_limit="floors",
    ),
    MiniGameType.CONVERSATION: MiniGameRules(
        mini_game=MiniGameType.CONVERSATION,
        base_exp=5,
        gold_per_correct=10,
        prompt_limit="turns",
    ),
    MiniGameType.SPELLING: MiniGameRules(
        mini_game=MiniGameType.SPELLING,
        base_exp=5,
        damages_player=True,
        grades_near_miss=True,
    ),
    MiniGameType.LISTENING: MiniGameRules(
        mini_game=MiniGameType.LISTENING,
        base_exp=5,
    ),
}


def rules_for(mini_game: MiniGameType) -> MiniGameRules:
    return RULES[mini_game]


def normalize_answer(text: str) -> str:
    """Collapse whitespace and case for comparison."""
    return " ".join(text.split()).casefold()


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + (ca != cb),
            ))
        previous = current
    return previous[-1]


def grade_answer(prompt: Prompt, answer: str, allow_near_miss: bool = False) -> AnswerGrade:
    """Grade an answer against the prompt's key and accepted alternatives."""
    given = normalize_answer(answer)
    keys = [normalize_answer(k) for k in (prompt.answer, *prompt.accepted)]
    if given in keys:
        return AnswerGrade.CORRECT
    if allow_near_miss and given and any(edit_distance(given, k) == 1 for k in keys):
        return AnswerGrade.NEAR_MISS
    return AnswerGrade.MISS


def enemy_damage(attack: int, combo: int) -> int:
    """Damage dealt to the enemy by a correct answer at the given (post-answer) combo."""
    return max(1, attack // 2) + max(0, combo - 1)


def miss_damage(
    effects: Iterable[ItemEffect],
    mini_game: MiniGameType,
    near_miss: bool = False,
) -> int:
    """HP lost for a miss after DamageReduction effects."""
    cost = MISS_HP_COST / 2 if near_miss else MISS_HP_COST
    return max(0, math.floor(cost * damage_multiplier(effects, mini_game) + _EPSILON))


def exp_for(rules: MiniGameRules, correct_count: int, exp_bonus: float) -> int:
    """baseExp * correct * (1 + bonus), rounded down."""
    return max(0, math.floor(rules.base_exp * correct_count * (1 + exp_bonus) + _EPSILON))


def gold_for(gold: int, gold_bonus: float) -> int:
    return max(0, math.floor(gold * (1 + gold_bonus) + _EPSILON))

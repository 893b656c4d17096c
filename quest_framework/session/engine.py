"""
Session engine - runs one mini-game instance to completion.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Sequence

from quest_engine.core.clock import Clock
from quest_engine.core.errors import InvalidSpecError, InvalidStateError, NotFoundError
from quest_engine.core.events import EventBus, GameEvent
from quest_engine.resources.database import Prompt
from quest_framework.components.equipment import EffectKind, EquipmentSet, ItemEffect, sum_modifier
from quest_framework.components.modes import MiniGameType
from quest_framework.session.models import (
    AnswerGrade,
    PromptOutcome,
    SessionHandle,
    SessionOutcome,
    SessionResult,
    SessionSpec,
)
from quest_framework.session.rules import (
    MiniGameRules,
    enemy_damage,
    exp_for,
    gold_for,
    grade_answer,
    miss_damage,
    rules_for,
)

logger = logging.getLogger(__name__)


@dataclass
class _SessionRun:
    """Mutable state of one session. Never leaves the engine."""
    handle: SessionHandle
    spec: SessionSpec
    rules: MiniGameRules
    prompts: tuple[Prompt, ...]
    effects: tuple[ItemEffect, ...]
    attack: int
    hp_budget: Optional[int]
    started_at: datetime

    index: int = 0
    combo: int = 0
    max_combo: int = 0
    correct: int = 0
    damage_taken: int = 0
    gold_earned: int = 0
    enemy_hp: Optional[int] = None
    attempted: list[str] = field(default_factory=list)
    missed: list[str] = field(default_factory=list)
    result: Optional[SessionResult] = None

    @property
    def is_active(self) -> bool:
        return self.result is None

    @property
    def current_prompt(self) -> Optional[Prompt]:
        if self.index < len(self.prompts):
            return self.prompts[self.index]
        return None


class SessionEngine:
    """
    Runs quiz sessions for all five mini-games.

    One lifecycle (start, answer..., end/abort) is shared; the rules
    table decides damage, rewards and early endings per mini-game.

    Usage:
        engine = SessionEngine(clock)
        handle = engine.start(spec, equipment, attack=player.attack, hp=player.hp)
        outcome = engine.submit_answer(handle, "reduce")
        if outcome.session_ended:
            result = engine.result(handle)
    """

    def __init__(self, clock: Clock, events: Optional[EventBus] = None):
        self.clock = clock
        self.events = events
        self._runs: dict[str, _SessionRun] = {}

    def start(
        self,
        spec: SessionSpec,
        equipment: EquipmentSet,
        *,
        attack: int = 10,
        hp: Optional[int] = None,
        bonuses: Sequence[ItemEffect] = (),
    ) -> SessionHandle:
        """
        Start a session.

        Args:
            spec: Mini-game, prompts and difficulty parameters
            equipment: Equipped items whose effects apply
            attack: Player attack (Vocab Battle damage)
            hp: Player's current HP; damage reaching it ends the session
            bonuses: Extra effects (class bonuses)

        Raises:
            InvalidSpecError: empty prompts or bad sizing
        """
        prompts = self._validate(spec)
        rules = rules_for(spec.mini_game)

        handle = SessionHandle(session_id=uuid.uuid4().hex, mini_game=spec.mini_game)
        run = _SessionRun(
            handle=handle,
            spec=spec,
            rules=rules,
            prompts=prompts,
            effects=tuple(equipment.effects()) + tuple(bonuses),
            attack=attack,
            hp_budget=hp,
            started_at=self.clock.now(),
            enemy_hp=spec.enemy_max_hp if rules.has_enemy else None,
        )
        self._runs[handle.session_id] = run

        logger.info(f"Session {handle.session_id} started: {spec.mini_game.value}, {len(prompts)} prompts")
        if self.events:
            self.events.publish(
                GameEvent.SESSION_STARTED,
                handle=handle,
                mini_game=spec.mini_game,
                total=len(prompts),
            )
        return handle

    def _validate(self, spec: SessionSpec) -> tuple[Prompt, ...]:
        """Check a spec and return the prompts that will actually be played."""
        if not spec.prompts:
            raise InvalidSpecError("Session needs at least one prompt")

        ids = [p.id for p in spec.prompts]
        if len(set(ids)) != len(ids):
            raise InvalidSpecError("Prompt ids must be unique within a session")

        rules = rules_for(spec.mini_game)
        if rules.has_enemy and (spec.enemy_max_hp is None or spec.enemy_max_hp <= 0):
            raise InvalidSpecError(f"{spec.mini_game.value} needs a positive enemy_max_hp")

        prompts = tuple(spec.prompts)
        if rules.prompt_limit:
            limit = getattr(spec, rules.prompt_limit)
            if limit is not None:
                if limit <= 0:
                    raise InvalidSpecError(f"{rules.prompt_limit} must be positive, got {limit}")
                prompts = prompts[:limit]
        return prompts

    def _get_run(self, handle: SessionHandle) -> _SessionRun:
        run = self._runs.get(handle.session_id)
        if run is None:
            raise NotFoundError(f"Unknown session {handle.session_id}")
        return run

    def submit_answer(
        self,
        handle: SessionHandle,
        answer: str,
        prompt_id: Optional[str] = None,
    ) -> PromptOutcome:
        """
        Answer the current prompt.

        Args:
            handle: Session to answer in
            answer: Player's answer text
            prompt_id: Optional id of the prompt being answered

        Raises:
            InvalidStateError: session already ended, or prompt_id is not current
            NotFoundError: unknown session or prompt id
        """
        run = self._get_run(handle)
        if not run.is_active:
            raise InvalidStateError(f"Session {handle.session_id} has already ended")

        prompt = run.current_prompt
        if prompt_id is not None and prompt_id != prompt.id:
            if all(p.id != prompt_id for p in run.spec.prompts):
                raise NotFoundError(f"Unknown prompt id {prompt_id!r}")
            raise InvalidStateError(f"Prompt {prompt_id!r} is not the current prompt ({prompt.id!r})")

        rules = run.rules
        grade = grade_answer(prompt, answer, allow_near_miss=rules.grades_near_miss)
        run.attempted.append(prompt.id)
        run.index += 1

        damage_taken = 0
        dealt = 0
        gold = 0
        if grade == AnswerGrade.CORRECT:
            run.correct += 1
            run.combo += 1
            run.max_combo = max(run.max_combo, run.combo)
            if rules.has_enemy:
                dealt = enemy_damage(run.attack, run.combo)
                run.enemy_hp = max(0, run.enemy_hp - dealt)
            gold = rules.gold_per_correct
            run.gold_earned += gold
        else:
            run.combo = 0
            run.missed.append(prompt.id)
            if rules.damages_player:
                damage_taken = miss_damage(
                    run.effects,
                    run.spec.mini_game,
                    near_miss=grade == AnswerGrade.NEAR_MISS,
                )
                run.damage_taken += damage_taken

        logger.debug(
            f"Session {handle.session_id} prompt {prompt.id}: {grade.name}, "
            f"combo={run.combo}, damage={damage_taken}, enemy_hp={run.enemy_hp}"
        )

        end = self._check_end(run)
        outcome = PromptOutcome(
            prompt_id=prompt.id,
            grade=grade,
            expected=prompt.answer,
            combo=run.combo,
            damage_taken=damage_taken,
            enemy_damage=dealt,
            enemy_hp=run.enemy_hp,
            gold_earned=gold,
            session_ended=end is not None,
        )
        if self.events:
            self.events.publish(GameEvent.ANSWER_EVALUATED, handle=handle, outcome=outcome)
        if end is not None:
            self._finish(run, end)
        return outcome

    def _check_end(self, run: _SessionRun) -> Optional[SessionOutcome]:
        if run.rules.has_enemy and run.enemy_hp is not None and run.enemy_hp <= 0:
            return SessionOutcome.VICTORY
        if run.hp_budget is not None and run.damage_taken > 0 and run.damage_taken >= run.hp_budget:
            return SessionOutcome.KNOCKED_OUT
        if run.index >= len(run.prompts):
            return SessionOutcome.CLEARED
        return None

    def abort(self, handle: SessionHandle) -> SessionResult:
        """
        Abort a session. Always succeeds.

        Returns the existing result if the session had already ended.
        """
        run = self._get_run(handle)
        if run.result is not None:
            return run.result
        return self._finish(run, SessionOutcome.ABORTED)

    def _finish(self, run: _SessionRun, outcome: SessionOutcome) -> SessionResult:
        rules = run.rules
        mini_game = run.spec.mini_game

        if outcome in (SessionOutcome.VICTORY, SessionOutcome.KNOCKED_OUT):
            total = len(run.attempted)
        else:
            total = len(run.prompts)

        gold = run.gold_earned
        if outcome == SessionOutcome.VICTORY:
            gold += rules.victory_gold

        exp_bonus = sum_modifier(run.effects, EffectKind.EXP_BONUS, mini_game)
        gold_bonus = sum_modifier(run.effects, EffectKind.GOLD_BONUS, mini_game)

        result = SessionResult(
            mini_game=mini_game,
            timestamp=self.clock.now(),
            correct_count=run.correct,
            total_count=total,
            max_combo=run.max_combo,
            exp_gained=exp_for(rules, run.correct, exp_bonus),
            hp_delta=-run.damage_taken,
            gold_delta=gold_for(gold, gold_bonus),
            missed_prompt_ids=frozenset(run.missed),
            attempted_prompt_ids=tuple(run.attempted),
            outcome=outcome,
        )
        run.result = result

        logger.info(
            f"Session {run.handle.session_id} ended ({outcome.value}): "
            f"{result.correct_count}/{result.total_count}, exp +{result.exp_gained}, "
            f"hp {result.hp_delta:+d}, gold {result.gold_delta:+d}"
        )
        if self.events:
            self.events.publish(GameEvent.SESSION_ENDED, handle=run.handle, result=result)
        return result

    def result(self, handle: SessionHandle) -> Optional[SessionResult]:
        """Final result, or None while the session is running."""
        return self._get_run(handle).result

    def is_active(self, handle: SessionHandle) -> bool:
        run = self._runs.get(handle.session_id)
        return run is not None and run.is_active

    def discard(self, handle: SessionHandle) -> None:
        """Forget a finished session."""
        run = self._get_run(handle)
        if run.is_active:
            raise InvalidStateError(f"Session {handle.session_id} is still running")
        del self._runs[handle.session_id]

    def snapshot(self, handle: SessionHandle) -> dict[str, Any]:
        """Read-only view of a session for render state."""
        run = self._get_run(handle)
        prompt = run.current_prompt if run.is_active else None
        return {
            "mini_game": run.spec.mini_game.value,
            "index": run.index,
            "total": len(run.prompts),
            "combo": run.combo,
            "max_combo": run.max_combo,
            "correct": run.correct,
            "damage_taken": run.damage_taken,
            "enemy_hp": run.enemy_hp,
            "enemy_max_hp": run.spec.enemy_max_hp if run.rules.has_enemy else None,
            "prompt": None if prompt is None else {"id": prompt.id, "question": prompt.question},
            "active": run.is_active,
        }

    @property
    def active_count(self) -> int:
        return sum(1 for run in self._runs.values() if run.is_active)

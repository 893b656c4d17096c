"""
Navigation state machine - the top-level game controller.

Holds the current screen, routes input events to whatever is active on
it, and moves between screens when sessions complete. It is the only
mutation entry point for a presentation layer:

- dispatch_input(event): apply one input event
- get_render_state(): read-only projection of everything on screen

Lifecycle of a mini-game:
    1. Home -> Select(i) builds a SessionSpec and starts a session
    2. Answer events go to the session engine; Cancel/Back aborts
    3. On completion the result is applied to the player, appended to
       history, and a screen queue is built: LevelUp (if any), then
       Fainted or the mini-game's result screen
    4. Confirm/Back walks the queue and finally returns Home
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from quest_engine.core.actions import Action, InputEvent
from quest_engine.core.clock import Clock
from quest_engine.core.config import GameConfig
from quest_engine.core.errors import InvalidSpecError, InvalidStateError
from quest_engine.core.events import EventBus, GameEvent
from quest_engine.resources.database import CategoryLookup, ContentProvider
from quest_framework.analysis.weakpoints import AnalysisEngine
from quest_framework.components.equipment import EquipmentSet, Item
from quest_framework.components.modes import MiniGameType
from quest_framework.components.player import CLASS_ORDER, PlayerState, new_player
from quest_framework.history.store import HistoryStore
from quest_framework.navigation.screens import (
    ACKNOWLEDGE_SCREENS,
    ACTIVE_SCREENS,
    HOME_MENU,
    RESULT_SCREENS,
    TOP_CONTINUE,
    TOP_NEW_GAME,
    Screen,
)
from quest_framework.progression.badges import badge_progress
from quest_framework.progression.leveling import ProgressionEngine, ProgressionOutcome
from quest_framework.session.engine import SessionEngine
from quest_framework.session.models import SessionHandle, SessionResult, SessionSpec

logger = logging.getLogger(__name__)


@dataclass
class GameState:
    """
    Everything that outlives a screen.

    Passed into the machine explicitly; there is no global player.

    Attributes:
        player: Current player (None before a new game)
        equipment: Equipped items
        history: Session log
        inventory: Items the player owns (from the inventory collaborator)
    """
    player: Optional[PlayerState] = None
    equipment: EquipmentSet = field(default_factory=EquipmentSet)
    history: HistoryStore = field(default_factory=HistoryStore)
    inventory: list[Item] = field(default_factory=list)


@dataclass(frozen=True)
class RenderState:
    """Snapshot of what the presentation layer should draw."""
    screen: Screen
    player: Optional[dict[str, Any]] = None
    session: Optional[dict[str, Any]] = None
    last_result: Optional[SessionResult] = None
    last_progression: Optional[ProgressionOutcome] = None
    screen_queue: tuple[Screen, ...] = ()
    menu: tuple[str, ...] = ()
    analysis: Optional[dict[str, Any]] = None
    history: Optional[dict[str, Any]] = None
    equipment: Optional[dict[str, Any]] = None
    status: Optional[dict[str, Any]] = None
    pending_name: Optional[str] = None


class NavigationMachine:
    """
    Screen state machine over an explicit GameState.

    Usage:
        machine = NavigationMachine(content, categories, clock, state=GameState())
        machine.dispatch_input(InputEvent.confirm())
        render = machine.get_render_state()
    """

    def __init__(
        self,
        content: ContentProvider,
        categories: CategoryLookup,
        clock: Clock,
        state: Optional[GameState] = None,
        config: Optional[GameConfig] = None,
        events: Optional[EventBus] = None,
    ):
        self.content = content
        self.clock = clock
        self.state = state or GameState()
        self.config = config or GameConfig()
        self.events = events

        self.sessions = SessionEngine(clock, events)
        self.progression = ProgressionEngine()
        self.analysis = AnalysisEngine(categories)

        self.screen = Screen.TOP
        self._queue: deque[Screen] = deque()
        self._handle: Optional[SessionHandle] = None
        self._pending_name: Optional[str] = None
        self.last_result: Optional[SessionResult] = None
        self.last_progression: Optional[ProgressionOutcome] = None

        self._handlers: dict[Screen, Callable[[InputEvent], None]] = {
            Screen.TOP: self._on_top,
            Screen.NEW_GAME: self._on_new_game,
            Screen.HOME: self._on_home,
            Screen.EQUIPMENT: self._on_equipment,
            Screen.LEVEL_UP: self._on_level_up,
        }
        for screen in ACTIVE_SCREENS.values():
            self._handlers[screen] = self._on_session
        for screen in ACKNOWLEDGE_SCREENS:
            self._handlers[screen] = self._on_acknowledge

    # Public API

    def dispatch_input(self, event: InputEvent) -> None:
        """Apply one input event. Events the current screen ignores are no-ops."""
        handler = self._handlers.get(self.screen)
        if handler is not None:
            handler(event)

    def get_render_state(self) -> RenderState:
        """Pure read projection of the current screen."""
        player = self.state.player
        session = None
        if self._handle is not None and self.sessions.is_active(self._handle):
            session = self.sessions.snapshot(self._handle)

        return RenderState(
            screen=self.screen,
            player=player.snapshot() if player else None,
            session=session,
            last_result=self.last_result,
            last_progression=self.last_progression,
            screen_queue=tuple(self._queue),
            menu=self._menu_labels(),
            analysis=self._analysis_view(),
            history=self._history_view(),
            equipment=self._equipment_view(),
            status=self._status_view(),
            pending_name=self._pending_name if self.screen == Screen.NEW_GAME else None,
        )

    @property
    def active_session(self) -> Optional[SessionHandle]:
        return self._handle

    def start_session(self, mini_game: MiniGameType) -> SessionHandle:
        """
        Build a SessionSpec for ``mini_game`` and start it.

        Raises:
            InvalidStateError: a session is already active, or no player exists
        """
        if self._handle is not None:
            raise InvalidStateError("A session is already active")
        player = self.state.player
        if player is None:
            raise InvalidStateError("Start a new game before playing")

        spec = self._build_spec(mini_game)
        self._handle = self.sessions.start(
            spec,
            self.state.equipment,
            attack=player.attack,
            hp=player.hp,
            bonuses=player.class_bonuses,
        )
        self._goto(ACTIVE_SCREENS[mini_game])
        return self._handle

    # Screen handlers

    def _on_top(self, event: InputEvent) -> None:
        if event.action == Action.CONFIRM or (event.action == Action.SELECT and event.index == TOP_CONTINUE):
            self._goto(Screen.HOME if self.state.player else Screen.NEW_GAME)
        elif event.action == Action.SELECT and event.index == TOP_NEW_GAME:
            self._goto(Screen.NEW_GAME)

    def _on_new_game(self, event: InputEvent) -> None:
        if event.action == Action.ANSWER and event.value and event.value.strip():
            self._pending_name = event.value.strip()
        elif event.action == Action.SELECT and self._in_range(event.index, CLASS_ORDER):
            self._create_player(CLASS_ORDER[event.index])
            self._goto(Screen.HOME)
        elif event.is_leave:
            self._pending_name = None
            self._goto(Screen.TOP)

    def _on_home(self, event: InputEvent) -> None:
        if event.action == Action.SELECT and self._in_range(event.index, HOME_MENU):
            entry = HOME_MENU[event.index]
            if isinstance(entry, MiniGameType):
                try:
                    self.start_session(entry)
                except InvalidSpecError as e:
                    logger.warning(f"Cannot start {entry.label}: {e}")
            else:
                self._goto(entry)
        elif event.is_leave:
            self._goto(Screen.TOP)

    def _on_session(self, event: InputEvent) -> None:
        if self._handle is None:
            return
        if event.action == Action.ANSWER and event.value is not None:
            outcome = self.sessions.submit_answer(self._handle, event.value)
            if outcome.session_ended:
                self._complete_session(self.sessions.result(self._handle))
        elif event.is_leave:
            self._complete_session(self.sessions.abort(self._handle))

    def _on_equipment(self, event: InputEvent) -> None:
        inventory = self.state.inventory
        if event.action == Action.SELECT and self._in_range(event.index, inventory):
            self._toggle_item(inventory[event.index])
        elif event.is_dismiss or event.is_leave:
            self._goto(Screen.HOME)

    def _on_level_up(self, event: InputEvent) -> None:
        if event.is_dismiss:
            self._goto(self._queue.popleft() if self._queue else Screen.HOME)

    def _on_acknowledge(self, event: InputEvent) -> None:
        if event.is_dismiss:
            self._queue.clear()
            self._goto(Screen.HOME)

    # Transitions

    def _goto(self, screen: Screen) -> None:
        previous = self.screen
        self.screen = screen
        logger.debug(f"Screen {previous.name} -> {screen.name}")
        self._publish(GameEvent.SCREEN_CHANGED, previous=previous, screen=screen)

    def _complete_session(self, result: SessionResult) -> None:
        player = self.state.player
        outcome = self.progression.apply_result(player, result)
        self.state.history.append(result)
        self.sessions.discard(self._handle)
        self._handle = None
        self.last_result = result
        self.last_progression = outcome

        if outcome.leveled_up:
            self._publish(GameEvent.LEVEL_UP, level=player.level, levels_gained=outcome.levels_gained)
        if outcome.fainted:
            self._publish(GameEvent.FAINTED, mini_game=result.mini_game)
        for badge_id in outcome.badges_earned:
            self._publish(GameEvent.BADGE_EARNED, badge=badge_id)

        self._queue.clear()
        if outcome.leveled_up:
            self._queue.append(Screen.LEVEL_UP)
        self._queue.append(Screen.FAINTED if outcome.fainted else RESULT_SCREENS[result.mini_game])
        self._goto(self._queue.popleft())

    # Helpers

    def _build_spec(self, mini_game: MiniGameType) -> SessionSpec:
        config = self.config
        prompts = tuple(self.content.get_prompts_for(mini_game, config.difficulty))
        if mini_game == MiniGameType.GRAMMAR_DUNGEON:
            return SessionSpec(mini_game, prompts, floors=config.dungeon_floors,
                               difficulty=config.difficulty)
        if mini_game == MiniGameType.CONVERSATION:
            return SessionSpec(mini_game, prompts, turns=config.conversation_turns,
                               difficulty=config.difficulty)
        prompts = prompts[:config.questions_per_session]
        if mini_game == MiniGameType.VOCAB_BATTLE:
            return SessionSpec(mini_game, prompts, enemy_max_hp=config.enemy_max_hp,
                               difficulty=config.difficulty)
        return SessionSpec(mini_game, prompts, difficulty=config.difficulty)

    def _create_player(self, player_class) -> None:
        name = self._pending_name or self.config.default_player_name
        self.state.player = new_player(name, player_class)
        self.state.equipment = EquipmentSet()
        self.state.history = HistoryStore()
        self.last_result = None
        self.last_progression = None
        self._pending_name = None
        logger.info(f"New game: {name} the {player_class.label}")
        self._publish(GameEvent.PLAYER_CREATED, player=self.state.player)

    def _toggle_item(self, item: Item) -> None:
        equipment = self.state.equipment
        if equipment.is_equipped(item.id):
            equipment.unequip(item.slot)
            self._publish(GameEvent.ITEM_UNEQUIPPED, item=item)
        else:
            replaced = equipment.equip(item)
            self._publish(GameEvent.ITEM_EQUIPPED, item=item, replaced=replaced)

    def _publish(self, event_type: GameEvent, **data: Any) -> None:
        if self.events:
            self.events.publish(event_type, **data)

    @staticmethod
    def _in_range(index: Optional[int], options) -> bool:
        return index is not None and 0 <= index < len(options)

    def _menu_labels(self) -> tuple[str, ...]:
        if self.screen == Screen.HOME:
            return tuple(entry.name for entry in HOME_MENU)
        if self.screen == Screen.NEW_GAME:
            return tuple(c.name for c in CLASS_ORDER)
        if self.screen == Screen.EQUIPMENT:
            return tuple(item.name for item in self.state.inventory)
        return ()

    # Screen views (computed on demand, never cached)

    def _analysis_view(self) -> Optional[dict[str, Any]]:
        if self.screen != Screen.ANALYSIS:
            return None
        report = self.analysis.analyze(list(self.state.history), self.config.analysis_window)
        return report.to_dict()

    def _history_view(self) -> Optional[dict[str, Any]]:
        if self.screen != Screen.HISTORY:
            return None
        page = self.state.history.recent(self.config.history_page_size)
        return {
            "sessions": [r.to_dict() for r in reversed(page)],
            "totals": self.state.history.totals(),
        }

    def _equipment_view(self) -> Optional[dict[str, Any]]:
        if self.screen != Screen.EQUIPMENT:
            return None
        equipment = self.state.equipment
        return {
            "slots": {
                slot.value: (item.id if item else None)
                for slot, item in equipment.slots.items()
            },
            "inventory": [
                {"id": item.id, "name": item.name, "slot": item.slot.value,
                 "equipped": equipment.is_equipped(item.id)}
                for item in self.state.inventory
            ],
        }

    def _status_view(self) -> Optional[dict[str, Any]]:
        if self.screen != Screen.STATUS or self.state.player is None:
            return None
        return {"badges": badge_progress(self.state.player)}

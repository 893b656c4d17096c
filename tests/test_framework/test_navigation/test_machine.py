import pytest
from quest_engine.core.actions import InputEvent
from quest_engine.core.config import GameConfig
from quest_engine.core.errors import InvalidSpecError, InvalidStateError
from quest_engine.core.events import GameEvent
from quest_framework.components import (
    EffectKind,
    EquipmentSlot,
    Item,
    ItemEffect,
    MiniGameType,
    PlayerClass,
)
from quest_framework.navigation import GameState, NavigationMachine, Screen
from quest_framework.session import SessionOutcome

@pytest.fixture
def sword():
    return Item(
        id="word_blade",
        name="Word Blade",
        slot=EquipmentSlot.WEAPON,
        effect=ItemEffect(EffectKind.EXP_BONUS, MiniGameType.VOCAB_BATTLE, 0.2),
    )

@pytest.fixture
def machine(content, clock, event_bus, sword):
    return NavigationMachine(
        content=content,
        categories=content,
        clock=clock,
        state=GameState(inventory=[sword]),
        events=event_bus,
    )

@pytest.fixture
def home(machine):
    """Machine on the Home screen with a fresh Vocabulary Warrior named Robin."""
    machine.dispatch_input(InputEvent.confirm())
    machine.dispatch_input(InputEvent.answer("Robin"))
    machine.dispatch_input(InputEvent.select(0))
    return machine

def answer_all(machine, count, start=0):
    for i in range(start, start + count):
        machine.dispatch_input(InputEvent.answer(f"a{i}"))

def dismiss_all(machine):
    while machine.screen != Screen.HOME:
        machine.dispatch_input(InputEvent.confirm())

def test_starts_on_top(machine):
    render = machine.get_render_state()
    assert render.screen == Screen.TOP
    assert render.player is None
    assert render.session is None

def test_new_game_flow(machine, event_bus):
    created = []
    event_bus.subscribe(GameEvent.PLAYER_CREATED, lambda e: created.append(e["player"]), weak=False)

    machine.dispatch_input(InputEvent.confirm())
    assert machine.screen == Screen.NEW_GAME
    assert machine.get_render_state().menu == tuple(c.name for c in PlayerClass)

    machine.dispatch_input(InputEvent.answer("  Robin "))
    assert machine.get_render_state().pending_name == "Robin"
    machine.dispatch_input(InputEvent.select(1))

    assert machine.screen == Screen.HOME
    player = machine.state.player
    assert player.name == "Robin"
    assert player.player_class == PlayerClass.GRAMMAR_MAGE
    assert created == [player]
    assert machine.get_render_state().player["name"] == "Robin"

def test_default_name(machine):
    machine.dispatch_input(InputEvent.select(1))
    machine.dispatch_input(InputEvent.select(2))
    assert machine.state.player.name == "Hero"
    assert machine.state.player.player_class == PlayerClass.CONVERSATION_BARD

def test_new_game_back_returns_to_top(machine):
    machine.dispatch_input(InputEvent.select(1))
    machine.dispatch_input(InputEvent.back())
    assert machine.screen == Screen.TOP
    assert machine.state.player is None

def test_continue_with_existing_player(home):
    home.dispatch_input(InputEvent.back())
    assert home.screen == Screen.TOP
    home.dispatch_input(InputEvent.select(0))
    assert home.screen == Screen.HOME

def test_vocab_battle_to_result_and_home(home, content):
    home.dispatch_input(InputEvent.select(0))

    render = home.get_render_state()
    assert render.screen == Screen.VOCAB_BATTLE
    assert render.session["total"] == 5
    assert render.session["enemy_max_hp"] == 35
    assert content.requests[-1] == (MiniGameType.VOCAB_BATTLE, 1)

    answer_all(home, 5)

    render = home.get_render_state()
    assert render.screen == Screen.VOCAB_BATTLE_RESULT
    assert render.session is None
    assert render.last_result.outcome == SessionOutcome.VICTORY
    assert render.last_result.correct_count == 5
    # 4 * 5 * 1.10 = 22
    assert render.last_result.exp_gained == 22
    assert render.player["exp"] == 22
    assert render.player["gold"] == 5
    assert len(home.state.history) == 1
    assert home.active_session is None

    home.dispatch_input(InputEvent.confirm())
    assert home.screen == Screen.HOME

def test_level_up_screen_comes_first(home, event_bus):
    levels = []
    event_bus.subscribe(GameEvent.LEVEL_UP, lambda e: levels.append(e["level"]), weak=False)
    home.state.player.exp = 45

    home.dispatch_input(InputEvent.select(4))
    answer_all(home, 5)

    render = home.get_render_state()
    assert render.screen == Screen.LEVEL_UP
    assert render.screen_queue == (Screen.LISTENING_RESULT,)
    assert render.last_progression.leveled_up
    assert render.player["level"] == 2
    assert levels == [2]

    home.dispatch_input(InputEvent.confirm())
    assert home.screen == Screen.LISTENING_RESULT
    assert home.get_render_state().screen_queue == ()

    home.dispatch_input(InputEvent.back())
    assert home.screen == Screen.HOME

def test_fainting(home, event_bus):
    fainted = []
    event_bus.subscribe(GameEvent.FAINTED, lambda e: fainted.append(e["mini_game"]), weak=False)
    home.state.player.hp = 10

    home.dispatch_input(InputEvent.select(3))
    home.dispatch_input(InputEvent.answer("wrong"))

    render = home.get_render_state()
    assert render.screen == Screen.FAINTED
    assert render.last_result.outcome == SessionOutcome.KNOCKED_OUT
    assert render.player["hp"] == 50
    assert fainted == [MiniGameType.SPELLING]

    home.dispatch_input(InputEvent.confirm())
    assert home.screen == Screen.HOME

def test_level_up_then_fainted(home, event_bus):
    events = []
    event_bus.subscribe(GameEvent.LEVEL_UP, lambda e: events.append("level_up"), weak=False)
    event_bus.subscribe(GameEvent.FAINTED, lambda e: events.append("fainted"), weak=False)
    home.state.player.hp = 10
    home.state.player.exp = 49

    home.dispatch_input(InputEvent.select(3))
    answer_all(home, 1)
    home.dispatch_input(InputEvent.answer("wrong"))

    render = home.get_render_state()
    assert render.screen == Screen.LEVEL_UP
    assert render.screen_queue == (Screen.FAINTED,)
    assert render.last_result.outcome == SessionOutcome.KNOCKED_OUT
    assert render.last_progression.leveled_up
    assert render.last_progression.fainted
    assert render.player["level"] == 2
    assert render.player["hp"] == 55
    assert events == ["level_up", "fainted"]

    home.dispatch_input(InputEvent.confirm())
    assert home.screen == Screen.FAINTED
    home.dispatch_input(InputEvent.confirm())
    assert home.screen == Screen.HOME

def test_back_aborts_session(home):
    home.dispatch_input(InputEvent.select(1))
    home.dispatch_input(InputEvent.answer("a0"))
    home.dispatch_input(InputEvent.back())

    render = home.get_render_state()
    assert render.screen == Screen.GRAMMAR_DUNGEON_RESULT
    assert render.last_result.outcome == SessionOutcome.ABORTED
    assert render.last_result.total_count == 5
    assert render.last_result.correct_count == 1
    assert home.state.player.sessions_played == 1

def test_session_sizing_from_config(content, clock):
    config = GameConfig(conversation_turns=3, questions_per_session=2, dungeon_floors=4)
    machine = NavigationMachine(content, content, clock, config=config)
    machine.dispatch_input(InputEvent.confirm())
    machine.dispatch_input(InputEvent.select(0))

    machine.dispatch_input(InputEvent.select(2))
    assert machine.get_render_state().session["total"] == 3
    machine.dispatch_input(InputEvent.cancel())
    machine.dispatch_input(InputEvent.confirm())

    machine.dispatch_input(InputEvent.select(1))
    assert machine.get_render_state().session["total"] == 4
    machine.dispatch_input(InputEvent.cancel())
    machine.dispatch_input(InputEvent.confirm())

    machine.dispatch_input(InputEvent.select(3))
    assert machine.get_render_state().session["total"] == 2

def test_double_start_rejected(home):
    home.dispatch_input(InputEvent.select(0))
    with pytest.raises(InvalidStateError):
        home.start_session(MiniGameType.SPELLING)

def test_start_without_player_rejected(machine):
    with pytest.raises(InvalidStateError):
        machine.start_session(MiniGameType.SPELLING)

def test_empty_content_stays_home(home, content):
    content.banks[MiniGameType.LISTENING] = []

    home.dispatch_input(InputEvent.select(4))

    assert home.screen == Screen.HOME
    assert home.active_session is None
    assert len(home.state.history) == 0

    # Other mini-games are still playable
    home.dispatch_input(InputEvent.select(3))
    assert home.screen == Screen.SPELLING

def test_start_session_rejects_empty_content(home, content):
    content.banks[MiniGameType.LISTENING] = []
    with pytest.raises(InvalidSpecError):
        home.start_session(MiniGameType.LISTENING)
    assert home.active_session is None

def test_equipment_toggle(home, sword, event_bus):
    changes = []
    event_bus.subscribe(GameEvent.ITEM_EQUIPPED, lambda e: changes.append("on"), weak=False)
    event_bus.subscribe(GameEvent.ITEM_UNEQUIPPED, lambda e: changes.append("off"), weak=False)

    home.dispatch_input(InputEvent.select(5))
    assert home.screen == Screen.EQUIPMENT
    assert home.get_render_state().menu == ("Word Blade",)

    home.dispatch_input(InputEvent.select(0))
    view = home.get_render_state().equipment
    assert view["slots"]["weapon"] == "word_blade"
    assert view["inventory"][0]["equipped"]

    home.dispatch_input(InputEvent.select(0))
    assert home.get_render_state().equipment["slots"]["weapon"] is None

    # Out of range is ignored
    home.dispatch_input(InputEvent.select(7))
    assert changes == ["on", "off"]

    home.dispatch_input(InputEvent.confirm())
    assert home.screen == Screen.HOME

def test_equipment_applies_to_sessions(home, sword):
    home.state.equipment.equip(sword)
    home.dispatch_input(InputEvent.select(0))
    answer_all(home, 5)
    # 4 * 5 * (1 + 0.10 + 0.20) = 26
    assert home.last_result.exp_gained == 26

def test_history_screen(home):
    for _ in range(2):
        home.dispatch_input(InputEvent.select(4))
        answer_all(home, 5)
        dismiss_all(home)
    home.dispatch_input(InputEvent.select(3))
    home.dispatch_input(InputEvent.cancel())
    dismiss_all(home)

    home.dispatch_input(InputEvent.select(7))
    view = home.get_render_state().history

    assert home.screen == Screen.HISTORY
    assert [s["mini_game"] for s in view["sessions"]] == ["spelling", "listening", "listening"]
    assert view["totals"]["sessions"] == 3

    home.dispatch_input(InputEvent.back())
    assert home.screen == Screen.HOME

def test_analysis_and_status_screens(home):
    home.dispatch_input(InputEvent.select(1))
    for _ in range(5):
        home.dispatch_input(InputEvent.answer("wrong"))
    home.dispatch_input(InputEvent.confirm())

    home.dispatch_input(InputEvent.select(6))
    render = home.get_render_state()
    assert render.screen == Screen.ANALYSIS
    assert {c["tag"] for c in render.analysis["weak_categories"]} == {"past_tense", "articles"}
    assert render.analysis["recommended_plan"] == ["grammar_dungeon"]
    assert render.history is None
    home.dispatch_input(InputEvent.confirm())

    home.dispatch_input(InputEvent.select(8))
    render = home.get_render_state()
    assert render.screen == Screen.STATUS
    assert [b["id"] for b in render.status["badges"]] == ["sharp_mind", "consistency_medal", "vocabulary_knight"]
    assert render.analysis is None

def test_render_state_is_pure(home):
    home.dispatch_input(InputEvent.select(6))
    first = home.get_render_state()
    second = home.get_render_state()
    assert first == second
    assert home.screen == Screen.ANALYSIS

def test_unhandled_events_are_noops(home):
    home.dispatch_input(InputEvent.answer("hello"))
    home.dispatch_input(InputEvent.select(99))
    home.dispatch_input(InputEvent.select(-1))
    assert home.screen == Screen.HOME

def test_new_game_resets_progress(home):
    home.dispatch_input(InputEvent.select(4))
    answer_all(home, 5)
    home.dispatch_input(InputEvent.confirm())
    assert len(home.state.history) == 1

    home.dispatch_input(InputEvent.back())
    home.dispatch_input(InputEvent.select(1))
    home.dispatch_input(InputEvent.select(0))

    assert len(home.state.history) == 0
    assert home.state.player.exp == 0
    assert home.get_render_state().last_result is None

def test_screen_changes_published(machine, event_bus):
    screens = []
    event_bus.subscribe(GameEvent.SCREEN_CHANGED, lambda e: screens.append(e["screen"]), weak=False)

    machine.dispatch_input(InputEvent.confirm())
    machine.dispatch_input(InputEvent.select(0))

    assert screens == [Screen.NEW_GAME, Screen.HOME]

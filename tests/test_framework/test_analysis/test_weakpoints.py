import pytest
from quest_framework.analysis import AnalysisEngine, CategoryScore, PLAN_LENGTH
from quest_framework.components import MiniGameType

class Categories:
    def __init__(self, mapping):
        self.mapping = mapping

    def category_of(self, prompt_id):
        return self.mapping.get(prompt_id)

@pytest.fixture
def categories():
    return Categories({
        "past1": "past_tense", "past2": "past_tense",
        "art1": "articles", "art2": "articles",
        "prep1": "prepositions", "prep2": "prepositions",
        "idiom1": "idioms",
        "w1": "spelling_ie", "w2": "spelling_ie", "w3": "spelling_ie",
        "w4": "spelling_ie", "w5": "spelling_ie",
    })

def session(make_result, mini_game, attempted, missed=()):
    return make_result(
        mini_game=mini_game,
        correct_count=len(attempted) - len(missed),
        total_count=len(attempted),
        attempted_prompt_ids=tuple(attempted),
        missed_prompt_ids=frozenset(missed),
    )

def test_empty_history_gives_empty_report(categories):
    report = AnalysisEngine(categories).analyze([], window_size=20)
    assert report.is_empty
    assert report.sessions_analyzed == 0
    assert report.recommended_plan == []

def test_non_positive_window_gives_empty_report(categories, make_result):
    history = [session(make_result, MiniGameType.GRAMMAR_DUNGEON, ["past1"], ["past1"])]
    assert AnalysisEngine(categories).analyze(history, window_size=0).is_empty
    assert AnalysisEngine(categories).analyze(history, window_size=-3).is_empty

def test_weak_categories_ranked_by_miss_rate(categories, make_result):
    history = [
        session(make_result, MiniGameType.GRAMMAR_DUNGEON, ["past1", "past2", "art1", "art2"], ["past1", "past2", "art1"]),
    ]

    report = AnalysisEngine(categories).analyze(history, window_size=20)

    assert [s.tag for s in report.weak_categories] == ["past_tense", "articles"]
    assert report.weak_categories[0] == CategoryScore("past_tense", 2, 2)
    assert report.weak_categories[1].miss_rate == pytest.approx(0.5)
    assert report.recommended_plan == [MiniGameType.GRAMMAR_DUNGEON]

def test_ties_broken_by_most_recent_miss(categories, make_result):
    history = [
        session(make_result, MiniGameType.SPELLING, ["art1", "art2"], ["art1"]),
        session(make_result, MiniGameType.CONVERSATION, ["prep1", "prep2"], ["prep1"]),
    ]

    report = AnalysisEngine(categories).analyze(history, window_size=20)

    assert [s.tag for s in report.weak_categories] == ["prepositions", "articles"]
    assert report.recommended_plan == [MiniGameType.CONVERSATION, MiniGameType.SPELLING]

def test_tag_name_breaks_remaining_ties(categories, make_result):
    history = [session(make_result, MiniGameType.LISTENING, ["prep1", "art1"], ["prep1", "art1"])]

    report = AnalysisEngine(categories).analyze(history, window_size=20)

    assert [s.tag for s in report.weak_categories] == ["articles", "prepositions"]
    assert report.recommended_plan == [MiniGameType.LISTENING]

def test_category_mini_game_is_latest_miss(categories, make_result):
    history = [
        session(make_result, MiniGameType.SPELLING, ["art1"], ["art1"]),
        session(make_result, MiniGameType.GRAMMAR_DUNGEON, ["art2"], ["art2"]),
    ]

    report = AnalysisEngine(categories).analyze(history, window_size=20)

    assert report.recommended_plan == [MiniGameType.GRAMMAR_DUNGEON]

def test_plan_is_capped(categories, make_result):
    history = [
        session(make_result, MiniGameType.VOCAB_BATTLE, ["idiom1"], ["idiom1"]),
        session(make_result, MiniGameType.SPELLING, ["art1"], ["art1"]),
        session(make_result, MiniGameType.CONVERSATION, ["prep1"], ["prep1"]),
        session(make_result, MiniGameType.GRAMMAR_DUNGEON, ["past1"], ["past1"]),
    ]

    report = AnalysisEngine(categories).analyze(history, window_size=20)

    assert len(report.weak_categories) == 4
    assert len(report.recommended_plan) == PLAN_LENGTH
    assert report.recommended_plan == [
        MiniGameType.GRAMMAR_DUNGEON,
        MiniGameType.CONVERSATION,
        MiniGameType.SPELLING,
    ]

def test_strong_categories_need_enough_attempts(categories, make_result):
    history = [
        session(make_result, MiniGameType.SPELLING, ["w1", "w2", "w3", "w4", "w5"]),
        session(make_result, MiniGameType.SPELLING, ["art1", "art2"]),
    ]

    report = AnalysisEngine(categories).analyze(history, window_size=20)

    assert [s.tag for s in report.strong_categories] == ["spelling_ie"]
    assert report.weak_categories == []
    assert report.recommended_plan == []
    assert report.mode_accuracy == {MiniGameType.SPELLING: 1.0}

def test_only_recent_window_is_used(categories, make_result):
    history = [
        session(make_result, MiniGameType.SPELLING, ["art1"], ["art1"]),
        session(make_result, MiniGameType.LISTENING, ["prep1", "prep2"]),
    ]

    report = AnalysisEngine(categories).analyze(history, window_size=1)

    assert report.sessions_analyzed == 1
    assert report.weak_categories == []

def test_unknown_prompts_are_skipped(categories, make_result):
    history = [session(make_result, MiniGameType.LISTENING, ["mystery"], ["mystery"])]

    report = AnalysisEngine(categories).analyze(history, window_size=20)

    assert report.weak_categories == []
    assert report.mode_accuracy == {MiniGameType.LISTENING: 0.0}

def test_report_to_dict(categories, make_result):
    history = [session(make_result, MiniGameType.GRAMMAR_DUNGEON, ["past1", "past2"], ["past1"])]

    data = AnalysisEngine(categories).analyze(history, window_size=20).to_dict()

    assert data["weak_categories"] == [
        {"tag": "past_tense", "attempts": 2, "misses": 1, "miss_rate": 0.5},
    ]
    assert data["recommended_plan"] == ["grammar_dungeon"]
    assert data["mode_accuracy"] == {"grammar_dungeon": 0.5}

import pytest
from datetime import timedelta
from quest_framework.components import MiniGameType
from quest_framework.progression import (
    BADGES,
    ProgressionEngine,
    award_badges,
    badge_progress,
    get_badge,
)

def test_catalogue():
    ids = [badge.id for badge in BADGES]
    assert ids == ["sharp_mind", "consistency_medal", "vocabulary_knight"]
    assert get_badge("sharp_mind").name == "Sharp Mind"
    assert get_badge("nope") is None

def test_sharp_mind_awarded_once(player, make_result):
    progression = ProgressionEngine()

    first = progression.apply_result(player, make_result(correct_count=10, total_count=10, max_combo=10))
    second = progression.apply_result(player, make_result(correct_count=10, total_count=10, max_combo=12))

    assert first.badges_earned == ["sharp_mind"]
    assert second.badges_earned == []
    assert player.badges == {"sharp_mind"}

def test_vocabulary_knight_from_words_mastered(player, make_result):
    progression = ProgressionEngine()
    earned = []
    for _ in range(10):
        earned += progression.apply_result(player, make_result(
            mini_game=MiniGameType.VOCAB_BATTLE, correct_count=5, total_count=5, max_combo=5,
        )).badges_earned

    assert player.words_mastered == 50
    assert earned == ["vocabulary_knight"]

def test_consistency_medal_after_seven_days(player, make_result, clock):
    progression = ProgressionEngine()
    for day in range(7):
        outcome = progression.apply_result(player, make_result(timestamp=clock.now() + timedelta(days=day)))

    assert player.streak_days == 7
    assert outcome.badges_earned == ["consistency_medal"]

def test_badges_never_removed(player):
    player.best_combo = 10
    assert award_badges(player) == ["sharp_mind"]

    player.best_combo = 0
    assert award_badges(player) == []
    assert "sharp_mind" in player.badges

def test_badge_progress(player):
    player.badges = {"consistency_medal"}
    progress = {entry["id"]: entry["earned"] for entry in badge_progress(player)}
    assert progress == {
        "sharp_mind": False,
        "consistency_medal": True,
        "vocabulary_knight": False,
    }

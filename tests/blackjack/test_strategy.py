import pytest

from casinojack.blackjack.strategy import (
    Advice,
    Recommendation,
    basic_strategy,
    recommend_for,
)
from casinojack.state import RoundState


@pytest.mark.parametrize("value", [4, 8, 11])
def test_eleven_or_less_always_hits(value):
    advice = basic_strategy(value, 6, False)
    assert advice.action is Advice.HIT
    assert advice.confidence == 1.0


@pytest.mark.parametrize("value", [17, 19, 21])
def test_hard_17_or_more_stands(value):
    advice = basic_strategy(value, 10, False)
    assert advice.action is Advice.STAND
    assert advice.confidence == 0.95


@pytest.mark.parametrize("upcard", [2, 3, 4, 5, 6])
def test_stiff_hand_stands_against_weak_upcard(upcard):
    advice = basic_strategy(14, upcard, False)
    assert advice.action is Advice.STAND
    assert advice.confidence == 0.85
    assert f"({upcard})" in advice.reasoning


@pytest.mark.parametrize("upcard", [7, 8, 9, 10, 11])
def test_stiff_hand_hits_against_strong_upcard(upcard):
    advice = basic_strategy(16, upcard, False)
    assert advice.action is Advice.HIT
    assert advice.confidence == 0.8


@pytest.mark.parametrize("value", [13, 15, 17, 18])
def test_soft_13_to_18_hits(value):
    advice = basic_strategy(value, 5, True)
    assert advice.action is Advice.HIT
    assert advice.confidence == 0.9
    assert advice.reasoning.startswith(f"Soft {value}")


def test_soft_19_stands():
    assert basic_strategy(19, 10, True).action is Advice.STAND


def test_soft_12_uses_hard_bands():
    # two aces: soft 12 is outside the soft band
    assert basic_strategy(12, 4, True).action is Advice.STAND


def test_recommend_for_round(dealt_round):
    state = dealt_round("10H", "6S", "9D", "7C")
    advice = recommend_for(state)
    assert advice.action is Advice.HIT
    assert "(9)" in advice.reasoning


def test_recommend_for_uses_visible_upcard_only(dealt_round):
    state = dealt_round("10H", "3S", "5D", "AC")
    assert recommend_for(state).action is Advice.STAND


def test_recommend_for_without_upcard_defaults_to_ten():
    advice = recommend_for(RoundState())
    assert advice.action is Advice.HIT


def test_recommendation_to_dict():
    advice = Recommendation(Advice.STAND, 0.95, "reason")
    assert advice.to_dict() == {
        "action": "stand",
        "confidence": 0.95,
        "reasoning": "reason",
        "source": "basic_strategy",
    }

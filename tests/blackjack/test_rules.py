import pytest

from casinojack.blackjack.hand import HandEvaluation, evaluate
from casinojack.blackjack.rules import (
    Outcome,
    RoundResult,
    dealer_should_hit,
    determine_outcome,
)

WAGER = 100


def hand(make_cards, *notation):
    return evaluate(make_cards(*notation))


def test_player_blackjack_beats_dealer_19(make_cards):
    outcome = determine_outcome(
        hand(make_cards, "AH", "KS"), hand(make_cards, "10D", "9C"), WAGER
    )
    assert outcome.player_wins
    assert not outcome.is_push
    assert outcome.payout == 250
    assert outcome.reason == "Player blackjack"


def test_push_at_equal_values(make_cards):
    outcome = determine_outcome(
        hand(make_cards, "10H", "8S"), hand(make_cards, "9D", "9C"), WAGER
    )
    assert outcome.is_push
    assert not outcome.player_wins
    assert outcome.payout == WAGER
    assert outcome.result is RoundResult.PUSH


def test_player_bust_pays_nothing_even_if_dealer_busts(make_cards):
    outcome = determine_outcome(
        hand(make_cards, "10H", "8S", "7C"),
        hand(make_cards, "10D", "6C", "KH"),
        WAGER,
    )
    assert not outcome.player_wins
    assert outcome.payout == 0
    assert outcome.reason == "Player busted"


def test_dealer_bust_pays_double(make_cards):
    outcome = determine_outcome(
        hand(make_cards, "10H", "2S"), hand(make_cards, "10D", "6C", "KH"), WAGER
    )
    assert outcome.player_wins
    assert outcome.payout == 200
    assert outcome.reason == "Dealer busted"


def test_dealer_bust_with_player_blackjack_pays_blackjack(make_cards):
    player = HandEvaluation(value=21, is_soft=True, is_busted=False, is_blackjack=True)
    dealer = HandEvaluation(value=22, is_soft=False, is_busted=True, is_blackjack=False)
    assert determine_outcome(player, dealer, WAGER).payout == 250


def test_both_blackjack_is_push(make_cards):
    outcome = determine_outcome(
        hand(make_cards, "AH", "KS"), hand(make_cards, "AD", "QC"), WAGER
    )
    assert outcome.is_push
    assert outcome.payout == WAGER
    assert outcome.reason == "Both have blackjack"


def test_dealer_blackjack_beats_player_21(make_cards):
    outcome = determine_outcome(
        hand(make_cards, "7H", "7S", "7C"), hand(make_cards, "AD", "QC"), WAGER
    )
    assert not outcome.player_wins
    assert outcome.payout == 0
    assert outcome.reason == "Dealer blackjack"


def test_higher_value_wins(make_cards):
    outcome = determine_outcome(
        hand(make_cards, "10H", "QS"), hand(make_cards, "10D", "8C"), WAGER
    )
    assert outcome.player_wins
    assert outcome.payout == 200
    assert outcome.reason == "Player wins 20 vs 18"
    assert outcome.result is RoundResult.WIN


def test_lower_value_loses(make_cards):
    outcome = determine_outcome(
        hand(make_cards, "10H", "7S"), hand(make_cards, "10D", "8C"), WAGER
    )
    assert not outcome.player_wins
    assert not outcome.is_push
    assert outcome.payout == 0
    assert outcome.reason == "Dealer wins 18 vs 17"
    assert outcome.result is RoundResult.LOSE


def test_outcome_to_dict():
    outcome = Outcome(True, False, 200, "Dealer busted")
    assert outcome.to_dict() == {
        "player_wins": True,
        "is_push": False,
        "payout": 200,
        "reason": "Dealer busted",
        "result": "win",
    }


@pytest.mark.parametrize(
    "notation,expected",
    [
        (("10H", "6S"), True),
        (("10H", "7S"), False),
        (("AH", "6S"), True),
        (("AH", "6S", "10C"), False),  # ace forced low, hard 17
        (("10H", "8S"), False),
        (("10H", "6S", "9C"), False),
    ],
)
def test_dealer_should_hit(make_cards, notation, expected):
    assert dealer_should_hit(hand(make_cards, *notation)) is expected


def test_dealer_stands_on_soft_17_when_configured(make_cards):
    assert not dealer_should_hit(hand(make_cards, "AH", "6S"), hit_soft_17=False)

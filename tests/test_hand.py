import pytest

from casinojack.blackjack.hand import HandEvaluation, evaluate
from casinojack.state.models import HandState


def test_empty_hand_value(make_cards):
    assert evaluate([]) == HandEvaluation(0, False, False, False)


def test_ten_and_ace_is_soft_blackjack(make_cards):
    result = evaluate(make_cards("10H", "AS"))
    assert result == HandEvaluation(
        value=21, is_soft=True, is_busted=False, is_blackjack=True
    )


def test_ace_forced_low(make_cards):
    result = evaluate(make_cards("10H", "5S", "AC"))
    assert result.value == 16
    assert not result.is_soft
    assert not result.is_busted


def test_bust(make_cards):
    result = evaluate(make_cards("10H", "8S", "7C"))
    assert result.value == 25
    assert result.is_busted


def test_three_aces_and_eight(make_cards):
    result = evaluate(make_cards("AH", "AS", "AC", "8D"))
    assert result.value == 21
    assert result.is_soft
    assert not result.is_blackjack


def test_two_aces(make_cards):
    result = evaluate(make_cards("AH", "AS"))
    assert result.value == 12
    assert result.is_soft


def test_three_card_21_is_not_blackjack(make_cards):
    result = evaluate(make_cards("7H", "7S", "7C"))
    assert result.value == 21
    assert not result.is_blackjack
    assert not result.is_soft


def test_concealed_card_is_ignored(make_cards):
    ten, ace = make_cards("10H", "AS")
    result = evaluate([ten, ace.conceal()])
    assert result.value == 10
    assert not result.is_soft
    assert not result.is_blackjack


def test_revealed_card_counts_again(make_cards):
    ten, ace = make_cards("10H", "AS")
    assert evaluate([ten, ace.conceal().reveal()]).is_blackjack


@pytest.mark.parametrize(
    "notation",
    [
        ("2H", "3S"),
        ("AH", "6S"),
        ("KH", "QS", "AD"),
        ("AH", "AS", "AC", "AD", "7H"),
        ("9H", "9S", "9D"),
    ],
)
def test_evaluate_is_deterministic(make_cards, notation):
    hand = make_cards(*notation)
    assert evaluate(hand) == evaluate(hand)
    assert evaluate(tuple(hand)) == evaluate(list(hand))


def test_hand_state_matches_evaluation(make_cards):
    hand = HandState(tuple(make_cards("AH", "6S")))
    assert hand.value == 17
    assert hand.is_soft
    assert hand.evaluation == evaluate(hand.cards)


def test_hand_state_add_returns_new_hand(make_cards):
    ace, six, ten = make_cards("AH", "6S", "10D")
    hand = HandState((ace, six))
    bigger = hand.add(ten)
    assert len(hand.cards) == 2
    assert bigger.value == 17
    assert not bigger.is_soft


def test_hand_state_revealed(make_cards):
    ten, ace = make_cards("10H", "AS")
    hand = HandState((ten, ace.conceal()))
    assert hand.has_concealed
    assert hand.value == 10
    revealed = hand.revealed()
    assert not revealed.has_concealed
    assert revealed.is_blackjack


def test_hand_state_to_dict_hides_concealed(make_cards):
    ten, ace = make_cards("10H", "AS")
    hand = HandState((ten, ace.conceal()))
    assert hand.to_dict()["cards"] == ["10♥", "??"]

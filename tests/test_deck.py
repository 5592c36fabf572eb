import random
from collections import Counter

import pytest

from casinojack.common.card import Card, Rank, Suit
from casinojack.common.deck import DECK_SIZE, Deck, build_deck
from casinojack.common.errors import DeckExhaustedError


def test_build_deck_has_52_unique_cards():
    deck = build_deck()
    assert deck.size == DECK_SIZE == 52
    assert len(set(deck.cards)) == 52


def test_build_deck_four_suits_thirteen_ranks():
    deck = build_deck()
    suits = Counter(card.suit for card in deck.cards)
    ranks = Counter(card.rank for card in deck.cards)
    assert suits == {suit: 13 for suit in Suit}
    assert ranks == {rank: 4 for rank in Rank}


def test_build_deck_cards_face_up():
    assert not any(card.concealed for card in build_deck().cards)


def test_build_deck_is_reproducible_with_seed():
    first = build_deck(random.Random(7))
    second = build_deck(random.Random(7))
    assert first.cards == second.cards


def test_build_deck_shuffles():
    deck = build_deck(random.Random(1))
    assert deck.cards != Deck().cards
    assert set(deck.cards) == set(Deck().cards)


def test_deck_deal_from_front():
    top = Card(Suit.SPADES, Rank.ACE)
    second = Card(Suit.HEARTS, Rank.TEN)
    deck = Deck.stacked([top, second])
    card, rest = deck.deal()
    assert card == top
    assert rest.cards == (second,)


def test_deck_deal_does_not_mutate():
    deck = build_deck()
    before = deck.cards
    deck.deal()
    assert deck.cards == before
    assert deck.size == 52


def test_deck_deal_concealed():
    deck = Deck.stacked([Card(Suit.CLUBS, Rank.FIVE)])
    card, _ = deck.deal(concealed=True)
    assert card.concealed


def test_stacked_reveals_cards():
    deck = Deck.stacked([Card(Suit.CLUBS, Rank.FIVE).conceal()])
    assert not deck.cards[0].concealed


def test_deck_deal_until_empty():
    deck = build_deck()
    for _ in range(52):
        card, deck = deck.deal()
        assert isinstance(card, Card)
    assert deck.is_empty()


def test_deck_draw_empty_deck():
    with pytest.raises(DeckExhaustedError):
        Deck(()).deal()


def test_deck_str():
    deck = Deck()
    assert str(deck) == "Deck of 52 cards"
    assert len(deck) == 52

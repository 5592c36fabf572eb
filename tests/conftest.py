"""
Pytest configuration for tests at the root level.

This module contains pytest fixtures shared by the casinojack test suite.
"""

import pytest

from casinojack.common.card import parse_card
from casinojack.common.deck import Deck
from casinojack.events import EventBus
from casinojack.state import RoundTransitions


def cards(*notation):
    """Build a list of cards from short notation, e.g. cards("10H", "AS")."""
    return [parse_card(text) for text in notation]


def stacked_deck(*notation):
    """
    A full 52-card deck whose first cards are dealt in the given order.

    The remaining cards follow in the default order.
    """
    top = cards(*notation)
    rest = [card for card in Deck().cards if card not in top]
    return Deck.stacked(top + rest)


# Reset event bus before each test
@pytest.fixture(scope="function", autouse=True)
def reset_event_bus():
    """Reset the event bus singleton before each test."""
    EventBus._instance = None
    yield
    EventBus._instance = None


@pytest.fixture
def make_cards():
    return cards


@pytest.fixture
def make_deck():
    return stacked_deck


@pytest.fixture
def dealt_round():
    """
    Factory for a round that has been through the initial deal.

    The first four notations are dealt player, player, dealer, dealer-hole;
    any further cards come next off the deck.
    """

    def _dealt_round(*notation, wager=100):
        state = RoundTransitions.initialize_round(wager, deck=stacked_deck(*notation))
        return RoundTransitions.deal_initial_cards(state)

    return _dealt_round

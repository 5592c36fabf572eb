"""
Hand evaluation for blackjack.

`evaluate` is a pure function over a sequence of cards. Concealed cards are
skipped until they are revealed.
"""

from dataclasses import dataclass
from typing import Iterable

from casinojack.common.card import Card
from casinojack.blackjack.constants import (
    ACE_HIGH_VALUE,
    ACE_LOW_VALUE,
    BLACKJACK_VALUE,
)


@dataclass(frozen=True)
class HandEvaluation:
    """The derived figures of a hand."""

    value: int = 0
    is_soft: bool = False
    is_busted: bool = False
    is_blackjack: bool = False


def evaluate(cards: Iterable[Card]) -> HandEvaluation:
    """
    Calculate the value of a hand, resolving each ace as 11 or 1.

    Non-ace cards are summed first. Each visible ace then counts 11 if that
    keeps the running total at 21 or below, otherwise 1.

    >>> from casinojack.common.card import parse_card
    >>> evaluate([parse_card("10H"), parse_card("AS")])
    HandEvaluation(value=21, is_soft=True, is_busted=False, is_blackjack=True)
    """
    cards = tuple(cards)
    visible = [card for card in cards if not card.concealed]

    value = 0
    aces = 0
    for card in visible:
        if card.is_ace:
            aces += 1
        else:
            value += card.value

    is_soft = False
    for _ in range(aces):
        if value + ACE_HIGH_VALUE <= BLACKJACK_VALUE:
            value += ACE_HIGH_VALUE
            is_soft = True
        else:
            value += ACE_LOW_VALUE

    return HandEvaluation(
        value=value,
        is_soft=is_soft,
        is_busted=value > BLACKJACK_VALUE,
        is_blackjack=(
            len(cards) == 2 and len(visible) == 2 and value == BLACKJACK_VALUE
        ),
    )

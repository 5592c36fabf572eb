"""
This module contains the Deck class, an immutable ordered deck of cards.

Dealing returns the card together with a new, smaller deck; the original deck
is left untouched so round snapshots can share it safely.

>>> deck = Deck.stacked([Card(Suit.HEARTS, Rank.TEN), Card(Suit.SPADES, Rank.ACE)])
>>> card, rest = deck.deal()
>>> str(card), rest.size, deck.size
('10♥', 1, 2)
"""

import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from casinojack.common.card import Card, Rank, Suit
from casinojack.common.errors import DeckExhaustedError

DECK_SIZE = 52

# Precompute the default deck order
_DEFAULT_ORDER: Tuple[Card, ...] = tuple(
    Card(suit, rank) for suit in Suit for rank in Rank
)


@dataclass(frozen=True)
class Deck:
    """
    A class representing a deck of cards, dealt from the front.
    """

    cards: Tuple[Card, ...] = _DEFAULT_ORDER

    @classmethod
    def stacked(cls, cards: Iterable[Card]) -> "Deck":
        """
        Build a deck whose cards will be dealt in exactly the given order.

        :param cards: Cards in dealing order.
        """
        return cls(tuple(card.reveal() for card in cards))

    def deal(self, concealed: bool = False) -> Tuple[Card, "Deck"]:
        """
        Take the front card off the deck.

        :param concealed: Deal the card face down.
        :return: The dealt card and the remaining deck.
        :raises DeckExhaustedError: If the deck has no cards left.
        """
        if not self.cards:
            raise DeckExhaustedError("Cannot deal from an empty deck")
        card = self.cards[0]
        if concealed:
            card = card.conceal()
        return card, Deck(self.cards[1:])

    @property
    def size(self) -> int:
        """
        Return the number of remaining cards in the deck.

        >>> Deck().size
        52
        """
        return len(self.cards)

    def is_empty(self) -> bool:
        return len(self.cards) == 0

    def __len__(self) -> int:
        return len(self.cards)

    def __repr__(self) -> str:
        return f"Deck({[repr(card) for card in self.cards]})"

    def __str__(self) -> str:
        return f"Deck of {len(self.cards)} cards"


def build_deck(rng: Optional[random.Random] = None) -> Deck:
    """
    Construct a fresh 52-card deck in a uniformly random order.

    :param rng: Random source used for the shuffle. Pass a seeded
                ``random.Random`` for a reproducible order.
    """
    cards: List[Card] = list(_DEFAULT_ORDER)
    # random.shuffle is a Fisher-Yates shuffle
    (rng or random).shuffle(cards)
    return Deck(tuple(cards))

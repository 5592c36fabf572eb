"""
This module defines the `Suit`, `Rank`, and `Card` classes, which are used to represent playing cards.

- `Suit`: An enum representing the four suits of a standard deck of playing
cards: Hearts, Diamonds, Clubs, and Spades.

- `Rank`: An enum representing the thirteen ranks of a standard deck: Ace, Two
through Ten, Jack, Queen, and King.

- `Card`: An immutable playing card. A card has a suit, a rank and a
`concealed` flag marking a dealer hole card that has not been revealed yet.
The flag never changes the card's identity, only whether it can be seen.

This module is part of the `casinojack` package.
"""

from dataclasses import dataclass, field, replace
from enum import Enum, unique


@unique
class Suit(Enum):
    """
    Enum for suits in a card deck.
    """

    HEARTS = "♥"
    DIAMONDS = "♦"
    CLUBS = "♣"
    SPADES = "♠"

    def __str__(self) -> str:
        return self.value


@unique
class Rank(Enum):
    """
    Enum for ranks in a card deck.
    """

    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"

    @property
    def rank_value(self) -> int:
        """The nominal blackjack value of the rank. Aces count 11 here."""
        if self is Rank.ACE:
            return 11
        if self in (Rank.JACK, Rank.QUEEN, Rank.KING):
            return 10
        return int(self.value)

    @classmethod
    def from_label(cls, label: str) -> "Rank":
        return cls(label.upper())

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Card:
    """
    Class representing a playing card.

    >>> card = Card(Suit.HEARTS, Rank.TEN)
    >>> print(card)
    10♥
    >>> card.value
    10
    >>> card.conceal() == card
    True
    """

    suit: Suit
    rank: Rank
    concealed: bool = field(default=False, compare=False)

    def __post_init__(self):
        if not isinstance(self.suit, Suit):
            raise TypeError(f"Invalid suit: {self.suit}")
        if not isinstance(self.rank, Rank):
            raise TypeError(f"Invalid rank: {self.rank}")

    @property
    def value(self) -> int:
        """Nominal value assigned at creation; soft/hard is decided on evaluation."""
        return self.rank.rank_value

    @property
    def is_ace(self) -> bool:
        return self.rank is Rank.ACE

    def conceal(self) -> "Card":
        return replace(self, concealed=True)

    def reveal(self) -> "Card":
        return replace(self, concealed=False)

    def display(self) -> str:
        """Render the card as a player would see it."""
        return "??" if self.concealed else str(self)

    def __repr__(self) -> str:
        flag = ", concealed=True" if self.concealed else ""
        return f"Card(Suit.{self.suit.name}, Rank.{self.rank.name}{flag})"

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"


def parse_card(text: str) -> Card:
    """
    Build a card from short notation such as ``"AS"``, ``"10H"`` or ``"qd"``.

    The last character is the suit letter (H, D, C, S).
    """
    suits = {"H": Suit.HEARTS, "D": Suit.DIAMONDS, "C": Suit.CLUBS, "S": Suit.SPADES}
    text = text.strip()
    if len(text) < 2:
        raise ValueError(f"Invalid card notation: {text!r}")
    rank_label, suit_letter = text[:-1], text[-1].upper()
    if suit_letter not in suits:
        raise ValueError(f"Invalid suit in card notation: {text!r}")
    try:
        rank = Rank.from_label(rank_label)
    except ValueError:
        raise ValueError(f"Invalid rank in card notation: {text!r}") from None
    return Card(suits[suit_letter], rank)

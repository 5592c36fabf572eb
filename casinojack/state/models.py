"""
Immutable state models for the casinojack engine.

This module provides dataclasses for representing the state of a blackjack
round in an immutable manner. These classes are designed to be used with pure
transition functions that create new state instances rather than modifying
existing ones.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional, Tuple
from enum import Enum, auto
import time
import uuid

from casinojack.blackjack.hand import HandEvaluation, evaluate
from casinojack.blackjack.rules import Outcome
from casinojack.common.card import Card
from casinojack.common.deck import Deck


class RoundPhase(Enum):
    """
    Phases of a blackjack round.
    """

    AWAITING_WAGER = auto()
    DEALING = auto()
    PLAYER_TURN = auto()
    DEALER_TURN = auto()
    ROUND_OVER = auto()


class PlayerAction(Enum):
    """Actions the player can take during their turn."""

    HIT = "hit"
    STAND = "stand"


@dataclass(frozen=True)
class HandState:
    """
    Immutable representation of a card hand.

    Only ``cards`` is supplied; the other attributes are derived from it on
    construction so they always agree with a fresh evaluation.

    Attributes:
        cards: Cards in the hand, in the order they were dealt
        value: Best total of the visible cards
        is_soft: Whether an ace is currently counted as 11
        is_busted: Whether the total is over 21
        is_blackjack: Whether the hand is a two-card 21 with nothing concealed
    """

    cards: Tuple[Card, ...] = ()
    value: int = field(init=False)
    is_soft: bool = field(init=False)
    is_busted: bool = field(init=False)
    is_blackjack: bool = field(init=False)

    def __post_init__(self):
        cards = tuple(self.cards)
        evaluation = evaluate(cards)
        object.__setattr__(self, "cards", cards)
        object.__setattr__(self, "value", evaluation.value)
        object.__setattr__(self, "is_soft", evaluation.is_soft)
        object.__setattr__(self, "is_busted", evaluation.is_busted)
        object.__setattr__(self, "is_blackjack", evaluation.is_blackjack)

    @property
    def evaluation(self) -> HandEvaluation:
        return HandEvaluation(
            value=self.value,
            is_soft=self.is_soft,
            is_busted=self.is_busted,
            is_blackjack=self.is_blackjack,
        )

    @property
    def has_concealed(self) -> bool:
        return any(card.concealed for card in self.cards)

    def add(self, card: Card) -> "HandState":
        """Return a new hand with ``card`` appended."""
        return HandState(self.cards + (card,))

    def revealed(self) -> "HandState":
        """Return a new hand with every card face up."""
        return HandState(tuple(card.reveal() for card in self.cards))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cards": [card.display() for card in self.cards],
            "value": self.value,
            "is_soft": self.is_soft,
            "is_busted": self.is_busted,
            "is_blackjack": self.is_blackjack,
        }


@dataclass(frozen=True)
class RoundState:
    """
    Immutable representation of a single blackjack round.

    Attributes:
        id: Unique identifier for this round
        phase: Current phase of the round
        player_hand: The player's hand
        dealer_hand: The dealer's hand, hole card concealed until the dealer turn
        wager: Amount staked on the round
        legal_actions: Player actions accepted in the current phase
        deck: Cards not yet dealt
        outcome: Settlement, present once the round is over
        timestamp: Time when this state was created
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    phase: RoundPhase = RoundPhase.AWAITING_WAGER
    player_hand: HandState = field(default_factory=HandState)
    dealer_hand: HandState = field(default_factory=HandState)
    wager: float = 0.0
    legal_actions: FrozenSet[PlayerAction] = frozenset()
    deck: Deck = field(default_factory=lambda: Deck(()))
    outcome: Optional[Outcome] = None
    timestamp: float = field(default_factory=time.time)

    @property
    def is_over(self) -> bool:
        return self.phase is RoundPhase.ROUND_OVER

    @property
    def dealer_upcard(self) -> Optional[Card]:
        """The first face-up dealer card, if any."""
        for card in self.dealer_hand.cards:
            if not card.concealed:
                return card
        return None

    @property
    def cards_dealt(self) -> int:
        return len(self.player_hand.cards) + len(self.dealer_hand.cards)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the round to a dictionary suitable for serialization.

        Concealed cards are rendered as ``"??"`` and the remaining deck is
        reported by size only.
        """
        return {
            "id": self.id,
            "phase": self.phase.name,
            "wager": self.wager,
            "player_hand": self.player_hand.to_dict(),
            "dealer_hand": self.dealer_hand.to_dict(),
            "legal_actions": sorted(action.value for action in self.legal_actions),
            "deck_remaining": self.deck.size,
            "outcome": self.outcome.to_dict() if self.outcome else None,
            "timestamp": self.timestamp,
        }

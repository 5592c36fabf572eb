"""
Basic-strategy heuristic used as the local advisory fallback.

The advice is a suggestion only; nothing here touches round state.
"""

from dataclasses import dataclass
from enum import Enum

from casinojack.state.models import RoundState

# Confidence levels attached to each band
CONFIDENCE_PERFECT = 1.0
CONFIDENCE_HIGH = 0.95
CONFIDENCE_MEDIUM_HIGH = 0.9
CONFIDENCE_MEDIUM = 0.85
CONFIDENCE_MEDIUM_LOW = 0.8

DEFAULT_UPCARD_VALUE = 10


class Advice(Enum):
    HIT = "hit"
    STAND = "stand"


@dataclass(frozen=True)
class Recommendation:
    """
    A suggested player action.

    Attributes:
        action: Suggested action
        confidence: Confidence between 0.0 and 1.0
        reasoning: Short explanation for display
        source: Which advisor produced the recommendation
    """

    action: Advice
    confidence: float
    reasoning: str
    source: str = "basic_strategy"

    def to_dict(self):
        return {
            "action": self.action.value,
            "confidence": self.confidence,
            "reasoning": self.reasoning,
            "source": self.source,
        }


def basic_strategy(
    player_value: int, dealer_upcard_value: int, is_soft: bool
) -> Recommendation:
    """
    Map a player total and the dealer upcard to hit or stand.

    Bands:
        - 11 or less: always hit
        - 17 or more: stand
        - 12 to 16: stand against a 2-6 upcard, hit against 7 through ace
        - soft 13 to 18: hit, whatever the upcard

    Args:
        player_value: Current player total
        dealer_upcard_value: Nominal value of the dealer's face-up card (ace = 11)
        is_soft: Whether the player total counts an ace as 11
    """
    if player_value >= 17:
        action = Advice.STAND
        reasoning = "Player has 17 or higher - basic strategy says to stand"
        confidence = CONFIDENCE_HIGH
    elif player_value <= 11:
        action = Advice.HIT
        reasoning = "Player has 11 or lower - impossible to bust, always hit"
        confidence = CONFIDENCE_PERFECT
    elif 2 <= dealer_upcard_value <= 6:
        action = Advice.STAND
        reasoning = (
            f"Dealer shows weak upcard ({dealer_upcard_value}), "
            f"likely to bust - stand on {player_value}"
        )
        confidence = CONFIDENCE_MEDIUM
    else:
        action = Advice.HIT
        reasoning = (
            f"Dealer shows strong upcard ({dealer_upcard_value}), "
            f"must improve hand value of {player_value}"
        )
        confidence = CONFIDENCE_MEDIUM_LOW

    if is_soft and 13 <= player_value <= 18:
        action = Advice.HIT
        reasoning = f"Soft {player_value} - can't bust by taking another card"
        confidence = CONFIDENCE_MEDIUM_HIGH

    return Recommendation(action=action, confidence=confidence, reasoning=reasoning)


def recommend_for(state: RoundState) -> Recommendation:
    """Apply `basic_strategy` to the visible cards of a round."""
    upcard = state.dealer_upcard
    upcard_value = upcard.value if upcard is not None else DEFAULT_UPCARD_VALUE
    return basic_strategy(
        state.player_hand.value, upcard_value, state.player_hand.is_soft
    )

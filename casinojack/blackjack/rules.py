"""
Blackjack table rules: dealer drawing strategy and round settlement.

The outcome table is applied in a fixed precedence order once both hands are
final:

1. Player busted: dealer wins, nothing returned.
2. Dealer busted: player wins 2x the wager, 2.5x with a natural.
3. Both naturals: push, wager returned.
4. Player natural: 2.5x the wager (3:2).
5. Dealer natural: dealer wins.
6. Higher total wins 2x; equal totals push; lower loses.

Payouts are the total returned to the player, stake included.
"""

from dataclasses import dataclass
from enum import Enum

from casinojack.blackjack.constants import (
    BLACKJACK_PAYOUT_MULTIPLIER,
    DEALER_STAND_VALUE,
    PUSH_PAYOUT_MULTIPLIER,
    WIN_PAYOUT_MULTIPLIER,
)
from casinojack.blackjack.hand import HandEvaluation


class RoundResult(Enum):
    """Result of a round from the player's point of view."""

    WIN = "win"
    LOSE = "lose"
    PUSH = "push"


@dataclass(frozen=True)
class Outcome:
    """
    Settlement of a finished round.

    Attributes:
        player_wins: Whether the player won the round
        is_push: Whether the round was a tie
        payout: Total amount returned to the player, stake included
        reason: Human-readable explanation for display
    """

    player_wins: bool
    is_push: bool
    payout: float
    reason: str

    @property
    def result(self) -> RoundResult:
        if self.player_wins:
            return RoundResult.WIN
        if self.is_push:
            return RoundResult.PUSH
        return RoundResult.LOSE

    def to_dict(self):
        return {
            "player_wins": self.player_wins,
            "is_push": self.is_push,
            "payout": self.payout,
            "reason": self.reason,
            "result": self.result.value,
        }


def dealer_should_hit(hand: HandEvaluation, hit_soft_17: bool = True) -> bool:
    """Dealer draws below 17, and on soft 17 when the table says so."""
    if hand.is_busted:
        return False
    if hand.value < DEALER_STAND_VALUE:
        return True
    return hit_soft_17 and hand.value == DEALER_STAND_VALUE and hand.is_soft


def determine_outcome(
    player: HandEvaluation, dealer: HandEvaluation, wager: float
) -> Outcome:
    """
    Settle a round given both final hands and the wager.

    Args:
        player: The player's final hand
        dealer: The dealer's final hand, hole card revealed
        wager: Amount staked on the round

    Returns:
        The outcome with the total amount returned to the player
    """
    if player.is_busted:
        return Outcome(False, False, 0, "Player busted")

    if dealer.is_busted:
        multiplier = (
            BLACKJACK_PAYOUT_MULTIPLIER if player.is_blackjack else WIN_PAYOUT_MULTIPLIER
        )
        return Outcome(True, False, wager * multiplier, "Dealer busted")

    if player.is_blackjack and dealer.is_blackjack:
        return Outcome(
            False, True, wager * PUSH_PAYOUT_MULTIPLIER, "Both have blackjack"
        )

    if player.is_blackjack:
        return Outcome(
            True, False, wager * BLACKJACK_PAYOUT_MULTIPLIER, "Player blackjack"
        )

    if dealer.is_blackjack:
        return Outcome(False, False, 0, "Dealer blackjack")

    if player.value > dealer.value:
        return Outcome(
            True,
            False,
            wager * WIN_PAYOUT_MULTIPLIER,
            f"Player wins {player.value} vs {dealer.value}",
        )
    if dealer.value > player.value:
        return Outcome(
            False, False, 0, f"Dealer wins {dealer.value} vs {player.value}"
        )
    return Outcome(
        False, True, wager * PUSH_PAYOUT_MULTIPLIER, f"Push at {player.value}"
    )

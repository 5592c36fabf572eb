"""
This module contains the statistics helpers for completed blackjack rounds:
the `RoundRecord` row kept by history sinks, `calculate_statistics` for a
batch of rounds, and the running `SessionStats` tally.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Union

import numpy as np

from casinojack.blackjack.rules import RoundResult
from casinojack.state.models import RoundState


@dataclass(frozen=True)
class RoundRecord:
    """A settled round as kept in game history."""

    wager: float
    payout: float
    result: RoundResult
    is_blackjack: bool = False
    user: Optional[str] = None
    round_id: Optional[str] = None
    timestamp: float = field(default_factory=time.time)

    @property
    def net(self) -> float:
        return self.payout - self.wager

    @classmethod
    def from_round(cls, state: RoundState, user: Optional[str] = None) -> "RoundRecord":
        if state.outcome is None:
            raise ValueError(f"Round {state.id} has no outcome yet")
        return cls(
            wager=state.wager,
            payout=state.outcome.payout,
            result=state.outcome.result,
            is_blackjack=state.player_hand.is_blackjack,
            user=user,
            round_id=state.id,
        )


def _as_record(item: Union[RoundRecord, RoundState]) -> Optional[RoundRecord]:
    if isinstance(item, RoundRecord):
        return item
    if item.outcome is None:
        return None
    return RoundRecord.from_round(item)


def calculate_statistics(
    rounds: Iterable[Union[RoundRecord, RoundState]],
) -> Dict[str, Any]:
    """
    Aggregate completed rounds.

    Rounds without an outcome are ignored.

    Returns:
        Dictionary with total games, wins, losses, pushes, win rate (percent),
        net winnings, average bet and the number of player naturals.
    """
    records = [record for record in map(_as_record, rounds) if record is not None]

    stats = {
        "total_games": len(records),
        "total_wins": 0,
        "total_losses": 0,
        "total_pushes": 0,
        "win_rate": 0.0,
        "total_winnings": 0.0,
        "average_bet": 0.0,
        "blackjack_count": 0,
    }
    if not records:
        return stats

    results = np.array([record.result.value for record in records])
    wagers = np.array([record.wager for record in records], dtype=float)
    payouts = np.array([record.payout for record in records], dtype=float)

    stats["total_wins"] = int(np.count_nonzero(results == RoundResult.WIN.value))
    stats["total_losses"] = int(np.count_nonzero(results == RoundResult.LOSE.value))
    stats["total_pushes"] = int(np.count_nonzero(results == RoundResult.PUSH.value))
    stats["win_rate"] = float(stats["total_wins"] / len(records) * 100)
    stats["total_winnings"] = float(np.sum(payouts - wagers))
    stats["average_bet"] = float(np.mean(wagers))
    stats["blackjack_count"] = sum(1 for record in records if record.is_blackjack)
    return stats


class SessionStats:
    """
    A running tally of the rounds played in a session.
    """

    def __init__(self):
        """
        Initializes the SessionStats with default values.
        """
        self.games_played = 0
        self.player_wins = 0
        self.dealer_wins = 0
        self.pushes = 0
        self.net_winnings = 0.0

    def update(self, state: RoundState) -> None:
        """Updates the statistics with a finished round."""
        if state.outcome is None:
            raise ValueError(f"Round {state.id} has no outcome yet")

        self.games_played += 1
        result = state.outcome.result
        if result is RoundResult.WIN:
            self.player_wins += 1
        elif result is RoundResult.LOSE:
            self.dealer_wins += 1
        else:
            self.pushes += 1
        self.net_winnings += state.outcome.payout - state.wager

    def report(self) -> Dict[str, Any]:
        """
        Returns a dictionary containing the current statistics.
        """
        return {
            "games_played": self.games_played,
            "player_wins": self.player_wins,
            "dealer_wins": self.dealer_wins,
            "pushes": self.pushes,
            "net_winnings": self.net_winnings,
        }

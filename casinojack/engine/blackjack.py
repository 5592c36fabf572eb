"""
Blackjack table engine.

This module provides the BlackjackEngine class, which runs rounds for users
on top of the pure round transitions and brackets each round with the wallet
and history collaborators:

    debit wager -> deal -> player actions -> dealer turn -> credit payout -> record

Card and hand state is authoritative once dealt. A wallet failure after
settlement is reported as a warning for manual reconciliation, never rolled
back into the round.
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from numbers import Real
from typing import Any, Dict, Optional, Set, Tuple

from casinojack.advisory import Advisor, FallbackAdvisor
from casinojack.blackjack.strategy import Recommendation
from casinojack.common.errors import IllegalPhaseError, InvalidWagerError
from casinojack.config import load_config
from casinojack.events import EventBus, EngineEventType
from casinojack.services import HistorySink, Wallet
from casinojack.state import RoundPhase, RoundState, RoundTransitions

logger = logging.getLogger("casinojack.engine")


@dataclass(frozen=True)
class RoundSummary:
    """
    What the caller gets back after each table operation.

    Attributes:
        state: Round snapshot after the operation
        warnings: Problems that need manual attention, e.g. a failed payout
        balance: User balance after the operation, when it could be read
    """

    state: RoundState
    warnings: Tuple[str, ...] = ()
    balance: Optional[float] = None


class BlackjackEngine:
    """
    Engine running single-hand blackjack rounds, one active round per user.

    Table operations for the same user are serialized, so concurrent calls
    see each other's rounds.
    """

    def __init__(
        self,
        wallet: Wallet,
        history: Optional[HistorySink] = None,
        advisor: Optional[Advisor] = None,
        config: Optional[Dict[str, Any]] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the blackjack engine.

        Args:
            wallet: Credits store debited and credited around each round
            history: Sink receiving a row per settled round
            advisor: Advice provider; the local basic strategy when omitted
            config: Configuration overrides merged over the defaults
            rng: Random source for deck shuffles
        """
        self.config = load_config(config)
        self.rules = self.config["rules"]
        self.wallet = wallet
        self.history = history
        self.advisor = advisor or FallbackAdvisor(
            timeout=self.config["advisor"]["timeout"]
        )
        self.rng = rng
        self.event_bus = EventBus.get_instance()
        self._rounds: Dict[str, RoundState] = {}
        self._pending: Set[asyncio.Task] = set()
        self._locks: Dict[str, asyncio.Lock] = {}

    def current_round(self, user: str) -> Optional[RoundState]:
        return self._rounds.get(user)

    async def start_round(
        self, user: str, wager: float, deck=None
    ) -> RoundSummary:
        """
        Take a wager from the user's wallet and deal a new round.

        Args:
            user: User placing the wager
            wager: Amount to stake
            deck: Optional deck to deal from instead of a fresh shuffle

        Raises:
            InvalidWagerError: If the wager is not positive, outside the table
                               limits, or not covered by the balance
            IllegalPhaseError: If the user's previous round is still in play
        """
        async with self._lock_for(user):
            current = self._rounds.get(user)
            if current is not None and not current.is_over:
                raise IllegalPhaseError(
                    "start_round", current.phase, (RoundPhase.ROUND_OVER,)
                )

            await self._check_wager(user, wager)

            state = RoundTransitions.initialize_round(wager, deck=deck, rng=self.rng)
            if not await self.wallet.debit(user, wager, key=f"{state.id}:debit"):
                raise InvalidWagerError(wager, "insufficient credits")

            self.event_bus.emit(
                EngineEventType.MONEY_BET,
                {"round_id": state.id, "user": user, "amount": wager},
            )
            logger.info("Round %s started for %s with wager %s", state.id, user, wager)

            state = RoundTransitions.deal_initial_cards(state)
            return await self._advance(user, state)

    async def hit(self, user: str) -> RoundSummary:
        """
        Deal the user another card.

        Raises:
            IllegalPhaseError: If the user has no round in the player turn
        """
        async with self._lock_for(user):
            state = RoundTransitions.apply_hit(self._require_round(user, "hit"))
            return await self._advance(user, state)

    async def stand(self, user: str) -> RoundSummary:
        """
        End the user's turn; the dealer plays out and the round is settled.

        Raises:
            IllegalPhaseError: If the user has no round in the player turn
        """
        async with self._lock_for(user):
            state = RoundTransitions.apply_stand(self._require_round(user, "stand"))
            return await self._advance(user, state)

    async def advise(self, user: str) -> Recommendation:
        """
        Suggest hit or stand for the user's current hand. Never changes the round.

        Raises:
            IllegalPhaseError: If it is not the user's turn
        """
        state = self._require_round(user, "advise")
        if state.phase is not RoundPhase.PLAYER_TURN:
            raise IllegalPhaseError("advise", state.phase, (RoundPhase.PLAYER_TURN,))

        recommendation = await self.advisor.request_advice(state)
        self.event_bus.emit(
            EngineEventType.ADVICE_GIVEN,
            {"round_id": state.id, "user": user, **recommendation.to_dict()},
        )
        return recommendation

    async def shutdown(self) -> None:
        """Wait for outstanding history writes."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _lock_for(self, user: str) -> asyncio.Lock:
        # Held from the phase check until the new snapshot is stored
        if user not in self._locks:
            self._locks[user] = asyncio.Lock()
        return self._locks[user]

    def _require_round(self, user: str, operation: str) -> RoundState:
        state = self._rounds.get(user)
        if state is None:
            raise IllegalPhaseError(operation, RoundPhase.AWAITING_WAGER, (RoundPhase.PLAYER_TURN,))
        return state

    async def _check_wager(self, user: str, wager: float) -> None:
        if isinstance(wager, bool) or not isinstance(wager, Real):
            raise InvalidWagerError(wager, "wager must be a number")
        if wager <= 0:
            raise InvalidWagerError(wager)
        if wager < self.rules["min_bet"]:
            raise InvalidWagerError(wager, f"minimum bet is {self.rules['min_bet']}")
        if wager > self.rules["max_bet"]:
            raise InvalidWagerError(wager, f"maximum bet is {self.rules['max_bet']}")
        balance = await self.wallet.get_balance(user)
        if wager > balance:
            raise InvalidWagerError(wager, f"insufficient credits ({balance})")

    async def _advance(self, user: str, state: RoundState) -> RoundSummary:
        if state.phase is RoundPhase.DEALER_TURN:
            state = RoundTransitions.play_dealer_turn(
                state, hit_soft_17=self.rules["dealer_hit_soft_17"]
            )
        self._rounds[user] = state

        if state.phase is RoundPhase.ROUND_OVER:
            return await self._settle(user, state)
        return RoundSummary(state=state)

    async def _settle(self, user: str, state: RoundState) -> RoundSummary:
        state = RoundTransitions.resolve_outcome(state)
        self._rounds[user] = state
        outcome = state.outcome
        warnings = []

        if outcome.payout > 0:
            try:
                credited = await self.wallet.credit(
                    user, outcome.payout, key=f"{state.id}:credit"
                )
            except Exception as e:
                logger.error(
                    f"Payout of {outcome.payout} to {user} failed for round {state.id}: {e}",
                    exc_info=True,
                )
                credited = False
            if credited:
                self.event_bus.emit(
                    EngineEventType.MONEY_PAYOUT,
                    {"round_id": state.id, "user": user, "amount": outcome.payout},
                )
            else:
                message = (
                    f"Payout of {outcome.payout} for round {state.id} was not credited; "
                    "manual reconciliation required"
                )
                warnings.append(message)
                self.event_bus.emit(
                    EngineEventType.WARNING,
                    {"round_id": state.id, "user": user, "message": message},
                )

        self._record_history(user, state)
        logger.info(
            "Round %s for %s settled: %s, payout %s",
            state.id,
            user,
            outcome.reason,
            outcome.payout,
        )

        try:
            balance = await self.wallet.get_balance(user)
        except Exception as e:
            logger.warning("Could not read balance for %s: %s", user, e)
            balance = None
        return RoundSummary(state=state, warnings=tuple(warnings), balance=balance)

    def _record_history(self, user: str, state: RoundState) -> None:
        if self.history is None:
            return
        task = asyncio.ensure_future(self._write_history(user, state))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _write_history(self, user: str, state: RoundState) -> None:
        try:
            await self.history.record_round(
                state.wager,
                state.outcome.payout,
                state.outcome.result,
                user=user,
                is_blackjack=state.player_hand.is_blackjack,
                round_id=state.id,
            )
        except Exception as e:
            logger.error(f"Failed to record round {state.id}: {e}", exc_info=True)

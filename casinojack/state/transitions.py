"""
State transition functions for the casinojack engine.

This module provides pure functions for moving a blackjack round through its
phases without modifying the original state objects:

    AWAITING_WAGER -> DEALING -> PLAYER_TURN -> DEALER_TURN -> ROUND_OVER

A player natural skips PLAYER_TURN, and a player bust goes straight from
PLAYER_TURN to ROUND_OVER without the dealer playing.
"""

import math
import random
from collections import Counter
from dataclasses import dataclass, field, replace
from numbers import Real
from typing import List, Optional, Tuple, Union

from casinojack.blackjack.constants import INITIAL_CARDS_DEALT
from casinojack.blackjack.hand import evaluate
from casinojack.blackjack.rules import dealer_should_hit, determine_outcome
from casinojack.common.deck import DECK_SIZE, Deck, build_deck
from casinojack.common.errors import IllegalPhaseError, InvalidWagerError
from casinojack.events import EventBus, EngineEventType
from casinojack.state.models import (
    HandState,
    PlayerAction,
    RoundPhase,
    RoundState,
)

PLAYER_TURN_ACTIONS = frozenset({PlayerAction.HIT, PlayerAction.STAND})


@dataclass(frozen=True)
class ValidationReport:
    """Result of checking a round snapshot for internal consistency."""

    is_valid: bool
    errors: Tuple[str, ...] = field(default_factory=tuple)


def _require_phase(state: RoundState, operation: str, *phases: RoundPhase) -> None:
    if state.phase not in phases:
        raise IllegalPhaseError(operation, state.phase, phases)


class RoundTransitions:
    """
    Pure functions for round transitions.

    Each method takes a round snapshot and returns a new one, leaving the
    argument untouched. Round activity is published on the event bus.
    """

    @staticmethod
    def reset_round() -> RoundState:
        """Return an empty round waiting for a wager."""
        return RoundState()

    @staticmethod
    def initialize_round(
        wager: float,
        deck: Optional[Deck] = None,
        rng: Optional[random.Random] = None,
    ) -> RoundState:
        """
        Accept a wager and prepare a round with a fresh deck.

        Args:
            wager: Amount staked, must be a positive number
            deck: Deck to deal from; a newly shuffled deck when omitted
            rng: Random source for the shuffle of a new deck

        Returns:
            Round in the DEALING phase

        Raises:
            InvalidWagerError: If the wager is not a positive finite number
        """
        if isinstance(wager, bool) or not isinstance(wager, Real):
            raise InvalidWagerError(wager, "wager must be a number")
        if not math.isfinite(wager) or wager <= 0:
            raise InvalidWagerError(wager)

        state = RoundState(
            phase=RoundPhase.DEALING,
            wager=wager,
            deck=deck if deck is not None else build_deck(rng),
        )

        EventBus.get_instance().emit(
            EngineEventType.ROUND_STARTED,
            {
                "round_id": state.id,
                "wager": wager,
                "deck_size": state.deck.size,
                "timestamp": state.timestamp,
            },
        )
        return state

    @staticmethod
    def deal_initial_cards(state: RoundState) -> RoundState:
        """
        Deal two cards each, in the order player, player, dealer, dealer.

        The dealer's second card is dealt concealed. A player natural moves
        the round straight to the dealer's turn.

        Raises:
            IllegalPhaseError: If the round is not in the DEALING phase
        """
        _require_phase(state, "deal_initial_cards", RoundPhase.DEALING)

        deck = state.deck
        player_hand = state.player_hand
        dealer_hand = state.dealer_hand
        event_bus = EventBus.get_instance()

        for to_dealer, concealed in (
            (False, False),
            (False, False),
            (True, False),
            (True, True),
        ):
            card, deck = deck.deal(concealed=concealed)
            if to_dealer:
                dealer_hand = dealer_hand.add(card)
            else:
                player_hand = player_hand.add(card)
            event_bus.emit(
                EngineEventType.CARD_DEALT,
                {
                    "round_id": state.id,
                    "is_dealer": to_dealer,
                    "card": card.display(),
                    "is_hole_card": concealed,
                },
            )

        if player_hand.is_blackjack:
            phase, legal_actions = RoundPhase.DEALER_TURN, frozenset()
        else:
            phase, legal_actions = RoundPhase.PLAYER_TURN, PLAYER_TURN_ACTIONS

        return replace(
            state,
            phase=phase,
            player_hand=player_hand,
            dealer_hand=dealer_hand,
            legal_actions=legal_actions,
            deck=deck,
        )

    @staticmethod
    def apply_hit(state: RoundState) -> RoundState:
        """
        Deal one card to the player.

        A bust ends the round immediately with the outcome settled; the dealer
        does not play.

        Raises:
            IllegalPhaseError: If it is not the player's turn
        """
        _require_phase(state, "apply_hit", RoundPhase.PLAYER_TURN)

        card, deck = state.deck.deal()
        player_hand = state.player_hand.add(card)

        event_bus = EventBus.get_instance()
        event_bus.emit(
            EngineEventType.PLAYER_ACTION,
            {"round_id": state.id, "action": PlayerAction.HIT.value},
        )
        event_bus.emit(
            EngineEventType.CARD_DEALT,
            {
                "round_id": state.id,
                "is_dealer": False,
                "card": str(card),
                "is_hole_card": False,
                "hand_value_before": state.player_hand.value,
                "hand_value_after": player_hand.value,
            },
        )

        new_state = replace(state, player_hand=player_hand, deck=deck)
        if not player_hand.is_busted:
            return new_state

        event_bus.emit(
            EngineEventType.HAND_BUSTED,
            {"round_id": state.id, "is_dealer": False, "value": player_hand.value},
        )
        return RoundTransitions._finish(new_state)

    @staticmethod
    def apply_stand(state: RoundState) -> RoundState:
        """
        End the player's turn and hand over to the dealer.

        Raises:
            IllegalPhaseError: If it is not the player's turn
        """
        _require_phase(state, "apply_stand", RoundPhase.PLAYER_TURN)

        EventBus.get_instance().emit(
            EngineEventType.PLAYER_ACTION,
            {"round_id": state.id, "action": PlayerAction.STAND.value},
        )
        return replace(state, phase=RoundPhase.DEALER_TURN, legal_actions=frozenset())

    @staticmethod
    def play_dealer_turn(state: RoundState, hit_soft_17: bool = True) -> RoundState:
        """
        Reveal the hole card and draw until the dealer must stand.

        The dealer draws below 17 and on soft 17 (unless ``hit_soft_17`` is
        off), stands otherwise or on a bust. The loop always runs to
        completion and the outcome is settled on the way out.

        Raises:
            IllegalPhaseError: If it is not the dealer's turn
        """
        _require_phase(state, "play_dealer_turn", RoundPhase.DEALER_TURN)

        event_bus = EventBus.get_instance()
        dealer_hand = state.dealer_hand.revealed()
        deck = state.deck

        for card in state.dealer_hand.cards:
            if card.concealed:
                event_bus.emit(
                    EngineEventType.CARD_REVEALED,
                    {
                        "round_id": state.id,
                        "card": str(card),
                        "dealer_value": dealer_hand.value,
                    },
                )

        while dealer_should_hit(dealer_hand.evaluation, hit_soft_17):
            card, deck = deck.deal()
            value_before = dealer_hand.value
            dealer_hand = dealer_hand.add(card)
            event_bus.emit(
                EngineEventType.DEALER_ACTION,
                {
                    "round_id": state.id,
                    "action": "hit",
                    "card": str(card),
                    "hand_value_before": value_before,
                    "hand_value_after": dealer_hand.value,
                },
            )

        if dealer_hand.is_busted:
            event_bus.emit(
                EngineEventType.HAND_BUSTED,
                {"round_id": state.id, "is_dealer": True, "value": dealer_hand.value},
            )
        else:
            event_bus.emit(
                EngineEventType.DEALER_ACTION,
                {"round_id": state.id, "action": "stand", "value": dealer_hand.value},
            )

        return RoundTransitions._finish(
            replace(state, dealer_hand=dealer_hand, deck=deck)
        )

    @staticmethod
    def resolve_outcome(state: RoundState) -> RoundState:
        """
        Settle a finished round.

        Returns the state unchanged when the outcome is already set.

        Raises:
            IllegalPhaseError: If the round has not reached ROUND_OVER
        """
        if state.outcome is not None:
            return state
        _require_phase(state, "resolve_outcome", RoundPhase.ROUND_OVER)
        return RoundTransitions._finish(state)

    @staticmethod
    def apply_action(
        state: RoundState, action: Union[PlayerAction, str]
    ) -> RoundState:
        """
        Apply a player action and carry the round as far as it goes on its own.

        Standing plays the dealer's turn and settles the round.

        Raises:
            ValueError: If the action is unknown
            IllegalPhaseError: If it is not the player's turn
        """
        if not isinstance(action, PlayerAction):
            try:
                action = PlayerAction(str(action).lower())
            except ValueError:
                raise ValueError(f"Unknown action: {action}") from None

        if action is PlayerAction.HIT:
            return RoundTransitions.apply_hit(state)

        new_state = RoundTransitions.apply_stand(state)
        return RoundTransitions.play_dealer_turn(new_state)

    @staticmethod
    def validate_round(state: RoundState) -> ValidationReport:
        """
        Check a snapshot for internal consistency.

        Covers deck size, card conservation, duplicate cards, hand values,
        card counts per phase and the presence of an outcome.
        """
        errors: List[str] = []

        if not 0 <= state.deck.size <= DECK_SIZE:
            errors.append("Invalid deck size")

        all_cards = (
            list(state.player_hand.cards)
            + list(state.dealer_hand.cards)
            + list(state.deck.cards)
        )
        if state.phase is not RoundPhase.AWAITING_WAGER and len(all_cards) != DECK_SIZE:
            errors.append(
                f"Card count mismatch: {len(all_cards)} cards in play, expected {DECK_SIZE}"
            )
        duplicates = [card for card, count in Counter(all_cards).items() if count > 1]
        if duplicates:
            errors.append(
                "Duplicate cards: " + ", ".join(str(card) for card in duplicates)
            )

        for label, hand in (("Player", state.player_hand), ("Dealer", state.dealer_hand)):
            if evaluate(hand.cards) != hand.evaluation:
                errors.append(f"{label} hand value mismatch")

        if state.phase is RoundPhase.AWAITING_WAGER:
            if state.cards_dealt:
                errors.append("Cards present while awaiting a wager")
        elif state.phase is RoundPhase.DEALING:
            if state.cards_dealt:
                errors.append("Cards present before the initial deal")
        elif (
            state.cards_dealt < INITIAL_CARDS_DEALT
            or len(state.player_hand.cards) < INITIAL_CARDS_DEALT // 2
            or len(state.dealer_hand.cards) < INITIAL_CARDS_DEALT // 2
        ):
            errors.append("Insufficient cards for current phase")

        if state.phase is RoundPhase.PLAYER_TURN and state.legal_actions != PLAYER_TURN_ACTIONS:
            errors.append("Player turn without hit and stand available")
        if state.phase is not RoundPhase.PLAYER_TURN and state.legal_actions:
            errors.append("Actions offered outside the player's turn")

        if state.phase is RoundPhase.ROUND_OVER and state.outcome is None:
            errors.append("Round over without outcome")
        if state.phase is not RoundPhase.ROUND_OVER and state.outcome is not None:
            errors.append("Outcome set before the round is over")

        return ValidationReport(is_valid=not errors, errors=tuple(errors))

    @staticmethod
    def _finish(state: RoundState) -> RoundState:
        outcome = determine_outcome(
            state.player_hand.evaluation, state.dealer_hand.evaluation, state.wager
        )
        new_state = replace(
            state,
            phase=RoundPhase.ROUND_OVER,
            legal_actions=frozenset(),
            outcome=outcome,
        )

        EventBus.get_instance().emit(
            EngineEventType.ROUND_ENDED,
            {
                "round_id": state.id,
                "wager": state.wager,
                "payout": outcome.payout,
                "result": outcome.result.value,
                "reason": outcome.reason,
                "player_value": state.player_hand.value,
                "dealer_value": state.dealer_hand.value,
            },
        )
        return new_state

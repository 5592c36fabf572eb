"""
Advisory capability: hit/stand suggestions for the player's current hand.

`FallbackAdvisor` is what the table uses. It asks a primary advisor (usually
the remote `RemoteAdvisor`) within a time limit and answers with the local
basic-strategy heuristic whenever the primary is unavailable, times out,
fails or returns something unusable.
"""

import asyncio
import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional

from casinojack.blackjack.strategy import Advice, Recommendation, recommend_for
from casinojack.common.errors import ExternalServiceUnavailableError
from casinojack.state.models import RoundState

logger = logging.getLogger("casinojack.advisory")

# Sends a prompt with the API key and returns the model's raw text reply
Transport = Callable[[str, str], Awaitable[str]]

_CODE_FENCE = re.compile(r"```(?:json)?\n?")


class Advisor(ABC):
    """Interface of an advice provider."""

    @property
    def available(self) -> bool:
        return True

    @abstractmethod
    async def request_advice(self, state: RoundState) -> Recommendation:
        pass


class BasicStrategyAdvisor(Advisor):
    """Local, deterministic advice from the basic-strategy bands."""

    async def request_advice(self, state: RoundState) -> Recommendation:
        return recommend_for(state)


def format_round_for_advice(state: RoundState) -> str:
    """
    Describe the visible part of a round for the remote advisor.

    The dealer's hole card is only counted as hidden.
    """
    player = state.player_hand
    visible_dealer = [card for card in state.dealer_hand.cards if not card.concealed]
    hidden_count = len(state.dealer_hand.cards) - len(visible_dealer)

    if player.is_busted:
        status = "BUSTED"
    elif player.is_blackjack:
        status = "BLACKJACK"
    else:
        status = "Active"

    upcard = str(visible_dealer[0]) if visible_dealer else "Unknown"
    dealer_visible_value = sum(card.value for card in visible_dealer)

    return "\n".join(
        [
            "BLACKJACK STRATEGY ANALYSIS REQUEST",
            "",
            f"Player Hand: {', '.join(str(card) for card in player.cards)}",
            f"Player Total: {player.value} ({'soft' if player.is_soft else 'hard'})",
            f"Player Status: {status}",
            "",
            f"Dealer Showing: {upcard}",
            f"Dealer Visible Total: {dealer_visible_value}",
            f"Hidden Cards: {hidden_count}",
            "",
            "Using optimal basic blackjack strategy, should the player HIT or STAND?",
            "Consider the dealer's upcard strength (2-6 weak, 7-A strong), "
            "the hand type (hard vs soft) and the bust probability.",
            "",
            "Respond with ONLY a valid JSON object in this exact format:",
            '{"action": "hit" or "stand", "reasoning": "brief explanation", '
            '"confidence": decimal between 0.0 and 1.0}',
        ]
    )


def parse_advice(text: str, source: str = "remote") -> Recommendation:
    """
    Parse and validate a JSON advice reply.

    Markdown code fences around the JSON are tolerated and an out-of-range
    confidence is clamped into [0, 1].

    Raises:
        ExternalServiceUnavailableError: If the reply is not usable advice
    """
    cleaned = _CODE_FENCE.sub("", text or "").strip()
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ExternalServiceUnavailableError(f"Advice is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise ExternalServiceUnavailableError("Advice must be a JSON object")

    action = payload.get("action")
    reasoning = payload.get("reasoning")
    confidence = payload.get("confidence")

    if action not in (Advice.HIT.value, Advice.STAND.value):
        raise ExternalServiceUnavailableError(f"Invalid action recommendation: {action!r}")
    if not isinstance(reasoning, str) or not reasoning.strip():
        raise ExternalServiceUnavailableError("Advice is missing its reasoning")
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        raise ExternalServiceUnavailableError("Advice confidence must be a number")

    return Recommendation(
        action=Advice(action),
        confidence=max(0.0, min(1.0, float(confidence))),
        reasoning=reasoning.strip(),
        source=source,
    )


class RemoteAdvisor(Advisor):
    """
    Advice from an external model service.

    The HTTP call itself is supplied as ``transport`` so the advisor does not
    depend on any particular client.
    """

    def __init__(self, transport: Transport, api_key: Optional[str] = None):
        self.transport = transport
        self.api_key = api_key

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    async def request_advice(self, state: RoundState) -> Recommendation:
        if not self.available:
            raise ExternalServiceUnavailableError("Advisory API key not configured")

        prompt = format_round_for_advice(state)
        try:
            reply = await self.transport(prompt, self.api_key)
        except ExternalServiceUnavailableError:
            raise
        except (OSError, asyncio.TimeoutError) as e:
            raise ExternalServiceUnavailableError(f"Advisory request failed: {e}") from e

        recommendation = parse_advice(reply)
        logger.info(
            "Remote advice: %s (%d%%)",
            recommendation.action.value.upper(),
            round(recommendation.confidence * 100),
        )
        return recommendation


class FallbackAdvisor(Advisor):
    """
    Primary advisor with a mandatory local fallback.

    Args:
        primary: Preferred advisor; skipped when missing or unavailable
        fallback: Advisor used whenever the primary cannot answer
        timeout: Seconds to wait for the primary
    """

    def __init__(
        self,
        primary: Optional[Advisor] = None,
        fallback: Optional[Advisor] = None,
        timeout: float = 5.0,
    ):
        self.primary = primary
        self.fallback = fallback or BasicStrategyAdvisor()
        self.timeout = timeout

    async def request_advice(self, state: RoundState) -> Recommendation:
        if self.primary is None or not self.primary.available:
            logger.debug("Primary advisor unavailable, using fallback")
            return await self.fallback.request_advice(state)

        try:
            return await asyncio.wait_for(
                self.primary.request_advice(state), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Advisory service timed out after %ss, using fallback", self.timeout
            )
        except ExternalServiceUnavailableError as e:
            logger.warning("Advisory service unavailable (%s), using fallback", e)
        except Exception as e:
            logger.error(f"Unexpected advisory failure: {e}", exc_info=True)

        return await self.fallback.request_advice(state)

"""
Command-line blackjack table.

Plays rounds in the terminal against an in-memory wallet, either
interactively or as an automatic simulation following the advisor.
"""

import argparse
import asyncio
import logging
import random
from typing import Callable, List, Optional

from casinojack.blackjack.stats import calculate_statistics
from casinojack.blackjack.strategy import Advice
from casinojack.common.errors import InvalidWagerError
from casinojack.config import load_config
from casinojack.engine import BlackjackEngine, RoundSummary
from casinojack.services import InMemoryWallet, SQLiteHistorySink
from casinojack.state import RoundPhase, RoundState

logger = logging.getLogger("casinojack.cli")

PLAYER = "player"


def describe_round(state: RoundState) -> List[str]:
    """Lines describing a round as the player sees it."""
    dealer = " ".join(card.display() for card in state.dealer_hand.cards)
    player = " ".join(str(card) for card in state.player_hand.cards)
    lines = [
        f"Dealer: {dealer}  ({state.dealer_hand.value})",
        f"You:    {player}  ({state.player_hand.value}{', soft' if state.player_hand.is_soft else ''})",
    ]
    if state.outcome is not None:
        lines.append(f"{state.outcome.reason} - payout {state.outcome.payout:g}")
    return lines


def _report(summary: RoundSummary, output: Callable[[str], None]) -> None:
    for line in describe_round(summary.state):
        output(line)
    for warning in summary.warnings:
        output(f"WARNING: {warning}")
    if summary.balance is not None and summary.state.phase is RoundPhase.ROUND_OVER:
        output(f"Balance: {summary.balance:g}")


async def play_console(
    engine: BlackjackEngine,
    input_fn: Callable[[str], str] = input,
    output: Callable[[str], None] = print,
) -> None:
    """
    Interactive loop: wager, then hit/stand/advice until the player quits.

    Prompts are read in a worker thread so pending history writes keep running.
    """
    while True:
        balance = await engine.wallet.get_balance(PLAYER)
        answer = (
            await asyncio.to_thread(input_fn, f"Balance {balance:g}. Wager (blank to quit): ")
        ).strip()
        if not answer:
            return
        try:
            summary = await engine.start_round(PLAYER, float(answer))
        except ValueError:
            output(f"Not a number: {answer}")
            continue
        except InvalidWagerError as e:
            output(str(e))
            continue

        _report(summary, output)
        while summary.state.phase is RoundPhase.PLAYER_TURN:
            choice = (
                await asyncio.to_thread(input_fn, "[h]it, [s]tand or [a]dvice? ")
            ).strip().lower()
            if choice.startswith("h"):
                summary = await engine.hit(PLAYER)
                _report(summary, output)
            elif choice.startswith("s"):
                summary = await engine.stand(PLAYER)
                _report(summary, output)
            elif choice.startswith("a"):
                advice = await engine.advise(PLAYER)
                output(
                    f"Advice: {advice.action.value} ({advice.confidence:.0%}) - {advice.reasoning}"
                )


async def simulate(engine: BlackjackEngine, rounds: int, wager: float) -> dict:
    """Play ``rounds`` rounds following the advisor and return the statistics."""
    states = []
    for _ in range(rounds):
        try:
            summary = await engine.start_round(PLAYER, wager)
        except InvalidWagerError as e:
            logger.info("Simulation stopped: %s", e)
            break
        while summary.state.phase is RoundPhase.PLAYER_TURN:
            advice = await engine.advise(PLAYER)
            if advice.action is Advice.HIT:
                summary = await engine.hit(PLAYER)
            else:
                summary = await engine.stand(PLAYER)
        states.append(summary.state)
    await engine.shutdown()
    return calculate_statistics(states)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play single-deck blackjack.")
    parser.add_argument(
        "--simulate",
        type=int,
        metavar="ROUNDS",
        help="Play ROUNDS rounds automatically with basic strategy and print statistics.",
    )
    parser.add_argument("--wager", type=float, default=10.0, help="Wager used in simulation mode")
    parser.add_argument("--credits", type=float, default=1000.0, help="Starting credits")
    parser.add_argument("--seed", type=int, help="Seed the deck shuffle for a reproducible game")
    parser.add_argument("--db", type=str, help="SQLite file recording round history")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    overrides = {"wallet": {"starting_credits": args.credits}}
    if args.db:
        overrides["history"] = {"db_path": args.db}
    config = load_config(overrides)

    engine = BlackjackEngine(
        InMemoryWallet(config["wallet"]["starting_credits"]),
        history=SQLiteHistorySink(config["history"]["db_path"]),
        config=config,
        rng=random.Random(args.seed) if args.seed is not None else None,
    )

    if args.simulate:
        stats = asyncio.run(simulate(engine, args.simulate, args.wager))
        for key, value in stats.items():
            print(f"{key}: {value}")
    else:
        asyncio.run(play_console(engine))


if __name__ == "__main__":
    main()

import asyncio
import random
import threading

import pytest

from casinojack.cli import build_parser, describe_round, main, play_console, simulate
from casinojack.engine import BlackjackEngine
from casinojack.services import InMemoryWallet
from casinojack.state import RoundTransitions


def scripted(*answers):
    replies = iter(answers)
    return lambda prompt: next(replies, "")


@pytest.fixture
def engine():
    return BlackjackEngine(InMemoryWallet(1000), rng=random.Random(42))


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.simulate is None
    assert args.wager == 10.0
    assert args.credits == 1000.0
    assert args.log_level == "WARNING"


def test_parser_options():
    args = build_parser().parse_args(["--simulate", "20", "--wager", "25", "--seed", "3"])
    assert args.simulate == 20
    assert args.wager == 25.0
    assert args.seed == 3


def test_describe_round_hides_hole_card(dealt_round):
    lines = describe_round(dealt_round("10H", "6S", "9D", "AC"))
    assert lines[0].startswith("Dealer: 9♦ ??")
    assert lines[1].startswith("You:    10♥ 6♠  (16")
    assert len(lines) == 2


def test_describe_finished_round(dealt_round):
    state = RoundTransitions.apply_action(dealt_round("10H", "7S", "9D", "8C"), "stand")
    lines = describe_round(state)
    assert lines[0] == "Dealer: 9♦ 8♣  (17)"
    assert lines[-1] == "Push at 17 - payout 100"


@pytest.mark.asyncio
async def test_play_console_plays_a_round(engine):
    output = []
    await play_console(engine, input_fn=scripted("10", "s", "s"), output=output.append)

    assert any(line.startswith("Dealer:") for line in output)
    assert any(line.startswith("Balance:") for line in output)
    assert engine.current_round("player").is_over


@pytest.mark.asyncio
async def test_play_console_rejects_bad_wagers(engine):
    output = []
    await play_console(engine, input_fn=scripted("abc", "2"), output=output.append)

    assert output[0] == "Not a number: abc"
    assert "minimum bet" in output[1]
    assert engine.current_round("player") is None


@pytest.mark.asyncio
async def test_play_console_quits_on_blank(engine):
    output = []
    await play_console(engine, input_fn=scripted(""), output=output.append)
    assert output == []


@pytest.mark.asyncio
async def test_simulate(engine):
    stats = await simulate(engine, 25, 10)
    assert stats["total_games"] == 25
    assert stats["total_wins"] + stats["total_losses"] + stats["total_pushes"] == 25
    assert stats["average_bet"] == 10


@pytest.mark.asyncio
async def test_simulate_stops_when_credits_run_out():
    engine = BlackjackEngine(InMemoryWallet(20), rng=random.Random(1))
    stats = await simulate(engine, 50, 10)
    assert stats["total_games"] <= 50
    balance = await engine.wallet.get_balance("player")
    assert balance >= 0


def test_main_simulation(capsys, tmp_path):
    db = str(tmp_path / "rounds.db")
    main(["--simulate", "5", "--seed", "7", "--db", db])
    out = capsys.readouterr().out
    assert "total_games: 5" in out
    assert (tmp_path / "rounds.db").exists()


@pytest.mark.asyncio
async def test_play_console_keeps_event_loop_running(engine):
    other_task_ran = threading.Event()
    answered = []

    async def other_task():
        await asyncio.sleep(0)
        other_task_ran.set()

    def waiting_input(prompt):
        answered.append(other_task_ran.wait(timeout=2))
        return ""

    task = asyncio.ensure_future(other_task())
    await play_console(engine, input_fn=waiting_input, output=[].append)
    await task

    assert answered == [True]

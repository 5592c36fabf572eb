import pytest

from casinojack.blackjack.rules import RoundResult
from casinojack.blackjack.stats import calculate_statistics
from casinojack.services import MemoryHistorySink, SQLiteHistorySink


@pytest.fixture
def sink():
    sink = SQLiteHistorySink()
    yield sink
    sink.close()


@pytest.mark.asyncio
async def test_record_and_list_rounds(sink):
    await sink.record_round(100, 200, RoundResult.WIN, user="alice", round_id="r1")
    await sink.record_round(50, 0, "lose", user="bob", round_id="r2")

    rounds = sink.rounds()
    assert [r.round_id for r in rounds] == ["r1", "r2"]
    assert rounds[0].result is RoundResult.WIN
    assert rounds[1].result is RoundResult.LOSE
    assert [r.round_id for r in sink.rounds("bob")] == ["r2"]


@pytest.mark.asyncio
async def test_invalid_result_rejected(sink):
    with pytest.raises(ValueError):
        await sink.record_round(10, 0, "draw")


@pytest.mark.asyncio
async def test_history_on_disk(tmp_path):
    path = str(tmp_path / "history.db")
    sink = SQLiteHistorySink(path)
    await sink.record_round(10, 25, RoundResult.WIN, user="alice", is_blackjack=True)
    sink.close()

    reopened = SQLiteHistorySink(path)
    rounds = reopened.rounds("alice")
    reopened.close()
    assert len(rounds) == 1
    assert rounds[0].is_blackjack
    assert rounds[0].net == 15


@pytest.mark.asyncio
async def test_to_dataframe(sink):
    await sink.record_round(100, 200, RoundResult.WIN, user="alice")
    await sink.record_round(100, 100, RoundResult.PUSH, user="alice")
    frame = sink.to_dataframe("alice")
    assert list(frame["result"]) == ["win", "push"]
    assert frame["net"].sum() == 100


def test_empty_dataframe(sink):
    frame = sink.to_dataframe()
    assert frame.empty
    assert "net" in frame.columns


@pytest.mark.asyncio
async def test_statistics_from_history(sink):
    await sink.record_round(100, 250, RoundResult.WIN, is_blackjack=True)
    await sink.record_round(100, 0, RoundResult.LOSE)
    stats = calculate_statistics(sink.rounds())
    assert stats["total_games"] == 2
    assert stats["blackjack_count"] == 1
    assert stats["total_winnings"] == 50


@pytest.mark.asyncio
async def test_memory_sink():
    sink = MemoryHistorySink()
    await sink.record_round(10, 0, "lose", user="alice")
    await sink.record_round(10, 20, "win", user="bob")
    assert len(sink.rounds()) == 2
    assert sink.rounds("bob")[0].result is RoundResult.WIN

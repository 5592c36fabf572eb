"""
Game history collaborator.

A `HistorySink` receives one row per settled round. Recording is
fire-and-forget from the table's point of view: failures are logged by the
caller and never block play.
"""

import logging
import sqlite3
from abc import ABC, abstractmethod
from typing import List, Optional, Union

import pandas as pd

from casinojack.blackjack.rules import RoundResult
from casinojack.blackjack.stats import RoundRecord

logger = logging.getLogger("casinojack.services.history")

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS rounds (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    round_id TEXT,
    user_id TEXT,
    wager REAL NOT NULL,
    payout REAL NOT NULL,
    result TEXT NOT NULL CHECK (result IN ('win', 'lose', 'push')),
    is_blackjack INTEGER NOT NULL DEFAULT 0,
    timestamp REAL NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_rounds_user ON rounds (user_id);
"""


def _make_record(
    wager: float,
    payout: float,
    result: Union[RoundResult, str],
    user: Optional[str],
    is_blackjack: bool,
    round_id: Optional[str],
) -> RoundRecord:
    return RoundRecord(
        wager=wager,
        payout=payout,
        result=result if isinstance(result, RoundResult) else RoundResult(result),
        is_blackjack=is_blackjack,
        user=user,
        round_id=round_id,
    )


class HistorySink(ABC):
    """Interface of a round history store."""

    @abstractmethod
    async def record_round(
        self,
        wager: float,
        payout: float,
        result: Union[RoundResult, str],
        user: Optional[str] = None,
        is_blackjack: bool = False,
        round_id: Optional[str] = None,
    ) -> None:
        pass

    @abstractmethod
    def rounds(self, user: Optional[str] = None) -> List[RoundRecord]:
        """Recorded rounds, oldest first, optionally for one user."""
        pass


class MemoryHistorySink(HistorySink):
    """History kept in a list, for tests and the CLI."""

    def __init__(self):
        self.records: List[RoundRecord] = []

    async def record_round(
        self,
        wager: float,
        payout: float,
        result: Union[RoundResult, str],
        user: Optional[str] = None,
        is_blackjack: bool = False,
        round_id: Optional[str] = None,
    ) -> None:
        self.records.append(
            _make_record(wager, payout, result, user, is_blackjack, round_id)
        )

    def rounds(self, user: Optional[str] = None) -> List[RoundRecord]:
        return [r for r in self.records if user is None or r.user == user]


class SQLiteHistorySink(HistorySink):
    """
    Store and retrieve round history from SQLite.
    """

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize the SQLite history sink.

        Args:
            db_path: Optional path to the database file. If None, an in-memory
                     database is used.
        """
        self.db_path = db_path
        self.conn = sqlite3.connect(db_path if db_path else ":memory:")
        self.conn.row_factory = sqlite3.Row
        self.initialize_database()

    def initialize_database(self) -> None:
        """Create the rounds table if it doesn't already exist."""
        cursor = self.conn.cursor()
        cursor.executescript(SCHEMA_SQL)
        self.conn.commit()

    def close(self) -> None:
        """Close the database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None

    async def record_round(
        self,
        wager: float,
        payout: float,
        result: Union[RoundResult, str],
        user: Optional[str] = None,
        is_blackjack: bool = False,
        round_id: Optional[str] = None,
    ) -> None:
        record = _make_record(wager, payout, result, user, is_blackjack, round_id)
        cursor = self.conn.cursor()
        cursor.execute(
            """
            INSERT INTO rounds (
                round_id, user_id, wager, payout, result, is_blackjack, timestamp
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.round_id,
                record.user,
                record.wager,
                record.payout,
                record.result.value,
                int(record.is_blackjack),
                record.timestamp,
            ),
        )
        self.conn.commit()
        logger.debug("Recorded round %s for %s: %s", record.round_id, record.user, record.result.value)

    def rounds(self, user: Optional[str] = None) -> List[RoundRecord]:
        cursor = self.conn.cursor()
        if user is None:
            cursor.execute("SELECT * FROM rounds ORDER BY id")
        else:
            cursor.execute("SELECT * FROM rounds WHERE user_id = ? ORDER BY id", (user,))
        return [
            RoundRecord(
                wager=row["wager"],
                payout=row["payout"],
                result=RoundResult(row["result"]),
                is_blackjack=bool(row["is_blackjack"]),
                user=row["user_id"],
                round_id=row["round_id"],
                timestamp=row["timestamp"],
            )
            for row in cursor.fetchall()
        ]

    def to_dataframe(self, user: Optional[str] = None) -> pd.DataFrame:
        """
        Export recorded rounds as a DataFrame with a ``net`` column.
        """
        columns = ["round_id", "user", "wager", "payout", "net", "result", "is_blackjack", "timestamp"]
        rows = [
            {
                "round_id": r.round_id,
                "user": r.user,
                "wager": r.wager,
                "payout": r.payout,
                "net": r.net,
                "result": r.result.value,
                "is_blackjack": r.is_blackjack,
                "timestamp": r.timestamp,
            }
            for r in self.rounds(user)
        ]
        return pd.DataFrame(rows, columns=columns)

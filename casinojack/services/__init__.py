"""
Collaborators the table engine calls around a round: the credits wallet and
the game history sink.
"""

from casinojack.services.wallet import Wallet, InMemoryWallet
from casinojack.services.history import (
    HistorySink,
    MemoryHistorySink,
    SQLiteHistorySink,
)

__all__ = [
    "Wallet",
    "InMemoryWallet",
    "HistorySink",
    "MemoryHistorySink",
    "SQLiteHistorySink",
]

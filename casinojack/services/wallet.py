"""
Credits wallet collaborator.

The engine holds no balances; the table debits the wager before dealing and
credits the payout after settlement through a `Wallet`. Both calls accept an
idempotency key so a retried request is applied at most once.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Dict, Optional

logger = logging.getLogger("casinojack.services.wallet")


class Wallet(ABC):
    """Interface of a credits store."""

    @abstractmethod
    async def get_balance(self, user: str) -> float:
        pass

    @abstractmethod
    async def debit(self, user: str, amount: float, key: Optional[str] = None) -> bool:
        """
        Remove ``amount`` from the user's balance.

        Returns:
            False when the balance does not cover the amount
        """
        pass

    @abstractmethod
    async def credit(self, user: str, amount: float, key: Optional[str] = None) -> bool:
        pass


class InMemoryWallet(Wallet):
    """
    Wallet keeping balances in process memory.

    Users are opened with ``starting_credits`` on first access. Only the
    ``max_keys`` most recently used idempotency keys are remembered.
    """

    def __init__(self, starting_credits: float = 1000.0, max_keys: int = 10000):
        self.starting_credits = starting_credits
        self.max_keys = max_keys
        self._balances: Dict[str, float] = {}
        self._applied: "OrderedDict[str, bool]" = OrderedDict()
        self._lock = asyncio.Lock()

    def _balance(self, user: str) -> float:
        if user not in self._balances:
            logger.info("Opening wallet for %s with %s credits", user, self.starting_credits)
            self._balances[user] = self.starting_credits
        return self._balances[user]

    def _seen(self, key: Optional[str]) -> Optional[bool]:
        if key is None or key not in self._applied:
            return None
        self._applied.move_to_end(key)
        return self._applied[key]

    def _remember(self, key: Optional[str], success: bool) -> None:
        if key is None:
            return
        self._applied[key] = success
        self._applied.move_to_end(key)
        while len(self._applied) > self.max_keys:
            self._applied.popitem(last=False)

    async def get_balance(self, user: str) -> float:
        async with self._lock:
            return self._balance(user)

    async def debit(self, user: str, amount: float, key: Optional[str] = None) -> bool:
        if amount < 0:
            raise ValueError(f"Cannot debit a negative amount: {amount}")
        async with self._lock:
            seen = self._seen(key)
            if seen is not None:
                return seen

            balance = self._balance(user)
            success = balance >= amount
            if success:
                self._balances[user] = balance - amount
                logger.debug("Debited %s from %s, balance %s", amount, user, self._balances[user])
            else:
                logger.info("Debit of %s refused for %s, balance %s", amount, user, balance)

            self._remember(key, success)
            return success

    async def credit(self, user: str, amount: float, key: Optional[str] = None) -> bool:
        if amount < 0:
            raise ValueError(f"Cannot credit a negative amount: {amount}")
        async with self._lock:
            seen = self._seen(key)
            if seen is not None:
                return seen

            self._balances[user] = self._balance(user) + amount
            logger.debug("Credited %s to %s, balance %s", amount, user, self._balances[user])

            self._remember(key, True)
            return True

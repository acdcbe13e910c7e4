"""Protocol fee vault.

A single FeeVault (the "pooler") per exchange accumulates every settlement
fee: the flat creation fee of each new pool and the 1% cut of each swap.
Only the exchange mutates it; the admin capability check happens there.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from bondcurve.constants import DEFAULT_CREATION_FEE, MAX_POOL_VALUE
from bondcurve.errors import IncorrectAmount, PoolFull
from bondcurve.safe_int import S

logger = structlog.get_logger()


@dataclass
class FeeVault:
    """Accumulated settlement fees plus the configured creation fee."""

    settlement_fee_balance: int = 0
    creation_fee: int = DEFAULT_CREATION_FEE

    def balance_after_deposit(self, amount: int) -> int:
        """Return the balance a deposit would produce without applying it.

        Raises:
            PoolFull: If the balance would reach MAX_POOL_VALUE
        """
        new_balance = S(self.settlement_fee_balance) + S(amount)
        if new_balance >= MAX_POOL_VALUE:
            raise PoolFull(f"fee balance would reach ceiling: {new_balance}")
        return new_balance.value

    def deposit(self, amount: int) -> None:
        self.settlement_fee_balance = self.balance_after_deposit(amount)

    def withdraw_all(self) -> int:
        """Drain the whole fee balance and return it."""
        amount = self.settlement_fee_balance
        self.settlement_fee_balance = 0
        return amount

    def set_creation_fee(self, fee: int) -> None:
        if not 0 <= fee < MAX_POOL_VALUE:
            raise IncorrectAmount(f"creation fee out of range: {fee}")
        logger.info("creation_fee_updated", old_fee=self.creation_fee, new_fee=fee)
        self.creation_fee = fee

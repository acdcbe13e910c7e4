"""Base classes for AMM pricing."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class SwapResult:
    """Outcome of a simulated swap against a pool.

    Nothing is applied until the exchange commits the result, so a
    SwapResult can be computed and discarded freely.
    """

    # True for settlement -> token, False for token -> settlement
    is_buy: bool
    amount_in: int
    # Amount paid out to the trader, after fees
    amount_out: int
    # Settlement fee routed to the fee vault
    fee: int
    # Pool reserves once the swap is committed
    settlement_reserve: int
    token_reserve: int

    @property
    def settlement_amount(self) -> int:
        """Settlement moved by the trader: paid in for buys, received for sells."""
        return self.amount_in if self.is_buy else self.amount_out

    @property
    def token_amount(self) -> int:
        """Tokens moved by the trader: received for buys, paid in for sells."""
        return self.amount_out if self.is_buy else self.amount_in


class AMM(ABC):
    """Abstract base class for AMM pricing functions."""

    @abstractmethod
    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
    ) -> int:
        """Calculate output amount for a given input.

        Args:
            amount_in: Input amount
            reserve_in: Reserve of the input asset used for pricing
            reserve_out: Reserve of the output asset used for pricing

        Returns:
            Output amount
        """
        ...

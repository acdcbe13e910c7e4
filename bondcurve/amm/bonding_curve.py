"""Bonding-curve AMM implementation.

The curve is the constant product formula x * y = k with one twist: the
settlement side is priced as if it already held a fixed virtual reserve
(the bootstrap offset). A freshly launched pool with almost no settlement
balance therefore trades on a smooth, front-loaded curve.

Fees are not part of the formula. Buys pay 1% of the settlement input
before pricing; sells pay 1% of the settlement output after pricing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from bondcurve.amm.base import AMM, SwapResult
from bondcurve.constants import BOOTSTRAP_OFFSET, MAX_POOL_VALUE, SWAP_FEE_PERCENT
from bondcurve.errors import PoolFull, ReservesEmpty
from bondcurve.fees.calculator import split_fee
from bondcurve.safe_int import S

if TYPE_CHECKING:
    from bondcurve.pools.pool import Pool

logger = structlog.get_logger()


class BondingCurve(AMM):
    """Constant product pricing with a virtual settlement reserve.

    Formula: amount_out = (amount_in * reserve_out) / (reserve_in + amount_in)

    where the settlement-side reserve is always ``settlement_reserve + bootstrap_offset``.
    """

    def __init__(
        self,
        bootstrap_offset: int = BOOTSTRAP_OFFSET,
        fee_percent: int = SWAP_FEE_PERCENT,
    ) -> None:
        self.bootstrap_offset = bootstrap_offset
        self.fee_percent = fee_percent

    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
    ) -> int:
        """Calculate output amount using the constant product formula.

        All inputs are u64. The product ``amount_in * reserve_out`` is formed
        in a u128 intermediate and the quotient narrowed back to u64. Division
        truncates, so rounding always favors the pool by at most one unit.

        Args:
            amount_in: Input amount (zero yields zero)
            reserve_in: Input-side reserve used for pricing
            reserve_out: Output-side reserve used for pricing

        Returns:
            Output amount, strictly less than reserve_out when reserve_out > 0

        Raises:
            Uint64Overflow: If any input does not fit in u64
        """
        amount = S(S(amount_in).to_u64())
        r_in = S(S(reserve_in).to_u64())
        r_out = S(S(reserve_out).to_u64())
        if amount == 0:
            return 0

        numerator = S((amount * r_out).to_u128())
        denominator = S((r_in + amount).to_u128())

        return (numerator // denominator).to_u64()

    def virtual_settlement_reserve(self, settlement_reserve: int) -> int:
        """Settlement reserve as seen by the pricing function.

        Raises:
            PoolFull: If the offset-adjusted reserve does not fit in u64
        """
        virtual = S(settlement_reserve) + S(self.bootstrap_offset)
        if not virtual.is_u64():
            raise PoolFull(f"virtual settlement reserve overflows u64: {virtual}")
        return virtual.value

    def simulate_buy(self, pool: Pool, settlement_in: int) -> SwapResult:
        """Simulate a settlement -> token swap (fee taken before pricing).

        Raises:
            ReservesEmpty: If either reserve is zero
            PoolFull: If the settlement reserve would reach MAX_POOL_VALUE
        """
        if not pool.has_reserves:
            raise ReservesEmpty(f"pool {pool.pool_id} has an empty reserve")

        split = split_fee(settlement_in, self.fee_percent)
        tokens_out = self.get_amount_out(
            split.net,
            self.virtual_settlement_reserve(pool.settlement_reserve),
            pool.token_reserve,
        )

        new_settlement = S(pool.settlement_reserve) + S(split.net)
        if new_settlement >= MAX_POOL_VALUE:
            raise PoolFull(f"settlement reserve would reach ceiling: {new_settlement}")
        new_token = S(pool.token_reserve) - S(tokens_out)

        return SwapResult(
            is_buy=True,
            amount_in=settlement_in,
            amount_out=tokens_out,
            fee=split.fee,
            settlement_reserve=new_settlement.value,
            token_reserve=new_token.value,
        )

    def simulate_sell(self, pool: Pool, tokens_in: int) -> SwapResult:
        """Simulate a token -> settlement swap (fee taken after pricing).

        The curve may price an output above the real settlement reserve
        because of the virtual offset; such a sell cannot be paid and aborts.

        Raises:
            ReservesEmpty: If either reserve is zero or cannot cover the output
            PoolFull: If the token reserve would reach MAX_POOL_VALUE
        """
        if not pool.has_reserves:
            raise ReservesEmpty(f"pool {pool.pool_id} has an empty reserve")

        gross_out = self.get_amount_out(
            tokens_in,
            pool.token_reserve,
            self.virtual_settlement_reserve(pool.settlement_reserve),
        )

        new_token = S(pool.token_reserve) + S(tokens_in)
        if new_token >= MAX_POOL_VALUE:
            raise PoolFull(f"token reserve would reach ceiling: {new_token}")
        if gross_out > pool.settlement_reserve:
            logger.debug(
                "sell_exceeds_settlement_reserve",
                pool_id=pool.pool_id,
                gross_out=gross_out,
                settlement_reserve=pool.settlement_reserve,
            )
            raise ReservesEmpty(
                f"settlement reserve {pool.settlement_reserve} cannot cover {gross_out}"
            )
        new_settlement = S(pool.settlement_reserve) - S(gross_out)
        split = split_fee(gross_out, self.fee_percent)

        return SwapResult(
            is_buy=False,
            amount_in=tokens_in,
            amount_out=split.net,
            fee=split.fee,
            settlement_reserve=new_settlement.value,
            token_reserve=new_token.value,
        )

    def quote_buy(self, pool: Pool, settlement_in: int) -> int:
        """Tokens the curve prices for ``settlement_in``, ignoring fees.

        Reserves are not checked: a pool with no tokens quotes 0.
        """
        return self.get_amount_out(
            settlement_in,
            self.virtual_settlement_reserve(pool.settlement_reserve),
            pool.token_reserve,
        )

    def quote_sell(self, pool: Pool, tokens_in: int) -> int:
        """Settlement the curve prices for ``tokens_in``, ignoring fees.

        Reserves are not checked and the result is not capped by the real
        settlement reserve.
        On a drained pool any sell quotes the whole bootstrap offset, while
        the matching swap raises ReservesEmpty.
        """
        return self.get_amount_out(
            tokens_in,
            pool.token_reserve,
            self.virtual_settlement_reserve(pool.settlement_reserve),
        )


__all__ = [
    "BondingCurve",
]

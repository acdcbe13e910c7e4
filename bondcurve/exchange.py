"""Bonding-curve exchange: pool lifecycle, swaps and fee routing.

The Exchange is the entry point for every operation. It owns the pool
registry and the fee vault, prices swaps with a BondingCurve and publishes
events to an EventSink.

Each public method is all-or-nothing: it validates and computes every new
value first and only then mutates state, so a raised ExchangeError leaves
pools and vault untouched. The exchange does no locking of its own; callers
that share an instance across threads must serialize calls (see the API).
"""

from __future__ import annotations

import uuid

import structlog

from bondcurve.admin import AdminCap, mint_admin_cap, require_admin
from bondcurve.amm.base import SwapResult
from bondcurve.amm.bonding_curve import BondingCurve
from bondcurve.constants import MAX_POOL_VALUE
from bondcurve.errors import IncorrectAmount, PoolAlreadyExists, PoolFull, TradingDisabled
from bondcurve.events import (
    EventSink,
    LoggingEventSink,
    PoolCreated,
    PoolMigrated,
    SwapExecuted,
)
from bondcurve.fees.config import DEFAULT_EXCHANGE_CONFIG, ExchangeConfig
from bondcurve.fees.vault import FeeVault
from bondcurve.pools.pool import Pool, normalize_token_type
from bondcurve.pools.registry import PoolRegistry
from bondcurve.safe_int import S
from bondcurve.tokens import validate_decimals

logger = structlog.get_logger()

# Sender recorded in events when the caller does not identify itself
ANONYMOUS_SENDER = "0x0"


class Exchange:
    """Bonding-curve exchange holding all pools and the shared fee vault.

    Use ``Exchange.initialize()`` to get an exchange together with its one
    AdminCap. An exchange built directly has no capability until
    ``mint_admin_cap`` is called for it, which works only once.

    Args:
        config: Pricing and fee parameters. Uses DEFAULT_EXCHANGE_CONFIG if not provided.
        event_sink: Receiver for published events. Defaults to LoggingEventSink.
    """

    def __init__(
        self,
        config: ExchangeConfig | None = None,
        event_sink: EventSink | None = None,
    ) -> None:
        self.config = config or DEFAULT_EXCHANGE_CONFIG
        self.event_sink: EventSink = event_sink or LoggingEventSink()
        self.exchange_id = uuid.uuid4().hex
        self.curve = BondingCurve(
            bootstrap_offset=self.config.bootstrap_offset,
            fee_percent=self.config.swap_fee_percent,
        )
        self.vault = FeeVault(creation_fee=self.config.creation_fee)
        self.registry = PoolRegistry()
        # Set once the exchange's AdminCap exists
        self.admin_cap_minted = False

    @classmethod
    def initialize(
        cls,
        config: ExchangeConfig | None = None,
        event_sink: EventSink | None = None,
    ) -> tuple[Exchange, AdminCap]:
        """Create an exchange and mint its admin capability.

        Returns:
            Tuple of (exchange, admin_cap). The cap is the only one that
            will ever authorize privileged calls on this exchange.
        """
        exchange = cls(config=config, event_sink=event_sink)
        cap = mint_admin_cap(exchange)
        logger.info(
            "exchange_initialized",
            exchange_id=exchange.exchange_id,
            creation_fee=exchange.config.creation_fee,
            bootstrap_offset=exchange.config.bootstrap_offset,
        )
        return exchange, cap

    # --- Reads ---

    def get_pool(self, token_type: str) -> Pool:
        """Return the live pool for a token type.

        Raises:
            PoolNotFound: If no pool exists for the token type
        """
        return self.registry.get_pool(token_type)

    def quote_settlement_for_token(self, token_type: str, settlement_in: int) -> int:
        """Tokens the curve currently prices for ``settlement_in`` (no fee)."""
        return self.curve.quote_buy(self.get_pool(token_type), settlement_in)

    def quote_token_for_settlement(self, token_type: str, tokens_in: int) -> int:
        """Settlement the curve currently prices for ``tokens_in`` (no fee).

        Not capped by the real settlement reserve: see BondingCurve.quote_sell.
        """
        return self.curve.quote_sell(self.get_pool(token_type), tokens_in)

    # --- Pool creation ---

    def create(
        self,
        token_type: str,
        token_amount: int,
        settlement_amount: int,
        *,
        decimals: int | None = None,
        sender: str = ANONYMOUS_SENDER,
    ) -> Pool:
        """Create a pool from the full token supply and a settlement deposit.

        The creation fee is taken from the settlement deposit; the remainder
        becomes the opening settlement reserve.

        Args:
            token_type: Identity of the traded token
            token_amount: Token deposit, must equal the required supply
            settlement_amount: Settlement deposit, must exceed the creation fee
            decimals: Token decimals (defaults to the configured convention)
            sender: Actor recorded in the PoolCreated event

        Returns:
            The newly registered pool

        Raises:
            InvalidTokenType: If token_type is blank
            PoolFull: If either amount is at or above MAX_POOL_VALUE
            IncorrectDecimalMetadata: If decimals is not the configured value
            IncorrectAmount: If token_amount != required supply or
                settlement_amount <= creation fee
            PoolAlreadyExists: If the token already has a pool
        """
        token_type = self._validate_creation(token_type, token_amount, settlement_amount, decimals)
        fee = self.vault.creation_fee
        self.vault.balance_after_deposit(fee)

        pool = Pool(
            token_type=token_type,
            settlement_reserve=settlement_amount - fee,
            token_reserve=token_amount,
        )

        self.vault.deposit(fee)
        self.registry.add_pool(pool)
        self._publish_created(pool, sender)
        return pool

    def create_and_seed(
        self,
        token_type: str,
        token_amount: int,
        settlement_amount: int,
        *,
        decimals: int | None = None,
        sender: str = ANONYMOUS_SENDER,
    ) -> int:
        """Create a pool and make the creator its first buyer, atomically.

        The pool opens with a settlement reserve of ``seed_reserve`` (one
        base unit). Everything left of the deposit after the creation fee
        and the seed reserve is swapped into the pool before the pool is
        registered, so nobody can trade ahead of the creator.

        Returns:
            Tokens paid out to the creator by the seed swap

        Raises:
            Same as create(), plus IncorrectAmount when nothing is left to
            swap after the creation fee and seed reserve.
        """
        token_type = self._validate_creation(token_type, token_amount, settlement_amount, decimals)
        fee = self.vault.creation_fee
        seed_reserve = self.config.seed_reserve

        remaining = S(settlement_amount) - S(fee)
        if remaining <= seed_reserve:
            raise IncorrectAmount(
                f"settlement {settlement_amount} leaves nothing to swap after fee and seed reserve"
            )
        swap_amount = (remaining - S(seed_reserve)).value

        pool = Pool(
            token_type=token_type,
            settlement_reserve=seed_reserve,
            token_reserve=token_amount,
        )
        self._check_swap(pool, swap_amount)
        result = self.curve.simulate_buy(pool, swap_amount)
        self.vault.balance_after_deposit(fee + result.fee)

        self.vault.deposit(fee + result.fee)
        self.registry.add_pool(pool)
        self._publish_created(pool, sender)
        self._commit_swap(pool, result, sender, fee_deposited=True)
        return result.amount_out

    # --- Liquidity ---

    def add_liquidity(
        self,
        token_type: str,
        settlement_amount: int,
        token_amount: int,
        *,
        sender: str = ANONYMOUS_SENDER,
    ) -> None:
        """Top up both reserves of a pool.

        Deposits are not tracked per depositor: there are no LP shares and
        only the admin can take liquidity back out.

        Raises:
            IncorrectAmount: If either amount is zero
            PoolFull: If a resulting reserve would reach MAX_POOL_VALUE
        """
        if settlement_amount <= 0 or token_amount <= 0:
            raise IncorrectAmount(
                f"liquidity amounts must be positive: {settlement_amount}, {token_amount}"
            )
        pool = self.get_pool(token_type)

        new_settlement = S(pool.settlement_reserve) + S(settlement_amount)
        new_token = S(pool.token_reserve) + S(token_amount)
        if new_settlement >= MAX_POOL_VALUE or new_token >= MAX_POOL_VALUE:
            raise PoolFull(f"liquidity would push pool {pool.pool_id} to the ceiling")

        pool.settlement_reserve = new_settlement.value
        pool.token_reserve = new_token.value
        logger.info(
            "liquidity_added",
            pool_id=pool.pool_id,
            sender=sender,
            settlement_amount=settlement_amount,
            token_amount=token_amount,
        )

    def remove_liquidity(
        self,
        cap: AdminCap | None,
        token_type: str,
        *,
        sender: str = ANONYMOUS_SENDER,
    ) -> tuple[int, int]:
        """Drain a pool's entire reserves (e.g. to migrate to another venue).

        Returns:
            Tuple of (settlement_amount, token_amount) removed

        Raises:
            InvalidCapability: If cap is not this exchange's admin capability
        """
        require_admin(cap, self.exchange_id)
        pool = self.get_pool(token_type)

        settlement_amount, token_amount = pool.drain()
        logger.info(
            "liquidity_removed",
            pool_id=pool.pool_id,
            sender=sender,
            settlement_amount=settlement_amount,
            token_amount=token_amount,
        )
        self.event_sink.publish(
            PoolMigrated(
                pool_id=pool.pool_id,
                sender=sender,
                settlement_amount=settlement_amount,
                token_amount=token_amount,
            )
        )
        return settlement_amount, token_amount

    # --- Swaps ---

    def swap_settlement_for_token(
        self,
        token_type: str,
        settlement_in: int,
        *,
        sender: str = ANONYMOUS_SENDER,
    ) -> int:
        """Buy tokens with settlement; 1% of the input goes to the vault first.

        Returns:
            Tokens paid out

        Raises:
            IncorrectAmount: If settlement_in is zero
            TradingDisabled: If trading is off for the pool
            ReservesEmpty: If either reserve is zero
            PoolFull: If the settlement reserve would reach MAX_POOL_VALUE
        """
        pool = self.get_pool(token_type)
        self._check_swap(pool, settlement_in)
        result = self.curve.simulate_buy(pool, settlement_in)
        self._commit_swap(pool, result, sender)
        return result.amount_out

    def swap_token_for_settlement(
        self,
        token_type: str,
        tokens_in: int,
        *,
        sender: str = ANONYMOUS_SENDER,
    ) -> int:
        """Sell tokens for settlement; 1% of the priced output goes to the vault.

        Returns:
            Settlement paid out, after the fee

        Raises:
            IncorrectAmount: If tokens_in is zero
            TradingDisabled: If trading is off for the pool
            ReservesEmpty: If either reserve is zero or cannot cover the output
            PoolFull: If the token reserve would reach MAX_POOL_VALUE
        """
        pool = self.get_pool(token_type)
        self._check_swap(pool, tokens_in)
        result = self.curve.simulate_sell(pool, tokens_in)
        self._commit_swap(pool, result, sender)
        return result.amount_out

    # --- Admin ---

    def set_trading_enabled(
        self,
        cap: AdminCap | None,
        token_type: str,
        enabled: bool,
        *,
        sender: str = ANONYMOUS_SENDER,
    ) -> None:
        require_admin(cap, self.exchange_id)
        pool = self.get_pool(token_type)
        pool.trading_enabled = enabled
        logger.info("trading_toggled", pool_id=pool.pool_id, sender=sender, enabled=enabled)

    def withdraw_fees(self, cap: AdminCap | None, *, sender: str = ANONYMOUS_SENDER) -> int:
        """Withdraw the whole fee balance.

        Raises:
            InvalidCapability: If cap is not this exchange's admin capability
        """
        require_admin(cap, self.exchange_id)
        amount = self.vault.withdraw_all()
        logger.info("fees_withdrawn", sender=sender, amount=amount)
        return amount

    def set_creation_fee(self, cap: AdminCap | None, fee: int) -> None:
        require_admin(cap, self.exchange_id)
        self.vault.set_creation_fee(fee)

    # --- Internals ---

    def _validate_creation(
        self,
        token_type: str,
        token_amount: int,
        settlement_amount: int,
        decimals: int | None,
    ) -> str:
        token_type = normalize_token_type(token_type)
        if token_amount >= MAX_POOL_VALUE or settlement_amount >= MAX_POOL_VALUE:
            raise PoolFull("creation amounts must stay below the pool ceiling")
        validate_decimals(
            self.config.token_decimals if decimals is None else decimals,
            self.config.token_decimals,
        )
        if token_amount != self.config.required_supply:
            raise IncorrectAmount(
                f"token deposit must be {self.config.required_supply}, got {token_amount}"
            )
        if settlement_amount <= self.vault.creation_fee:
            raise IncorrectAmount(
                f"settlement deposit {settlement_amount} must exceed creation fee "
                f"{self.vault.creation_fee}"
            )
        if self.registry.has_pool(token_type):
            raise PoolAlreadyExists(f"pool already exists for {token_type}")
        return token_type

    def _check_swap(self, pool: Pool, amount_in: int) -> None:
        if not 0 < amount_in <= MAX_POOL_VALUE:
            raise IncorrectAmount(f"swap amount out of range: {amount_in}")
        if not pool.trading_enabled:
            raise TradingDisabled(f"trading is disabled for pool {pool.pool_id}")

    def _commit_swap(
        self,
        pool: Pool,
        result: SwapResult,
        sender: str,
        *,
        fee_deposited: bool = False,
    ) -> None:
        if not fee_deposited:
            self.vault.balance_after_deposit(result.fee)
            self.vault.deposit(result.fee)
        pool.apply_swap(result)

        logger.info(
            "swap_executed",
            pool_id=pool.pool_id,
            is_buy=result.is_buy,
            amount_in=result.amount_in,
            amount_out=result.amount_out,
            fee=result.fee,
        )
        self.event_sink.publish(
            SwapExecuted(
                pool_id=pool.pool_id,
                sender=sender,
                is_buy=result.is_buy,
                settlement_amount=result.settlement_amount,
                token_amount=result.token_amount,
                fee=result.fee,
            )
        )

    def _publish_created(self, pool: Pool, sender: str) -> None:
        logger.info(
            "pool_created",
            pool_id=pool.pool_id,
            token_type=pool.token_type,
            settlement_reserve=pool.settlement_reserve,
            token_reserve=pool.token_reserve,
        )
        self.event_sink.publish(
            PoolCreated(
                pool_id=pool.pool_id,
                sender=sender,
                token_type=pool.token_type,
                settlement_amount=pool.settlement_reserve,
                token_amount=pool.token_reserve,
            )
        )

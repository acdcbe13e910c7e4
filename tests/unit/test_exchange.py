"""Tests for pool creation, liquidity and admin operations on the Exchange."""

import pytest

from bondcurve.constants import MAX_POOL_VALUE
from bondcurve.errors import (
    ExchangeError,
    IncorrectAmount,
    IncorrectDecimalMetadata,
    InvalidCapability,
    InvalidTokenType,
    PoolAlreadyExists,
    PoolFull,
    PoolNotFound,
    ReservesEmpty,
)
from bondcurve.events import RecordingEventSink
from bondcurve.exchange import ANONYMOUS_SENDER, Exchange
from bondcurve.fees import ExchangeConfig
from bondcurve.pools import derive_pool_id
from tests.helpers import (
    ALICE,
    BOB,
    CREATION_FEE,
    MEME,
    PEPE,
    SUPPLY,
    UNIT,
    launch_pool,
    snapshot,
)


class TestCreate:
    """Tests for Exchange.create."""

    def test_fee_split_from_deposit(self, exchange, sink):
        pool = exchange.create(MEME, SUPPLY, CREATION_FEE + 10 * UNIT, sender=ALICE)

        assert pool.settlement_reserve == 10 * UNIT
        assert pool.token_reserve == SUPPLY
        assert pool.trading_enabled
        assert pool.pool_id == derive_pool_id(MEME)
        assert exchange.vault.settlement_fee_balance == CREATION_FEE
        assert exchange.get_pool(MEME) is pool

        (event,) = sink.events
        assert event.kind == "pool_created"
        assert event.sender == ALICE
        assert event.token_type == MEME
        assert event.settlement_amount == 10 * UNIT
        assert event.token_amount == SUPPLY

    def test_one_above_fee_is_enough(self, exchange):
        pool = exchange.create(MEME, SUPPLY, CREATION_FEE + 1)
        assert pool.settlement_reserve == 1

    def test_token_one_below_supply_rejected(self, exchange):
        with pytest.raises(IncorrectAmount):
            exchange.create(MEME, SUPPLY - 1, CREATION_FEE + UNIT)

    def test_token_above_supply_rejected(self, exchange):
        with pytest.raises(IncorrectAmount):
            exchange.create(MEME, SUPPLY + 1, CREATION_FEE + UNIT)

    def test_settlement_equal_to_fee_rejected(self, exchange):
        """The deposit must be strictly greater than the creation fee."""
        with pytest.raises(IncorrectAmount):
            exchange.create(MEME, SUPPLY, CREATION_FEE)

    def test_amounts_at_ceiling_rejected(self, exchange):
        with pytest.raises(PoolFull):
            exchange.create(MEME, SUPPLY, MAX_POOL_VALUE)
        with pytest.raises(PoolFull):
            exchange.create(MEME, MAX_POOL_VALUE, CREATION_FEE + 1)

    def test_wrong_decimals_rejected(self, exchange):
        with pytest.raises(IncorrectDecimalMetadata):
            exchange.create(MEME, SUPPLY, CREATION_FEE + UNIT, decimals=6)

    def test_duplicate_rejected(self, exchange, pool):
        before = snapshot(exchange)
        with pytest.raises(PoolAlreadyExists):
            exchange.create(MEME, SUPPLY, CREATION_FEE + UNIT)
        assert snapshot(exchange) == before

    @pytest.mark.parametrize("token_type", ["", "   "])
    def test_blank_token_type_rejected(self, exchange, sink, token_type):
        with pytest.raises(InvalidTokenType) as exc_info:
            exchange.create(token_type, SUPPLY, CREATION_FEE + UNIT)
        assert isinstance(exc_info.value, ExchangeError)
        assert exchange.vault.settlement_fee_balance == 0
        assert sink.events == []

    def test_blank_token_type_lookup(self, exchange):
        with pytest.raises(InvalidTokenType):
            exchange.get_pool("  ")
        with pytest.raises(InvalidTokenType):
            exchange.swap_settlement_for_token(" ", UNIT)

    def test_failed_creation_changes_nothing(self, exchange, sink):
        with pytest.raises(IncorrectAmount):
            exchange.create(MEME, SUPPLY - 1, CREATION_FEE + UNIT)
        assert not exchange.registry.has_pool(MEME)
        assert exchange.vault.settlement_fee_balance == 0
        assert sink.events == []

    def test_default_sender(self, exchange, sink):
        launch_pool(exchange)
        assert sink.events[0].sender == ANONYMOUS_SENDER

    def test_custom_config(self):
        config = ExchangeConfig(creation_fee=5 * UNIT, required_supply=1_000)
        exchange, _ = Exchange.initialize(config=config, event_sink=RecordingEventSink())
        pool = exchange.create(MEME, 1_000, 6 * UNIT)
        assert pool.settlement_reserve == UNIT
        assert exchange.vault.settlement_fee_balance == 5 * UNIT


class TestCreateAndSeed:
    """Tests for atomic creation with the creator's first buy."""

    def test_seed_swap(self, exchange, sink):
        tokens_out = exchange.create_and_seed(
            MEME, SUPPLY, CREATION_FEE + 1 + 1_000 * UNIT, sender=ALICE
        )

        # floor(990e9 * 1e18 / (1 + 4200e9 + 990e9))
        assert tokens_out == 190_751_445_086_668_448
        pool = exchange.get_pool(MEME)
        assert pool.settlement_reserve == 1 + 990 * UNIT
        assert pool.token_reserve == SUPPLY - tokens_out
        assert exchange.vault.settlement_fee_balance == CREATION_FEE + 10 * UNIT

    def test_seed_events(self, exchange, sink):
        tokens_out = exchange.create_and_seed(
            MEME, SUPPLY, CREATION_FEE + 1 + 1_000 * UNIT, sender=ALICE
        )

        created, swapped = sink.events
        assert created.kind == "pool_created"
        assert created.settlement_amount == 1
        assert created.token_amount == SUPPLY
        assert swapped.kind == "swap_executed"
        assert swapped.is_buy
        assert swapped.sender == ALICE
        assert swapped.settlement_amount == 1_000 * UNIT
        assert swapped.token_amount == tokens_out
        assert swapped.fee == 10 * UNIT

    def test_seed_equals_manual_buy_on_one_unit_pool(self, exchange):
        """Seeding prices exactly like a buy against a pool holding 1 base unit."""
        other, _ = Exchange.initialize(event_sink=RecordingEventSink())
        other.create(MEME, SUPPLY, CREATION_FEE + 1)
        expected = other.swap_settlement_for_token(MEME, 500 * UNIT)

        assert exchange.create_and_seed(MEME, SUPPLY, CREATION_FEE + 1 + 500 * UNIT) == expected
        assert snapshot(exchange) == snapshot(other)

    def test_smallest_seed(self, exchange):
        """One base unit left to swap pays no fee and still buys tokens."""
        tokens_out = exchange.create_and_seed(MEME, SUPPLY, CREATION_FEE + 2)
        assert tokens_out == SUPPLY // (4_200 * UNIT + 2)
        assert exchange.vault.settlement_fee_balance == CREATION_FEE

    def test_nothing_left_to_swap_rejected(self, exchange, sink):
        with pytest.raises(IncorrectAmount):
            exchange.create_and_seed(MEME, SUPPLY, CREATION_FEE + 1)
        assert not exchange.registry.has_pool(MEME)
        assert exchange.vault.settlement_fee_balance == 0
        assert sink.events == []

    def test_same_validation_as_create(self, exchange):
        with pytest.raises(IncorrectAmount):
            exchange.create_and_seed(MEME, SUPPLY - 1, CREATION_FEE + UNIT)
        with pytest.raises(IncorrectAmount):
            exchange.create_and_seed(MEME, SUPPLY, CREATION_FEE)
        with pytest.raises(IncorrectDecimalMetadata):
            exchange.create_and_seed(MEME, SUPPLY, CREATION_FEE + UNIT, decimals=18)

    def test_duplicate_rejected(self, exchange, pool):
        with pytest.raises(PoolAlreadyExists):
            exchange.create_and_seed(MEME, SUPPLY, CREATION_FEE + UNIT)


class TestAddLiquidity:
    def test_tops_up_both_reserves(self, exchange, pool):
        exchange.add_liquidity(MEME, 5 * UNIT, 1_000, sender=BOB)
        assert pool.settlement_reserve == 6 * UNIT
        assert pool.token_reserve == SUPPLY + 1_000

    @pytest.mark.parametrize("settlement,tokens", [(0, 1), (1, 0), (0, 0)])
    def test_zero_amount_rejected(self, exchange, pool, settlement, tokens):
        before = snapshot(exchange)
        with pytest.raises(IncorrectAmount):
            exchange.add_liquidity(MEME, settlement, tokens)
        assert snapshot(exchange) == before

    def test_ceiling_rejected(self, exchange, pool):
        before = snapshot(exchange)
        with pytest.raises(PoolFull):
            exchange.add_liquidity(MEME, 1, MAX_POOL_VALUE - SUPPLY)
        with pytest.raises(PoolFull):
            exchange.add_liquidity(MEME, MAX_POOL_VALUE - UNIT, 1)
        assert snapshot(exchange) == before

    def test_just_below_ceiling_allowed(self, exchange, pool):
        exchange.add_liquidity(MEME, 1, MAX_POOL_VALUE - SUPPLY - 1)
        assert pool.token_reserve == MAX_POOL_VALUE - 1

    def test_unknown_pool(self, exchange):
        with pytest.raises(PoolNotFound):
            exchange.add_liquidity(PEPE, 1, 1)


class TestRemoveLiquidity:
    def test_drains_everything(self, exchange, admin_cap, pool, sink):
        exchange.swap_settlement_for_token(MEME, 100 * UNIT)
        settlement, tokens = pool.settlement_reserve, pool.token_reserve

        assert exchange.remove_liquidity(admin_cap, MEME, sender=ALICE) == (settlement, tokens)
        assert pool.settlement_reserve == 0
        assert pool.token_reserve == 0
        # The pool object stays registered, just empty
        assert exchange.get_pool(MEME) is pool

        migrated = sink.of_kind("pool_migrated")
        assert len(migrated) == 1
        assert migrated[0].sender == ALICE
        assert migrated[0].settlement_amount == settlement
        assert migrated[0].token_amount == tokens

    def test_requires_cap(self, exchange, pool, sink):
        """Without a valid capability nothing moves."""
        before = snapshot(exchange)
        with pytest.raises(InvalidCapability):
            exchange.remove_liquidity(None, MEME)
        assert snapshot(exchange) == before
        assert sink.of_kind("pool_migrated") == []

    def test_cap_of_other_exchange_rejected(self, exchange, pool):
        _, other_cap = Exchange.initialize(event_sink=RecordingEventSink())
        before = snapshot(exchange)
        with pytest.raises(InvalidCapability):
            exchange.remove_liquidity(other_cap, MEME)
        assert snapshot(exchange) == before

    def test_swaps_fail_after_removal(self, exchange, admin_cap, pool):
        exchange.remove_liquidity(admin_cap, MEME)
        with pytest.raises(ReservesEmpty):
            exchange.swap_settlement_for_token(MEME, UNIT)
        with pytest.raises(ReservesEmpty):
            exchange.swap_token_for_settlement(MEME, UNIT)

    def test_fees_stay_in_vault(self, exchange, admin_cap, pool):
        exchange.swap_settlement_for_token(MEME, 100 * UNIT)
        fees = exchange.vault.settlement_fee_balance
        exchange.remove_liquidity(admin_cap, MEME)
        assert exchange.vault.settlement_fee_balance == fees


class TestAdminOperations:
    def test_toggle_trading(self, exchange, admin_cap, pool):
        exchange.set_trading_enabled(admin_cap, MEME, False)
        assert not pool.trading_enabled
        exchange.set_trading_enabled(admin_cap, MEME, True)
        assert pool.trading_enabled

    def test_toggle_requires_cap(self, exchange, pool):
        with pytest.raises(InvalidCapability):
            exchange.set_trading_enabled(None, MEME, False)
        assert pool.trading_enabled

    def test_withdraw_fees(self, exchange, admin_cap, pool):
        exchange.swap_settlement_for_token(MEME, 100 * UNIT)
        assert exchange.withdraw_fees(admin_cap) == CREATION_FEE + UNIT
        assert exchange.vault.settlement_fee_balance == 0

    def test_withdraw_requires_cap(self, exchange, pool):
        with pytest.raises(InvalidCapability):
            exchange.withdraw_fees(None)
        assert exchange.vault.settlement_fee_balance == CREATION_FEE

    def test_set_creation_fee(self, exchange, admin_cap):
        exchange.set_creation_fee(admin_cap, 3 * UNIT)
        with pytest.raises(IncorrectAmount):
            exchange.create(MEME, SUPPLY, 3 * UNIT)
        pool = exchange.create(MEME, SUPPLY, 4 * UNIT)
        assert pool.settlement_reserve == UNIT
        assert exchange.vault.settlement_fee_balance == 3 * UNIT

    def test_set_creation_fee_requires_cap(self, exchange):
        with pytest.raises(InvalidCapability):
            exchange.set_creation_fee(None, 0)
        assert exchange.vault.creation_fee == CREATION_FEE

    def test_one_cap_governs_every_pool(self, exchange, admin_cap):
        launch_pool(exchange, MEME)
        launch_pool(exchange, PEPE)
        exchange.set_trading_enabled(admin_cap, MEME, False)
        exchange.set_trading_enabled(admin_cap, PEPE, False)
        assert not exchange.get_pool(MEME).trading_enabled
        assert not exchange.get_pool(PEPE).trading_enabled

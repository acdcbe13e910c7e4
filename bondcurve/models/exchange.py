"""Pydantic request/response models for the exchange API.

Field names are camelCase on the wire and snake_case in Python.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from bondcurve.constants import TOKEN_DECIMALS
from bondcurve.exchange import ANONYMOUS_SENDER
from bondcurve.fees.vault import FeeVault
from bondcurve.models.types import TokenType, Uint64
from bondcurve.pools.pool import Pool


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SwapDirection(str, Enum):
    """Which asset the trader pays in."""

    BUY = "buy"  # settlement -> token
    SELL = "sell"  # token -> settlement


# =============================================================================
# Requests
# =============================================================================


class CreatePoolRequest(ApiModel):
    token_type: TokenType
    token_amount: Uint64
    settlement_amount: Uint64
    decimals: int = TOKEN_DECIMALS
    seed: bool = Field(
        default=False,
        description="Swap the rest of the deposit into the pool in the same call.",
    )
    sender: str = ANONYMOUS_SENDER


class AddLiquidityRequest(ApiModel):
    settlement_amount: Uint64
    token_amount: Uint64
    sender: str = ANONYMOUS_SENDER


class SwapRequest(ApiModel):
    direction: SwapDirection
    amount: Uint64 = Field(description="Amount paid in, in the direction's input asset")
    sender: str = ANONYMOUS_SENDER


class TradingRequest(ApiModel):
    enabled: bool
    sender: str = ANONYMOUS_SENDER


# =============================================================================
# Responses
# =============================================================================


class PoolState(ApiModel):
    pool_id: str
    token_type: str
    settlement_reserve: Uint64
    token_reserve: Uint64
    trading_enabled: bool

    @classmethod
    def from_pool(cls, pool: Pool) -> PoolState:
        return cls(
            pool_id=pool.pool_id,
            token_type=pool.token_type,
            settlement_reserve=pool.settlement_reserve,
            token_reserve=pool.token_reserve,
            trading_enabled=pool.trading_enabled,
        )


class CreatePoolResponse(ApiModel):
    pool: PoolState
    # Only set for seeded creation
    tokens_out: Uint64 | None = None


class SwapResponse(ApiModel):
    direction: SwapDirection
    amount_in: Uint64
    amount_out: Uint64


class QuoteResponse(ApiModel):
    direction: SwapDirection
    amount_in: Uint64
    amount_out: Uint64


class RemoveLiquidityResponse(ApiModel):
    settlement_amount: Uint64
    token_amount: Uint64


class FeeVaultState(ApiModel):
    settlement_fee_balance: Uint64
    creation_fee: Uint64

    @classmethod
    def from_vault(cls, vault: FeeVault) -> FeeVaultState:
        return cls(
            settlement_fee_balance=vault.settlement_fee_balance,
            creation_fee=vault.creation_fee,
        )


class WithdrawFeesResponse(ApiModel):
    amount: Uint64


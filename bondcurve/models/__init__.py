"""Pydantic models for the exchange API."""

from bondcurve.models.exchange import (
    AddLiquidityRequest,
    CreatePoolRequest,
    CreatePoolResponse,
    FeeVaultState,
    PoolState,
    QuoteResponse,
    RemoveLiquidityResponse,
    SwapDirection,
    SwapRequest,
    SwapResponse,
    TradingRequest,
    WithdrawFeesResponse,
)
from bondcurve.models.types import TokenType, Uint64

__all__ = [
    # Types
    "TokenType",
    "Uint64",
    # Requests
    "CreatePoolRequest",
    "AddLiquidityRequest",
    "SwapRequest",
    "SwapDirection",
    "TradingRequest",
    # Responses
    "PoolState",
    "CreatePoolResponse",
    "SwapResponse",
    "QuoteResponse",
    "RemoveLiquidityResponse",
    "FeeVaultState",
    "WithdrawFeesResponse",
]

"""API endpoints for the bonding-curve exchange."""

from __future__ import annotations

import os
import secrets
import threading
from dataclasses import dataclass, field

import structlog
from fastapi import APIRouter, Depends, Header, Query

from bondcurve.admin import AdminCap
from bondcurve.constants import DEFAULT_CREATION_FEE
from bondcurve.events import EventSink
from bondcurve.exchange import ANONYMOUS_SENDER, Exchange
from bondcurve.fees.config import ExchangeConfig
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
from bondcurve.safe_int import U64_MAX

logger = structlog.get_logger()

router = APIRouter()

# Shared secret for admin endpoints; admin calls always fail when unset
ADMIN_TOKEN = os.environ.get("BONDCURVE_ADMIN_TOKEN")

# Creation fee the default exchange starts with, in settlement base units
CREATION_FEE = int(os.environ.get("BONDCURVE_CREATION_FEE", str(DEFAULT_CREATION_FEE)))


@dataclass
class ExchangeService:
    """An exchange, its admin capability and the lock serializing calls.

    The exchange core assumes calls never interleave. Endpoints run in a
    thread pool, so every engine call goes through ``lock``.
    """

    exchange: Exchange
    admin_cap: AdminCap
    admin_token: str | None = None
    lock: threading.Lock = field(default_factory=threading.Lock)

    @classmethod
    def create(
        cls,
        config: ExchangeConfig | None = None,
        admin_token: str | None = None,
        event_sink: EventSink | None = None,
    ) -> ExchangeService:
        exchange, admin_cap = Exchange.initialize(config=config, event_sink=event_sink)
        return cls(exchange=exchange, admin_cap=admin_cap, admin_token=admin_token)

    def cap_for(self, token: str | None) -> AdminCap | None:
        """Hand out the admin capability only for a matching admin token."""
        if not self.admin_token or not token:
            return None
        if not secrets.compare_digest(token, self.admin_token):
            logger.warning("admin_token_mismatch")
            return None
        return self.admin_cap


_default_service: ExchangeService | None = None
_default_service_lock = threading.Lock()


def get_default_service() -> ExchangeService:
    """Lazily create the process-wide exchange service."""
    global _default_service
    with _default_service_lock:
        if _default_service is None:
            _default_service = ExchangeService.create(
                config=ExchangeConfig(creation_fee=CREATION_FEE),
                admin_token=ADMIN_TOKEN,
            )
        return _default_service


def get_service() -> ExchangeService:
    """Dependency provider for the exchange service.

    Override this in tests to inject a fresh service:
        app.dependency_overrides[get_service] = lambda: service
    """
    return get_default_service()


@router.post("/pools", response_model_exclude_none=True)
def create_pool(
    request: CreatePoolRequest,
    service: ExchangeService = Depends(get_service),
) -> CreatePoolResponse:
    """Create a pool, optionally with an atomic seed swap by the creator."""
    token_amount = int(request.token_amount)
    settlement_amount = int(request.settlement_amount)

    with service.lock:
        exchange = service.exchange
        if request.seed:
            tokens_out = exchange.create_and_seed(
                request.token_type,
                token_amount,
                settlement_amount,
                decimals=request.decimals,
                sender=request.sender,
            )
            pool = exchange.get_pool(request.token_type)
            return CreatePoolResponse(pool=PoolState.from_pool(pool), tokens_out=str(tokens_out))

        pool = exchange.create(
            request.token_type,
            token_amount,
            settlement_amount,
            decimals=request.decimals,
            sender=request.sender,
        )
        return CreatePoolResponse(pool=PoolState.from_pool(pool))


@router.get("/pools/{token_type}")
def get_pool(
    token_type: str,
    service: ExchangeService = Depends(get_service),
) -> PoolState:
    with service.lock:
        return PoolState.from_pool(service.exchange.get_pool(token_type))


@router.post("/pools/{token_type}/liquidity", status_code=204)
def add_liquidity(
    token_type: str,
    request: AddLiquidityRequest,
    service: ExchangeService = Depends(get_service),
) -> None:
    with service.lock:
        service.exchange.add_liquidity(
            token_type,
            int(request.settlement_amount),
            int(request.token_amount),
            sender=request.sender,
        )


@router.delete("/pools/{token_type}/liquidity")
def remove_liquidity(
    token_type: str,
    x_admin_token: str | None = Header(default=None),
    sender: str = Query(default=ANONYMOUS_SENDER, description="Actor recorded in the event"),
    service: ExchangeService = Depends(get_service),
) -> RemoveLiquidityResponse:
    """Drain the pool for migration. Requires the admin token."""
    with service.lock:
        settlement_amount, token_amount = service.exchange.remove_liquidity(
            service.cap_for(x_admin_token), token_type, sender=sender
        )
    return RemoveLiquidityResponse(
        settlement_amount=str(settlement_amount),
        token_amount=str(token_amount),
    )


@router.post("/pools/{token_type}/swap")
def swap(
    token_type: str,
    request: SwapRequest,
    service: ExchangeService = Depends(get_service),
) -> SwapResponse:
    amount_in = int(request.amount)
    with service.lock:
        if request.direction == SwapDirection.BUY:
            amount_out = service.exchange.swap_settlement_for_token(
                token_type, amount_in, sender=request.sender
            )
        else:
            amount_out = service.exchange.swap_token_for_settlement(
                token_type, amount_in, sender=request.sender
            )
    return SwapResponse(
        direction=request.direction,
        amount_in=str(amount_in),
        amount_out=str(amount_out),
    )


@router.get("/pools/{token_type}/quote")
def quote(
    token_type: str,
    direction: SwapDirection,
    amount: int = Query(ge=0, le=U64_MAX, description="Amount paid in, in base units"),
    service: ExchangeService = Depends(get_service),
) -> QuoteResponse:
    """Estimate a swap's output from the curve alone (no fees, no state change)."""
    with service.lock:
        if direction == SwapDirection.BUY:
            amount_out = service.exchange.quote_settlement_for_token(token_type, amount)
        else:
            amount_out = service.exchange.quote_token_for_settlement(token_type, amount)
    return QuoteResponse(direction=direction, amount_in=str(amount), amount_out=str(amount_out))


@router.put("/pools/{token_type}/trading", status_code=204)
def set_trading(
    token_type: str,
    request: TradingRequest,
    x_admin_token: str | None = Header(default=None),
    service: ExchangeService = Depends(get_service),
) -> None:
    with service.lock:
        service.exchange.set_trading_enabled(
            service.cap_for(x_admin_token), token_type, request.enabled, sender=request.sender
        )


@router.get("/fees")
def get_fees(service: ExchangeService = Depends(get_service)) -> FeeVaultState:
    with service.lock:
        return FeeVaultState.from_vault(service.exchange.vault)


@router.post("/fees/withdraw")
def withdraw_fees(
    x_admin_token: str | None = Header(default=None),
    sender: str = Query(default=ANONYMOUS_SENDER),
    service: ExchangeService = Depends(get_service),
) -> WithdrawFeesResponse:
    with service.lock:
        amount = service.exchange.withdraw_fees(
            service.cap_for(x_admin_token), sender=sender
        )
    return WithdrawFeesResponse(amount=str(amount))

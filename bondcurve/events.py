"""Notifications published for off-chain observers.

The exchange publishes one event per pool creation, per swap and per full
liquidity removal (migration). Sinks are not needed for correctness: an
exchange with the default LoggingEventSink behaves exactly like one with a
RecordingEventSink.
"""

from __future__ import annotations

from typing import Literal, Protocol, runtime_checkable

import structlog
from pydantic import BaseModel, ConfigDict, Field

logger = structlog.get_logger()


class ExchangeEvent(BaseModel):
    """Fields shared by every event."""

    model_config = ConfigDict(frozen=True)

    pool_id: str = Field(description="Pool the event refers to")
    sender: str = Field(description="Actor that made the call")


class PoolCreated(ExchangeEvent):
    kind: Literal["pool_created"] = "pool_created"
    token_type: str
    # Reserves the pool opened with (after the creation fee)
    settlement_amount: int
    token_amount: int


class PoolMigrated(ExchangeEvent):
    """All liquidity was removed from a pool by the admin."""

    kind: Literal["pool_migrated"] = "pool_migrated"
    settlement_amount: int
    token_amount: int


class SwapExecuted(ExchangeEvent):
    kind: Literal["swap_executed"] = "swap_executed"
    # True for settlement -> token
    is_buy: bool
    settlement_amount: int
    token_amount: int
    fee: int


Event = PoolCreated | PoolMigrated | SwapExecuted


@runtime_checkable
class EventSink(Protocol):
    """Receives events after the operation that produced them committed."""

    def publish(self, event: Event) -> None: ...


class LoggingEventSink:
    """Writes each event to the structured log."""

    def publish(self, event: Event) -> None:
        logger.info(event.kind, **event.model_dump(exclude={"kind"}))


class RecordingEventSink:
    """Keeps events in memory, in publication order."""

    def __init__(self) -> None:
        self.events: list[Event] = []

    def publish(self, event: Event) -> None:
        self.events.append(event)

    def of_kind(self, kind: str) -> list[Event]:
        return [event for event in self.events if event.kind == kind]

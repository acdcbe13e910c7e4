"""Bonding-curve pool state.

A pool holds the real reserves of one traded token and the settlement
asset. The virtual bootstrap offset used for pricing is never stored here.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from bondcurve.errors import InvalidTokenType

if TYPE_CHECKING:
    from bondcurve.amm.base import SwapResult


def normalize_token_type(token_type: str) -> str:
    """Normalize a token type identifier (e.g. ``0xabc::meme::MEME``).

    Raises:
        InvalidTokenType: If token_type is empty or blank
    """
    normalized = token_type.strip()
    if not normalized:
        raise InvalidTokenType("token_type must be a non-empty string")
    return normalized


def derive_pool_id(token_type: str) -> str:
    """Deterministic pool id: 0x-prefixed sha256 of the token type."""
    digest = hashlib.sha256(normalize_token_type(token_type).encode("utf-8")).hexdigest()
    return "0x" + digest


@dataclass
class Pool:
    """Reserve pair for one token plus the trading gate."""

    token_type: str
    settlement_reserve: int = 0
    token_reserve: int = 0
    trading_enabled: bool = True
    pool_id: str = field(default="")

    def __post_init__(self) -> None:
        self.token_type = normalize_token_type(self.token_type)
        if not self.pool_id:
            self.pool_id = derive_pool_id(self.token_type)

    @property
    def has_reserves(self) -> bool:
        """True if both sides hold a non-zero balance."""
        return self.settlement_reserve > 0 and self.token_reserve > 0

    def apply_swap(self, result: SwapResult) -> None:
        """Commit the post-swap reserves computed by the curve."""
        self.settlement_reserve = result.settlement_reserve
        self.token_reserve = result.token_reserve

    def drain(self) -> tuple[int, int]:
        """Empty both reserves and return (settlement, token)."""
        amounts = (self.settlement_reserve, self.token_reserve)
        self.settlement_reserve = 0
        self.token_reserve = 0
        return amounts

"""Fee handling for the exchange.

This module provides:
- Swap fee splitting (1% by default, rounded down)
- The protocol FeeVault that accumulates creation and swap fees
- ExchangeConfig holding fee and pricing parameters

Usage:
    from bondcurve.fees import FeeVault, split_fee

    split = split_fee(25_000 * 10**9)
    vault = FeeVault()
    vault.deposit(split.fee)
"""

from bondcurve.fees.calculator import split_fee
from bondcurve.fees.config import DEFAULT_EXCHANGE_CONFIG, ExchangeConfig
from bondcurve.fees.result import FeeSplit
from bondcurve.fees.vault import FeeVault

__all__ = [
    # Calculator
    "split_fee",
    "FeeSplit",
    # Config
    "ExchangeConfig",
    "DEFAULT_EXCHANGE_CONFIG",
    # Vault
    "FeeVault",
]

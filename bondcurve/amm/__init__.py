"""AMM (Automated Market Maker) pricing."""

from bondcurve.amm.base import AMM, SwapResult
from bondcurve.amm.bonding_curve import BondingCurve

__all__ = [
    # Base classes
    "AMM",
    "SwapResult",
    # Bonding curve
    "BondingCurve",
]

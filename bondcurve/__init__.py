"""Bonding-curve AMM exchange engine."""

from bondcurve.admin import AdminCap
from bondcurve.exchange import Exchange

__version__ = "0.1.0"
__all__ = ["Exchange", "AdminCap", "__version__"]

"""Token metadata checks."""

from bondcurve.constants import TOKEN_DECIMALS
from bondcurve.errors import IncorrectDecimalMetadata


def validate_decimals(decimals: int, expected: int = TOKEN_DECIMALS) -> None:
    """Ensure a token uses the same fractional-unit convention as the curve.

    Supply and pricing constants assume 9 decimals.

    Raises:
        IncorrectDecimalMetadata: If decimals differs from expected
    """
    if decimals != expected:
        raise IncorrectDecimalMetadata(f"token must have {expected} decimals, got {decimals}")

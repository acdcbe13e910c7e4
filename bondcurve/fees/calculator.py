"""Swap fee calculation.

Uses SafeInt so the percentage product cannot silently go negative and the
results are checked to fit in u64.
"""

from bondcurve.constants import PERCENT_DENOMINATOR, SWAP_FEE_PERCENT
from bondcurve.fees.result import FeeSplit
from bondcurve.safe_int import S


def split_fee(amount: int, fee_percent: int = SWAP_FEE_PERCENT) -> FeeSplit:
    """Take ``fee_percent`` of ``amount`` as the protocol fee.

    The fee rounds down, so on small amounts the trader keeps the remainder:
        fee = floor(amount * fee_percent / 100), net = amount - fee

    Args:
        amount: Gross amount in base units (u64)
        fee_percent: Fee in whole percent

    Returns:
        FeeSplit with gross, fee and net amounts
    """
    gross = S(amount)
    fee = (gross * S(fee_percent)) // S(PERCENT_DENOMINATOR)
    net = gross - fee
    return FeeSplit(gross=gross.to_u64(), fee=fee.to_u64(), net=net.to_u64())

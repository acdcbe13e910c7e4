"""Exchange error classes.

Each error is a named abort: the call that raised it leaves no state
change behind and the caller must resubmit with corrected inputs.
"""


class ExchangeError(Exception):
    """Base error for exchange operations."""

    code = "exchange_error"


class IncorrectAmount(ExchangeError):
    """Amount is zero or outside what the operation allows."""

    code = "incorrect_amount"


class ReservesEmpty(ExchangeError):
    """Swap attempted against an empty (or insufficient) reserve."""

    code = "reserves_empty"


class PoolFull(ExchangeError):
    """A reserve or fee balance would reach the u64 ceiling."""

    code = "pool_full"


class TradingDisabled(ExchangeError):
    """Swap attempted while trading is switched off for the pool."""

    code = "trading_disabled"


class IncorrectDecimalMetadata(ExchangeError):
    """Token does not use the expected number of fractional digits."""

    code = "incorrect_decimal_metadata"


class InvalidCapability(ExchangeError):
    """Privileged call made without a valid admin capability."""

    code = "invalid_capability"


class PoolNotFound(ExchangeError):
    """No pool exists for the token type."""

    code = "pool_not_found"


class PoolAlreadyExists(ExchangeError):
    """A pool for the token type was already created."""

    code = "pool_already_exists"


class InvalidTokenType(ExchangeError):
    """Token type identifier is empty or blank."""

    code = "invalid_token_type"

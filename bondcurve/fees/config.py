"""Exchange configuration."""

from dataclasses import dataclass

from bondcurve.constants import (
    BOOTSTRAP_OFFSET,
    DEFAULT_CREATION_FEE,
    DEFAULT_SUPPLY,
    MAX_POOL_VALUE,
    PERCENT_DENOMINATOR,
    SEED_RESERVE,
    SWAP_FEE_PERCENT,
    TOKEN_DECIMALS,
)


@dataclass(frozen=True)
class ExchangeConfig:
    """Centralized configuration for pricing, fees and pool creation.

    Defaults come from constants.py; tests pass their own instance.

    Attributes:
        creation_fee: Initial flat fee charged per pool creation (default: 1 unit)
        swap_fee_percent: Fee taken on every swap, in whole percent (default: 1)
        bootstrap_offset: Virtual settlement reserve used for pricing (default: 4200 units)
        required_supply: Exact token deposit required to create a pool (default: 1B tokens)
        seed_reserve: Opening settlement reserve of a seeded pool (default: 1 base unit)
        token_decimals: Fractional digits a launched token must declare (default: 9)
    """

    creation_fee: int = DEFAULT_CREATION_FEE
    swap_fee_percent: int = SWAP_FEE_PERCENT
    bootstrap_offset: int = BOOTSTRAP_OFFSET
    required_supply: int = DEFAULT_SUPPLY
    seed_reserve: int = SEED_RESERVE
    token_decimals: int = TOKEN_DECIMALS

    def __post_init__(self) -> None:
        for name in ("creation_fee", "bootstrap_offset", "required_supply", "seed_reserve"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"{name} must be an int")
            if not 0 <= value < MAX_POOL_VALUE:
                raise ValueError(f"{name} must be in [0, {MAX_POOL_VALUE}): {value}")
        if not 0 <= self.swap_fee_percent < PERCENT_DENOMINATOR:
            raise ValueError(f"swap_fee_percent must be in [0, 100): {self.swap_fee_percent}")
        if self.required_supply == 0:
            raise ValueError("required_supply must be positive")
        if self.seed_reserve == 0:
            raise ValueError("seed_reserve must be positive")


# Default configuration instance
DEFAULT_EXCHANGE_CONFIG = ExchangeConfig()

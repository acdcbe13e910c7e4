"""Protocol constants for the bonding-curve exchange.

Centralizes the amounts and bounds shared by pricing, pools and the fee vault.
All amounts are in base units (1 whole unit = 10**9 base units).
"""

from bondcurve.safe_int import U64_MAX

# Reserves and fee balances must stay strictly below this ceiling
MAX_POOL_VALUE = U64_MAX

# Both the settlement asset and launched tokens use 9 fractional digits
SETTLEMENT_DECIMALS = 9
TOKEN_DECIMALS = 9
UNIT = 10**SETTLEMENT_DECIMALS

# Every pool must be created with exactly this many token base units (1B tokens)
DEFAULT_SUPPLY = 1_000_000_000 * 10**TOKEN_DECIMALS

# Virtual settlement reserve added on the settlement side for pricing only
BOOTSTRAP_OFFSET = 4_200 * UNIT

# Flat fee taken from the settlement deposit when a pool is created
DEFAULT_CREATION_FEE = 1 * UNIT

# Swap fee in whole percent (1 = 1%)
SWAP_FEE_PERCENT = 1
PERCENT_DENOMINATOR = 100

# Opening settlement reserve for pools created with a seed swap
SEED_RESERVE = 1

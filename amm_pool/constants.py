"""Protocol constants for the constant-product pool.

Centralizes the fixed pool parameters and well-known account labels.
"""

# Shares permanently locked by the first deposit and credited to no holder.
# Keeps total_shares > 0 forever after the first mint.
MIN_LIQUIDITY = 1_000

# Trading fee retained by the pool: effective_in = amount_in * 99 / 100 (1%)
FEE_NUMERATOR = 99
FEE_DENOMINATOR = 100

# Optional transfer tax on the taxed token, diverted to the treasury (2%)
TAX_NUMERATOR = 2
TAX_DENOMINATOR = 100

# One whole token in minimal units (18 decimals for both assets)
ONE_TOKEN = 10**18

UINT256_MAX = 2**256 - 1

# Labels used to derive deterministic account addresses in a Market
POOL_LABEL = "pool"
ROUTER_LABEL = "router"
TREASURY_LABEL = "treasury"

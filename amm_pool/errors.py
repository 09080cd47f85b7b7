"""Error classes for pool, router and ledger operations.

Every error is terminal to the call that raised it. The ``code`` attribute
is the contract revert string for the same failure, so clients can match on
a stable string rather than on the class name.
"""

from typing import ClassVar


class AMMError(Exception):
    """Base error for all pool, router and ledger failures."""

    code: ClassVar[str] = "AMM_ERROR"


# =============================================================================
# Pool errors
# =============================================================================


class PoolError(AMMError):
    """Base error for LiquidityPool primitives."""

    code = "POOL_ERROR"


class ZeroDeposit(PoolError):
    """Nothing (or only one side) was deposited before mint or swap."""

    code = "ZERO_DEPOSITED"


class MintAmountTooSmall(PoolError):
    """Deposit would mint no shares, or the first deposit does not exceed MIN_LIQUIDITY."""

    code = "MINT_AMOUNT_SMALL"


class NothingToBurn(PoolError):
    """No shares were handed to the pool for redemption."""

    code = "NOTHING_TO_BURN"


class ZeroOutput(PoolError):
    """Burn would redeem zero of both assets."""

    code = "ZERO_OUTPUT"


class ZeroLiquidity(PoolError):
    """Swap attempted before any liquidity exists."""

    code = "ZERO_LIQUIDITY"


class InvariantViolation(PoolError):
    """Swap would decrease reserve_a * reserve_b."""

    code = "K"


# =============================================================================
# Router errors
# =============================================================================


class RouterError(AMMError):
    """Base error for Router slippage and input checks."""

    code = "ROUTER_ERROR"


class NoLiquidityIn(RouterError):
    """First deposit with a zero amount on either side."""

    code = "NO_LIQUIDITY_IN"


class NotEnoughAIn(RouterError):
    """Ratio-matched amount of asset A is below the caller's minimum."""

    code = "NOT_ENOUGH_ETH_IN"


class NotEnoughBIn(RouterError):
    """Ratio-matched amount of asset B is below the caller's minimum."""

    code = "NOT_ENOUGH_SPC_IN"


class MinimumNotMet(RouterError):
    """Amounts actually delivered to the pool fell below the caller's minimums."""

    code = "MINIMUM_NOT_MET"


class SupplyMoreLiquidity(RouterError):
    """Redeemed amounts are below the caller's minimums."""

    code = "SUPPLY_MORE_LIQUIDITY"


class SwapMoreA(RouterError):
    """Asset A -> B swap output is below the caller's minimum."""

    code = "SWAP_MORE_ETH"


class SwapMoreB(RouterError):
    """Asset B -> A swap output is below the caller's minimum."""

    code = "SWAP_MORE_SPC"


# =============================================================================
# Ledger (collaborator) errors
# =============================================================================


class LedgerError(AMMError):
    """Base error for asset and share ledgers."""

    code = "LEDGER_ERROR"


class InsufficientBalance(LedgerError):
    """Sender balance is lower than the transfer amount."""

    code = "ERC20: transfer amount exceeds balance"


class InsufficientAllowance(LedgerError):
    """Spender allowance is lower than the transfer amount."""

    code = "ERC20: insufficient allowance"


class InvalidAmount(LedgerError):
    """Negative amount passed to a ledger operation."""

    code = "INVALID_AMOUNT"


class InvalidAddress(AMMError):
    """Account is not a 0x-prefixed, 40-hex-digit address."""

    code = "INVALID_ADDRESS"

"""Constant-product pool math.

All functions are pure and work on integer minimal units with floor
division. The multiply-before-divide order below is part of the contract:
reordering any expression changes rounding.

    first deposit:  shares = isqrt(a * b) - MIN_LIQUIDITY
    later deposits: shares = min(a * T // rA, b * T // rB)
    redemption:     out_x  = liquidity * rX // T
    swap:           out    = r_out - (r_in * r_out) // (r_in + amount_in * 99 // 100)
"""

from decimal import Decimal

from amm_pool.constants import FEE_DENOMINATOR, FEE_NUMERATOR, MIN_LIQUIDITY
from amm_pool.errors import MintAmountTooSmall
from amm_pool.safe_int import S


def initial_shares(amount_a: int, amount_b: int, min_liquidity: int = MIN_LIQUIDITY) -> int:
    """Shares credited to the first depositor.

    Args:
        amount_a: Asset A deposited
        amount_b: Asset B deposited
        min_liquidity: Shares locked forever and credited to no one

    Returns:
        isqrt(amount_a * amount_b) - min_liquidity

    Raises:
        MintAmountTooSmall: If the geometric mean does not exceed min_liquidity
    """
    root = (S(amount_a) * S(amount_b)).isqrt()
    if root <= min_liquidity:
        raise MintAmountTooSmall(
            f"Geometric mean {root.value} does not exceed minimum liquidity {min_liquidity}"
        )
    return (root - S(min_liquidity)).value


def proportional_shares(
    amount_a: int,
    amount_b: int,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
) -> int:
    """Shares for a deposit into a non-empty pool.

    Capped by whichever side is short relative to the current ratio, so an
    unbalanced deposit never over-credits the depositor.
    """
    from_a = S(amount_a) * S(total_shares) // S(reserve_a)
    from_b = S(amount_b) * S(total_shares) // S(reserve_b)
    return from_a.min(from_b).value


def redeem_amounts(
    liquidity: int,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
) -> tuple[int, int]:
    """Assets owed for burning `liquidity` shares."""
    out_a = S(liquidity) * S(reserve_a) // S(total_shares)
    out_b = S(liquidity) * S(reserve_b) // S(total_shares)
    return out_a.value, out_b.value


def get_amount_out(
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    fee_numerator: int = FEE_NUMERATOR,
    fee_denominator: int = FEE_DENOMINATOR,
) -> int:
    """Calculate swap output using the fee-adjusted constant product.

    Formula: out = r_out - (r_in * r_out) // (r_in + in * fee_num // fee_den)

    Args:
        amount_in: Input token amount
        reserve_in: Reserve of input token in pool
        reserve_out: Reserve of output token in pool
        fee_numerator: Fee numerator (default 99 for a 1% fee)
        fee_denominator: Fee denominator (default 100)

    Returns:
        Output token amount (0 for empty input or reserves)
    """
    if amount_in <= 0:
        return 0
    if reserve_in <= 0 or reserve_out <= 0:
        return 0

    effective_in = S(amount_in) * S(fee_numerator) // S(fee_denominator)
    k = S(reserve_in) * S(reserve_out)
    new_reserve_out = k // (S(reserve_in) + effective_in)

    return (S(reserve_out) - new_reserve_out).value


def quote(amount: int, reserve_from: int, reserve_to: int) -> int:
    """Amount of the other asset matching `amount` at the current reserve ratio."""
    return (S(amount) * S(reserve_to) // S(reserve_from)).value


def spot_price(reserve_a: int, reserve_b: int) -> Decimal | None:
    """Price of one unit of asset A in asset B, or None for an empty pool.

    Decimal keeps the ratio exact for display; pool math never uses it.
    """
    if reserve_a <= 0 or reserve_b <= 0:
        return None
    return Decimal(reserve_b) / Decimal(reserve_a)

"""Tests for constant-product pool math."""

from decimal import Decimal

import pytest

from amm_pool import cpmm
from amm_pool.errors import MintAmountTooSmall
from amm_pool.safe_int import DivisionByZero
from tests.helpers import MIN_LIQ, ONE, units


class TestInitialShares:
    """First deposit: isqrt(a * b) - MIN_LIQUIDITY."""

    def test_one_to_four(self):
        assert cpmm.initial_shares(ONE, 4 * ONE) == 2 * ONE - MIN_LIQ

    def test_uneven_amounts(self):
        # isqrt(10 * 4.9) = 7
        assert cpmm.initial_shares(10 * ONE, units("4.9")) == 7 * ONE - MIN_LIQ

    def test_at_or_below_minimum_raises(self):
        """Geometric mean must strictly exceed MIN_LIQUIDITY."""
        with pytest.raises(MintAmountTooSmall):
            cpmm.initial_shares(999, 999)
        with pytest.raises(MintAmountTooSmall):
            cpmm.initial_shares(1000, 1000)

    def test_just_above_minimum(self):
        assert cpmm.initial_shares(1001, 1001) == 1

    def test_custom_minimum(self):
        assert cpmm.initial_shares(100, 100, min_liquidity=0) == 100


class TestProportionalShares:
    """Later deposits: min(a * T // rA, b * T // rB)."""

    def test_balanced_deposit(self):
        assert cpmm.proportional_shares(ONE, 4 * ONE, ONE, 4 * ONE, 2 * ONE) == 2 * ONE

    def test_unbalanced_deposit_takes_smaller_side(self):
        # 8 A would earn 16 shares, 2 B only 1
        assert cpmm.proportional_shares(8 * ONE, 2 * ONE, ONE, 4 * ONE, 2 * ONE) == ONE

    def test_dust_rounds_to_zero(self):
        assert cpmm.proportional_shares(1, 1, 10 * ONE, 10 * ONE, ONE) == 0


class TestRedeemAmounts:
    def test_half_of_supply(self):
        assert cpmm.redeem_amounts(ONE, ONE, 4 * ONE, 2 * ONE) == (ONE // 2, 2 * ONE)

    def test_floors_each_side(self):
        assert cpmm.redeem_amounts(1, 3, 5, 2) == (1, 2)

    def test_zero_supply_raises(self):
        with pytest.raises(DivisionByZero):
            cpmm.redeem_amounts(1, 1, 1, 0)


class TestGetAmountOut:
    """out = r_out - (r_in * r_out) // (r_in + in * 99 // 100)."""

    def test_one_token_into_small_pool(self):
        out = cpmm.get_amount_out(ONE, units("0.01"), units("0.04"))
        assert out == units("0.04") - units("0.0004")

    def test_zero_input_returns_zero(self):
        assert cpmm.get_amount_out(0, ONE, ONE) == 0

    def test_empty_reserves_return_zero(self):
        assert cpmm.get_amount_out(ONE, 0, ONE) == 0
        assert cpmm.get_amount_out(ONE, ONE, 0) == 0

    def test_fee_is_taken_from_input(self):
        """With no fee the output is strictly larger."""
        with_fee = cpmm.get_amount_out(ONE, 10 * ONE, 10 * ONE)
        no_fee = cpmm.get_amount_out(ONE, 10 * ONE, 10 * ONE, 100, 100)
        assert with_fee < no_fee

    def test_output_below_reserve(self):
        assert cpmm.get_amount_out(1000 * ONE, ONE, ONE) < ONE

    def test_input_below_fee_granularity(self):
        """Inputs under 2 units have no effective amount after the fee."""
        assert cpmm.get_amount_out(1, ONE, ONE) == 0


class TestQuoteAndPrice:
    def test_quote(self):
        assert cpmm.quote(units("0.04"), units("0.04"), units("0.01")) == units("0.01")
        assert cpmm.quote(units("0.04"), units("0.01"), units("0.04")) == units("0.16")

    def test_spot_price(self):
        assert cpmm.spot_price(ONE, 4 * ONE) == Decimal(4)

    def test_spot_price_empty_pool(self):
        assert cpmm.spot_price(0, 0) is None

"""Tests for SafeInt safe arithmetic wrapper."""

import pytest

from amm_pool.safe_int import (
    DivisionByZero,
    S,
    SafeInt,
    SafeIntError,
    Underflow,
)


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        """SafeInt can be constructed from int."""
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        """SafeInt can be constructed from another SafeInt."""
        assert SafeInt(SafeInt(42)).value == 42

    def test_rejects_other_types(self):
        """Strings, floats and bools are rejected."""
        with pytest.raises(TypeError):
            SafeInt("42")  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(3.14)  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(True)

    def test_alias(self):
        """S is an alias for SafeInt."""
        assert S is SafeInt
        assert isinstance(S(1), SafeInt)


class TestSafeIntArithmetic:
    """Tests for SafeInt arithmetic operations."""

    def test_add_and_radd(self):
        assert (S(10) + S(5)).value == 15
        assert (S(10) + 5).value == 15
        assert (5 + S(10)).value == 15

    def test_sub(self):
        assert (S(10) - S(3)).value == 7
        assert (10 - S(3)).value == 7

    def test_sub_underflow_raises(self):
        """Subtraction below zero raises Underflow."""
        with pytest.raises(Underflow):
            S(3) - S(10)
        with pytest.raises(Underflow):
            3 - S(10)

    def test_mul(self):
        assert (S(6) * S(7)).value == 42
        assert (6 * S(7)).value == 42

    def test_floordiv_rounds_down(self):
        assert (S(10) // S(3)).value == 3
        assert (S(99) // 100).value == 0

    def test_floordiv_by_zero_raises(self):
        with pytest.raises(DivisionByZero):
            S(10) // S(0)

    def test_errors_share_base_class(self):
        """All SafeInt errors are ArithmeticErrors."""
        assert issubclass(Underflow, SafeIntError)
        assert issubclass(DivisionByZero, SafeIntError)
        assert issubclass(SafeIntError, ArithmeticError)

    def test_multiply_before_divide_order(self):
        """Order of operations changes the floor result."""
        assert (S(3) * S(10) // S(4)).value == 7
        assert (S(3) // S(4) * S(10)).value == 0


class TestSafeIntComparison:
    """Tests for comparisons against SafeInt and int."""

    def test_equality(self):
        assert S(5) == S(5)
        assert S(5) == 5
        assert S(5) != 6

    def test_ordering(self):
        assert S(1) < S(2)
        assert S(2) <= 2
        assert S(3) > 2
        assert S(3) >= S(3)

    def test_bool(self):
        assert not S(0)
        assert S(1)


class TestSafeIntNamedOperations:
    """Tests for isqrt, min and conversions."""

    def test_isqrt_floors(self):
        assert S(16).isqrt().value == 4
        assert S(17).isqrt().value == 4
        assert S(4 * 10**36).isqrt().value == 2 * 10**18

    def test_isqrt_negative_raises(self):
        with pytest.raises(Underflow):
            S(-1).isqrt()

    def test_min(self):
        assert S(3).min(5).value == 3
        assert S(7).min(S(5)).value == 5

    def test_int_conversion(self):
        assert int(S(9)) == 9
        assert [10, 20, 30][S(1)] == 20

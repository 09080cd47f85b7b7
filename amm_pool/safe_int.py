"""Checked integer arithmetic for pool amounts.

Every ratio in the pool is computed as multiply-then-floor-divide on
SafeInt values. Anything that would be an on-chain revert raises instead
of silently producing a wrong number:

    S(a) - S(b)     Underflow when b > a
    S(a) // S(0)    DivisionByZero
    S(x).isqrt()    Underflow for negative x

Wrap at entry, unwrap with ``.value`` at exit:
    from amm_pool.safe_int import S

    def shares_for(amount: int, reserve: int, total: int) -> int:
        return (S(amount) * S(total) // S(reserve)).value
"""

from __future__ import annotations

import math
from functools import total_ordering


class SafeIntError(ArithmeticError):
    """Base class for SafeInt arithmetic errors."""


class DivisionByZero(SafeIntError):
    """Floor division by zero."""


class Underflow(SafeIntError):
    """Result would be negative."""


def _unwrap(x: SafeInt | int) -> int:
    return x._value if isinstance(x, SafeInt) else x


@total_ordering
class SafeInt:
    """Immutable int wrapper whose operators refuse invalid results.

    Only ints (not bools) and other SafeInts are accepted. Mixed
    arithmetic with plain ints works on either side of the operator.
    """

    __slots__ = ("_value",)

    def __init__(self, value: int | SafeInt) -> None:
        if isinstance(value, SafeInt):
            value = value._value
        elif isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")
        self._value: int = value

    @property
    def value(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _unwrap(other))

    __radd__ = __add__

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _unwrap(other))

    __rmul__ = __mul__

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        return _checked_sub(self._value, _unwrap(other))

    def __rsub__(self, other: int) -> SafeInt:
        return _checked_sub(other, self._value)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        divisor = _unwrap(other)
        if divisor == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // divisor)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt | int):
            return self._value == _unwrap(other)
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _unwrap(other)

    __hash__ = None  # type: ignore[assignment]

    def __int__(self) -> int:
        return self._value

    __index__ = __int__

    def __bool__(self) -> bool:
        return self._value != 0

    def isqrt(self) -> SafeInt:
        """Floor square root (first-deposit share count)."""
        if self._value < 0:
            raise Underflow(f"Square root of negative value: {self._value}")
        return SafeInt(math.isqrt(self._value))

    def min(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(min(self._value, _unwrap(other)))


def _checked_sub(left: int, right: int) -> SafeInt:
    if right > left:
        raise Underflow(f"Underflow: {left} - {right} = {left - right}")
    return SafeInt(left - right)


S = SafeInt

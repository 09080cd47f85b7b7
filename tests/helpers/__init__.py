"""Test helpers module for shared test utilities.

- constants: Account addresses and common amounts
- factories: Market factory and fund-moving helpers
"""

from tests.helpers.constants import (
    ALICE,
    BOB,
    CAROL,
    MALLORY,
    MIN_LIQ,
    ONE,
    STARTING_A,
    STARTING_B,
    units,
)
from tests.helpers.factories import add_liquidity, deposit, make_market, share_holdings_total

__all__ = [
    # Constants
    "ALICE",
    "BOB",
    "CAROL",
    "MALLORY",
    "ONE",
    "MIN_LIQ",
    "STARTING_A",
    "STARTING_B",
    "units",
    # Factories
    "make_market",
    "deposit",
    "add_liquidity",
    "share_holdings_total",
]

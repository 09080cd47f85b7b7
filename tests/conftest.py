"""Pytest configuration and fixtures."""

import pytest

from amm_pool.market import Market
from amm_pool.pool import LiquidityPool
from amm_pool.router import Router
from tests.helpers import make_market


@pytest.fixture
def market() -> Market:
    """Fresh market, tax off, every test account funded."""
    return make_market()


@pytest.fixture
def pool(market: Market) -> LiquidityPool:
    return market.pool


@pytest.fixture
def router(market: Market) -> Router:
    return market.router

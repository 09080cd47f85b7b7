"""Constant-product AMM: two-asset liquidity pool and router."""

from amm_pool.market import Market, get_default_market
from amm_pool.pool import LiquidityPool
from amm_pool.router import Router

__version__ = "0.1.0"
__all__ = ["LiquidityPool", "Router", "Market", "get_default_market", "__version__"]

"""Market: the asset ledgers, pool and router wired together.

A Market is the unit the HTTP service and the integration tests work with.
Addresses are derived from fixed labels, so two markets built from the same
config look identical.
"""

import structlog

from amm_pool.config import MarketConfig
from amm_pool.constants import POOL_LABEL, ROUTER_LABEL
from amm_pool.models.requests import AccountState, PoolState
from amm_pool.models.types import derive_address
from amm_pool.pool import LiquidityPool
from amm_pool.router import Router
from amm_pool.tokens.ledger import TokenLedger
from amm_pool.tokens.taxed import TaxedToken

logger = structlog.get_logger()


class Market:
    """Native currency (asset A), taxed token (asset B), pool and router."""

    def __init__(self, config: MarketConfig | None = None) -> None:
        self.config = config if config is not None else MarketConfig()
        self.asset_a = TokenLedger("Ether", "ETH")
        self.asset_b = TaxedToken(
            "SpaceCoin",
            "SPC",
            treasury=self.config.treasury,
            tax_enabled=self.config.tax_enabled,
        )
        self.pool = LiquidityPool(
            derive_address(POOL_LABEL),
            self.asset_a,
            self.asset_b,
            self.config.pool_config,
        )
        self.router = Router(self.pool, derive_address(ROUTER_LABEL))

    @property
    def treasury(self) -> str:
        return self.asset_b.treasury

    def fund(self, account: str, amount_a: int = 0, amount_b: int = 0) -> None:
        """Mint test balances of both assets to `account`."""
        if amount_a:
            self.asset_a.mint(account, amount_a)
        if amount_b:
            self.asset_b.mint(account, amount_b)
        logger.info("account_funded", account=account, amount_a=amount_a, amount_b=amount_b)

    def set_tax(self, enabled: bool) -> None:
        self.asset_b.set_tax(enabled)

    def state(self) -> PoolState:
        price = self.pool.spot_price()
        return PoolState(
            address=self.pool.address,
            router=self.router.address,
            reserve_a=str(self.pool.reserve_a),
            reserve_b=str(self.pool.reserve_b),
            total_shares=str(self.pool.total_shares),
            locked_shares=str(self.pool.shares.locked),
            spot_price=str(price) if price is not None else None,
            tax_enabled=self.asset_b.tax_enabled,
        )

    def account(self, address: str) -> AccountState:
        return AccountState(
            address=address,
            balance_a=str(self.asset_a.balance_of(address)),
            balance_b=str(self.asset_b.balance_of(address)),
            shares=str(self.pool.balance_of(address)),
        )


_default_market: Market | None = None


def get_default_market() -> Market:
    """Process-wide market, configured from the environment on first use."""
    global _default_market
    if _default_market is None:
        _default_market = Market(MarketConfig.from_env())
        logger.info(
            "market_created",
            pool=_default_market.pool.address,
            router=_default_market.router.address,
            tax_enabled=_default_market.asset_b.tax_enabled,
        )
    return _default_market

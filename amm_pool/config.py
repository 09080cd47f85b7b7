"""Configuration for pools and markets."""

import os
from dataclasses import dataclass, field

from amm_pool.constants import FEE_DENOMINATOR, FEE_NUMERATOR, MIN_LIQUIDITY, TREASURY_LABEL
from amm_pool.models.types import derive_address, normalize_address


@dataclass(frozen=True)
class PoolConfig:
    """Fixed parameters of a constant-product pool.

    Attributes:
        min_liquidity: Shares locked forever by the first deposit (default: 1,000)
        fee_numerator: Share of the input that counts toward pricing (default: 99)
        fee_denominator: Fee denominator (default: 100)
    """

    min_liquidity: int = MIN_LIQUIDITY
    fee_numerator: int = FEE_NUMERATOR
    fee_denominator: int = FEE_DENOMINATOR

    def __post_init__(self) -> None:
        if self.min_liquidity < 0:
            raise ValueError(f"min_liquidity must be non-negative: {self.min_liquidity}")
        if not 0 < self.fee_numerator <= self.fee_denominator:
            raise ValueError(
                f"Fee must satisfy 0 < numerator <= denominator: "
                f"{self.fee_numerator}/{self.fee_denominator}"
            )


DEFAULT_POOL_CONFIG = PoolConfig()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class MarketConfig:
    """Configuration for a Market (ledgers + pool + router).

    Attributes:
        treasury: Account receiving the transfer tax of the taxed token
        tax_enabled: Whether the transfer tax is on at startup
        pool_config: Parameters for the pool
    """

    treasury: str = field(default_factory=lambda: derive_address(TREASURY_LABEL))
    tax_enabled: bool = False
    pool_config: PoolConfig = DEFAULT_POOL_CONFIG

    @classmethod
    def from_env(cls) -> "MarketConfig":
        """Build a config from environment variables.

        - AMM_TREASURY: Treasury address (default: derived from "treasury")
        - AMM_TAX_ENABLED: Start with the transfer tax on (default: false)
        """
        treasury = os.environ.get("AMM_TREASURY")
        return cls(
            treasury=(
                normalize_address(treasury, validate=True)
                if treasury
                else derive_address(TREASURY_LABEL)
            ),
            tax_enabled=_env_flag("AMM_TAX_ENABLED"),
        )

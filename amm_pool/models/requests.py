"""Pydantic models for the HTTP service's requests and responses.

Amounts travel as decimal strings so that values above 2**53 survive JSON
clients; handlers convert them with ``int()``.
"""

from typing import Literal

from pydantic import BaseModel, Field

from amm_pool.models.types import Address, Uint256


class FundRequest(BaseModel):
    """Credit test balances of both assets to an account."""

    amount_a: Uint256 = Field(default="0", alias="amountA")
    amount_b: Uint256 = Field(default="0", alias="amountB")

    model_config = {"populate_by_name": True}


class ApproveRequest(BaseModel):
    """Allow a spender (the router by default) to move an owner's funds."""

    token: Literal["b", "shares"] = Field(description="Ledger to approve on.")
    amount: Uint256
    spender: Address | None = Field(default=None, description="Defaults to the router.")


class AddLiquidityRequest(BaseModel):
    sender: Address
    to: Address
    desired_b: Uint256 = Field(alias="desiredB")
    min_a: Uint256 = Field(alias="minA")
    min_b: Uint256 = Field(alias="minB")
    value: Uint256 = Field(description="Native value (asset A) attached to the call.")

    model_config = {"populate_by_name": True}


class RemoveLiquidityRequest(BaseModel):
    sender: Address
    to: Address
    liquidity: Uint256
    min_a: Uint256 = Field(alias="minA")
    min_b: Uint256 = Field(alias="minB")

    model_config = {"populate_by_name": True}


class SwapAForBRequest(BaseModel):
    sender: Address
    to: Address
    min_out: Uint256 = Field(alias="minOut")
    value: Uint256 = Field(description="Native value (asset A) to swap.")

    model_config = {"populate_by_name": True}


class SwapBForARequest(BaseModel):
    sender: Address
    to: Address
    amount_in: Uint256 = Field(alias="amountIn")
    min_out: Uint256 = Field(alias="minOut")

    model_config = {"populate_by_name": True}


class PoolState(BaseModel):
    """Snapshot of the pool's official state."""

    address: Address
    router: Address
    reserve_a: Uint256 = Field(alias="reserveA")
    reserve_b: Uint256 = Field(alias="reserveB")
    total_shares: Uint256 = Field(alias="totalShares")
    locked_shares: Uint256 = Field(alias="lockedShares")
    spot_price: str | None = Field(
        default=None,
        alias="spotPrice",
        description="Asset B per unit of asset A, as a decimal string.",
    )
    tax_enabled: bool = Field(alias="taxEnabled")

    model_config = {"populate_by_name": True}


class AccountState(BaseModel):
    address: Address
    balance_a: Uint256 = Field(alias="balanceA")
    balance_b: Uint256 = Field(alias="balanceB")
    shares: Uint256

    model_config = {"populate_by_name": True}


class AddLiquidityResponse(BaseModel):
    shares: Uint256


class RemoveLiquidityResponse(BaseModel):
    amount_a: Uint256 = Field(alias="amountA")
    amount_b: Uint256 = Field(alias="amountB")

    model_config = {"populate_by_name": True}


class SwapResponse(BaseModel):
    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    """Body returned for a failed pool, router or ledger call."""

    error: str = Field(description="Stable error code, e.g. ZERO_LIQUIDITY.")
    detail: str

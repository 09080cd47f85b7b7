"""Pydantic models for events emitted by the liquidity pool.

Events are appended to ``LiquidityPool.events`` in emission order and are
meant for observers and tests; the pool never reads them back.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Discriminator, Field

from amm_pool.models.types import Address

Amount = Annotated[int, Field(ge=0)]


class MintEvent(BaseModel):
    """Shares issued for a two-sided deposit."""

    kind: Literal["mint"] = "mint"
    sender: Address = Field(description="Account that called mint.")
    to: Address = Field(description="Recipient of the new shares.")
    amount_a: Amount = Field(alias="amountA", description="Asset A absorbed by the pool.")
    amount_b: Amount = Field(alias="amountB", description="Asset B absorbed by the pool.")
    shares: Amount = Field(alias="sharesOut", description="Shares credited to `to`.")

    model_config = {"populate_by_name": True, "frozen": True}


class BurnEvent(BaseModel):
    """Shares redeemed for the underlying assets."""

    kind: Literal["burn"] = "burn"
    sender: Address = Field(description="Account that called burn.")
    to: Address = Field(description="Recipient of the redeemed assets.")
    shares: Amount = Field(alias="sharesIn", description="Shares destroyed.")
    amount_a: Amount = Field(alias="amountAOut", description="Asset A received by `to`.")
    amount_b: Amount = Field(alias="amountBOut", description="Asset B received by `to`.")

    model_config = {"populate_by_name": True, "frozen": True}


class SwapEvent(BaseModel):
    """Single-sided deposit exchanged for the other asset.

    Exactly one input leg and one output leg are non-zero.
    """

    kind: Literal["swap"] = "swap"
    sender: Address = Field(description="Account that called the swap.")
    to: Address = Field(description="Recipient of the output asset.")
    amount_a_in: Amount = Field(alias="aIn")
    amount_b_in: Amount = Field(alias="bIn")
    amount_a_out: Amount = Field(alias="aOut")
    amount_b_out: Amount = Field(alias="bOut")

    model_config = {"populate_by_name": True, "frozen": True}


PoolEvent = Annotated[MintEvent | BurnEvent | SwapEvent, Discriminator("kind")]

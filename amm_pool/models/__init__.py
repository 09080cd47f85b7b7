"""Pydantic models for pool events and the HTTP service."""

from amm_pool.models.events import BurnEvent, MintEvent, PoolEvent, SwapEvent
from amm_pool.models.requests import (
    AccountState,
    AddLiquidityRequest,
    AddLiquidityResponse,
    ApproveRequest,
    ErrorResponse,
    FundRequest,
    PoolState,
    RemoveLiquidityRequest,
    RemoveLiquidityResponse,
    SwapAForBRequest,
    SwapBForARequest,
    SwapResponse,
)
from amm_pool.models.types import Address, Uint256, derive_address, normalize_address

__all__ = [
    # Types
    "Address",
    "Uint256",
    "derive_address",
    "normalize_address",
    # Events
    "MintEvent",
    "BurnEvent",
    "SwapEvent",
    "PoolEvent",
    # Service models
    "FundRequest",
    "ApproveRequest",
    "AddLiquidityRequest",
    "RemoveLiquidityRequest",
    "SwapAForBRequest",
    "SwapBForARequest",
    "PoolState",
    "AccountState",
    "AddLiquidityResponse",
    "RemoveLiquidityResponse",
    "SwapResponse",
    "ErrorResponse",
]

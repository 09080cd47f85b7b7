"""API endpoints for the pool service."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Path, Query

from amm_pool.market import Market, get_default_market
from amm_pool.models.events import PoolEvent
from amm_pool.models.requests import (
    AccountState,
    AddLiquidityRequest,
    AddLiquidityResponse,
    ApproveRequest,
    FundRequest,
    PoolState,
    RemoveLiquidityRequest,
    RemoveLiquidityResponse,
    SwapAForBRequest,
    SwapBForARequest,
    SwapResponse,
)
from amm_pool.models.types import normalize_address

logger = structlog.get_logger()

router = APIRouter()

AccountPath = Annotated[
    str, Path(pattern=r"^0x[a-fA-F0-9]{40}$", description="Account address.")
]


def get_market() -> Market:
    """Dependency provider for the market instance.

    Override this in tests to inject a fresh market:
        app.dependency_overrides[get_market] = lambda: market
    """
    return get_default_market()


@router.get("/pool", response_model=PoolState)
def pool_state(market: Market = Depends(get_market)) -> PoolState:
    return market.state()


@router.get("/events", response_model=list[PoolEvent])
def pool_events(market: Market = Depends(get_market)) -> list[PoolEvent]:
    """Events emitted so far, oldest first."""
    return list(market.pool.events)


@router.get("/accounts/{address}", response_model=AccountState)
def account_state(address: AccountPath, market: Market = Depends(get_market)) -> AccountState:
    return market.account(normalize_address(address))


@router.post("/accounts/{address}/fund", response_model=AccountState)
def fund_account(
    address: AccountPath,
    request: FundRequest,
    market: Market = Depends(get_market),
) -> AccountState:
    market.fund(address, int(request.amount_a), int(request.amount_b))
    return market.account(address)


@router.post("/accounts/{address}/approve", status_code=204)
def approve(
    address: AccountPath,
    request: ApproveRequest,
    market: Market = Depends(get_market),
) -> None:
    """Approve the router (or another spender) on asset B or on pool shares."""
    ledger = market.asset_b if request.token == "b" else market.pool.shares
    spender = request.spender or market.router.address
    ledger.approve(address, spender, int(request.amount))
    logger.info("approved", owner=address, spender=spender, token=ledger.symbol)


@router.post("/liquidity/add", response_model=AddLiquidityResponse)
def add_liquidity(
    request: AddLiquidityRequest,
    market: Market = Depends(get_market),
) -> AddLiquidityResponse:
    shares = market.router.add_liquidity(
        request.sender,
        request.to,
        desired_b=int(request.desired_b),
        min_a=int(request.min_a),
        min_b=int(request.min_b),
        value=int(request.value),
    )
    return AddLiquidityResponse(shares=str(shares))


@router.post("/liquidity/remove", response_model=RemoveLiquidityResponse)
def remove_liquidity(
    request: RemoveLiquidityRequest,
    market: Market = Depends(get_market),
) -> RemoveLiquidityResponse:
    amount_a, amount_b = market.router.remove_liquidity(
        request.sender,
        request.to,
        liquidity=int(request.liquidity),
        min_a=int(request.min_a),
        min_b=int(request.min_b),
    )
    return RemoveLiquidityResponse(amount_a=str(amount_a), amount_b=str(amount_b))


@router.post("/swap/a-for-b", response_model=SwapResponse)
def swap_a_for_b(
    request: SwapAForBRequest,
    market: Market = Depends(get_market),
) -> SwapResponse:
    amount_out = market.router.swap_a_for_b(
        request.sender,
        request.to,
        min_out=int(request.min_out),
        value=int(request.value),
    )
    return SwapResponse(amount_out=str(amount_out))


@router.post("/swap/b-for-a", response_model=SwapResponse)
def swap_b_for_a(
    request: SwapBForARequest,
    market: Market = Depends(get_market),
) -> SwapResponse:
    amount_out = market.router.swap_b_for_a(
        request.sender,
        request.to,
        amount_in=int(request.amount_in),
        min_out=int(request.min_out),
    )
    return SwapResponse(amount_out=str(amount_out))


@router.get("/quote", response_model=SwapResponse)
def quote(
    amount_in: int = Query(alias="amountIn", ge=0),
    direction: str = Query(default="a-for-b", pattern="^(a-for-b|b-for-a)$"),
    market: Market = Depends(get_market),
) -> SwapResponse:
    """Expected swap output at the current reserves (no state change)."""
    amount_out = market.router.get_amount_out(amount_in, a_to_b=direction == "a-for-b")
    return SwapResponse(amount_out=str(amount_out))

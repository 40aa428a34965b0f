"""
Trade API Routes
Buy/sell through the trade coordinator; failures come back with the
executor's reason.
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from ovt_nav.domain.errors import TradeExecutionFailed
from ovt_nav.domain.schemas.nav import TradeRequest, TradeResponseSchema
from ovt_nav.domain.services.trade_coordinator import TradeCoordinator

router = APIRouter()


def get_trade_coordinator(request: Request) -> TradeCoordinator:
    return request.app.state.trade_coordinator


async def _execute(side: str, body: TradeRequest, request: Request, coordinator: TradeCoordinator):
    if coordinator.is_submitting:
        raise HTTPException(status_code=409, detail="A trade is already being submitted")
    call = coordinator.buy if side == "buy" else coordinator.sell
    try:
        result = await call(body.amount)
    except TradeExecutionFailed as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return TradeResponseSchema(
        success=True,
        message=coordinator.banner.success or "",
        txid=result.txid if result else None,
        nav=request.app.state.aggregator.as_dict(),
    )


@router.post("/buy", response_model=TradeResponseSchema)
async def buy(
    body: TradeRequest,
    request: Request,
    coordinator: TradeCoordinator = Depends(get_trade_coordinator),
):
    return await _execute("buy", body, request, coordinator)


@router.post("/sell", response_model=TradeResponseSchema)
async def sell(
    body: TradeRequest,
    request: Request,
    coordinator: TradeCoordinator = Depends(get_trade_coordinator),
):
    return await _execute("sell", body, request, coordinator)

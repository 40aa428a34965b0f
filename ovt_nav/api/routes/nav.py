"""
NAV API Routes
Aggregator state, manual refresh and display currency.
"""

from fastapi import APIRouter, Depends, Request

from ovt_nav.domain.schemas.nav import CurrencyChangeRequest, NAVStateSchema
from ovt_nav.domain.services.currency_sync import CurrencyToggle
from ovt_nav.domain.services.nav_aggregator import NAVAggregator

router = APIRouter()


def get_aggregator(request: Request) -> NAVAggregator:
    return request.app.state.aggregator


def get_currency_toggle(request: Request) -> CurrencyToggle:
    return request.app.state.currency_toggle


@router.get("", response_model=NAVStateSchema)
async def get_nav(aggregator: NAVAggregator = Depends(get_aggregator)):
    return aggregator.as_dict()


@router.post("/refresh", response_model=NAVStateSchema)
async def refresh_nav(aggregator: NAVAggregator = Depends(get_aggregator)):
    await aggregator.fetch_nav()
    return aggregator.as_dict()


@router.put("/currency", response_model=NAVStateSchema)
async def change_currency(
    body: CurrencyChangeRequest,
    aggregator: NAVAggregator = Depends(get_aggregator),
    toggle: CurrencyToggle = Depends(get_currency_toggle),
):
    # the toggle owns the display currency; CurrencySync carries it to the aggregator
    toggle.set(body.currency)
    await aggregator.fetch_nav()
    return aggregator.as_dict()

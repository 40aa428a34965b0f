"""
FastAPI Main Application
Wires the NAV aggregator, its sources and the periodic refresh.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import AsyncGenerator
import logging

from ovt_nav import __version__
from ovt_nav.api.routes import health, nav, trade
from ovt_nav.config import settings
from ovt_nav.core.logging import setup_logging
from ovt_nav.domain.services.currency_sync import CurrencySync, CurrencyToggle
from ovt_nav.domain.services.nav_aggregator import NAVAggregator
from ovt_nav.domain.services.price_movement import SyntheticPriceMovement
from ovt_nav.domain.services.trade_coordinator import TradeCoordinator
from ovt_nav.infrastructure.sources.source_factory import (
    build_preference_store,
    build_sources,
    source_timeout,
)
from ovt_nav.realtime.poller import NAVPoller

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# One drift factor per process, shared by the aggregator and trades
price_movement = SyntheticPriceMovement()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager
    Starts the BTC price feed, NAV polling and currency sync; stops them on shutdown.
    """
    logger.info("Starting OVT NAV service")

    sources = build_sources(settings)
    aggregator = NAVAggregator(
        distribution_source=sources.distribution,
        valuation_source=sources.valuation,
        price_source=sources.price,
        price_movement=price_movement,
        preference_store=build_preference_store(settings),
        timeout_seconds=source_timeout(settings),
        rune_id=settings.RUNE_ID,
        rune_symbol=settings.RUNE_SYMBOL,
    )
    poller = NAVPoller(aggregator, settings.NAV_POLL_INTERVAL_SECONDS)
    currency_toggle = CurrencyToggle(aggregator.base_currency)
    currency_sync = CurrencySync(currency_toggle, aggregator)
    currency_sync.start()

    app.state.aggregator = aggregator
    app.state.currency_toggle = currency_toggle
    app.state.currency_sync = currency_sync
    app.state.poller = poller
    app.state.trade_coordinator = TradeCoordinator(sources.trades, aggregator, price_movement)

    sources.price.start()
    if settings.POLLING_ENABLED:
        poller.start()
        logger.info("NAV polling every %ss", settings.NAV_POLL_INTERVAL_SECONDS)
    else:
        logger.info("NAV polling disabled")

    yield

    logger.info("Shutting down OVT NAV service")
    currency_sync.stop()
    await poller.stop()
    await sources.price.stop()


app = FastAPI(
    title="OVT NAV Aggregator",
    description="NAV, rune distribution and BTC price for the OVT fund",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, tags=["Health"])
app.include_router(nav.router, prefix="/api/v1/nav", tags=["NAV"])
app.include_router(trade.router, prefix="/api/v1/trade", tags=["Trade"])


def run() -> None:
    import uvicorn

    uvicorn.run("ovt_nav.main:app", host=settings.API_HOST, port=settings.API_PORT)

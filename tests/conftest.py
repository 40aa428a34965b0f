import asyncio
from typing import AsyncGenerator, List, Optional

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from ovt_nav.api.routes import health, nav, trade
from ovt_nav.domain.schemas.sources import (
    DistributionStats,
    NAVPayload,
    RuneBalance,
    RuneInfo,
    TradeResult,
)
from ovt_nav.domain.services.currency_sync import CurrencySync, CurrencyToggle
from ovt_nav.domain.services.nav_aggregator import NAVAggregator
from ovt_nav.domain.services.price_movement import SyntheticPriceMovement
from ovt_nav.domain.services.trade_coordinator import TradeCoordinator
from ovt_nav.infrastructure.sources.types import BitcoinPrice
from ovt_nav.infrastructure.storage.key_value import InMemoryStorage
from ovt_nav.infrastructure.storage.preference_store import CurrencyPreferenceStore


RUNE_INFO = {
    "id": "test-rune-id",
    "symbol": "OVT",
    "supply": {
        "total": 2100000,
        "distributed": 1000000,
        "treasury": 1100000,
        "percentDistributed": 4.76,
    },
    "events": [],
}

DISTRIBUTION_STATS = {
    "totalSupply": 2100000,
    "treasuryHeld": 1680000,
    "lpHeld": 210000,
    "distributed": 210000,
    "percentDistributed": 10,
    "percentInLP": 10,
    "treasuryAddresses": ["treasury-address"],
    "lpAddresses": ["lp-address"],
    "distributionEvents": [],
}


# Fake sources for testing
class FakeRuneSource:
    """In-memory token distribution source"""

    def __init__(self):
        self.stats = dict(DISTRIBUTION_STATS)
        self.info = dict(RUNE_INFO)
        self.error: Optional[Exception] = None
        self.delay = 0.0
        self.calls = 0

    async def get_distribution_stats(self) -> DistributionStats:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return DistributionStats.model_validate(self.stats)

    async def get_rune_info(self) -> RuneInfo:
        if self.error:
            raise self.error
        return RuneInfo.model_validate(self.info)

    async def get_rune_balances(self) -> List[RuneBalance]:
        return []


class FakeArchSource:
    """In-memory portfolio valuation source"""

    def __init__(self):
        self.payload = {"value": 0, "portfolioItems": []}
        self.error: Optional[Exception] = None
        self.delay = 0.0
        self.calls = 0

    async def get_current_nav(self) -> NAVPayload:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return NAVPayload.model_validate(self.payload)


class FakePriceSource:
    def __init__(self, price: Optional[float] = 50000.0):
        self.price = price

    def current(self) -> BitcoinPrice:
        return BitcoinPrice(price=self.price, is_loading=False, error=None)


class FakeTradeExecutor:
    def __init__(self):
        self.error: Optional[Exception] = None
        self.calls: List[tuple] = []

    async def buy(self, amount: float) -> TradeResult:
        return self._submit("buy", amount)

    async def sell(self, amount: float) -> TradeResult:
        return self._submit("sell", amount)

    def _submit(self, side: str, amount: float) -> TradeResult:
        self.calls.append((side, amount))
        if self.error:
            raise self.error
        return TradeResult(side=side, amount=amount, txid="test-tx-id")


@pytest.fixture()
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture()
def preference_store(storage) -> CurrencyPreferenceStore:
    return CurrencyPreferenceStore(storage)


@pytest.fixture()
def price_movement() -> SyntheticPriceMovement:
    return SyntheticPriceMovement()


@pytest.fixture()
def rune_source() -> FakeRuneSource:
    return FakeRuneSource()


@pytest.fixture()
def arch_source() -> FakeArchSource:
    return FakeArchSource()


@pytest.fixture()
def price_source() -> FakePriceSource:
    return FakePriceSource()


@pytest.fixture()
def trade_executor() -> FakeTradeExecutor:
    return FakeTradeExecutor()


@pytest.fixture()
def make_aggregator(rune_source, arch_source, price_source, price_movement, preference_store):
    def _make(**overrides) -> NAVAggregator:
        kwargs = dict(
            distribution_source=rune_source,
            valuation_source=arch_source,
            price_source=price_source,
            price_movement=price_movement,
            preference_store=preference_store,
            timeout_seconds=1.0,
        )
        kwargs.update(overrides)
        return NAVAggregator(**kwargs)

    return _make


@pytest.fixture()
def aggregator(make_aggregator) -> NAVAggregator:
    return make_aggregator()


@pytest.fixture()
def currency_toggle(aggregator) -> CurrencyToggle:
    return CurrencyToggle(aggregator.base_currency)


@pytest.fixture()
def currency_sync(currency_toggle, aggregator):
    sync = CurrencySync(currency_toggle, aggregator)
    sync.start()
    yield sync
    sync.stop()


@pytest.fixture()
def app(aggregator, trade_executor, price_movement, currency_toggle, currency_sync) -> FastAPI:
    app = FastAPI()
    app.include_router(health.router, tags=["Health"])
    app.include_router(nav.router, prefix="/api/v1/nav", tags=["NAV"])
    app.include_router(trade.router, prefix="/api/v1/trade", tags=["Trade"])

    app.state.aggregator = aggregator
    app.state.poller = None
    app.state.currency_toggle = currency_toggle
    app.state.currency_sync = currency_sync
    app.state.trade_coordinator = TradeCoordinator(trade_executor, aggregator, price_movement)
    return app


@pytest.fixture()
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

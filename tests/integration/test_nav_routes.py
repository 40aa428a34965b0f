import pytest

from ovt_nav.domain.errors import TradeExecutionFailed
from ovt_nav.domain.models import Currency


@pytest.mark.asyncio
@pytest.mark.integration
async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "nav_state": "idle", "polling": False}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_nav_before_and_after_refresh(client):
    resp = await client.get("/api/v1/nav")
    assert resp.status_code == 200
    assert resp.json()["state"] == "idle"

    resp = await client.post("/api/v1/nav/refresh")
    assert resp.status_code == 200
    data = resp.json()
    assert data["state"] == "ready"
    assert data["error"] is None
    assert data["btc_price"] == 50000.0
    dist = data["nav_data"]["tokenDistribution"]
    assert dist["runeId"] == "test-rune-id"
    assert dist["percentDistributed"] == pytest.approx(10.0)


@pytest.mark.asyncio
@pytest.mark.integration
async def test_currency_change_formats_and_persists(client, aggregator, arch_source, storage):
    arch_source.payload = {"value": 0, "portfolioItems": [{"name": "BTC", "value": 100000000}]}

    resp = await client.put("/api/v1/nav/currency", json={"currency": "usd"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["base_currency"] == "usd"
    assert data["formatted_total"] == "$50.0k"
    assert storage.store["ovt-currency-preference"] == "usd"

    resp = await client.put("/api/v1/nav/currency", json={"currency": "btc"})
    assert resp.json()["formatted_total"] == "₿1.00"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_currency_change_rejects_unknown(client):
    resp = await client.put("/api/v1/nav/currency", json={"currency": "eur"})
    assert resp.status_code == 422


@pytest.mark.asyncio
@pytest.mark.integration
async def test_currency_change_surfaces_portfolio_error(client, aggregator):
    aggregator.set_portfolio_positions(None)

    resp = await client.put("/api/v1/nav/currency", json={"currency": "usd"})
    assert resp.status_code == 200
    assert resp.json()["error"] == "Failed to fetch portfolio data"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_buy_route(client, price_movement):
    resp = await client.post("/api/v1/trade/buy", json={"amount": 10})
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["message"] == "Successfully purchased 10 OVT!"
    assert data["txid"] == "test-tx-id"
    assert data["nav"]["state"] == "ready"
    assert price_movement.get() > 1.0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_sell_route_failure_returns_reason(client, trade_executor, price_movement):
    trade_executor.error = TradeExecutionFailed("Wallet not connected")

    resp = await client.post("/api/v1/trade/sell", json={"amount": 1})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Wallet not connected"
    assert price_movement.get() == 1.0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_trade_rejects_non_positive_amount(client, trade_executor):
    resp = await client.post("/api/v1/trade/buy", json={"amount": 0})
    assert resp.status_code == 422
    assert trade_executor.calls == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_currency_change_goes_through_toggle(client, aggregator, currency_toggle, currency_sync, rune_source):
    heard = []
    currency_toggle.subscribe(heard.append)

    resp = await client.put("/api/v1/nav/currency", json={"currency": "usd"})

    assert resp.status_code == 200
    assert currency_toggle.currency is Currency.USD
    assert heard == [Currency.USD]
    assert currency_sync.last_applied is Currency.USD
    assert aggregator.base_currency is Currency.USD
    assert rune_source.calls == 1

    # unchanged currency does not re-notify but still revalidates
    resp = await client.put("/api/v1/nav/currency", json={"currency": "usd"})
    assert resp.json()["base_currency"] == "usd"
    assert heard == [Currency.USD]
    assert rune_source.calls == 2


@pytest.mark.asyncio
@pytest.mark.integration
async def test_nav_state_includes_ovt_price(client, arch_source):
    arch_source.payload = {"value": 0, "portfolioItems": [{"name": "BTC", "value": 105000000, "change": -2}]}

    resp = await client.post("/api/v1/nav/refresh")
    data = resp.json()

    assert data["ovt_price"] == pytest.approx(500.0)
    assert data["formatted_ovt_price"] == "500 sats"
    assert data["daily_change_formatted"] == "-2.00%"
    assert data["is_positive_change"] is False
    assert data["btc_price_formatted"] == "$50,000"
    assert data["nav_data"]["ovtPrice"] == pytest.approx(500.0)

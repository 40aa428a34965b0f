"""
Source factory (settings-driven).
"""

from __future__ import annotations

from dataclasses import dataclass

from ovt_nav.config import Settings
from ovt_nav.infrastructure.sources.arch_client import ArchClient
from ovt_nav.infrastructure.sources.bitcoin_price import CoinGeckoPriceSource
from ovt_nav.infrastructure.sources.rune_client import RuneClient
from ovt_nav.infrastructure.sources.trade_client import HttpTradeExecutor
from ovt_nav.infrastructure.storage.key_value import JsonFileStorage
from ovt_nav.infrastructure.storage.preference_store import CurrencyPreferenceStore


@dataclass(frozen=True)
class Sources:
    distribution: RuneClient
    valuation: ArchClient
    price: CoinGeckoPriceSource
    trades: HttpTradeExecutor


def source_timeout(settings: Settings) -> float:
    # a fetch must never outlive the poll period
    return min(settings.SOURCE_TIMEOUT_SECONDS, settings.NAV_POLL_INTERVAL_SECONDS)


def build_sources(settings: Settings) -> Sources:
    timeout = source_timeout(settings)
    return Sources(
        distribution=RuneClient(
            api_base_url=settings.RUNE_API_URL,
            rune_id=settings.RUNE_ID,
            treasury_addresses=settings.TREASURY_ADDRESSES,
            lp_addresses=settings.LP_ADDRESSES,
            timeout_seconds=timeout,
        ),
        valuation=ArchClient(settings.ARCH_API_URL, timeout_seconds=timeout),
        price=CoinGeckoPriceSource(
            api_base_url=settings.BTC_PRICE_API_URL,
            refresh_seconds=settings.BTC_PRICE_REFRESH_SECONDS,
            cache_ttl_seconds=settings.BTC_PRICE_CACHE_TTL,
            api_key=settings.BTC_PRICE_API_KEY,
        ),
        trades=HttpTradeExecutor(settings.TRADE_API_URL),
    )


def build_preference_store(settings: Settings) -> CurrencyPreferenceStore:
    storage = JsonFileStorage(settings.PREFERENCE_STORE_DIR, scope=settings.PREFERENCE_SCOPE)
    return CurrencyPreferenceStore(storage)

"""
NAV AGGREGATOR

Merge the rune distribution source and the portfolio valuation source into
one NAVSnapshot.

RESPONSIBILITIES:
- Request both sources concurrently, bounded by a timeout
- Publish a complete snapshot or nothing (previous snapshot is retained)
- Apply the synthetic price movement factor to the total value
- Own the display currency and persist it through the preference store

RULES:
❌ Source errors never reach the caller
❌ No partial merges
✅ One reference assignment per publish
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ovt_nav.domain.errors import PortfolioDataUnavailable, SourceUnavailable
from ovt_nav.domain.models import (
    ChangePeriod,
    Currency,
    LoadState,
    NAVSnapshot,
    PortfolioPosition,
    TokenDistribution,
)
from ovt_nav.domain.schemas.sources import DistributionStats, NAVPayload, PortfolioItemPayload, RuneInfo
from ovt_nav.domain.services.price_movement import SyntheticPriceMovement
from ovt_nav.domain.services.value_formatter import format_btc_price, format_change, format_value
from ovt_nav.infrastructure.sources.types import (
    BitcoinPriceSource,
    PortfolioValuationSource,
    TokenDistributionSource,
)
from ovt_nav.infrastructure.storage.preference_store import CurrencyPreferenceStore

logger = logging.getLogger(__name__)

PORTFOLIO_ERROR_MESSAGE = "Failed to fetch portfolio data"
NAV_ERROR_MESSAGE = "Failed to fetch NAV data"


class NAVAggregator:
    """
    Single consistent view of the fund's NAV, rune distribution and BTC price.
    """

    def __init__(
        self,
        distribution_source: TokenDistributionSource,
        valuation_source: PortfolioValuationSource,
        price_source: BitcoinPriceSource,
        price_movement: SyntheticPriceMovement,
        preference_store: CurrencyPreferenceStore,
        timeout_seconds: float = 30.0,
        rune_id: str = "",
        rune_symbol: str = "OVT",
    ):
        self._distribution_source = distribution_source
        self._valuation_source = valuation_source
        self._price_source = price_source
        self._price_movement = price_movement
        self._preferences = preference_store
        self._timeout_seconds = timeout_seconds

        self._nav_data = NAVSnapshot(
            token_distribution=TokenDistribution(rune_id=rune_id, rune_symbol=rune_symbol),
        )
        self._portfolio_positions: Any = []
        self._base_currency = preference_store.load()
        self._inflight = 0
        self._outcome = LoadState.IDLE
        self._error: Optional[str] = None
        self._reference_rate: Optional[float] = None

    # ------------------------------------------------------------------
    # READ ACCESSORS
    # ------------------------------------------------------------------

    @property
    def nav_data(self) -> NAVSnapshot:
        return self._nav_data

    @property
    def is_loading(self) -> bool:
        return self._inflight > 0

    @property
    def state(self) -> LoadState:
        return LoadState.LOADING if self._inflight else self._outcome

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def base_currency(self) -> Currency:
        return self._base_currency

    @property
    def btc_price(self) -> Optional[float]:
        return self._price_source.current().price

    @property
    def portfolio_positions(self) -> Any:
        return self._portfolio_positions

    # ------------------------------------------------------------------
    # MUTATIONS
    # ------------------------------------------------------------------

    def set_portfolio_positions(self, positions: Any) -> None:
        """Replace the held positions. Validation happens on the next fetch."""
        self._portfolio_positions = positions

    def handle_currency_change(self, currency: Currency | str) -> None:
        next_currency = Currency.parse(currency)
        if self._preferences.get() != next_currency:
            self._preferences.set(next_currency)
        self._base_currency = next_currency

    set_base_currency = handle_currency_change

    async def change_currency(self, currency: Currency | str) -> None:
        """Switch currency, then revalidate the snapshot."""
        self.handle_currency_change(currency)
        await self.fetch_nav()

    def format_value(self, amount_sats: int, currency: Optional[Currency | str] = None) -> str:
        return format_value(amount_sats, currency or self._base_currency, self.btc_price)

    # ------------------------------------------------------------------
    # FETCH
    # ------------------------------------------------------------------

    async def fetch_nav(self) -> None:
        self._inflight += 1
        self._error = None
        try:
            try:
                positions = self._coerce_positions()
            except PortfolioDataUnavailable as exc:
                logger.warning("Portfolio data unavailable: %s", exc)
                self._fail(PORTFOLIO_ERROR_MESSAGE)
                return

            try:
                stats, info, nav = await asyncio.wait_for(
                    asyncio.gather(
                        self._distribution_source.get_distribution_stats(),
                        self._distribution_source.get_rune_info(),
                        self._valuation_source.get_current_nav(),
                    ),
                    timeout=self._timeout_seconds,
                )
                snapshot = self._merge(stats, info, nav, positions)
            except asyncio.TimeoutError:
                logger.warning("NAV sources timed out after %.1fs", self._timeout_seconds)
                self._fail(NAV_ERROR_MESSAGE)
                return
            except Exception as exc:
                if not isinstance(exc, SourceUnavailable):
                    exc = SourceUnavailable(type(exc).__name__, str(exc))
                logger.warning("NAV fetch failed: %s", exc)
                self._fail(NAV_ERROR_MESSAGE)
                return

            self._nav_data = snapshot
            self._outcome = LoadState.READY
            logger.debug(
                "Published NAV snapshot: %s sats, %s items",
                snapshot.total_value_sats,
                len(snapshot.portfolio_items),
            )
        finally:
            self._inflight -= 1

    def _fail(self, message: str) -> None:
        self._error = message
        self._outcome = LoadState.ERRORED

    def _coerce_positions(self) -> List[PortfolioPosition]:
        raw = self._portfolio_positions
        if raw is None or isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
            raise PortfolioDataUnavailable(f"portfolio positions are {type(raw).__name__}")

        positions: List[PortfolioPosition] = []
        for item in raw:
            if isinstance(item, PortfolioPosition):
                if not _valid_amount(item.value):
                    raise PortfolioDataUnavailable(f"invalid value for position {item.name!r}")
                positions.append(item)
                continue
            try:
                positions.append(PortfolioItemPayload.model_validate(item).to_position())
            except ValidationError as exc:
                raise PortfolioDataUnavailable("invalid portfolio position") from exc
        return positions

    def _merge(
        self,
        stats: DistributionStats,
        info: RuneInfo,
        nav: NAVPayload,
        positions: List[PortfolioPosition],
    ) -> NAVSnapshot:
        items = nav.positions() or positions
        base_value = sum(item.value for item in items) if items else nav.value
        factor = self._price_movement.get()

        distribution = TokenDistribution(
            total_supply=stats.total_supply,
            distributed=stats.distributed,
            treasury=stats.treasury_held,
            lp_held=stats.lp_held,
            rune_id=info.id,
            rune_symbol=info.symbol,
            distribution_events=tuple(stats.distribution_events),
        )
        return NAVSnapshot(
            total_value_sats=int(round(base_value * factor)),
            portfolio_items=tuple(items),
            token_distribution=distribution,
            change_period=self._change_period(items, factor),
        )

    def _change_period(self, items: List[PortfolioPosition], factor: float) -> ChangePeriod:
        total = sum(item.value for item in items)
        weighted = sum(item.value * item.change for item in items) / total if total else 0.0
        ovt = ((1.0 + weighted / 100.0) * factor - 1.0) * 100.0

        rate = self.btc_price
        if rate and self._reference_rate is None:
            self._reference_rate = rate
        if rate and self._reference_rate:
            usd = ((1.0 + ovt / 100.0) * (rate / self._reference_rate) - 1.0) * 100.0
        else:
            usd = ovt
        return ChangePeriod(ovt=ovt, usd=usd)

    # ------------------------------------------------------------------
    # PRESENTATION
    # ------------------------------------------------------------------

    def daily_change(self) -> float:
        """Period change of the OVT price in the active currency."""
        period = self._nav_data.change_period
        return period.usd if self._base_currency is Currency.USD else period.ovt

    def as_dict(self) -> Dict[str, Any]:
        snapshot = self._nav_data
        btc_price = self.btc_price
        change = self.daily_change()
        return {
            "is_loading": self.is_loading,
            "error": self._error,
            "state": self.state.value,
            "base_currency": self._base_currency,
            "btc_price": btc_price,
            "btc_price_formatted": format_btc_price(btc_price),
            "formatted_total": self.format_value(snapshot.total_value_sats),
            "ovt_price": snapshot.ovt_price_sats,
            "formatted_ovt_price": self.format_value(round(snapshot.ovt_price_sats)),
            "daily_change": change,
            "daily_change_formatted": format_change(change),
            "is_positive_change": change >= 0,
            "nav_data": snapshot.to_dict(),
        }


def _valid_amount(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0

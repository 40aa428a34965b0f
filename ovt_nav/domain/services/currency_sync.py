"""
Currency toggle owned by presentation code, and the one-way wiring that
pushes its changes into the aggregator.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from ovt_nav.domain.models import Currency

logger = logging.getLogger(__name__)

CurrencyListener = Callable[[Currency], None]


class CurrencyToggle:
    def __init__(self, initial: Currency | str = Currency.BTC):
        self._currency = Currency.parse(initial)
        self._listeners: List[CurrencyListener] = []

    @property
    def currency(self) -> Currency:
        return self._currency

    def subscribe(self, listener: CurrencyListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set(self, currency: Currency | str) -> None:
        next_currency = Currency.parse(currency)
        if next_currency == self._currency:
            return
        self._currency = next_currency
        for listener in list(self._listeners):
            listener(next_currency)

    def toggle(self) -> Currency:
        self.set(Currency.USD if self._currency is Currency.BTC else Currency.BTC)
        return self._currency


class CurrencySync:
    """
    Applies each toggle change to the aggregator at most once.

    ``last_applied`` guards against a change bouncing back through a
    listener that itself touches the toggle.
    """

    def __init__(self, toggle: CurrencyToggle, aggregator):
        self._toggle = toggle
        self._aggregator = aggregator
        self.last_applied: Optional[Currency] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    def start(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self._toggle.subscribe(self._on_change)

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_change(self, currency: Currency) -> None:
        if currency == self._aggregator.base_currency or currency == self.last_applied:
            return
        self.last_applied = currency
        logger.debug("Syncing display currency to %s", currency.value)
        self._aggregator.set_base_currency(currency)

"""
Persisted display-currency preference.

Storage failures never reach the caller: the store falls back to an
in-memory value and, absent anything stored, to BTC.
"""

from __future__ import annotations

import logging
from typing import Optional

from ovt_nav.domain.errors import StorageUnavailable
from ovt_nav.domain.models import Currency
from ovt_nav.infrastructure.storage.key_value import KeyValueStorage

logger = logging.getLogger(__name__)

CURRENCY_PREFERENCE_KEY = "ovt-currency-preference"
DEFAULT_CURRENCY = Currency.BTC


class CurrencyPreferenceStore:
    def __init__(self, storage: Optional[KeyValueStorage], key: str = CURRENCY_PREFERENCE_KEY):
        self._storage = storage
        self._key = key
        self._fallback: Optional[Currency] = None

    def get(self) -> Optional[Currency]:
        if self._storage is None:
            return self._fallback
        try:
            raw = self._storage.get_item(self._key)
        except (StorageUnavailable, OSError) as exc:
            logger.debug("Currency preference read failed: %s", exc)
            return self._fallback
        if raw is None:
            return self._fallback
        try:
            return Currency.parse(raw)
        except ValueError:
            logger.debug("Ignoring stored currency preference %r", raw)
            return self._fallback

    def set(self, value: Currency | str) -> None:
        currency = Currency.parse(value)
        self._fallback = currency
        if self._storage is None:
            return
        try:
            self._storage.set_item(self._key, currency.value)
        except (StorageUnavailable, OSError) as exc:
            logger.debug("Currency preference write failed: %s", exc)

    def load(self) -> Currency:
        return self.get() or DEFAULT_CURRENCY

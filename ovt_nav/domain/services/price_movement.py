"""
SYNTHETIC PRICE MOVEMENT

Simulated NAV drift factor nudged by completed trades.

One instance is created per process and injected into every consumer.
Not persisted; ``reset()`` exists for test harnesses only.
"""

from __future__ import annotations

import random
import threading
from typing import Optional

MIN_FACTOR = 0.01

BUY_BUMP_MIN = 0.001
BUY_BUMP_SPAN = 0.004
SELL_BUMP_MIN = 0.0005
SELL_BUMP_SPAN = 0.0015


class SyntheticPriceMovement:
    def __init__(self, initial: float = 1.0, floor: float = MIN_FACTOR):
        if floor <= 0:
            raise ValueError("floor must be positive")
        self._floor = floor
        self._initial = max(float(initial), floor)
        self._value = self._initial
        self._lock = threading.Lock()

    def get(self) -> float:
        return self._value

    def update(self, delta_fraction: float) -> float:
        """Multiply the reference by ``1 + delta_fraction``, never dropping below the floor."""
        with self._lock:
            self._value = max(self._value * (1.0 + delta_fraction), self._floor)
            return self._value

    def reset(self) -> None:
        with self._lock:
            self._value = self._initial


def buy_bump(rng: Optional[random.Random] = None) -> float:
    """Positive impact of a completed buy: 0.1% to 0.5%."""
    r = (rng or random).random()
    return BUY_BUMP_MIN + r * BUY_BUMP_SPAN


def sell_bump(rng: Optional[random.Random] = None) -> float:
    """Negative impact of a completed sell: 0.05% to 0.2%."""
    r = (rng or random).random()
    return -SELL_BUMP_MIN - r * SELL_BUMP_SPAN

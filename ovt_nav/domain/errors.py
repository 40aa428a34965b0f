"""
Error taxonomy for the NAV aggregator.

Source and storage failures are caught at the aggregator / store boundary and
converted to state; only trade failures travel back to the caller.
"""

from __future__ import annotations


class NAVError(Exception):
    """Base class for aggregator errors."""


class SourceUnavailable(NAVError):
    """An upstream source raised, timed out or returned an invalid payload."""

    def __init__(self, source: str, reason: str = ""):
        self.source = source
        self.reason = reason
        message = f"{source} unavailable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class PortfolioDataUnavailable(NAVError):
    """The held portfolio positions are not in a usable state."""


class StorageUnavailable(NAVError):
    """The persistent key-value storage is disabled or unreadable."""


class TradeExecutionFailed(NAVError):
    """A buy or sell did not complete; the message is user-facing."""

    def __init__(self, message: str, side: str = ""):
        self.side = side
        super().__init__(message)

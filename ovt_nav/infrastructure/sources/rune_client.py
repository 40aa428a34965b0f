"""
Rune indexer client: token distribution source.

Balances are classified against the configured treasury and LP address sets;
LP-held tokens are reported as their own category, never as distributed.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List, Optional, Set

from pydantic import ValidationError

from ovt_nav.domain.errors import SourceUnavailable
from ovt_nav.domain.schemas.sources import DistributionStats, RuneBalance, RuneInfo
from ovt_nav.infrastructure.sources.http_client import JsonHttpSource

logger = logging.getLogger(__name__)


class RuneClient(JsonHttpSource):
    source_name = "rune"

    def __init__(
        self,
        api_base_url: str,
        rune_id: str,
        treasury_addresses: Optional[Iterable[str]] = None,
        lp_addresses: Optional[Iterable[str]] = None,
        timeout_seconds: float = 30.0,
    ):
        super().__init__(api_base_url, timeout_seconds)
        self.rune_id = rune_id
        self._treasury: Set[str] = set(treasury_addresses or [])
        self._lp: Set[str] = set(lp_addresses or [])
        self._info_request: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # ADDRESS SETS
    # ------------------------------------------------------------------

    def add_treasury_address(self, address: str) -> None:
        if address:
            self._treasury.add(address)

    def remove_treasury_address(self, address: str) -> None:
        self._treasury.discard(address)

    def is_treasury_address(self, address: str) -> bool:
        return address in self._treasury

    def is_lp_address(self, address: str) -> bool:
        return address in self._lp

    # ------------------------------------------------------------------
    # QUERIES
    # ------------------------------------------------------------------

    async def get_rune_info(self) -> RuneInfo:
        # concurrent callers share one upstream response
        if self._info_request is None or self._info_request.done():
            self._info_request = asyncio.ensure_future(self._fetch_rune_info())
        return await self._info_request

    async def _fetch_rune_info(self) -> RuneInfo:
        payload = await self._request_json(self._url(self.rune_id))
        if isinstance(payload, dict) and "data" in payload:
            payload = payload["data"]
        try:
            return RuneInfo.model_validate(payload)
        except ValidationError as exc:
            raise SourceUnavailable(self.source_name, "invalid rune info") from exc

    async def get_rune_balances(self) -> List[RuneBalance]:
        payload = await self._request_json(self._url(f"{self.rune_id}/balances"))
        if isinstance(payload, dict):
            payload = payload.get("balances") or payload.get("data") or []
        if not isinstance(payload, list):
            raise SourceUnavailable(self.source_name, "invalid balances")

        balances: List[RuneBalance] = []
        for entry in payload:
            try:
                address = str(entry["address"])
                amount = int(entry["amount"])
            except (KeyError, TypeError, ValueError):
                logger.debug("Skipping malformed balance entry: %s", entry)
                continue
            balances.append(
                RuneBalance(
                    address=address,
                    amount=amount,
                    is_distributed=not (self.is_treasury_address(address) or self.is_lp_address(address)),
                )
            )
        return balances

    async def get_distribution_stats(self) -> DistributionStats:
        info, balances = await asyncio.gather(self.get_rune_info(), self.get_rune_balances())

        treasury_held = sum(b.amount for b in balances if self.is_treasury_address(b.address))
        lp_held = sum(b.amount for b in balances if self.is_lp_address(b.address))
        distributed = sum(b.amount for b in balances if b.is_distributed)
        total = info.supply.total

        try:
            return DistributionStats(
                total_supply=total,
                treasury_held=treasury_held,
                lp_held=lp_held,
                distributed=distributed,
                percent_distributed=(distributed / total * 100.0) if total else 0.0,
                percent_in_lp=(lp_held / total * 100.0) if total else 0.0,
                treasury_addresses=sorted(self._treasury),
                lp_addresses=sorted(self._lp),
                distribution_events=info.events,
            )
        except ValidationError as exc:
            raise SourceUnavailable(self.source_name, "balances exceed supply") from exc

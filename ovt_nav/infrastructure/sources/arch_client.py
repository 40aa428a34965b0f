"""
Arch client: portfolio valuation source.
"""

from __future__ import annotations

from pydantic import ValidationError

from ovt_nav.domain.errors import SourceUnavailable
from ovt_nav.domain.schemas.sources import NAVPayload
from ovt_nav.infrastructure.sources.http_client import JsonHttpSource


class ArchClient(JsonHttpSource):
    source_name = "arch"

    async def get_current_nav(self) -> NAVPayload:
        payload = await self._request_json(self._url("nav"))
        if isinstance(payload, dict) and "data" in payload:
            payload = payload["data"]
        try:
            return NAVPayload.model_validate(payload)
        except ValidationError as exc:
            raise SourceUnavailable(self.source_name, "invalid NAV payload") from exc

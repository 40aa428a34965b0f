"""
Shared JSON-over-HTTP plumbing for the upstream source adapters.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ovt_nav.domain.errors import SourceUnavailable

logger = logging.getLogger(__name__)


class JsonHttpSource:
    source_name = "source"

    def __init__(self, api_base_url: str, timeout_seconds: float = 30.0):
        self.api_base_url = api_base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    def _url(self, path: str) -> str:
        return f"{self.api_base_url}/{path.lstrip('/')}" if path else self.api_base_url

    async def _request_json(
        self,
        url: str,
        params: Optional[dict] = None,
        method: str = "GET",
        json: Optional[dict] = None,
    ) -> Any:
        headers = {"Accept": "application/json"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.request(method, url, headers=headers, params=params, json=json)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.debug("%s request failed: %s", self.source_name, exc)
            raise SourceUnavailable(self.source_name, str(exc)) from exc

        if response.status_code != 200:
            logger.debug("%s API %s: %s", self.source_name, response.status_code, response.text)
            raise SourceUnavailable(self.source_name, f"HTTP {response.status_code}")
        try:
            return response.json()
        except ValueError as exc:
            raise SourceUnavailable(self.source_name, "invalid JSON") from exc

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

import httpx

from fxcharts.providers.base import ApiError, RateProvider

log = logging.getLogger("frankfurter_provider")


class FrankfurterProvider(RateProvider):
    """
    Frankfurter exchange-rate history (REST).

    GET {base_url}/{start}..{end}?from=NZD&to=CNY
      -> {"rates": {"2020-01-01": {"CNY": 4.61}, ...}}
      -> {"error": "..."} on bad input
    """

    def __init__(
        self,
        base_url: str = "https://api.frankfurter.app",
        timeout_s: float = 20.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout_s)

    def build_url(self, start: date, end: date) -> str:
        return f"{self.base_url}/{start.isoformat()}..{end.isoformat()}"

    async def fetch_rate_history(
        self,
        base: str,
        target: str,
        start: date,
        end: date,
    ) -> dict[str, Any]:
        url = self.build_url(start, end)
        params = {"from": base, "to": target}

        resp = await self._client.get(url, params=params)
        try:
            data = resp.json()
        except ValueError:
            # Non-JSON error pages: report the HTTP status rather than the decode error.
            resp.raise_for_status()
            raise

        # The error body wins over the status code: callers get the API's own message.
        if isinstance(data, dict) and data.get("error"):
            log.warning("Frankfurter error base=%s target=%s error=%s", base, target, data["error"])
            raise ApiError(str(data["error"]))

        resp.raise_for_status()
        return data

    async def aclose(self) -> None:
        await self._client.aclose()

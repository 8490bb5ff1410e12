from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from fxcharts.providers.base import CandleProvider

log = logging.getLogger("huobi_provider")


class HuobiProvider(CandleProvider):
    """
    Huobi kline history (REST).

    GET {url}?period=1day&size=200&symbol=btcusdt
      -> {"data": [{"id": 1577836800, "open": ..., "close": ..., "low": ..., "high": ..., "vol": ...}]}

    Rows come back newest first; ordering is left to the series builder.
    """

    def __init__(
        self,
        url: str = "https://api.huobi.pro/market/history/kline",
        period: str = "1day",
        size: int = 200,
        symbol: str = "btcusdt",
        timeout_s: float = 20.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.url = url
        self.period = period
        self.size = size
        self.symbol = symbol
        self._client = client or httpx.AsyncClient(timeout=timeout_s)

    def params(self) -> dict[str, str]:
        return {"period": self.period, "size": str(self.size), "symbol": self.symbol}

    async def fetch_klines(self) -> dict[str, Any]:
        resp = await self._client.get(self.url, params=self.params())
        resp.raise_for_status()

        data = resp.json()
        log.debug("Huobi klines symbol=%s rows=%s", self.symbol, len(data.get("data") or []))
        return data

    async def aclose(self) -> None:
        await self._client.aclose()

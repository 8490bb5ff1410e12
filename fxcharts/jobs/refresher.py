from __future__ import annotations

import asyncio
import logging
import traceback
from datetime import tzinfo
from typing import Any, Awaitable, Callable, Optional

from fxcharts.models.series import FetchResult
from fxcharts.pipelines import normalize_currency, query_candles, query_rates
from fxcharts.providers.base import CandleProvider, RateProvider
from fxcharts.render.sinks import ChartSink

Query = Callable[..., Awaitable[FetchResult]]
Render = Callable[..., None]


class LatestRefresher:
    """
    Fetch-then-render where the most recent trigger wins.

    - trigger() cancels whatever run is still in flight, then starts a new one
    - a superseded run never reaches render()
    - failed runs are logged and kept in last_result; render() is skipped
    """

    def __init__(self, query: Query, render: Render, name: str = "refresher"):
        self._query = query
        self._render = render
        self._task: Optional[asyncio.Task] = None
        self._seq = 0
        self.last_result: Optional[FetchResult] = None
        self.log = logging.getLogger(name)

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    def trigger(self, *args: Any) -> asyncio.Task:
        if self.in_flight:
            self.log.debug("Superseding in-flight refresh seq=%d", self._seq)
            self._task.cancel()

        self._seq += 1
        self._task = asyncio.create_task(self._run(self._seq, args))
        return self._task

    async def _run(self, seq: int, args: tuple) -> FetchResult:
        try:
            result = await self._query(*args)
        except Exception as e:
            # Keep the app alive if a refresh blows up unexpectedly, but log it.
            self.log.error("Refresh failed args=%s error=%s", args, repr(e))
            self.log.error(traceback.format_exc())
            result = FetchResult.failure(repr(e))

        if seq != self._seq:
            self.log.debug("Dropping stale refresh seq=%d latest=%d", seq, self._seq)
            return result

        if not result.ok:
            self.log.warning("Refresh returned error args=%s error=%s", args, result.error)
            self.last_result = result
            return result

        try:
            self._render(result.value, *args)
        except Exception as e:
            self.log.error("Render failed args=%s error=%s", args, repr(e))
            self.log.error(traceback.format_exc())
            result = FetchResult.failure(repr(e))

        self.last_result = result
        return result

    async def wait(self) -> Optional[FetchResult]:
        """Wait for the latest run (following any newer triggers made meanwhile)."""
        while self._task is not None:
            task = self._task
            try:
                result = await task
            except asyncio.CancelledError:
                if not task.cancelled():
                    raise
                if task is self._task:
                    return None
                continue

            if task is self._task:
                return result
        return None

    def close(self) -> None:
        if self.in_flight:
            self._task.cancel()


def rates_refresher(provider: RateProvider, sink: ChartSink) -> LatestRefresher:
    """trigger(base, target, start, end) -> renders the rate chart into sink."""

    async def query(base, target, start, end):
        return await query_rates(provider, base, target, start, end)

    def render(points, base, target, start, end):
        sink.render_rates(normalize_currency(base), normalize_currency(target), points)

    return LatestRefresher(query, render, name="rates_refresher")


def candles_refresher(
    provider: CandleProvider,
    sink: ChartSink,
    tz: Optional[tzinfo] = None,
) -> LatestRefresher:
    """trigger() -> renders the candle chart into sink."""

    async def query():
        return await query_candles(provider, tz=tz)

    def render(candles):
        sink.render_candles(provider.symbol, candles)

    return LatestRefresher(query, render, name="candles_refresher")

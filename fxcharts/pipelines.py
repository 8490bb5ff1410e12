from __future__ import annotations

import logging
from datetime import date, tzinfo
from typing import Optional

import httpx

from fxcharts.models.series import CandlePoint, FetchResult, RatePoint
from fxcharts.providers.base import ApiError, CandleProvider, RateProvider
from fxcharts.series.candles import build_candle_series
from fxcharts.series.rates import build_rate_series

log = logging.getLogger("pipelines")


def normalize_currency(code: str) -> str:
    return (code or "").strip().upper()


async def fetch_rates(
    provider: RateProvider,
    base: str,
    target: str,
    start: date,
    end: date,
) -> tuple[RatePoint, ...]:
    """
    Exchange-rate pipeline: one GET, then shape into ascending, truncated RatePoints.

    Raises ApiError when the response carries an `error` message.
    Network / decode errors and a missing target currency propagate as-is.
    """
    base = normalize_currency(base)
    target = normalize_currency(target)

    data = await provider.fetch_rate_history(base, target, start, end)
    points = build_rate_series(data["rates"], target)

    log.info("Fetched rates base=%s target=%s points=%d", base, target, len(points))
    return points


async def fetch_candles(
    provider: CandleProvider,
    tz: Optional[tzinfo] = None,
) -> tuple[CandlePoint, ...]:
    """
    Candlestick pipeline: one GET to the fixed kline endpoint, then sort and shape.
    No explicit checks; malformed payloads fail with whatever the parse raises.
    """
    data = await provider.fetch_klines()
    candles = build_candle_series(data["data"], tz=tz)

    log.info("Fetched candles symbol=%s count=%d", provider.symbol, len(candles))
    return candles


async def query_rates(
    provider: RateProvider,
    base: str,
    target: str,
    start: date,
    end: date,
) -> FetchResult[tuple[RatePoint, ...]]:
    """fetch_rates as a result: API and HTTP failures become FetchResult.failure."""
    try:
        points = await fetch_rates(provider, base, target, start, end)
    except ApiError as e:
        log.warning("Rate query rejected base=%s target=%s error=%s", base, target, e.message)
        return FetchResult.failure(e.message)
    except httpx.HTTPError as e:
        log.warning("Rate query failed base=%s target=%s error=%s", base, target, repr(e))
        return FetchResult.failure(str(e) or e.__class__.__name__)

    return FetchResult.success(points)


async def query_candles(
    provider: CandleProvider,
    tz: Optional[tzinfo] = None,
) -> FetchResult[tuple[CandlePoint, ...]]:
    try:
        candles = await fetch_candles(provider, tz=tz)
    except httpx.HTTPError as e:
        log.warning("Candle query failed symbol=%s error=%s", provider.symbol, repr(e))
        return FetchResult.failure(str(e) or e.__class__.__name__)

    return FetchResult.success(candles)

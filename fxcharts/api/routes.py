from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request

from fxcharts.pipelines import normalize_currency, query_candles, query_rates
from fxcharts.render.sinks import CANDLES, RATES, candle_chart_payload, rate_chart_payload
from fxcharts.series.rates import default_window
from fxcharts.series.tooltip import nearest_point, tooltip_lines

router = APIRouter()


def resolve_rate_query(
    request: Request,
    base: Optional[str],
    target: Optional[str],
    from_date: Optional[date],
    to_date: Optional[date],
) -> tuple[str, str, date, date]:
    """Fill in missing inputs with the configured pair and trailing window."""
    settings = request.app.state.settings
    start, end = default_window(request.app.state.today(), settings.default_window_days)

    return (
        normalize_currency(base or settings.default_base_currency),
        normalize_currency(target or settings.default_target_currency),
        from_date or start,
        to_date or end,
    )


@router.get("/rates")
async def rates(
    request: Request,
    base: Optional[str] = Query(None, description="Base currency, e.g. NZD"),
    target: Optional[str] = Query(None, description="Target currency, e.g. CNY"),
    from_date: Optional[date] = Query(None, description="First day, YYYY-MM-DD"),
    to_date: Optional[date] = Query(None, description="Last day, YYYY-MM-DD"),
):
    """
    Direct fetch of the exchange-rate line data.
    Upstream errors come back as 502 with the upstream message.
    """
    base, target, start, end = resolve_rate_query(request, base, target, from_date, to_date)

    result = await query_rates(request.app.state.rate_provider, base, target, start, end)
    if not result.ok:
        raise HTTPException(status_code=502, detail=result.error)

    return rate_chart_payload(base, target, result.value)


@router.get("/candles")
async def candles(request: Request):
    """Direct fetch of the candlestick + volume data."""
    provider = request.app.state.candle_provider

    result = await query_candles(provider, tz=request.app.state.tz)
    if not result.ok:
        raise HTTPException(status_code=502, detail=result.error)

    return candle_chart_payload(provider.symbol, result.value)


@router.post("/charts/rates/refresh")
async def refresh_rates_chart(
    request: Request,
    base: Optional[str] = Query(None),
    target: Optional[str] = Query(None),
    from_date: Optional[date] = Query(None),
    to_date: Optional[date] = Query(None),
):
    """
    Input-change hook: re-render the rate chart in the background.
    A newer call supersedes one still in flight.
    """
    base, target, start, end = resolve_rate_query(request, base, target, from_date, to_date)
    request.app.state.rates_refresher.trigger(base, target, start, end)

    return {
        "ok": True,
        "base": base,
        "target": target,
        "from_date": start.isoformat(),
        "to_date": end.isoformat(),
    }


@router.get("/charts/rates")
def rates_chart(request: Request):
    payload = request.app.state.sink.get_payload(RATES)
    if payload is None:
        raise HTTPException(status_code=404, detail="rate chart not rendered yet")
    return payload


@router.get("/charts/candles")
def candles_chart(request: Request):
    payload = request.app.state.sink.get_payload(CANDLES)
    if payload is None:
        raise HTTPException(status_code=404, detail="candle chart not rendered yet")
    return payload


@router.get("/charts/rates/tooltip")
def rates_tooltip(
    request: Request,
    at: date = Query(..., description="Hovered day, YYYY-MM-DD"),
):
    """Nearest rendered point to the hovered day plus its tooltip text."""
    rendered = request.app.state.sink.rates
    point = nearest_point(rendered.points, at) if rendered is not None else None
    if point is None:
        raise HTTPException(status_code=404, detail="no rate points rendered")

    return {
        "date": point.date.isoformat(),
        "rate": point.rate,
        "lines": tooltip_lines(rendered.base, rendered.target, point),
    }

from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Any, Mapping

from fxcharts.models.series import RatePoint


def truncate_rate(rate: float) -> float:
    """Cut a rate down to 3 decimals (1.0549 -> 1.054, never 1.055)."""
    return math.floor(rate * 1000) / 1000


def build_rate_series(rates: Mapping[str, Mapping[str, Any]], target: str) -> tuple[RatePoint, ...]:
    """
    Convert the `rates` mapping of a history response into RatePoints.

    rates: {"2020-01-02": {"CNY": 1.0551}, "2020-01-01": {"CNY": 1.0}}
    Mapping order is not chronological, so the result is sorted by date.
    """
    points = [
        RatePoint(date=date.fromisoformat(day), rate=truncate_rate(float(per_ccy[target])))
        for day, per_ccy in rates.items()
    ]
    points.sort(key=lambda p: p.date)
    return tuple(points)


def default_window(today: date, days: int = 365) -> tuple[date, date]:
    """Trailing window ending today, used when no dates are given."""
    return today - timedelta(days=days), today

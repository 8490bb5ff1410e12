from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Any, Iterable, Mapping, Optional

from fxcharts.models.series import CandlePoint


def candle_direction(open_: float, close: float) -> int:
    """+1 only when open is strictly above close; a flat candle counts as -1."""
    return 1 if open_ > close else -1


def format_day(ts: int, tz: Optional[tzinfo] = None) -> str:
    """Unix seconds -> "YYYY-MM-DD" (local time unless tz is given)."""
    return datetime.fromtimestamp(ts, tz=tz).strftime("%Y-%m-%d")


def build_candle_series(
    rows: Iterable[Mapping[str, Any]],
    tz: Optional[tzinfo] = None,
) -> tuple[CandlePoint, ...]:
    """
    Convert raw kline rows into CandlePoints.

    Each row: {"id": unix_seconds, "open", "close", "low", "high", "vol"}.
    Rows are sorted by id first; a missing field raises KeyError.
    """
    out: list[CandlePoint] = []
    for row in sorted(rows, key=lambda r: r["id"]):
        out.append(
            CandlePoint(
                timestamp=int(row["id"]),
                date=format_day(row["id"], tz),
                open=row["open"],
                close=row["close"],
                low=row["low"],
                high=row["high"],
                volume=row["vol"],
                direction=candle_direction(row["open"], row["close"]),
            )
        )
    return tuple(out)

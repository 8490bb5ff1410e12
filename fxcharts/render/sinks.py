from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, TextIO

from fxcharts.models.series import CandlePoint, RatePoint

RATES = "rates"
CANDLES = "candles"


def rate_chart_payload(base: str, target: str, points: Sequence[RatePoint]) -> dict[str, Any]:
    """Line-chart input: one {date, rate} row per day, oldest first."""
    return {
        "base": base,
        "target": target,
        "dataset": [{"date": p.date.isoformat(), "rate": p.rate} for p in points],
    }


def candle_chart_payload(symbol: str, candles: Sequence[CandlePoint]) -> dict[str, Any]:
    """
    Candlestick + volume input, split the way the charting library consumes it:
    categories (x labels), values ([o, c, l, h]) and volumes ([vol, vol, direction]).
    """
    return {
        "symbol": symbol,
        "categories": [c.date for c in candles],
        "values": [c.values for c in candles],
        "volumes": [c.volume_bar for c in candles],
    }


class ChartSink(ABC):
    """
    Hand-off point to the external chart renderer.
    Always passed in explicitly; nothing looks a sink up from global state.
    """

    @abstractmethod
    def render_rates(self, base: str, target: str, points: Sequence[RatePoint]) -> None:
        raise NotImplementedError

    @abstractmethod
    def render_candles(self, symbol: str, candles: Sequence[CandlePoint]) -> None:
        raise NotImplementedError


@dataclass
class RenderedRates:
    base: str
    target: str
    points: tuple[RatePoint, ...]
    payload: dict[str, Any]


@dataclass
class MemorySink(ChartSink):
    """
    Keeps the last rendered frame per chart.
    Each render replaces the previous frame in place (one container per chart).
    """
    rates: Optional[RenderedRates] = None
    payloads: Dict[str, dict[str, Any]] = field(default_factory=dict)
    render_count: int = 0

    def render_rates(self, base: str, target: str, points: Sequence[RatePoint]) -> None:
        payload = rate_chart_payload(base, target, points)
        self.rates = RenderedRates(base=base, target=target, points=tuple(points), payload=payload)
        self.payloads[RATES] = payload
        self.render_count += 1

    def render_candles(self, symbol: str, candles: Sequence[CandlePoint]) -> None:
        self.payloads[CANDLES] = candle_chart_payload(symbol, candles)
        self.render_count += 1

    def get_payload(self, kind: str) -> Optional[dict[str, Any]]:
        return self.payloads.get(kind)


class JsonFileSink(ChartSink):
    """
    Writes each frame as a JSON document followed by a newline to the given text handle.
    Frames are single lines unless an indent is set.
    """

    def __init__(self, out: TextIO, indent: Optional[int] = None):
        self.out = out
        self.indent = indent

    def _write(self, kind: str, payload: dict[str, Any]) -> None:
        self.out.write(json.dumps({"chart": kind, **payload}, indent=self.indent))
        self.out.write("\n")
        self.out.flush()

    def render_rates(self, base: str, target: str, points: Sequence[RatePoint]) -> None:
        self._write(RATES, rate_chart_payload(base, target, points))

    def render_candles(self, symbol: str, candles: Sequence[CandlePoint]) -> None:
        self._write(CANDLES, candle_chart_payload(symbol, candles))

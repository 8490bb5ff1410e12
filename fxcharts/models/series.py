from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class RatePoint:
    """
    RatePoint = one day on the exchange-rate line.

    date: calendar day the rate applies to
    rate: units of target currency per 1 unit of base, truncated to 3 decimals
    """
    date: date
    rate: float


@dataclass(frozen=True)
class CandlePoint:
    """
    CandlePoint = one candlestick period (OHLCV) ready for charting.

    timestamp: period start in unix seconds (the sort key)
    date: "YYYY-MM-DD" label for the category axis
    direction: +1 when open > close, otherwise -1
    """
    timestamp: int
    date: str
    open: float
    close: float
    low: float
    high: float
    volume: float
    direction: int

    @property
    def values(self) -> list[float]:
        # Candlestick series order: open, close, low, high.
        return [self.open, self.close, self.low, self.high]

    @property
    def volume_bar(self) -> list[float]:
        return [self.volume, self.volume, self.direction]


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Outcome of one fetch-then-transform run: either a value or an error message."""
    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "FetchResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> "FetchResult[T]":
        return cls(error=error)

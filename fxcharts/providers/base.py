from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Dict


class ApiError(Exception):
    """Upstream API answered with an explicit `error` message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RateProvider(ABC):
    """
    Exchange-rate provider contract (interface).

    fetch_rate_history(): one GET for a date range, returns the parsed JSON body
    """

    @abstractmethod
    async def fetch_rate_history(
        self,
        base: str,
        target: str,
        start: date,
        end: date,
    ) -> Dict[str, Any]:
        raise NotImplementedError

    async def aclose(self) -> None:
        return None


class CandleProvider(ABC):
    """
    Candle provider contract (interface).

    fetch_klines(): one GET for the configured symbol/period, returns the parsed JSON body
    """

    symbol: str = ""

    @abstractmethod
    async def fetch_klines(self) -> Dict[str, Any]:
        raise NotImplementedError

    async def aclose(self) -> None:
        return None

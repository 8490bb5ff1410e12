from typing import Optional

from fxcharts.config import Settings, get_settings
from fxcharts.providers.base import CandleProvider, RateProvider
from fxcharts.providers.frankfurter import FrankfurterProvider
from fxcharts.providers.huobi import HuobiProvider


def get_rate_provider(settings: Optional[Settings] = None) -> RateProvider:
    """
    Provider loader / factory.

    Reads RATES_PROVIDER from config and returns an instance of the selected provider.
    This is the single place that knows about concrete providers.
    """
    settings = settings or get_settings()
    provider_name = settings.rates_provider.strip().upper()

    if provider_name == "FRANKFURTER":
        return FrankfurterProvider(
            base_url=settings.rates_base_url,
            timeout_s=settings.http_timeout_seconds,
        )

    raise ValueError(f"Unknown RATES_PROVIDER='{settings.rates_provider}'. Expected: FRANKFURTER")


def get_candle_provider(settings: Optional[Settings] = None) -> CandleProvider:
    settings = settings or get_settings()
    provider_name = settings.candles_provider.strip().upper()

    if provider_name == "HUOBI":
        return HuobiProvider(
            url=settings.candles_url,
            period=settings.candles_period,
            size=settings.candles_size,
            symbol=settings.candles_symbol,
            timeout_s=settings.http_timeout_seconds,
        )

    raise ValueError(f"Unknown CANDLES_PROVIDER='{settings.candles_provider}'. Expected: HUOBI")

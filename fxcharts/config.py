# fxcharts/config.py
import os
from dataclasses import dataclass
from dotenv import load_dotenv

# Loads variables from a local .env file into environment variables (dev only).
load_dotenv()


@dataclass(frozen=True)
class Settings:
    # App config
    app_env: str
    log_level: str
    rates_provider: str
    candles_provider: str

    # Exchange-rate history (Frankfurter)
    rates_base_url: str
    default_base_currency: str
    default_target_currency: str
    default_window_days: int

    # Kline history (Huobi)
    candles_url: str
    candles_period: str
    candles_size: int
    candles_symbol: str

    http_timeout_seconds: float


def get_settings() -> Settings:
    """
    Reads env vars and returns a Settings object.
    """
    window_days = int(os.getenv("DEFAULT_WINDOW_DAYS", "365"))
    if window_days <= 0:
        raise RuntimeError("DEFAULT_WINDOW_DAYS must be a positive number of days")

    return Settings(
        app_env=os.getenv("APP_ENV", "local"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        rates_provider=os.getenv("RATES_PROVIDER", "FRANKFURTER"),
        candles_provider=os.getenv("CANDLES_PROVIDER", "HUOBI"),
        rates_base_url=os.getenv("RATES_BASE_URL", "https://api.frankfurter.app").rstrip("/"),
        default_base_currency=os.getenv("DEFAULT_BASE_CURRENCY", "NZD").strip().upper(),
        default_target_currency=os.getenv("DEFAULT_TARGET_CURRENCY", "CNY").strip().upper(),
        default_window_days=window_days,
        candles_url=os.getenv("CANDLES_URL", "https://api.huobi.pro/market/history/kline"),
        candles_period=os.getenv("CANDLES_PERIOD", "1day"),
        candles_size=int(os.getenv("CANDLES_SIZE", "200")),
        candles_symbol=os.getenv("CANDLES_SYMBOL", "btcusdt").strip().lower(),
        http_timeout_seconds=float(os.getenv("HTTP_TIMEOUT_SECONDS", "20")),
    )

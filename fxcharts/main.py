import logging
from contextlib import asynccontextmanager
from datetime import date, tzinfo
from typing import Callable, Optional

from fastapi import FastAPI

from fxcharts.api.routes import router as api_router
from fxcharts.config import Settings, get_settings
from fxcharts.jobs.refresher import candles_refresher, rates_refresher
from fxcharts.providers.base import CandleProvider, RateProvider
from fxcharts.providers.loader import get_candle_provider, get_rate_provider
from fxcharts.render.sinks import MemorySink
from fxcharts.series.rates import default_window


def create_app(
    settings: Optional[Settings] = None,
    rate_provider: Optional[RateProvider] = None,
    candle_provider: Optional[CandleProvider] = None,
    sink: Optional[MemorySink] = None,
    today: Callable[[], date] = date.today,
    tz: Optional[tzinfo] = None,
) -> FastAPI:
    """
    Wires providers, the chart sink and both refreshers onto app.state.
    Everything is injectable; defaults come from Settings.
    """
    settings = settings or get_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    rate_provider = rate_provider or get_rate_provider(settings)
    candle_provider = candle_provider or get_candle_provider(settings)
    sink = sink if sink is not None else MemorySink()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # First render with the default pair / window, then the candle chart.
        start, end = default_window(today(), settings.default_window_days)
        app.state.rates_refresher.trigger(
            settings.default_base_currency,
            settings.default_target_currency,
            start,
            end,
        )
        app.state.candles_refresher.trigger()

        yield

        # Let cancelled refreshes unwind before their HTTP clients go away.
        for refresher in (app.state.rates_refresher, app.state.candles_refresher):
            refresher.close()
            await refresher.wait()
        await rate_provider.aclose()
        await candle_provider.aclose()

    app = FastAPI(title="FX Charts API", version="0.1.0", lifespan=lifespan)
    app.include_router(api_router)

    app.state.settings = settings
    app.state.rate_provider = rate_provider
    app.state.candle_provider = candle_provider
    app.state.sink = sink
    app.state.today = today
    app.state.tz = tz
    app.state.rates_refresher = rates_refresher(rate_provider, sink)
    app.state.candles_refresher = candles_refresher(candle_provider, sink, tz=tz)

    @app.get("/health")
    def health():
        return {
            "status": "ok",
            "app_env": settings.app_env,
            "rates_provider_config": settings.rates_provider,
            "rates_provider_loaded": rate_provider.__class__.__name__,
            "candles_provider_config": settings.candles_provider,
            "candles_provider_loaded": candle_provider.__class__.__name__,
        }

    return app


app = create_app()

import argparse
import asyncio
import os
import sys
from datetime import date

# Add repo root to Python import path so `import fxcharts...` works
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from fxcharts.config import get_settings
from fxcharts.jobs.refresher import candles_refresher, rates_refresher
from fxcharts.providers.loader import get_candle_provider, get_rate_provider
from fxcharts.render.sinks import JsonFileSink
from fxcharts.series.rates import default_window


async def export(args: argparse.Namespace, out) -> int:
    settings = get_settings()
    sink = JsonFileSink(out, indent=2 if args.pretty else None)

    start, end = default_window(date.today(), settings.default_window_days)
    start = date.fromisoformat(args.from_date) if args.from_date else start
    end = date.fromisoformat(args.to_date) if args.to_date else end

    rates_provider = get_rate_provider(settings)
    candle_provider = get_candle_provider(settings)
    failures = 0
    try:
        if args.chart in ("rates", "all"):
            refresher = rates_refresher(rates_provider, sink)
            refresher.trigger(args.base, args.target, start, end)
            result = await refresher.wait()
            if result is None or not result.ok:
                print(f"rates failed: {result.error if result else 'cancelled'}", file=sys.stderr)
                failures += 1

        if args.chart in ("candles", "all"):
            refresher = candles_refresher(candle_provider, sink)
            refresher.trigger()
            result = await refresher.wait()
            if result is None or not result.ok:
                print(f"candles failed: {result.error if result else 'cancelled'}", file=sys.stderr)
                failures += 1
    finally:
        await rates_provider.aclose()
        await candle_provider.aclose()

    return 1 if failures else 0


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Write chart payloads as JSON lines")
    parser.add_argument("--chart", choices=["rates", "candles", "all"], default="all")
    parser.add_argument("--base", default=settings.default_base_currency)
    parser.add_argument("--target", default=settings.default_target_currency)
    parser.add_argument("--from-date", default=None, help="YYYY-MM-DD")
    parser.add_argument("--to-date", default=None, help="YYYY-MM-DD")
    parser.add_argument("--out", default="-", help="Output file (default: stdout)")
    parser.add_argument("--pretty", action="store_true")
    args = parser.parse_args()

    if args.out == "-":
        code = asyncio.run(export(args, sys.stdout))
    else:
        with open(args.out, "w", encoding="utf-8") as f:
            code = asyncio.run(export(args, f))

    sys.exit(code)


if __name__ == "__main__":
    main()

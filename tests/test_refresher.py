import asyncio
import io
import json
import unittest
from datetime import date

from fxcharts.jobs.refresher import LatestRefresher, rates_refresher
from fxcharts.models.series import FetchResult, RatePoint
from fxcharts.providers.base import ApiError, RateProvider
from fxcharts.render.sinks import JsonFileSink, MemorySink, RATES


class GatedQuery:
    """Query whose calls block until the test releases them."""

    def __init__(self):
        self.gates: dict[str, asyncio.Event] = {}

    async def __call__(self, key):
        gate = asyncio.Event()
        self.gates[key] = gate
        await gate.wait()
        return FetchResult.success(key)


class FakeRateProvider(RateProvider):
    def __init__(self, rates=None, error=None):
        self.rates = rates or {}
        self.error = error
        self.calls = []

    async def fetch_rate_history(self, base, target, start, end):
        self.calls.append((base, target, start, end))
        if self.error:
            raise ApiError(self.error)
        return {"rates": self.rates}


class TestLatestRefresher(unittest.IsolatedAsyncioTestCase):
    async def test_latest_trigger_wins(self):
        query = GatedQuery()
        rendered = []
        refresher = LatestRefresher(query, lambda value, key: rendered.append(value))

        first = refresher.trigger("first")
        await asyncio.sleep(0)
        refresher.trigger("second")
        await asyncio.sleep(0)

        query.gates["second"].set()
        result = await refresher.wait()

        self.assertTrue(first.cancelled())
        self.assertEqual(result.value, "second")
        self.assertEqual(rendered, ["second"])

    async def test_superseded_run_never_renders(self):
        query = GatedQuery()
        rendered = []
        refresher = LatestRefresher(query, lambda value, key: rendered.append(value))

        refresher.trigger("first")
        await asyncio.sleep(0)
        refresher.trigger("second")
        await asyncio.sleep(0)

        # Releasing the old gate must not resurrect the cancelled run.
        query.gates["first"].set()
        query.gates["second"].set()
        await refresher.wait()
        await asyncio.sleep(0)

        self.assertEqual(rendered, ["second"])

    async def test_failure_skips_render(self):
        async def failing(key):
            return FetchResult.failure("bad pair")

        rendered = []
        refresher = LatestRefresher(failing, lambda value, key: rendered.append(value))

        refresher.trigger("x")
        result = await refresher.wait()

        self.assertFalse(result.ok)
        self.assertEqual(refresher.last_result.error, "bad pair")
        self.assertEqual(rendered, [])

    async def test_unexpected_exception_is_logged(self):
        async def broken():
            raise RuntimeError("kaboom")

        refresher = LatestRefresher(broken, lambda value: None, name="test_refresher")

        with self.assertLogs("test_refresher", level="ERROR"):
            refresher.trigger()
            result = await refresher.wait()

        self.assertFalse(result.ok)
        self.assertIn("kaboom", result.error)

    async def test_render_failure_is_logged_and_recorded(self):
        async def ok_query():
            return FetchResult.success("frame")

        def render_to_closed_sink(value):
            raise OSError("sink closed")

        refresher = LatestRefresher(ok_query, render_to_closed_sink, name="render_refresher")

        with self.assertLogs("render_refresher", level="ERROR") as logs:
            refresher.trigger()
            result = await refresher.wait()

        self.assertFalse(result.ok)
        self.assertIn("sink closed", result.error)
        self.assertFalse(refresher.last_result.ok)
        self.assertTrue(any("Render failed" in line for line in logs.output))

    async def test_close_cancels_in_flight(self):
        query = GatedQuery()
        refresher = LatestRefresher(query, lambda value, key: None)

        task = refresher.trigger("slow")
        await asyncio.sleep(0)
        refresher.close()

        self.assertIsNone(await refresher.wait())
        self.assertTrue(task.cancelled())
        self.assertFalse(refresher.in_flight)


class TestRatesRefresher(unittest.IsolatedAsyncioTestCase):
    async def test_renders_into_memory_sink(self):
        provider = FakeRateProvider({"2020-01-02": {"CNY": 4.7}, "2020-01-01": {"CNY": 4.6123}})
        sink = MemorySink()
        refresher = rates_refresher(provider, sink)

        refresher.trigger("nzd", "cny", date(2020, 1, 1), date(2020, 1, 2))
        await refresher.wait()

        self.assertEqual(provider.calls, [("NZD", "CNY", date(2020, 1, 1), date(2020, 1, 2))])
        self.assertEqual(sink.rates.base, "NZD")
        self.assertEqual(sink.rates.points[0], RatePoint(date=date(2020, 1, 1), rate=4.612))
        self.assertEqual(
            sink.get_payload(RATES)["dataset"],
            [{"date": "2020-01-01", "rate": 4.612}, {"date": "2020-01-02", "rate": 4.7}],
        )

    async def test_api_error_leaves_previous_frame(self):
        sink = MemorySink()
        good = rates_refresher(FakeRateProvider({"2020-01-01": {"CNY": 4.6}}), sink)
        good.trigger("NZD", "CNY", date(2020, 1, 1), date(2020, 1, 1))
        await good.wait()

        bad = rates_refresher(FakeRateProvider(error="not found"), sink)
        bad.trigger("NZD", "XXX", date(2020, 1, 1), date(2020, 1, 1))
        result = await bad.wait()

        self.assertEqual(result.error, "not found")
        self.assertEqual(sink.rates.target, "CNY")
        self.assertEqual(sink.render_count, 1)

    async def test_json_file_sink_writes_one_line_per_frame(self):
        out = io.StringIO()
        refresher = rates_refresher(FakeRateProvider({"2020-01-01": {"CNY": 4.6}}), JsonFileSink(out))

        refresher.trigger("NZD", "CNY", date(2020, 1, 1), date(2020, 1, 1))
        await refresher.wait()

        frame = json.loads(out.getvalue().strip())
        self.assertEqual(frame["chart"], "rates")
        self.assertEqual(frame["dataset"], [{"date": "2020-01-01", "rate": 4.6}])

import unittest
from datetime import date

import httpx

from fxcharts.providers.base import ApiError
from fxcharts.providers.frankfurter import FrankfurterProvider
from fxcharts.providers.huobi import HuobiProvider


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestFrankfurterProvider(unittest.IsolatedAsyncioTestCase):
    async def test_request_shape(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"rates": {}})

        provider = FrankfurterProvider(base_url="https://fx.test/", client=mock_client(handler))
        await provider.fetch_rate_history("NZD", "CNY", date(2020, 1, 1), date(2020, 12, 31))
        await provider.aclose()

        self.assertEqual(len(seen), 1)
        req = seen[0]
        self.assertEqual(req.method, "GET")
        self.assertEqual(req.url.path, "/2020-01-01..2020-12-31")
        self.assertEqual(req.url.params["from"], "NZD")
        self.assertEqual(req.url.params["to"], "CNY")

    async def test_error_field_raises_api_error(self):
        def handler(request):
            return httpx.Response(200, json={"error": "bad currency pair"})

        provider = FrankfurterProvider(client=mock_client(handler))
        with self.assertRaises(ApiError) as ctx:
            await provider.fetch_rate_history("NZD", "XXX", date(2020, 1, 1), date(2020, 1, 2))

        self.assertEqual(str(ctx.exception), "bad currency pair")
        self.assertEqual(ctx.exception.message, "bad currency pair")

    async def test_error_field_wins_over_status(self):
        def handler(request):
            return httpx.Response(422, json={"error": "invalid date"})

        provider = FrankfurterProvider(client=mock_client(handler))
        with self.assertRaises(ApiError):
            await provider.fetch_rate_history("NZD", "CNY", date(2020, 1, 1), date(2020, 1, 2))

    async def test_empty_error_field_is_ignored(self):
        def handler(request):
            return httpx.Response(200, json={"error": "", "rates": {"2020-01-01": {"CNY": 1.0}}})

        provider = FrankfurterProvider(client=mock_client(handler))
        data = await provider.fetch_rate_history("NZD", "CNY", date(2020, 1, 1), date(2020, 1, 1))

        self.assertEqual(data["rates"], {"2020-01-01": {"CNY": 1.0}})

    async def test_http_error_without_error_field(self):
        def handler(request):
            return httpx.Response(500, json={"message": "upstream down"})

        provider = FrankfurterProvider(client=mock_client(handler))
        with self.assertRaises(httpx.HTTPStatusError):
            await provider.fetch_rate_history("NZD", "CNY", date(2020, 1, 1), date(2020, 1, 2))


class TestHuobiProvider(unittest.IsolatedAsyncioTestCase):
    async def test_fixed_request_params(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"data": []})

        provider = HuobiProvider(url="https://kline.test/market/history/kline", client=mock_client(handler))
        data = await provider.fetch_klines()
        await provider.aclose()

        self.assertEqual(data, {"data": []})
        params = seen[0].url.params
        self.assertEqual(seen[0].url.path, "/market/history/kline")
        self.assertEqual(params["period"], "1day")
        self.assertEqual(params["size"], "200")
        self.assertEqual(params["symbol"], "btcusdt")

    async def test_http_error_propagates(self):
        def handler(request):
            return httpx.Response(503, text="unavailable")

        provider = HuobiProvider(client=mock_client(handler))
        with self.assertRaises(httpx.HTTPStatusError):
            await provider.fetch_klines()

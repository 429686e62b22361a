import httpx
import pytest

from cryptochat.adapters.coincap_client import DAY_MS, CoinCapClient
from cryptochat.core.errors import CoinNotFound, MalformedResponse
from cryptochat.core.models import Timeframe

BASE = "https://coincap.test/v2"
NOW = 1_700_000_000.0


def make_client(directory, handler):
    return CoinCapClient(BASE, directory, transport=httpx.MockTransport(handler), clock=lambda: NOW)


def test_spot_price_uses_provider_id_and_parses_strings(directory):
    def handler(request):
        assert request.url.path == "/v2/assets/xrp"
        return httpx.Response(
            200,
            json={"data": {"id": "xrp", "priceUsd": "0.5123", "changePercent24Hr": "-3.5", "marketCapUsd": "2.8e10"}},
        )

    point = make_client(directory, handler).get_spot_price(directory.get("ripple"))
    assert point.price == 0.5123  # noqa: PLR2004
    assert point.change_24h_pct == -3.5  # noqa: PLR2004
    assert point.market_cap_usd == 2.8e10  # noqa: PLR2004


def test_missing_asset(directory):
    client = make_client(directory, lambda r: httpx.Response(404, json={"error": "bitcoinz not found"}))
    with pytest.raises(CoinNotFound):
        client.get_spot_price(directory.coin_for("bitcoinz"))


def test_missing_data_envelope(directory):
    client = make_client(directory, lambda r: httpx.Response(200, json={"priceUsd": "1"}))
    with pytest.raises(MalformedResponse):
        client.get_spot_price(directory.get("bitcoin"))


def test_non_numeric_price(directory):
    client = make_client(directory, lambda r: httpx.Response(200, json={"data": {"priceUsd": "n/a"}}))
    with pytest.raises(MalformedResponse):
        client.get_spot_price(directory.get("bitcoin"))


def test_trending_maps_xrp_back_to_ripple(directory):
    assets = [
        {"id": "bitcoin", "symbol": "BTC", "name": "Bitcoin", "priceUsd": "60000", "marketCapUsd": "1.2e12"},
        {"id": "xrp", "symbol": "XRP", "name": "XRP", "priceUsd": "0.5", "marketCapUsd": "2.8e10"},
    ]
    coins = make_client(directory, lambda r: httpx.Response(200, json={"data": assets})).get_trending_coins(2)
    assert [c.coin.id for c in coins] == ["bitcoin", "ripple"]


@pytest.mark.parametrize("timeframe", list(Timeframe))
def test_history_window_and_order(directory, timeframe):
    end = int(NOW * 1000)

    def handler(request):
        params = request.url.params
        assert int(params["end"]) == end
        assert int(params["start"]) == end - timeframe.days * DAY_MS
        return httpx.Response(
            200,
            json={"data": [
                {"priceUsd": "2", "time": end},
                {"priceUsd": "1", "time": end - timeframe.days * DAY_MS},
            ]},
        )

    series = make_client(directory, handler).get_history(directory.get("bitcoin"), timeframe)
    assert [p.price_usd for p in series] == [1.0, 2.0]
    assert series[0].timestamp_ms < series[-1].timestamp_ms


def test_history_interval_is_hourly_for_short_windows(directory):
    seen = []

    def handler(request):
        seen.append(request.url.params["interval"])
        return httpx.Response(200, json={"data": [{"priceUsd": "1", "time": 1}]})

    client = make_client(directory, handler)
    client.get_history(directory.get("bitcoin"), Timeframe.ONE_DAY)
    client.get_history(directory.get("bitcoin"), Timeframe.THREE_DAYS)
    client.get_history(directory.get("bitcoin"), Timeframe.ONE_YEAR)
    assert seen == ["h1", "h1", "d1"]

import dataclasses

import httpx
import pytest

from cryptochat.adapters.coincap_client import CoinCapClient
from cryptochat.adapters.coingecko_client import CoinGeckoClient
from cryptochat.adapters.price_source import build_price_source, normalize_series
from cryptochat.bootstrap import build_orchestrator
from cryptochat.core.coins import WORD
from cryptochat.core.errors import ConfigurationError, MalformedResponse
from cryptochat.core.settings import get_settings
from cryptochat.storage.kv import MemoryStore


@pytest.fixture
def settings(monkeypatch):
    get_settings.cache_clear()
    monkeypatch.setenv("LEDGER_BACKEND", "memory")
    yield get_settings()
    get_settings.cache_clear()


def test_provider_selected_from_settings(settings, directory):
    assert isinstance(build_price_source(settings, directory), CoinGeckoClient)
    coincap = dataclasses.replace(settings, price_provider="coincap")
    assert isinstance(build_price_source(coincap, directory), CoinCapClient)


def test_unknown_provider(settings, directory):
    with pytest.raises(ConfigurationError):
        build_price_source(dataclasses.replace(settings, price_provider="binance"), directory)


def test_invalid_provider_env(monkeypatch):
    get_settings.cache_clear()
    monkeypatch.setenv("PRICE_PROVIDER", "kraken")
    try:
        with pytest.raises(ConfigurationError):
            get_settings()
    finally:
        get_settings.cache_clear()


def test_end_to_end_over_mock_transport(settings):
    def handler(request):
        if request.url.path.endswith("/simple/price"):
            return httpx.Response(200, json={"dogecoin": {"usd": 0.08, "usd_24h_change": 5.0}})
        return httpx.Response(404)

    store = MemoryStore()
    orchestrator = build_orchestrator(settings, store=store, transport=httpx.MockTransport(handler))

    reply = orchestrator.handle_utterance("What is dogecoin trading at?")
    assert reply.reply_text == "Dogecoin (DOGE) is trading at $0.08 with a 24h change of +5.00%"

    reply = orchestrator.handle_utterance("I have twenty doge")
    assert reply.reply_text == "Added 20 DOGE to your portfolio! Your total portfolio value is now $1.60."
    assert store.get(settings.ledger_key) is not None

    reply = orchestrator.handle_utterance("show the doge chart")
    assert reply.chart_request is None
    assert reply.reply_text.startswith("Sorry")


def test_word_policy_from_settings(settings):
    strict = dataclasses.replace(settings, coin_match_policy=WORD)
    orchestrator = build_orchestrator(strict, store=MemoryStore())
    assert orchestrator.directory.policy == WORD


def test_normalize_series_rejects_empty():
    with pytest.raises(MalformedResponse):
        normalize_series([])

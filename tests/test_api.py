import pytest
from fastapi.testclient import TestClient

from cryptochat.api.app import app, get_orchestrator
from cryptochat.core.errors import TransportError


@pytest.fixture
def client(orchestrator):
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    yield TestClient(app)  # type: ignore  # noqa: PGH003
    app.dependency_overrides.clear()


def test_chat_price(client):
    r = client.post("/chat", json={"text": "What's the price of bitcoin?"})
    assert r.status_code == 200  # noqa: PLR2004
    body = r.json()
    assert body["reply_text"].startswith("Bitcoin (BTC) is trading at $50,000.00")
    assert body["chart_request"] is None


def test_chat_chart_payload(client):
    body = client.post("/chat", json={"text": "solana chart 1 day"}).json()
    chart = body["chart_request"]
    assert chart["coin"]["id"] == "solana"
    assert chart["timeframe"] == "1d"
    assert len(chart["series"]) == 25  # noqa: PLR2004


def test_chat_rejects_empty_text(client):
    assert client.post("/chat", json={"text": ""}).status_code == 422  # noqa: PLR2004


def test_chat_status(client):
    assert client.get("/chat/status").json() == {"thinking": False}


def test_portfolio_flow(client, prices):
    client.post("/chat", json={"text": "I have 2 ETH"})
    client.post("/chat", json={"text": "add 1 btc"})

    body = client.get("/portfolio").json()
    assert body["count"] == 2  # noqa: PLR2004
    assert [i["coin"]["id"] for i in body["items"]] == ["ethereum", "bitcoin"]
    assert body["total_value"] == 56_000.0  # noqa: PLR2004

    prices.prices["ethereum"] = 4_000.0
    assert client.get("/portfolio", params={"refresh": True}).json()["total_value"] == 58_000.0  # noqa: PLR2004

    body = client.delete("/portfolio/ethereum").json()
    assert body["count"] == 1
    assert client.delete("/portfolio/ethereum").json()["count"] == 1


def test_price_endpoint(client):
    body = client.get("/prices/ETH").json()
    assert body["coin"]["id"] == "ethereum"
    assert body["price"]["price"] == 3_000.0  # noqa: PLR2004


def test_price_endpoint_unknown_coin(client):
    assert client.get("/prices/gold").status_code == 404  # noqa: PLR2004


def test_price_endpoint_upstream_failure(client, prices):
    prices.failures["bitcoin"] = TransportError("down")
    assert client.get("/prices/bitcoin").status_code == 502  # noqa: PLR2004


def test_trending_endpoint(client):
    body = client.get("/trending", params={"limit": 2}).json()
    assert [c["coin"]["id"] for c in body] == ["bitcoin", "ethereum"]


def test_history_endpoint(client):
    body = client.get("/history/btc", params={"timeframe": "3d"}).json()
    assert body["timeframe"] == "3d"
    assert body["count"] == 3 * 24 + 1
    stamps = [p["timestamp_ms"] for p in body["series"]]
    assert all(a < b for a, b in zip(stamps, stamps[1:]))


def test_history_rejects_unknown_timeframe(client):
    assert client.get("/history/btc", params={"timeframe": "2w"}).status_code == 422  # noqa: PLR2004

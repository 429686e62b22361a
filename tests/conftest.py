"""Shared fixtures: an in-process price source and ledger wiring."""

from __future__ import annotations

import pytest

from cryptochat.conversation.interpreter import Interpreter
from cryptochat.conversation.orchestrator import Orchestrator
from cryptochat.core.coins import CoinDirectory
from cryptochat.core.errors import CoinNotFound, DataError
from cryptochat.core.models import CoinRef, HistoryPoint, PricePoint, Timeframe, TrendingCoin
from cryptochat.portfolio.ledger import Ledger
from cryptochat.storage.kv import MemoryStore

HOUR_MS = 60 * 60 * 1000
NOW_MS = 1_700_000_000_000


class FakePriceSource:
    """Prices by coin id; ids listed in ``failures`` raise the given error."""

    def __init__(self, prices: dict[str, float] | None = None) -> None:
        self.prices: dict[str, float] = dict(prices or {})
        self.failures: dict[str, DataError] = {}
        self.trending_error: DataError | None = None
        self.history_error: DataError | None = None
        self.calls: list[str] = []

    def get_spot_price(self, coin: CoinRef) -> PricePoint:
        self.calls.append(coin.id)
        if coin.id in self.failures:
            raise self.failures[coin.id]
        if coin.id not in self.prices:
            raise CoinNotFound(f"no price for {coin.id}")
        return PricePoint(price=self.prices[coin.id], change_24h_pct=2.5, market_cap_usd=1e9)

    def get_trending_coins(self, limit: int = 10) -> list[TrendingCoin]:
        if self.trending_error is not None:
            raise self.trending_error
        directory = CoinDirectory()
        ranked = sorted(self.prices.items(), key=lambda kv: kv[1], reverse=True)
        return [
            TrendingCoin(
                coin=directory.coin_for(coin_id),
                price=PricePoint(price=price, change_24h_pct=None, market_cap_usd=price * 1e6),
            )
            for coin_id, price in ranked[:limit]
        ]

    def get_history(self, coin: CoinRef, timeframe: Timeframe) -> list[HistoryPoint]:
        if self.history_error is not None:
            raise self.history_error
        base = self.prices.get(coin.id, 1.0)
        hours = timeframe.days * 24
        return [
            HistoryPoint(timestamp_ms=NOW_MS - (hours - i) * HOUR_MS, price_usd=base + i)
            for i in range(hours + 1)
        ]


@pytest.fixture
def directory() -> CoinDirectory:
    return CoinDirectory()


@pytest.fixture
def prices() -> FakePriceSource:
    return FakePriceSource({"bitcoin": 50_000.0, "ethereum": 3_000.0, "solana": 150.0})


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def ledger(store: MemoryStore, prices: FakePriceSource, directory: CoinDirectory) -> Ledger:
    return Ledger(store=store, prices=prices, directory=directory, key="test-ledger")


@pytest.fixture
def orchestrator(prices: FakePriceSource, ledger: Ledger, directory: CoinDirectory) -> Orchestrator:
    return Orchestrator(interpreter=Interpreter(directory), prices=prices, ledger=ledger)

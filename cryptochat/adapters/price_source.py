from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

import httpx

from cryptochat.core.coins import CoinDirectory
from cryptochat.core.errors import ConfigurationError, MalformedResponse
from cryptochat.core.models import CoinRef, HistoryPoint, PricePoint, Timeframe, TrendingCoin
from cryptochat.core.settings import Settings

logger = logging.getLogger(__name__)


class PriceSource(Protocol):
    def get_spot_price(self, coin: CoinRef) -> PricePoint: ...

    def get_trending_coins(self, limit: int = 10) -> list[TrendingCoin]: ...

    def get_history(self, coin: CoinRef, timeframe: Timeframe) -> list[HistoryPoint]: ...


def normalize_series(samples: Iterable[tuple[int, float]]) -> list[HistoryPoint]:
    """Sort samples by time and drop repeated timestamps (first one wins)."""
    series: list[HistoryPoint] = []
    for ts, price in sorted(samples, key=lambda s: s[0]):
        if series and ts <= series[-1].timestamp_ms:
            continue
        series.append(HistoryPoint(timestamp_ms=ts, price_usd=price))
    if not series:
        raise MalformedResponse("History series is empty")
    return series


def rank_by_market_cap(coins: list[TrendingCoin], limit: int) -> list[TrendingCoin]:
    # providers already rank, but a missing cap must not float above a known one
    ranked = sorted(
        coins,
        key=lambda c: c.price.market_cap_usd if c.price.market_cap_usd is not None else float("-inf"),
        reverse=True,
    )
    return ranked[:limit]


def check_limit(limit: int) -> None:
    if limit < 1:
        raise ValueError("limit must be at least 1")


def build_price_source(
    settings: Settings,
    directory: CoinDirectory,
    transport: httpx.BaseTransport | None = None,
) -> PriceSource:
    """Instantiate the adapter named by ``PRICE_PROVIDER``."""
    # imported here so each adapter module only depends on this one, not vice versa
    from cryptochat.adapters.coincap_client import CoinCapClient
    from cryptochat.adapters.coingecko_client import CoinGeckoClient

    logger.info("Using %s price provider", settings.price_provider)
    if settings.price_provider == "coingecko":
        return CoinGeckoClient(
            base_url=settings.cg_base_url,
            directory=directory,
            api_key=settings.cg_api_key,
            timeout_seconds=settings.http_timeout_seconds,
            transport=transport,
        )
    if settings.price_provider == "coincap":
        return CoinCapClient(
            base_url=settings.coincap_base_url,
            directory=directory,
            api_key=settings.coincap_api_key,
            timeout_seconds=settings.http_timeout_seconds,
            transport=transport,
        )
    raise ConfigurationError(f"Unknown price provider '{settings.price_provider}'")

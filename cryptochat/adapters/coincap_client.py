# cryptochat/adapters/coincap_client.py
from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

import httpx

from cryptochat.adapters.http_client import (
    JsonHttpClient,
    optional_number,
    require_list,
    require_mapping,
    require_number,
)
from cryptochat.adapters.price_source import check_limit, normalize_series, rank_by_market_cap
from cryptochat.core.coins import CoinDirectory
from cryptochat.core.errors import CoinNotFound, MalformedResponse
from cryptochat.core.models import CoinRef, HistoryPoint, PricePoint, Timeframe, TrendingCoin

PROVIDER = "coincap"

# hourly up to three days, coarser beyond
HISTORY_INTERVALS = {
    Timeframe.ONE_DAY: "h1",
    Timeframe.THREE_DAYS: "h1",
    Timeframe.ONE_WEEK: "h2",
    Timeframe.ONE_MONTH: "h12",
    Timeframe.ONE_YEAR: "d1",
}

DAY_MS = 24 * 60 * 60 * 1000


class CoinCapClient(JsonHttpClient):
    """
    CoinCap API (v2). Every payload is wrapped in ``{"data": ...}`` and numbers
    arrive as decimal strings; ripple is addressed as ``xrp``.
    """

    provider = PROVIDER

    def __init__(
        self,
        base_url: str,
        directory: CoinDirectory,
        api_key: str = "",
        timeout_seconds: float = 5.0,
        transport: httpx.BaseTransport | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else None
        super().__init__(base_url, timeout_seconds=timeout_seconds, headers=headers, transport=transport)
        self.directory = directory
        self._clock = clock

    def _coin_id(self, coin: CoinRef) -> str:
        return self.directory.provider_id(coin, PROVIDER)

    def _data(self, path: str, params: dict[str, Any] | None = None) -> Any:
        raw = require_mapping(self._get(path, params), path)
        if "data" not in raw:
            raise MalformedResponse(f"coincap response for {path} has no 'data'")
        return raw["data"]

    # --- API surface ----------------------------------------------------------

    def get_spot_price(self, coin: CoinRef) -> PricePoint:
        coin_id = self._coin_id(coin)
        data = self._data(f"/assets/{coin_id}")
        if not data:
            raise CoinNotFound(f"coincap has no asset '{coin_id}'")
        asset = require_mapping(data, f"asset {coin_id}")
        return PricePoint(
            price=require_number(asset.get("priceUsd"), "priceUsd"),
            change_24h_pct=optional_number(asset.get("changePercent24Hr"), "changePercent24Hr"),
            market_cap_usd=optional_number(asset.get("marketCapUsd"), "marketCapUsd"),
        )

    def get_trending_coins(self, limit: int = 10) -> list[TrendingCoin]:
        check_limit(limit)
        assets = require_list(self._data("/assets", {"limit": limit}), "assets")
        coins = [self._trending_item(require_mapping(a, "asset")) for a in assets]
        return rank_by_market_cap(coins, limit)

    def _trending_item(self, asset: Any) -> TrendingCoin:
        provider_id = asset.get("id")
        if not isinstance(provider_id, str) or not provider_id:
            raise MalformedResponse("Asset has no id")
        coin = self.directory.from_provider_id(PROVIDER, provider_id) or CoinRef(
            id=provider_id,
            display_name=str(asset.get("name") or provider_id),
            symbol=str(asset.get("symbol") or provider_id).upper(),
        )
        return TrendingCoin(
            coin=coin,
            price=PricePoint(
                price=require_number(asset.get("priceUsd"), "priceUsd"),
                change_24h_pct=optional_number(asset.get("changePercent24Hr"), "changePercent24Hr"),
                market_cap_usd=optional_number(asset.get("marketCapUsd"), "marketCapUsd"),
            ),
        )

    def get_history(self, coin: CoinRef, timeframe: Timeframe) -> list[HistoryPoint]:
        coin_id = self._coin_id(coin)
        end = int(self._clock() * 1000)
        start = end - timeframe.days * DAY_MS
        rows = require_list(
            self._data(
                f"/assets/{coin_id}/history",
                {"interval": HISTORY_INTERVALS[timeframe], "start": start, "end": end},
            ),
            "asset history",
        )
        samples: list[tuple[int, float]] = []
        for row in rows:
            row = require_mapping(row, "history row")
            samples.append((int(require_number(row.get("time"), "time")), require_number(row.get("priceUsd"), "priceUsd")))
        return normalize_series(samples)

# cryptochat/adapters/coingecko_client.py
from __future__ import annotations

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

PROVIDER = "coingecko"


class CoinGeckoClient(JsonHttpClient):
    """
    CoinGecko public API (v3).

      /simple/price             -> {"<id>": {"usd", "usd_24h_change", "usd_market_cap"}}
      /coins/markets            -> [{"id", "symbol", "name", "current_price", ...}]
      /coins/<id>/market_chart  -> {"prices": [[ms, price], ...]}
    """

    provider = PROVIDER

    def __init__(
        self,
        base_url: str,
        directory: CoinDirectory,
        api_key: str = "",
        timeout_seconds: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        headers = {"x-cg-demo-api-key": api_key} if api_key else None
        super().__init__(base_url, timeout_seconds=timeout_seconds, headers=headers, transport=transport)
        self.directory = directory

    def _coin_id(self, coin: CoinRef) -> str:
        return self.directory.provider_id(coin, PROVIDER)

    # --- API surface ----------------------------------------------------------

    def get_spot_price(self, coin: CoinRef) -> PricePoint:
        coin_id = self._coin_id(coin)
        raw = require_mapping(
            self._get(
                "/simple/price",
                {
                    "ids": coin_id,
                    "vs_currencies": "usd",
                    "include_24hr_change": "true",
                    "include_market_cap": "true",
                },
            ),
            "simple price",
        )
        data = raw.get(coin_id)
        if not data:
            raise CoinNotFound(f"coingecko has no price for '{coin_id}'")
        data = require_mapping(data, f"price of {coin_id}")
        return PricePoint(
            price=require_number(data.get("usd"), "usd"),
            change_24h_pct=optional_number(data.get("usd_24h_change"), "usd_24h_change"),
            market_cap_usd=optional_number(data.get("usd_market_cap"), "usd_market_cap"),
        )

    def get_trending_coins(self, limit: int = 10) -> list[TrendingCoin]:
        check_limit(limit)
        raw = require_list(
            self._get(
                "/coins/markets",
                {"vs_currency": "usd", "order": "market_cap_desc", "per_page": limit, "page": 1},
            ),
            "coin markets",
        )
        coins = [self._trending_item(require_mapping(item, "market entry")) for item in raw]
        return rank_by_market_cap(coins, limit)

    def _trending_item(self, item: Any) -> TrendingCoin:
        provider_id = item.get("id")
        if not isinstance(provider_id, str) or not provider_id:
            raise MalformedResponse("Market entry has no id")
        coin = self.directory.from_provider_id(PROVIDER, provider_id) or CoinRef(
            id=provider_id,
            display_name=str(item.get("name") or provider_id),
            symbol=str(item.get("symbol") or provider_id).upper(),
        )
        return TrendingCoin(
            coin=coin,
            price=PricePoint(
                price=require_number(item.get("current_price"), "current_price"),
                change_24h_pct=optional_number(
                    item.get("price_change_percentage_24h"), "price_change_percentage_24h"
                ),
                market_cap_usd=optional_number(item.get("market_cap"), "market_cap"),
            ),
        )

    def get_history(self, coin: CoinRef, timeframe: Timeframe) -> list[HistoryPoint]:
        # CoinGecko picks granularity from the span: 5-minutely for 1 day,
        # hourly up to 90 days, daily beyond.
        coin_id = self._coin_id(coin)
        raw = require_mapping(
            self._get(f"/coins/{coin_id}/market_chart", {"vs_currency": "usd", "days": timeframe.days}),
            "market chart",
        )
        prices = require_list(raw.get("prices"), "market chart prices")
        samples: list[tuple[int, float]] = []
        for pair in prices:
            if not isinstance(pair, list) or len(pair) < 2:  # noqa: PLR2004
                raise MalformedResponse(f"Unexpected market chart sample: {pair!r}")
            samples.append((int(require_number(pair[0], "timestamp")), require_number(pair[1], "price")))
        return normalize_series(samples)

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from cryptochat.core.models import CoinRef, Timeframe


class UnrecognizedReason(str, Enum):
    NO_COIN = "no_coin"
    NO_AMOUNT = "no_amount"
    NO_MATCH = "no_match"


class _Intent(BaseModel):
    model_config = ConfigDict(frozen=True)


class PriceQuery(_Intent):
    kind: Literal["price_query"] = "price_query"
    coin: CoinRef


class TrendingQuery(_Intent):
    kind: Literal["trending_query"] = "trending_query"


class ChartQuery(_Intent):
    kind: Literal["chart_query"] = "chart_query"
    coin: CoinRef
    timeframe: Timeframe = Timeframe.ONE_WEEK


class PortfolioQuery(_Intent):
    kind: Literal["portfolio_query"] = "portfolio_query"


class AddHolding(_Intent):
    kind: Literal["add_holding"] = "add_holding"
    coin: CoinRef
    amount: float = Field(..., gt=0)


class Unrecognized(_Intent):
    kind: Literal["unrecognized"] = "unrecognized"
    coin: CoinRef | None = None
    reason: UnrecognizedReason


Intent = Annotated[
    Union[PriceQuery, TrendingQuery, ChartQuery, PortfolioQuery, AddHolding, Unrecognized],
    Field(discriminator="kind"),
]

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class CoinRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., examples=["bitcoin"])
    display_name: str = Field(..., examples=["Bitcoin"])
    symbol: str = Field(..., examples=["BTC"])

    @property
    def label(self) -> str:
        return f"{self.display_name} ({self.symbol})"


class PricePoint(BaseModel):
    price: float
    change_24h_pct: float | None = None
    market_cap_usd: float | None = None


class HistoryPoint(BaseModel):
    timestamp_ms: int
    price_usd: float


class Timeframe(str, Enum):
    ONE_DAY = "1d"
    THREE_DAYS = "3d"
    ONE_WEEK = "7d"
    ONE_MONTH = "30d"
    ONE_YEAR = "1y"

    @property
    def days(self) -> int:
        return _TIMEFRAME_DAYS[self]

    @property
    def label(self) -> str:
        return _TIMEFRAME_LABELS[self]


_TIMEFRAME_DAYS = {
    Timeframe.ONE_DAY: 1,
    Timeframe.THREE_DAYS: 3,
    Timeframe.ONE_WEEK: 7,
    Timeframe.ONE_MONTH: 30,
    Timeframe.ONE_YEAR: 365,
}

_TIMEFRAME_LABELS = {
    Timeframe.ONE_DAY: "24 hours",
    Timeframe.THREE_DAYS: "3 days",
    Timeframe.ONE_WEEK: "7 days",
    Timeframe.ONE_MONTH: "30 days",
    Timeframe.ONE_YEAR: "year",
}


class TrendingCoin(BaseModel):
    coin: CoinRef
    price: PricePoint


class Holding(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    coin: CoinRef
    amount: float = Field(..., gt=0)
    last_price: float = Field(..., ge=0)
    value: float

    @classmethod
    def priced(cls, coin: CoinRef, amount: float, price: float) -> Holding:
        """Build a holding whose value is derived from amount and price."""
        return cls(coin=coin, amount=amount, last_price=price, value=amount * price)


class ChartRequest(BaseModel):
    coin: CoinRef
    timeframe: Timeframe
    series: list[HistoryPoint]


class Reply(BaseModel):
    reply_text: str
    chart_request: ChartRequest | None = None


# --- API payloads --------------------------------------------------------------

class ChatRequest(BaseModel):
    text: str = Field(..., min_length=1, examples=["What's the price of bitcoin?"])


class ChatStatusResponse(BaseModel):
    thinking: bool


class PortfolioResponse(BaseModel):
    count: int
    total_value: float
    items: list[Holding]


class PriceResponse(BaseModel):
    coin: CoinRef
    price: PricePoint


class HistoryResponse(BaseModel):
    coin: CoinRef
    timeframe: Timeframe
    count: int
    series: list[HistoryPoint]


class HealthResponse(BaseModel):
    ok: bool = True
    name: str
    version: str
    time: int

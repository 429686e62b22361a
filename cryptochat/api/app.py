from __future__ import annotations

import time
from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from cryptochat.bootstrap import build_orchestrator
from cryptochat.conversation.orchestrator import Orchestrator
from cryptochat.core.errors import CoinNotFound, DataError
from cryptochat.core.logging import configure_logging
from cryptochat.core.models import (
    ChatRequest,
    ChatStatusResponse,
    CoinRef,
    HealthResponse,
    HistoryResponse,
    PortfolioResponse,
    PriceResponse,
    Reply,
    Timeframe,
    TrendingCoin,
)
from cryptochat.core.settings import Settings, get_settings

settings: Settings = get_settings()
configure_logging(settings.log_level)
app = FastAPI(title=settings.app_name, version=settings.app_version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.cors_allow_origin],
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["*"],
)


# One orchestrator (and so one ledger) per process, built on first use
@lru_cache(maxsize=1)
def get_orchestrator() -> Orchestrator:
    return build_orchestrator(settings)


def _now_epoch() -> int:
    return int(time.time())


def _resolve_coin(orchestrator: Orchestrator, token: str) -> CoinRef:
    coin = orchestrator.directory.resolve(token)
    if coin is None:
        raise HTTPException(status_code=404, detail=f"Unsupported coin '{token}'")
    return coin


def _upstream_error(e: DataError) -> HTTPException:
    if isinstance(e, CoinNotFound):
        return HTTPException(status_code=404, detail=str(e))
    return HTTPException(status_code=502, detail=str(e))


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(name=settings.app_name, version=settings.app_version, time=_now_epoch())


@app.post("/chat", response_model=Reply)
def chat(body: ChatRequest, orchestrator: Orchestrator = Depends(get_orchestrator)) -> Reply:
    return orchestrator.handle_utterance(body.text)


@app.get("/chat/status", response_model=ChatStatusResponse)
def chat_status(orchestrator: Orchestrator = Depends(get_orchestrator)) -> ChatStatusResponse:
    return ChatStatusResponse(thinking=orchestrator.thinking)


@app.get("/portfolio", response_model=PortfolioResponse)
def portfolio(
    refresh: bool = Query(False, description="Reprice every holding before answering"),
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> PortfolioResponse:
    items = orchestrator.refresh_portfolio() if refresh else orchestrator.ledger.holdings
    return PortfolioResponse(count=len(items), total_value=sum(h.value for h in items), items=items)


@app.delete("/portfolio/{coin_id}", response_model=PortfolioResponse)
def remove_holding(coin_id: str, orchestrator: Orchestrator = Depends(get_orchestrator)) -> PortfolioResponse:
    items = orchestrator.remove_holding(coin_id.lower())
    return PortfolioResponse(count=len(items), total_value=sum(h.value for h in items), items=items)


@app.get("/prices/{coin}", response_model=PriceResponse)
def price(coin: str, orchestrator: Orchestrator = Depends(get_orchestrator)) -> PriceResponse:
    ref = _resolve_coin(orchestrator, coin)
    try:
        point = orchestrator.prices.get_spot_price(ref)
    except DataError as e:
        raise _upstream_error(e) from e
    return PriceResponse(coin=ref, price=point)


@app.get("/trending", response_model=list[TrendingCoin])
def trending(
    limit: int = Query(10, ge=1, le=100),
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> list[TrendingCoin]:
    try:
        return orchestrator.prices.get_trending_coins(limit)
    except DataError as e:
        raise _upstream_error(e) from e


@app.get("/history/{coin}", response_model=HistoryResponse)
def history(
    coin: str,
    timeframe: Timeframe = Query(Timeframe.ONE_WEEK),
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> HistoryResponse:
    ref = _resolve_coin(orchestrator, coin)
    try:
        series = orchestrator.prices.get_history(ref, timeframe)
    except DataError as e:
        raise _upstream_error(e) from e
    return HistoryResponse(coin=ref, timeframe=timeframe, count=len(series), series=series)

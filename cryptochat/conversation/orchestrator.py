from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

from cryptochat.adapters.price_source import PriceSource
from cryptochat.conversation import replies
from cryptochat.conversation.intents import (
    AddHolding,
    ChartQuery,
    PortfolioQuery,
    PriceQuery,
    TrendingQuery,
    Unrecognized,
    UnrecognizedReason,
)
from cryptochat.conversation.interpreter import Interpreter
from cryptochat.conversation.speech import SpeechSynthesizer
from cryptochat.core.coins import CoinDirectory
from cryptochat.core.errors import DataError, PriceUnavailable
from cryptochat.core.models import ChartRequest, Holding, Reply
from cryptochat.portfolio.ledger import Ledger

logger = logging.getLogger(__name__)

TRENDING_LIMIT = 5


class Orchestrator:
    """
    Turns one utterance into one reply.

    Utterances are handled one at a time; ``thinking`` is true while a reply
    is being prepared so callers can hold back further input. Nothing is
    remembered between utterances apart from the ledger itself.
    """

    def __init__(
        self,
        interpreter: Interpreter,
        prices: PriceSource,
        ledger: Ledger,
        synthesizer: SpeechSynthesizer | None = None,
    ) -> None:
        self.interpreter = interpreter
        self.prices = prices
        self.ledger = ledger
        self.synthesizer = synthesizer
        self._lock = threading.Lock()
        self._thinking = False
        self._handlers: dict[str, Callable[[Any], Reply]] = {
            "price_query": self._on_price,
            "trending_query": self._on_trending,
            "chart_query": self._on_chart,
            "portfolio_query": self._on_portfolio,
            "add_holding": self._on_add_holding,
            "unrecognized": self._on_unrecognized,
        }

    @property
    def thinking(self) -> bool:
        return self._thinking

    @property
    def directory(self) -> CoinDirectory:
        return self.interpreter.directory

    def handle_utterance(self, text: str) -> Reply:
        with self._lock:
            self._thinking = True
            try:
                reply = self._respond(text)
            finally:
                self._thinking = False
        self._narrate(reply)
        return reply

    # Ledger writes from outside the chat go through the same lock as utterances.

    def refresh_portfolio(self) -> list[Holding]:
        with self._lock:
            return self.ledger.reprice()

    def remove_holding(self, coin_id: str) -> list[Holding]:
        with self._lock:
            return self.ledger.remove_holding(coin_id)

    def _respond(self, text: str) -> Reply:
        try:
            intent = self.interpreter.interpret(text)
            logger.debug("Classified %r as %s", text, intent)
            return self._handlers[intent.kind](intent)
        except Exception:  # noqa: BLE001
            logger.exception("Failed to handle utterance %r", text)
            return Reply(reply_text=replies.GENERIC_ERROR)

    def _narrate(self, reply: Reply) -> None:
        if self.synthesizer is None:
            return
        try:
            self.synthesizer.speak(reply.reply_text)
        except Exception as e:  # noqa: BLE001
            logger.warning("Speech synthesis failed, reply stays text-only: %s", e)

    # --- intent handlers ----------------------------------------------------------

    def _on_price(self, intent: PriceQuery) -> Reply:
        try:
            point = self.prices.get_spot_price(intent.coin)
        except DataError as e:
            logger.warning("Price lookup for %s failed: %s", intent.coin.id, e)
            return Reply(reply_text=replies.price_unavailable(intent.coin))
        return Reply(reply_text=replies.price(intent.coin, point))

    def _on_trending(self, intent: TrendingQuery) -> Reply:
        try:
            coins = self.prices.get_trending_coins(TRENDING_LIMIT)
        except DataError as e:
            logger.warning("Trending lookup failed: %s", e)
            return Reply(reply_text=replies.TRENDING_UNAVAILABLE)
        if not coins:
            return Reply(reply_text=replies.TRENDING_UNAVAILABLE)
        return Reply(reply_text=replies.trending(coins))

    def _on_chart(self, intent: ChartQuery) -> Reply:
        try:
            series = self.prices.get_history(intent.coin, intent.timeframe)
        except DataError as e:
            logger.warning("History lookup for %s failed: %s", intent.coin.id, e)
            return Reply(reply_text=replies.chart_unavailable(intent.coin))
        return Reply(
            reply_text=replies.chart(intent.coin, intent.timeframe),
            chart_request=ChartRequest(coin=intent.coin, timeframe=intent.timeframe, series=series),
        )

    def _on_portfolio(self, intent: PortfolioQuery) -> Reply:
        if len(self.ledger) == 0:
            return Reply(reply_text=replies.EMPTY_PORTFOLIO)
        total = self.ledger.total_value()
        return Reply(reply_text=replies.portfolio(total, self.ledger.holdings))

    def _on_add_holding(self, intent: AddHolding) -> Reply:
        try:
            self.ledger.add_holding(intent.coin.id, intent.amount)
        except PriceUnavailable as e:
            logger.warning("Not adding %s %s: %s", intent.amount, intent.coin.id, e)
            return Reply(reply_text=replies.add_failed(intent.coin))
        total = self.ledger.total_value()
        return Reply(reply_text=replies.added(intent.coin, intent.amount, total))

    def _on_unrecognized(self, intent: Unrecognized) -> Reply:
        supported = self.directory.supported()
        if intent.reason is UnrecognizedReason.NO_AMOUNT:
            return Reply(reply_text=replies.need_amount(intent.coin))
        if intent.reason is UnrecognizedReason.NO_COIN:
            return Reply(reply_text=replies.which_coin(supported))
        return Reply(reply_text=replies.not_understood(supported))

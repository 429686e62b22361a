"""Rule-based utterance classification.

``Interpreter.rules`` is an ordered decision table; the first rule whose
keywords occur in the lower-cased utterance builds the intent. Anything that
matches no rule is ``Unrecognized(NO_MATCH)``.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from dataclasses import dataclass

from cryptochat.conversation.intents import (
    AddHolding,
    ChartQuery,
    Intent,
    PortfolioQuery,
    PriceQuery,
    TrendingQuery,
    Unrecognized,
    UnrecognizedReason,
)
from cryptochat.core.coins import CoinDirectory
from cryptochat.core.models import Timeframe

# Longest words first, so "seventeen" is not read as "seven".
NUMBER_WORDS: tuple[tuple[str, int], ...] = (
    ("twenty", 20),
    ("nineteen", 19),
    ("eighteen", 18),
    ("seventeen", 17),
    ("sixteen", 16),
    ("fifteen", 15),
    ("fourteen", 14),
    ("thirteen", 13),
    ("twelve", 12),
    ("eleven", 11),
    ("ten", 10),
    ("nine", 9),
    ("eight", 8),
    ("seven", 7),
    ("six", 6),
    ("five", 5),
    ("four", 4),
    ("three", 3),
    ("two", 2),
    ("one", 1),
    ("zero", 0),
)

_DECIMAL = re.compile(r"-?\d*\.?\d+")
_COIN_TOKEN = r"(?P<coin>[a-z][a-z-]*)"

HOLDING_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(rf"\b(?:i have|i own|add)\s+(?P<amount>-?[\w.]+)\s+{_COIN_TOKEN}"),
    re.compile(
        rf"(?<![\w.-])(?P<amount>-?\d*\.?\d+|\b(?:{'|'.join(w for w, _ in NUMBER_WORDS)})\b)\s*{_COIN_TOKEN}"
    ),
)

TIMEFRAME_PHRASES: tuple[tuple[Timeframe, re.Pattern[str]], ...] = (
    (Timeframe.ONE_YEAR, re.compile(r"\b(?:1\s*y|one year|years?|12 months|365 days?)\b")),
    (Timeframe.ONE_MONTH, re.compile(r"\b(?:30\s*d(?:ays?)?|one month|months?)\b")),
    (Timeframe.THREE_DAYS, re.compile(r"\b(?:3\s*d(?:ays?)?|three days?)\b")),
    (Timeframe.ONE_WEEK, re.compile(r"\b(?:7\s*d(?:ays?)?|seven days?|weeks?)\b")),
    (Timeframe.ONE_DAY, re.compile(r"\b(?:1\s*d(?:ay)?|24\s*h(?:ours?)?|one day|today|day)\b")),
)


def parse_amount(token: str) -> float | None:
    """Read a decimal number or a spelled-out cardinal (zero to twenty)."""
    token = token.strip().lower()
    if _DECIMAL.fullmatch(token):
        value = float(token)
        # digit strings past float range come back as inf
        return value if math.isfinite(value) else None
    for word, value in NUMBER_WORDS:
        if word in token:
            return float(value)
    return None


def parse_timeframe(lowered: str, default: Timeframe = Timeframe.ONE_WEEK) -> Timeframe:
    for timeframe, pattern in TIMEFRAME_PHRASES:
        if pattern.search(lowered):
            return timeframe
    return default


@dataclass(frozen=True)
class Rule:
    name: str
    keywords: tuple[str, ...]
    build: Callable[[str], Intent]

    def applies(self, lowered: str) -> bool:
        return any(k in lowered for k in self.keywords)


class Interpreter:
    def __init__(self, directory: CoinDirectory | None = None) -> None:
        self.directory = directory or CoinDirectory()
        self.rules: tuple[Rule, ...] = (
            Rule("price", ("price", "trading", "worth"), self._price),
            Rule("trending", ("trending", "top"), self._trending),
            Rule("chart", ("chart",), self._chart),
            Rule("portfolio", ("portfolio",), self._portfolio),
            Rule("add_holding", ("i have", "i own", "add"), self._add_holding),
        )

    def interpret(self, text: str) -> Intent:
        lowered = text.lower()
        for rule in self.rules:
            if rule.applies(lowered):
                return rule.build(lowered)
        return Unrecognized(coin=self.directory.resolve(lowered), reason=UnrecognizedReason.NO_MATCH)

    def match_rule(self, text: str) -> Rule | None:
        lowered = text.lower()
        return next((r for r in self.rules if r.applies(lowered)), None)

    # --- rule builders ----------------------------------------------------------

    def _price(self, lowered: str) -> Intent:
        coin = self.directory.resolve(lowered)
        if coin is None:
            return Unrecognized(reason=UnrecognizedReason.NO_COIN)
        return PriceQuery(coin=coin)

    def _trending(self, lowered: str) -> Intent:
        return TrendingQuery()

    def _chart(self, lowered: str) -> Intent:
        coin = self.directory.resolve(lowered)
        if coin is None:
            return Unrecognized(reason=UnrecognizedReason.NO_COIN)
        return ChartQuery(coin=coin, timeframe=parse_timeframe(lowered))

    def _portfolio(self, lowered: str) -> Intent:
        return PortfolioQuery()

    def _add_holding(self, lowered: str) -> Intent:
        for pattern in HOLDING_PATTERNS:
            match = pattern.search(lowered)
            if match is None:
                continue
            amount = parse_amount(match["amount"])
            if amount is None:
                continue
            if amount <= 0:
                break
            coin = self.directory.resolve(match["coin"])
            if coin is None:
                return Unrecognized(reason=UnrecognizedReason.NO_MATCH)
            return AddHolding(coin=coin, amount=amount)
        return Unrecognized(coin=self.directory.resolve(lowered), reason=UnrecognizedReason.NO_AMOUNT)


def interpret(text: str, directory: CoinDirectory | None = None) -> Intent:
    return Interpreter(directory).interpret(text)

from __future__ import annotations

import httpx

from cryptochat.adapters.price_source import PriceSource, build_price_source
from cryptochat.conversation.interpreter import Interpreter
from cryptochat.conversation.orchestrator import Orchestrator
from cryptochat.conversation.speech import SpeechSynthesizer
from cryptochat.core.coins import CoinDirectory
from cryptochat.core.settings import Settings
from cryptochat.portfolio.ledger import Ledger
from cryptochat.storage.kv import KeyValueStore, build_store


def build_orchestrator(
    settings: Settings,
    *,
    prices: PriceSource | None = None,
    store: KeyValueStore | None = None,
    synthesizer: SpeechSynthesizer | None = None,
    transport: httpx.BaseTransport | None = None,
) -> Orchestrator:
    """Wire directory, price source, ledger and interpreter from settings."""
    directory = CoinDirectory(policy=settings.coin_match_policy)
    prices = prices or build_price_source(settings, directory, transport=transport)
    ledger = Ledger(
        store=store or build_store(settings),
        prices=prices,
        directory=directory,
        key=settings.ledger_key,
    )
    return Orchestrator(
        interpreter=Interpreter(directory),
        prices=prices,
        ledger=ledger,
        synthesizer=synthesizer,
    )

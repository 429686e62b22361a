"""Static coin directory.

Maps colloquial names, tickers and provider-specific identifiers onto one
canonical ``CoinRef`` per coin. Everything here is data: new coins or aliases
are added to ``COINS`` / ``ALIASES`` without touching callers.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from cryptochat.core.models import CoinRef

SUBSTRING = "substring"
WORD = "word"


@dataclass(frozen=True)
class CoinEntry:
    id: str
    display_name: str
    symbol: str
    provider_ids: Mapping[str, str] = field(default_factory=dict)

    def ref(self) -> CoinRef:
        return CoinRef(id=self.id, display_name=self.display_name, symbol=self.symbol)


COINS: tuple[CoinEntry, ...] = (
    CoinEntry("bitcoin", "Bitcoin", "BTC"),
    CoinEntry("ethereum", "Ethereum", "ETH"),
    CoinEntry("litecoin", "Litecoin", "LTC"),
    CoinEntry("cardano", "Cardano", "ADA"),
    CoinEntry("polkadot", "Polkadot", "DOT"),
    CoinEntry("chainlink", "Chainlink", "LINK"),
    CoinEntry("ripple", "Ripple", "XRP", {"coincap": "xrp"}),
    CoinEntry("solana", "Solana", "SOL"),
    CoinEntry("dogecoin", "Dogecoin", "DOGE"),
    CoinEntry("shiba-inu", "Shiba Inu", "SHIB"),
)

# Scanned in order; the first alias contained in the input wins.
ALIASES: tuple[tuple[str, str], ...] = (
    ("bitcoin", "bitcoin"),
    ("btc", "bitcoin"),
    ("ethereum", "ethereum"),
    ("eth", "ethereum"),
    ("litecoin", "litecoin"),
    ("ltc", "litecoin"),
    ("cardano", "cardano"),
    ("ada", "cardano"),
    ("polkadot", "polkadot"),
    ("dot", "polkadot"),
    ("chainlink", "chainlink"),
    ("link", "chainlink"),
    ("ripple", "ripple"),
    ("xrp", "ripple"),
    ("solana", "solana"),
    ("sol", "solana"),
    ("dogecoin", "dogecoin"),
    ("doge", "dogecoin"),
    ("shiba-inu", "shiba-inu"),
    ("shib", "shiba-inu"),
    ("xbt", "bitcoin"),
)


class CoinDirectory:
    def __init__(
        self,
        coins: Iterable[CoinEntry] = COINS,
        aliases: Iterable[tuple[str, str]] = ALIASES,
        policy: str = SUBSTRING,
    ) -> None:
        if policy not in (SUBSTRING, WORD):
            raise ValueError(f"Unknown match policy '{policy}'")
        self.policy = policy
        self._entries: dict[str, CoinEntry] = {c.id: c for c in coins}
        self._refs: dict[str, CoinRef] = {cid: e.ref() for cid, e in self._entries.items()}
        self._aliases: list[tuple[str, str]] = []
        for alias, coin_id in aliases:
            if coin_id not in self._entries:
                raise ValueError(f"Alias '{alias}' points at unknown coin '{coin_id}'")
            self._aliases.append((alias.lower(), coin_id))
        self._word_patterns = {
            alias: re.compile(rf"(?<![a-z0-9-]){re.escape(alias)}(?![a-z0-9-])")
            for alias, _ in self._aliases
        }

    def resolve(self, token: str) -> CoinRef | None:
        """Return the first coin whose alias occurs in ``token``.

        With the default substring policy "dot" also matches inside words
        such as "anecdote"; the word policy requires the alias to stand alone.
        """
        lowered = token.lower()
        for alias, coin_id in self._aliases:
            if self._matches(alias, lowered):
                return self._refs[coin_id]
        return None

    def _matches(self, alias: str, lowered: str) -> bool:
        if self.policy == WORD:
            return self._word_patterns[alias].search(lowered) is not None
        return alias in lowered

    def get(self, coin_id: str) -> CoinRef | None:
        return self._refs.get(coin_id.lower())

    def coin_for(self, coin_id: str) -> CoinRef:
        """Exact lookup, synthesizing a bare ref for coins outside the table."""
        ref = self.get(coin_id)
        if ref is not None:
            return ref
        slug = coin_id.strip().lower()
        return CoinRef(id=slug, display_name=slug, symbol=slug.upper())

    def provider_id(self, coin: CoinRef, provider: str) -> str:
        entry = self._entries.get(coin.id)
        if entry is None:
            return coin.id
        return entry.provider_ids.get(provider, coin.id)

    def from_provider_id(self, provider: str, provider_id: str) -> CoinRef | None:
        wanted = provider_id.lower()
        for entry in self._entries.values():
            if entry.provider_ids.get(provider, entry.id) == wanted:
                return self._refs[entry.id]
        return None

    def supported(self) -> list[CoinRef]:
        return list(self._refs.values())

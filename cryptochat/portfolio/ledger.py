"""Portfolio ledger: ordered holdings, valued from live prices, persisted as one snapshot."""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor

from pydantic import TypeAdapter, ValidationError

from cryptochat.adapters.price_source import PriceSource
from cryptochat.core.coins import CoinDirectory
from cryptochat.core.errors import DataError, InvalidAmount, PriceUnavailable, SnapshotError
from cryptochat.core.models import Holding, PricePoint
from cryptochat.storage.kv import KeyValueStore

logger = logging.getLogger(__name__)

_SNAPSHOT = TypeAdapter(list[Holding])

MAX_REPRICE_WORKERS = 8


def dump_snapshot(holdings: list[Holding]) -> str:
    return _SNAPSHOT.dump_json(holdings).decode("utf-8")


def load_snapshot(raw: str) -> list[Holding]:
    try:
        holdings = _SNAPSHOT.validate_json(raw)
    except ValidationError as e:
        raise SnapshotError(f"Stored ledger snapshot is invalid: {e}") from e
    seen: set[str] = set()
    for h in holdings:
        if h.coin.id in seen:
            raise SnapshotError(f"Stored ledger snapshot holds '{h.coin.id}' twice")
        seen.add(h.coin.id)
    return holdings


class Ledger:
    """
    Holdings keyed by coin id, in insertion order.

    Every mutation builds the new list, writes it to the store and only then
    replaces the in-memory copy, so a failed price fetch or a failed write
    leaves the ledger as it was.
    """

    def __init__(
        self,
        store: KeyValueStore,
        prices: PriceSource,
        directory: CoinDirectory,
        key: str = "cryptoPortfolio",
    ) -> None:
        self.store = store
        self.prices = prices
        self.directory = directory
        self.key = key
        self._holdings: list[Holding] = self._load()

    def _load(self) -> list[Holding]:
        raw = self.store.get(self.key)
        if raw is None:
            return []
        holdings = load_snapshot(raw)
        logger.info("Loaded %d holdings from '%s'", len(holdings), self.key)
        return holdings

    def _commit(self, holdings: list[Holding]) -> list[Holding]:
        self.store.set(self.key, dump_snapshot(holdings))
        self._holdings = holdings
        return self.holdings

    @property
    def holdings(self) -> list[Holding]:
        return list(self._holdings)

    def __len__(self) -> int:
        return len(self._holdings)

    def find(self, coin_id: str) -> Holding | None:
        return next((h for h in self._holdings if h.coin.id == coin_id), None)

    # --- mutations ----------------------------------------------------------------

    def add_holding(self, coin_id: str, amount: float) -> list[Holding]:
        if not (math.isfinite(amount) and amount > 0):
            raise InvalidAmount(f"Amount must be positive, got {amount}")
        coin = self.directory.coin_for(coin_id)
        try:
            point = self.prices.get_spot_price(coin)
        except DataError as e:
            raise PriceUnavailable(f"Could not price {coin.display_name}: {e}") from e

        updated: list[Holding] = []
        merged = False
        for h in self._holdings:
            if h.coin.id == coin.id:
                updated.append(Holding.priced(h.coin, h.amount + amount, point.price))
                merged = True
            else:
                updated.append(h)
        if not merged:
            updated.append(Holding.priced(coin, amount, point.price))

        logger.info("%s %s %s at $%s", "Merged" if merged else "Added", amount, coin.symbol, point.price)
        return self._commit(updated)

    def remove_holding(self, coin_id: str) -> list[Holding]:
        remaining = [h for h in self._holdings if h.coin.id != coin_id]
        if len(remaining) == len(self._holdings):
            return self.holdings
        logger.info("Removed %s", coin_id)
        return self._commit(remaining)

    def reprice(self) -> list[Holding]:
        """Refresh every holding's price; holdings that fail to price keep their last value."""
        current = self.holdings
        if not current:
            return current

        with ThreadPoolExecutor(max_workers=min(MAX_REPRICE_WORKERS, len(current))) as pool:
            futures = [pool.submit(self.prices.get_spot_price, h.coin) for h in current]

        updated: list[Holding] = []
        for holding, future in zip(current, futures):
            try:
                point: PricePoint = future.result()
            except DataError as e:
                logger.warning("Keeping stale price for %s: %s", holding.coin.id, e)
                updated.append(holding)
                continue
            updated.append(Holding.priced(holding.coin, holding.amount, point.price))
        return self._commit(updated)

    def total_value(self) -> float:
        # best effort: when every fetch fails this is the last known total
        return sum(h.value for h in self.reprice())

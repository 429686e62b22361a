"""Exception hierarchy shared by the price adapters, the ledger and the API."""

from __future__ import annotations


class CryptoChatError(Exception):
    """Base exception for all cryptochat errors."""


class ConfigurationError(CryptoChatError):
    """Raised when an environment setting is missing or invalid."""


class DataError(CryptoChatError):
    """Base exception for price data source failures."""


class CoinNotFound(DataError):
    """The upstream provider has no data for the requested coin."""


class TransportError(DataError):
    """Network failure, timeout or non-success HTTP status."""


class MalformedResponse(DataError):
    """The upstream answered, but expected fields are absent or unusable."""


class LedgerError(CryptoChatError):
    """Base exception for portfolio ledger failures."""


class PriceUnavailable(LedgerError):
    """A holding could not be priced, so the ledger was left untouched."""


class InvalidAmount(LedgerError):
    """Holding amounts must be strictly positive."""


class SnapshotError(LedgerError):
    """The persisted ledger snapshot cannot be loaded."""

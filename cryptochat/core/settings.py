from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from cryptochat.core.errors import ConfigurationError

PRICE_PROVIDERS = ("coingecko", "coincap")
LEDGER_BACKENDS = ("memory", "file", "dynamodb")
MATCH_POLICIES = ("substring", "word")


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_version: str
    price_provider: str
    cg_base_url: str
    cg_api_key: str
    coincap_base_url: str
    coincap_api_key: str
    http_timeout_seconds: float
    ledger_backend: str
    ledger_file: str
    ledger_key: str
    ddb_table: str
    coin_match_policy: str
    log_level: str
    cors_allow_origin: str


def _choice(name: str, default: str, allowed: tuple[str, ...]) -> str:
    value = os.getenv(name, default).strip().lower()
    if value not in allowed:
        raise ConfigurationError(f"{name} must be one of {', '.join(allowed)}, got '{value}'")
    return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    try:
        timeout = float(os.getenv("HTTP_TIMEOUT_SECONDS", "5"))
    except ValueError as e:
        raise ConfigurationError("HTTP_TIMEOUT_SECONDS must be a number") from e
    if timeout <= 0:
        raise ConfigurationError("HTTP_TIMEOUT_SECONDS must be positive")

    ledger_key = os.getenv("LEDGER_KEY", "cryptoPortfolio")
    if not ledger_key:
        raise ConfigurationError("LEDGER_KEY must not be empty")

    return Settings(
        app_name=os.getenv("APP_NAME", "cryptochat-api"),
        app_version=os.getenv("APP_VERSION", "0.1.0"),
        price_provider=_choice("PRICE_PROVIDER", "coingecko", PRICE_PROVIDERS),
        cg_base_url=os.getenv("CG_BASE_URL", "https://api.coingecko.com/api/v3"),
        cg_api_key=os.getenv("CG_API_KEY", ""),
        coincap_base_url=os.getenv("COINCAP_BASE_URL", "https://api.coincap.io/v2"),
        coincap_api_key=os.getenv("COINCAP_API_KEY", ""),
        http_timeout_seconds=timeout,
        ledger_backend=_choice("LEDGER_BACKEND", "file", LEDGER_BACKENDS),
        ledger_file=os.getenv("LEDGER_FILE", "cryptochat_store.json"),
        ledger_key=ledger_key,
        ddb_table=os.getenv("DDB_TABLE", "cryptochat_kv"),
        coin_match_policy=_choice("COIN_MATCH_POLICY", "substring", MATCH_POLICIES),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        cors_allow_origin=os.getenv("CORS_ALLOW_ORIGIN", "*"),
    )

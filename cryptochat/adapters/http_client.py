# cryptochat/adapters/http_client.py
from __future__ import annotations

import logging
import math
import os
from collections.abc import Mapping
from typing import Any

import httpx

from cryptochat.core.errors import CoinNotFound, MalformedResponse, TransportError

logger = logging.getLogger(__name__)

# --- Config (env-tunable) ----------------------------------------------------

USER_AGENT = os.getenv("CRYPTOCHAT_USER_AGENT", "cryptochat/0.1")

# --- Field coercion ----------------------------------------------------------

def _ensure_path(path: str) -> str:
    return path if path.startswith("/") else "/" + path

def require_number(value: Any, field: str) -> float:
    """Coerce an upstream number (providers send floats or decimal strings)."""
    if isinstance(value, bool) or value is None:
        raise MalformedResponse(f"Field '{field}' is missing")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise MalformedResponse(f"Field '{field}' is not numeric: {value!r}") from e
    if math.isnan(number) or math.isinf(number):
        raise MalformedResponse(f"Field '{field}' is not finite: {value!r}")
    return number

def optional_number(value: Any, field: str) -> float | None:
    if value is None or value == "":
        return None
    return require_number(value, field)

def require_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise MalformedResponse(f"Expected an object for {what}, got {type(value).__name__}")
    return value  # type: ignore[return-value]

def require_list(value: Any, what: str) -> list[Any]:
    if not isinstance(value, list):
        raise MalformedResponse(f"Expected a list for {what}, got {type(value).__name__}")
    return value  # type: ignore[return-value]


class JsonHttpClient:
    """
    Thin JSON-over-HTTP base for price providers.

    Maps transport outcomes onto the data error taxonomy once:
      404 -> CoinNotFound, other HTTP errors / timeouts -> TransportError,
      undecodable body -> MalformedResponse
    """

    provider = "http"

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 5.0,
        headers: Mapping[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._http = httpx.Client(
            base_url=self.base_url,
            timeout=timeout_seconds,
            headers={
                "Accept": "application/json",
                "User-Agent": USER_AGENT,
                **(headers or {}),
            },
            transport=transport,
        )

    # --- housekeeping ---------------------------------------------------------

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> JsonHttpClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        self.close()

    # --- request --------------------------------------------------------------

    def _get(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        path = _ensure_path(path)
        logger.debug("%s GET %s params=%s", self.provider, path, params)
        try:
            resp = self._http.get(path, params=dict(params or {}))
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning("%s GET %s failed with HTTP %s", self.provider, path, status)
            if status == 404:  # noqa: PLR2004
                raise CoinNotFound(f"{self.provider} has no data at {path}") from e
            raise TransportError(f"{self.provider} HTTP {status}: {e.response.text[:200]}") from e
        except httpx.TimeoutException as e:
            logger.warning("%s GET %s timed out", self.provider, path)
            raise TransportError(f"{self.provider} request timed out: {path}") from e
        except httpx.HTTPError as e:
            logger.warning("%s GET %s network error: %s", self.provider, path, e)
            raise TransportError(f"{self.provider} network error: {e}") from e

        try:
            return resp.json()
        except ValueError as e:
            raise MalformedResponse(f"{self.provider} returned a non-JSON body for {path}") from e

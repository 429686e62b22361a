from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from cryptochat.core.errors import ConfigurationError
from cryptochat.core.settings import Settings

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """All keys live in one JSON object on disk; every ``set`` rewrites the file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        with self.path.open(encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return {str(k): str(v) for k, v in data.items()}

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise


def build_store(settings: Settings) -> KeyValueStore:
    logger.info("Using %s ledger storage", settings.ledger_backend)
    if settings.ledger_backend == "memory":
        return MemoryStore()
    if settings.ledger_backend == "file":
        return JsonFileStore(settings.ledger_file)
    if settings.ledger_backend == "dynamodb":
        # boto3 is only needed for this backend
        from cryptochat.storage.ddb import DynamoKeyValueStore

        return DynamoKeyValueStore(table_name=settings.ddb_table)
    raise ConfigurationError(f"Unknown ledger backend '{settings.ledger_backend}'")

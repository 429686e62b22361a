from __future__ import annotations

import time
from typing import Any, cast

import boto3
from mypy_boto3_dynamodb import DynamoDBServiceResource
from mypy_boto3_dynamodb.service_resource import Table
from mypy_boto3_dynamodb.type_defs import GetItemOutputTypeDef


class DynamoKeyValueStore:
    """String values keyed by name, one DynamoDB item per key."""

    def __init__(self, table_name: str, client: DynamoDBServiceResource | None = None) -> None:
        self.table_name = table_name

        self.dynamodb = client or boto3.resource("dynamodb")  # type: ignore  # noqa: PGH003
        self.table: Table = self.dynamodb.Table(table_name)  # type: ignore  # noqa: PGH003

    @staticmethod
    def _pk(key: str) -> str:
        return f"kv#{key}"

    def get(self, key: str) -> str | None:
        resp: GetItemOutputTypeDef = self.table.get_item(Key={"pk": self._pk(key)})  # type: ignore  # noqa: PGH003

        item = cast(dict[str, Any] | None, resp.get("Item"))
        if not item:
            return None

        value = item.get("value")
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        doc: dict[str, Any] = {
            "pk": self._pk(key),
            "updated_at": int(time.time()),
            "value": value,
        }
        self.table.put_item(Item=doc)

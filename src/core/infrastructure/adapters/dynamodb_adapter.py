"""Thin DynamoDB adapter wrapping boto3 table operations."""

from decimal import Decimal
from typing import Any, Protocol, cast

import boto3

from core.infrastructure.adapters.client_config import client_kwargs, require_env


class DynamoDBTable(Protocol):
    """Minimal DynamoDB Table protocol."""

    def put_item(self, *, Item: dict[str, Any], **kwargs: Any) -> dict[str, Any]: ...
    def get_item(self, *, Key: dict[str, Any], **kwargs: Any) -> dict[str, Any]: ...
    def update_item(self, **kwargs: Any) -> dict[str, Any]: ...
    def delete_item(self, *, Key: dict[str, Any], **kwargs: Any) -> dict[str, Any]: ...
    def query(self, **kwargs: Any) -> dict[str, Any]: ...
    def scan(self, **kwargs: Any) -> dict[str, Any]: ...
    def batch_writer(self, **kwargs: Any) -> Any: ...


class DynamoDBAdapterProtocol(Protocol):
    """Repository-facing DynamoDB adapter protocol."""

    def put_item(
        self,
        *,
        item: dict[str, Any],
        condition_expression: str | None = None,
    ) -> dict[str, Any]: ...

    def get_item(self, *, key: dict[str, Any]) -> dict[str, Any]: ...

    def update_item(self, *, key: dict[str, Any], **kwargs: Any) -> dict[str, Any]: ...

    def delete_item(self, *, key: dict[str, Any]) -> dict[str, Any]: ...

    def query_all(self, **kwargs: Any) -> list[dict[str, Any]]: ...

    def scan_all(self, **kwargs: Any) -> list[dict[str, Any]]: ...

    def batch_delete(self, *, keys: list[dict[str, Any]]) -> None: ...


def normalize_item(value: Any) -> Any:
    """Convert DynamoDB Decimals back into plain ints/floats, recursively."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)

    if isinstance(value, dict):
        return {key: normalize_item(item) for key, item in value.items()}

    if isinstance(value, list):
        return [normalize_item(item) for item in value]

    if isinstance(value, set):
        return sorted(normalize_item(item) for item in value)

    return value


class DynamoDBAdapter:
    """Low-level DynamoDB operations (mechanical, no error handling).

    This adapter:
    - Wraps one boto3 DynamoDB table, named by an environment variable
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(self, table_env: str) -> None:
        """Initialize DynamoDB table from environment."""
        table_name = require_env(table_env)
        dynamodb = boto3.resource("dynamodb", **client_kwargs())

        self.table: DynamoDBTable = cast(
            DynamoDBTable,
            dynamodb.Table(table_name),
        )

    def put_item(
        self,
        *,
        item: dict[str, Any],
        condition_expression: str | None = None,
    ) -> dict[str, Any]:
        """Insert item into DynamoDB.

        Raises boto3 exceptions - caught by domain implementation.
        """
        kwargs: dict[str, Any] = {"Item": item}

        if condition_expression:
            kwargs["ConditionExpression"] = condition_expression

        return self.table.put_item(**kwargs)

    def get_item(self, *, key: dict[str, Any]) -> dict[str, Any]:
        """Retrieve item by key (strongly consistent).

        Raises boto3 exceptions - caught by domain implementation.
        """
        return self.table.get_item(Key=key, ConsistentRead=True)

    def update_item(self, *, key: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        """Apply an update expression to an item.

        Raises boto3 exceptions - caught by domain implementation.
        """
        return self.table.update_item(Key=key, **kwargs)

    def delete_item(self, *, key: dict[str, Any]) -> dict[str, Any]:
        """Delete item by key.

        Raises boto3 exceptions - caught by domain implementation.
        """
        return self.table.delete_item(Key=key)

    def query_all(self, **kwargs: Any) -> list[dict[str, Any]]:
        """Execute a DynamoDB query and follow LastEvaluatedKey to the end."""
        items: list[dict[str, Any]] = []

        while True:
            response = self.table.query(**kwargs)
            items.extend(response.get("Items", []))

            last_evaluated_key = response.get("LastEvaluatedKey")
            if not last_evaluated_key:
                return items
            kwargs["ExclusiveStartKey"] = last_evaluated_key

    def scan_all(self, **kwargs: Any) -> list[dict[str, Any]]:
        """Execute a full table scan, following pagination."""
        items: list[dict[str, Any]] = []

        while True:
            response = self.table.scan(**kwargs)
            items.extend(response.get("Items", []))

            last_evaluated_key = response.get("LastEvaluatedKey")
            if not last_evaluated_key:
                return items
            kwargs["ExclusiveStartKey"] = last_evaluated_key

    def batch_delete(self, *, keys: list[dict[str, Any]]) -> None:
        """Delete many items; the batch writer handles chunking and retries."""
        with self.table.batch_writer() as batch:
            for key in keys:
                batch.delete_item(Key=key)

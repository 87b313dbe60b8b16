"""DynamoDB-backed connection registry."""
from __future__ import annotations

from functools import partial
from typing import Any, Optional

import anyio

from core.logging_config import get_logger
from domain.common.exceptions import RegistryException
from domain.connection import Connection, ConnectionRepository
from infrastructure.external.aws import error_code


logger = get_logger(__name__)

KEY_ATTRIBUTE = "connectionId"


class DynamoDBConnectionRepository(ConnectionRepository):
    """Registry stored in a table keyed by ``connectionId`` with a ``ttl`` attribute."""

    def __init__(self, table: Any):
        """
        Args:
            table: boto3 ``dynamodb.Table`` resource
        """
        self.table = table

    async def put(self, connection: Connection) -> None:
        try:
            await anyio.to_thread.run_sync(
                partial(self.table.put_item, Item=connection.to_item())
            )
        except Exception as e:
            self._handle_exception(e, f"put {connection.connection_id}")

    async def delete(self, connection_id: str) -> None:
        try:
            # DeleteItem on a missing key succeeds, so this is delete-if-exists
            await anyio.to_thread.run_sync(
                partial(self.table.delete_item, Key={KEY_ATTRIBUTE: connection_id})
            )
        except Exception as e:
            self._handle_exception(e, f"delete {connection_id}")

    async def get(self, connection_id: str) -> Optional[Connection]:
        try:
            response = await anyio.to_thread.run_sync(
                partial(self.table.get_item, Key={KEY_ATTRIBUTE: connection_id})
            )
        except Exception as e:
            self._handle_exception(e, f"get {connection_id}")
        item = (response or {}).get("Item")
        return Connection.from_item(item) if item else None

    async def list_connection_ids(self) -> list[str]:
        items = await self._scan(ProjectionExpression=KEY_ATTRIBUTE)
        return [str(item[KEY_ATTRIBUTE]) for item in items if item.get(KEY_ATTRIBUTE)]

    async def list_connections(self) -> list[Connection]:
        return [Connection.from_item(item) for item in await self._scan() if item.get(KEY_ATTRIBUTE)]

    async def _scan(self, **scan_kwargs: Any) -> list[dict[str, Any]]:
        """Full table read, following ``LastEvaluatedKey`` pages."""
        items: list[dict[str, Any]] = []
        pages = 0
        try:
            while True:
                response = await anyio.to_thread.run_sync(partial(self.table.scan, **scan_kwargs))
                pages += 1
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                scan_kwargs["ExclusiveStartKey"] = last_key
        except Exception as e:
            self._handle_exception(e, "scan")
        logger.debug("registry_scanned", items=len(items), pages=pages)
        return items

    def _handle_exception(self, e: Exception, operation: str) -> None:
        """Map DynamoDB errors to RegistryException."""
        code = error_code(e)
        logger.error("registry_operation_failed", operation=operation, error=str(e), code=code)
        raise RegistryException(operation, str(e), provider_code=code or None) from e

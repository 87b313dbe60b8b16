"""Registry maintenance: the only durable state the relay keeps.

Connect inserts, disconnect deletes, and a delivery that reports the
target is gone deletes reactively (``purge_stale``). Writes are
independent single-key operations, so racing writes on the same id are
last-writer-wins.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from core.config import ONE_YEAR_IN_SECONDS
from core.logging_config import get_logger
from domain.connection import Connection, ConnectionRepository


logger = get_logger(__name__)


class RegistryService:
    def __init__(self, *, repository: ConnectionRepository, ttl_seconds: int = ONE_YEAR_IN_SECONDS) -> None:
        self._repo = repository
        self._ttl = timedelta(seconds=ttl_seconds)

    async def register(self, connection_id: str, *, now: Optional[datetime] = None) -> Connection:
        """Insert (or overwrite) the record for a freshly authorized connection."""
        connection = Connection.open(connection_id, now=now, ttl=self._ttl)
        await self._repo.put(connection)
        logger.info(
            "connection_registered",
            connection_id=connection_id,
            expires_at=connection.expires_at.isoformat(),
        )
        return connection

    async def unregister(self, connection_id: str) -> None:
        await self._repo.delete(connection_id)
        logger.info("connection_unregistered", connection_id=connection_id)

    async def purge_stale(self, connection_id: str) -> bool:
        """Remove a connection the gateway reported as gone.

        Called from the delivery failure path, so store errors are logged
        and swallowed rather than surfaced.
        """
        logger.info("stale_connection_purging", connection_id=connection_id)
        try:
            await self._repo.delete(connection_id)
        except Exception as exc:
            logger.error(
                "stale_connection_purge_failed",
                connection_id=connection_id,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return False
        logger.info("stale_connection_purged", connection_id=connection_id)
        return True

    async def get(self, connection_id: str) -> Connection | None:
        return await self._repo.get(connection_id)

    async def list_connection_ids(self) -> list[str]:
        ids = await self._repo.list_connection_ids()
        logger.info("connections_listed", count=len(ids))
        return ids

    async def list_connections(self) -> list[Connection]:
        return await self._repo.list_connections()

"""In-memory implementation of ConnectionRepository.

Single-process only. Useful for local dev and tests. A thread lock is
used so one instance survives across the per-invocation event loops.
"""
from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Dict, Optional

from domain.connection import Connection, ConnectionRepository


class InMemoryConnectionRepository(ConnectionRepository):
    def __init__(self) -> None:
        self._items: Dict[str, Connection] = {}
        self._lock = threading.Lock()

    async def put(self, connection: Connection) -> None:
        with self._lock:
            self._items[connection.connection_id] = connection

    async def delete(self, connection_id: str) -> None:
        with self._lock:
            self._items.pop(connection_id, None)

    async def get(self, connection_id: str) -> Optional[Connection]:
        with self._lock:
            connection = self._items.get(connection_id)
        if connection is not None and connection.is_expired():
            return None
        return connection

    async def list_connection_ids(self) -> list[str]:
        return [c.connection_id for c in await self.list_connections()]

    async def list_connections(self) -> list[Connection]:
        # Mimic the table's TTL sweep: expired records are never returned
        now = datetime.now(timezone.utc)
        with self._lock:
            return [c for c in self._items.values() if not c.is_expired(now)]

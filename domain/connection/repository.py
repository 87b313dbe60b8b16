"""Repository abstraction for the connection registry."""
from __future__ import annotations

from abc import ABC, abstractmethod

from .entity import Connection


class ConnectionRepository(ABC):
    """Contract for the key-value store backing the registry.

    Writes are independent single-key operations; there is no
    compare-and-swap, so concurrent writes on one key are last-writer-wins.
    """

    @abstractmethod
    async def put(self, connection: Connection) -> None:
        """Insert or overwrite the record for ``connection.connection_id``."""
        ...

    @abstractmethod
    async def delete(self, connection_id: str) -> None:
        """Delete by key; absent keys are not an error."""
        ...

    @abstractmethod
    async def get(self, connection_id: str) -> Connection | None:
        ...

    @abstractmethod
    async def list_connection_ids(self) -> list[str]:
        """Full read of every registered id."""
        ...

    @abstractmethod
    async def list_connections(self) -> list[Connection]:
        ...

"""
Push channel port (contracts-first).

The application layer only needs "post these bytes to that connection";
the concrete API Gateway Management API client lives in infrastructure.
Implementations must raise ``ConnectionGoneException`` when the target
no longer exists and ``DeliveryFailedException`` for any other failure.
"""
from __future__ import annotations

from typing import Callable, Protocol


class PushClientPort(Protocol):
    """One push client is bound to one management endpoint."""

    async def post_to_connection(self, connection_id: str, data: bytes) -> None: ...


# endpoint (https://...) -> pooled client for that endpoint
PushClientFactory = Callable[[str], PushClientPort]


__all__ = ["PushClientPort", "PushClientFactory"]

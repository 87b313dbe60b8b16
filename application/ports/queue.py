"""Broadcast queue port.

Publishing only enqueues; the fan-out itself runs when the queue
triggers the broadcast handler.
"""
from __future__ import annotations

from typing import Any, Protocol


class BroadcastQueuePort(Protocol):
    async def publish(self, message: Any) -> str:
        """Enqueue one broadcast message and return its message id."""
        ...


__all__ = ["BroadcastQueuePort"]

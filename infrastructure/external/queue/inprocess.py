"""In-process implementation of BroadcastQueuePort.

Single-process only: no durability, no redelivery. Useful for local dev
when no queue is configured; the fan-out runs before ``publish`` returns.
"""
from __future__ import annotations

import uuid
from typing import Any

from application.services.broadcast_service import BroadcastService
from core.logging_config import get_logger
from .sqs import encode_body


logger = get_logger(__name__)


class InProcessBroadcastQueue:
    def __init__(self, broadcast: BroadcastService) -> None:
        self._broadcast = broadcast

    async def publish(self, message: Any) -> str:
        message_id = str(uuid.uuid4())
        result = await self._broadcast.broadcast(encode_body(message))
        logger.info(
            "broadcast_published_inprocess",
            message_id=message_id,
            total=result.total,
            failed=result.failed,
        )
        return message_id

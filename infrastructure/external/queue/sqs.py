"""SQS implementation of BroadcastQueuePort."""
from __future__ import annotations

import json
from functools import partial
from typing import Any

import anyio

from core.logging_config import get_logger
from domain.common.exceptions import QueuePublishException
from infrastructure.external.aws import error_code


logger = get_logger(__name__)


def encode_body(message: Any) -> str:
    # Plain strings are sent raw; the fan-out wraps non-JSON text as {"text": ...}
    if isinstance(message, str):
        return message
    return json.dumps(message, ensure_ascii=False, default=str)


class SqsBroadcastQueue:
    def __init__(self, client: Any, queue_url: str) -> None:
        self.client = client
        self.queue_url = queue_url

    async def publish(self, message: Any) -> str:
        body = encode_body(message)
        try:
            response = await anyio.to_thread.run_sync(
                partial(
                    self.client.send_message,
                    QueueUrl=self.queue_url,
                    MessageBody=body,
                )
            )
        except Exception as e:
            logger.error("broadcast_enqueue_failed", queue_url=self.queue_url, error=str(e))
            raise QueuePublishException(str(e), provider_code=error_code(e) or None) from e
        message_id = str((response or {}).get("MessageId", ""))
        logger.info("broadcast_enqueued", message_id=message_id, size=len(body))
        return message_id

"""
Broadcast DTOs and payload normalization.
"""
from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, Field, model_validator


def normalize_broadcast_payload(raw: str) -> Any:
    """Derive what is relayed to clients from a raw queue body.

    - JSON object with a non-null ``data`` field -> ``data``
    - any other JSON value -> the parsed value as-is
    - not JSON -> ``{"text": raw}``
    """
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return {"text": raw}
    if isinstance(parsed, dict) and parsed.get("data") is not None:
        return parsed["data"]
    return parsed


def serialize_message(message: Any) -> bytes:
    return json.dumps(message, ensure_ascii=False, default=str).encode("utf-8")


class BroadcastResult(BaseModel):
    total: int = 0
    delivered: int = 0
    failed: int = 0
    # True when connections existed but no push endpoint was configured
    skipped: bool = False


class BatchResult(BaseModel):
    processed: int = 0
    failed_message_ids: list[str] = Field(default_factory=list)

    def batch_item_failures(self) -> list[dict[str, str]]:
        """SQS partial batch response entries."""
        return [{"itemIdentifier": mid} for mid in self.failed_message_ids]


class PublishRequest(BaseModel):
    """Operator API body: either structured ``data`` or plain ``text``."""

    data: Any = None
    text: str | None = None

    @model_validator(mode="after")
    def _require_payload(self):
        if self.data is None and self.text is None:
            raise ValueError("either 'data' or 'text' is required")
        return self

    def to_message(self) -> Any:
        # plain text is enqueued raw so the fan-out wraps it as {"text": ...}
        if self.data is not None:
            return {"data": self.data}
        return self.text


class PublishResponse(BaseModel):
    message_id: str


__all__ = [
    "normalize_broadcast_payload",
    "serialize_message",
    "BroadcastResult",
    "BatchResult",
    "PublishRequest",
    "PublishResponse",
]

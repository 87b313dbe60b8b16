"""
Boundary resolution of raw Lambda events.

The gateway and the queue invoke the same function; the event kind is
decided here, once, and the core only ever sees the tagged union.
"""
from __future__ import annotations

from typing import Any

from application.dtos.events import (
    BroadcastBatchEvent,
    BroadcastRecord,
    InboundEvent,
    SessionEvent,
    UnknownEvent,
)


SQS_EVENT_SOURCE = "aws:sqs"


def _is_queue_batch(raw: dict[str, Any]) -> bool:
    records = raw.get("Records")
    if not isinstance(records, list) or not records:
        return False
    first = records[0]
    return isinstance(first, dict) and first.get("eventSource") == SQS_EVENT_SOURCE


def _is_session(raw: dict[str, Any]) -> bool:
    ctx = raw.get("requestContext")
    return isinstance(ctx, dict) and ctx.get("routeKey") is not None


def resolve_event(raw: Any) -> InboundEvent:
    if not isinstance(raw, dict):
        return UnknownEvent()

    if _is_queue_batch(raw):
        return BroadcastBatchEvent(
            records=[
                BroadcastRecord(
                    message_id=str(r.get("messageId") or ""),
                    body="" if r.get("body") is None else str(r.get("body")),
                )
                for r in raw["Records"]
            ]
        )

    if _is_session(raw):
        ctx = raw["requestContext"]
        return SessionEvent(
            connection_id=str(ctx.get("connectionId") or ""),
            route_key=str(ctx["routeKey"]),
            domain_name=str(ctx.get("domainName") or ""),
            stage=str(ctx.get("stage") or ""),
            body=raw.get("body"),
            request_id=ctx.get("requestId"),
            authorizer=dict(ctx.get("authorizer") or {}),
        )

    return UnknownEvent(keys=sorted(str(k) for k in raw.keys()))

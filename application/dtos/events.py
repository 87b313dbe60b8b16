"""
Inbound event DTOs (tagged union).

Raw Lambda events are resolved into one of these at the boundary
(``api.events.resolve_event``); the core never inspects raw event shape.
"""
from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field


CONNECT_ROUTE = "$connect"
DISCONNECT_ROUTE = "$disconnect"
DEFAULT_ROUTE = "$default"
PING_ROUTE = "ping"


class SessionEvent(BaseModel):
    """One per-connection event delivered by the WebSocket gateway."""

    kind: Literal["session"] = "session"
    connection_id: str
    route_key: str
    domain_name: str = ""
    stage: str = ""
    body: Optional[str] = None
    request_id: Optional[str] = None
    # Context attached by the $connect authorizer (principalId, userId, ...)
    authorizer: dict[str, Any] = Field(default_factory=dict)


class BroadcastRecord(BaseModel):
    message_id: str = ""
    body: str = ""


class BroadcastBatchEvent(BaseModel):
    """A batch of queued broadcast messages; each record is one broadcast."""

    kind: Literal["broadcast_batch"] = "broadcast_batch"
    records: list[BroadcastRecord] = Field(default_factory=list)


class UnknownEvent(BaseModel):
    kind: Literal["unknown"] = "unknown"
    keys: list[str] = Field(default_factory=list)


InboundEvent = Annotated[
    Union[SessionEvent, BroadcastBatchEvent, UnknownEvent],
    Field(discriminator="kind"),
]


__all__ = [
    "CONNECT_ROUTE",
    "DISCONNECT_ROUTE",
    "DEFAULT_ROUTE",
    "PING_ROUTE",
    "SessionEvent",
    "BroadcastRecord",
    "BroadcastBatchEvent",
    "UnknownEvent",
    "InboundEvent",
]

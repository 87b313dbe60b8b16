"""Domain entity representing one live WebSocket session in the registry."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from domain.common.exceptions import InvalidMessageException

ONE_YEAR = timedelta(days=365)


def _ensure_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass
class Connection:
    """Registry record keyed by the gateway-assigned connection id.

    ``expires_at`` is persisted as the table TTL attribute; the store
    purges expired records independently of the application.
    """

    connection_id: str
    connected_at: datetime
    expires_at: datetime

    def __post_init__(self) -> None:
        if not self.connection_id:
            raise InvalidMessageException("connection_id must not be empty")
        self.connected_at = _ensure_utc(self.connected_at)
        self.expires_at = _ensure_utc(self.expires_at)

    @classmethod
    def open(
        cls,
        connection_id: str,
        *,
        now: Optional[datetime] = None,
        ttl: timedelta = ONE_YEAR,
    ) -> "Connection":
        ts = _ensure_utc(now or datetime.now(timezone.utc))
        return cls(connection_id=connection_id, connected_at=ts, expires_at=ts + ttl)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        ts = _ensure_utc(now or datetime.now(timezone.utc))
        return ts >= self.expires_at

    @property
    def ttl_epoch(self) -> int:
        return int(self.expires_at.timestamp())

    def to_item(self) -> dict[str, Any]:
        """Table item shape: ``connectionId`` / ``connectedAt`` / ``ttl``."""
        return {
            "connectionId": self.connection_id,
            "connectedAt": self.connected_at.isoformat(),
            "ttl": self.ttl_epoch,
        }

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> "Connection":
        connected_raw = item.get("connectedAt")
        connected_at = (
            datetime.fromisoformat(str(connected_raw).replace("Z", "+00:00"))
            if connected_raw
            else datetime.fromtimestamp(0, tz=timezone.utc)
        )
        ttl_raw = item.get("ttl")
        expires_at = (
            datetime.fromtimestamp(int(ttl_raw), tz=timezone.utc)
            if ttl_raw is not None
            else connected_at + ONE_YEAR
        )
        return cls(
            connection_id=str(item["connectionId"]),
            connected_at=connected_at,
            expires_at=expires_at,
        )

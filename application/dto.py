"""
数据传输对象（DTO）- 应用层与表现层之间的数据传输
"""
from datetime import datetime, timezone

from pydantic import BaseModel, Field, model_serializer

from domain.connection import Connection


class DTOBase(BaseModel):
    """Base DTO: unify datetime serialization to UTC-Z for all subclasses."""

    @model_serializer(mode="wrap")
    def _serialize_model(self, handler):  # type: ignore[override]
        data = handler(self)

        def convert(value):
            if isinstance(value, datetime):
                ts = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
                s = ts.astimezone(timezone.utc).isoformat()
                return s.replace("+00:00", "Z")
            if isinstance(value, list):
                return [convert(v) for v in value]
            if isinstance(value, dict):
                return {k: convert(v) for k, v in value.items()}
            return value

        return convert(data)


class ConnectionResponseDTO(DTOBase):
    """连接记录响应DTO"""
    connection_id: str = Field(..., description="网关分配的连接ID")
    connected_at: datetime = Field(..., description="注册时间")
    expires_at: datetime = Field(..., description="过期时间（表 TTL）")

    @classmethod
    def from_entity(cls, connection: Connection) -> "ConnectionResponseDTO":
        return cls(
            connection_id=connection.connection_id,
            connected_at=connection.connected_at,
            expires_at=connection.expires_at,
        )


class ConnectionListDTO(DTOBase):
    """连接列表DTO"""
    items: list[ConnectionResponseDTO]
    total: int

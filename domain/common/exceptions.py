"""领域层业务异常定义，供领域与基础设施使用。

核心（core）层仅负责全局映射与异常处理，尽量避免领域层反向依赖核心层。
"""
from __future__ import annotations

from typing import Optional
from shared.codes import BusinessCode


class BusinessException(Exception):
    """业务异常基类"""

    def __init__(
        self,
        code: int,
        message: str,
        error_type: str = "BusinessError",
        details: Optional[dict] = None,
        field: Optional[str] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.error_type = error_type
        self.details = details
        self.field = field
        super().__init__(self.message)


class ConnectionGoneException(BusinessException):
    """推送目标已不存在（API Gateway 返回 410 GoneException）"""

    def __init__(self, connection_id: str):
        super().__init__(
            code=BusinessCode.CONNECTION_GONE,
            message=f"Connection {connection_id} is gone",
            error_type="ConnectionGone",
            details={"connection_id": connection_id},
        )
        self.connection_id = connection_id


class DeliveryFailedException(BusinessException):
    def __init__(self, connection_id: str, reason: str, *, provider_code: str | None = None):
        super().__init__(
            code=BusinessCode.DELIVERY_FAILED,
            message=f"Failed to deliver to connection {connection_id}: {reason}",
            error_type="DeliveryFailed",
            details={"connection_id": connection_id, "provider_code": provider_code},
        )
        self.connection_id = connection_id
        self.provider_code = provider_code


class RegistryException(BusinessException):
    def __init__(self, operation: str, reason: str, *, provider_code: str | None = None):
        super().__init__(
            code=BusinessCode.REGISTRY_ERROR,
            message=f"Connection registry error during {operation}: {reason}",
            error_type="RegistryError",
            details={"operation": operation, "provider_code": provider_code},
        )
        self.operation = operation


class ConnectionNotFoundException(BusinessException):
    def __init__(self, connection_id: str):
        super().__init__(
            code=BusinessCode.CONNECTION_NOT_FOUND,
            message="Connection not found",
            error_type="ConnectionNotFound",
            details={"connection_id": connection_id},
        )


class InvalidMessageException(BusinessException):
    def __init__(self, reason: str = "Invalid message format"):
        super().__init__(
            code=BusinessCode.INVALID_MESSAGE,
            message=reason,
            error_type="InvalidMessage",
            field="body",
        )


class UnhandledRouteException(BusinessException):
    def __init__(self, route_key: str):
        super().__init__(
            code=BusinessCode.UNHANDLED_ROUTE,
            message=f"Unhandled route: {route_key}",
            error_type="UnhandledRoute",
            details={"route_key": route_key},
        )
        self.route_key = route_key


class QueuePublishException(BusinessException):
    def __init__(self, reason: str, *, provider_code: str | None = None):
        super().__init__(
            code=BusinessCode.QUEUE_ERROR,
            message=f"Failed to enqueue broadcast: {reason}",
            error_type="QueuePublishError",
            details={"provider_code": provider_code},
        )


class ConfigurationException(BusinessException):
    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(
            code=BusinessCode.CONFIGURATION_ERROR,
            message=message,
            error_type="ConfigurationError",
            field=field,
        )

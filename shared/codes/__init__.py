"""
Shared business codes used across layers (Domain/Core/API).

Single source of truth for the relay's error taxonomy; the operator API
maps these to HTTP statuses and the Lambda handlers map them to gateway
status codes.
"""
from enum import IntEnum


class BusinessCode(IntEnum):
    """Unified business status codes (single source of truth)."""

    # Success
    SUCCESS = 0

    # Parameter errors (1xxxx)
    PARAM_ERROR = 10000
    PARAM_MISSING = 10001
    PARAM_TYPE_ERROR = 10002
    PARAM_VALIDATION_ERROR = 10003
    INVALID_MESSAGE = 10004
    UNHANDLED_ROUTE = 10005
    UNKNOWN_EVENT = 10006

    # Business errors (2xxxx)
    BUSINESS_ERROR = 20000
    CONNECTION_NOT_FOUND = 20001
    CONNECTION_GONE = 20002
    NOT_FOUND = 20006  # Generic resource not found

    # Authorization errors (3xxxx)
    PERMISSION_ERROR = 30000
    UNAUTHORIZED = 30001
    FORBIDDEN = 30002

    # System errors (4xxxx)
    SYSTEM_ERROR = 40000
    REGISTRY_ERROR = 40001
    NETWORK_ERROR = 40002
    SERVICE_UNAVAILABLE = 40003
    DELIVERY_FAILED = 40004
    QUEUE_ERROR = 40005
    CONFIGURATION_ERROR = 40006


__all__ = ["BusinessCode"]

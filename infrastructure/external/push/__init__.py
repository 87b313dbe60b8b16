"""Push client pool and lifecycle.

One client per management endpoint, created on first use and reused for
the life of the process (warm Lambda containers included).
"""
from __future__ import annotations

import threading

from core.logging_config import get_logger
from domain.common.exceptions import ConfigurationException
from infrastructure.external.aws import get_client
from .apigateway import ApiGatewayPushClient

logger = get_logger(__name__)

_push_clients: dict[str, ApiGatewayPushClient] = {}
_lock = threading.Lock()


def get_push_client(endpoint: str) -> ApiGatewayPushClient:
    """Pooled push client for ``endpoint`` (already https://)."""
    if not endpoint or not endpoint.startswith(("https://", "http://")):
        raise ConfigurationException(f"Invalid push endpoint: {endpoint!r}", field="WEBSOCKET_ENDPOINT")
    with _lock:
        client = _push_clients.get(endpoint)
        if client is None:
            sdk = get_client("apigatewaymanagementapi", endpoint_url=endpoint)
            client = ApiGatewayPushClient(sdk, endpoint)
            _push_clients[endpoint] = client
            logger.info("push_client_created", endpoint=endpoint)
        return client


def shutdown_push_clients() -> None:
    with _lock:
        _push_clients.clear()
    logger.info("push_clients_shutdown")


__all__ = [
    "ApiGatewayPushClient",
    "get_push_client",
    "shutdown_push_clients",
]

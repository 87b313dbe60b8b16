"""Delivery client: push one message to one live connection.

A ``ConnectionGoneException`` from the push channel is the self-healing
trigger: the registry entry is purged and the failure is absorbed. Every
other failure propagates to the caller unchanged and is not retried here.
"""
from __future__ import annotations

from typing import Any

from application.dtos.broadcast import serialize_message
from application.ports.push import PushClientFactory
from application.services.registry_service import RegistryService
from core.logging_config import get_logger
from domain.common.exceptions import ConnectionGoneException


logger = get_logger(__name__)


def normalize_endpoint(endpoint: str) -> str:
    """Management API expects https://; gateway URLs are usually wss://."""
    if endpoint.startswith("wss://"):
        return "https://" + endpoint[len("wss://"):]
    if endpoint.startswith("ws://"):
        return "http://" + endpoint[len("ws://"):]
    return endpoint


def reply_endpoint(domain_name: str, stage: str) -> str:
    return f"https://{domain_name}/{stage}"


class DeliveryService:
    def __init__(self, *, client_factory: PushClientFactory, registry: RegistryService) -> None:
        self._client_factory = client_factory
        self._registry = registry

    async def deliver(self, endpoint: str, connection_id: str, message: Any) -> None:
        data = serialize_message(message)
        client = self._client_factory(normalize_endpoint(endpoint))
        try:
            await client.post_to_connection(connection_id, data)
        except ConnectionGoneException:
            logger.info("connection_gone", connection_id=connection_id)
            await self._registry.purge_stale(connection_id)
            return
        except Exception as exc:
            logger.error(
                "message_delivery_failed",
                connection_id=connection_id,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise
        logger.debug("message_delivered", connection_id=connection_id, size=len(data))

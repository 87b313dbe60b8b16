"""Session protocol handler for per-connection gateway events.

Stateless between events: the registry is the only state. Routes:

- ``$connect``     register the connection
- ``$disconnect``  unregister it
- ``ping``         push ``{"action": "pong"}`` back to the caller
- ``$default``     JSON body; ``{"action": "ping"}`` behaves as ``ping``,
                   anything else is acknowledged
"""
from __future__ import annotations

import json
from typing import Awaitable, Callable

from application.dtos.events import (
    CONNECT_ROUTE,
    DEFAULT_ROUTE,
    DISCONNECT_ROUTE,
    PING_ROUTE,
    SessionEvent,
)
from application.services.delivery_service import DeliveryService, reply_endpoint
from application.services.registry_service import RegistryService
from core.logging_config import get_logger
from core.response import GatewayResponse
from domain.common.exceptions import InvalidMessageException, UnhandledRouteException


logger = get_logger(__name__)

PING_ACTION = "ping"
PONG_PAYLOAD = {"action": "pong"}

RouteHandler = Callable[[SessionEvent], Awaitable[GatewayResponse]]


class SessionService:
    def __init__(self, *, registry: RegistryService, delivery: DeliveryService) -> None:
        self._registry = registry
        self._delivery = delivery
        self._routes: dict[str, RouteHandler] = {
            CONNECT_ROUTE: self._on_connect,
            DISCONNECT_ROUTE: self._on_disconnect,
            PING_ROUTE: self._on_ping,
            DEFAULT_ROUTE: self._on_default,
        }

    async def handle(self, event: SessionEvent) -> GatewayResponse:
        try:
            handler = self._routes.get(event.route_key)
            if handler is None:
                raise UnhandledRouteException(event.route_key)
            return await handler(event)
        except (InvalidMessageException, UnhandledRouteException) as exc:
            logger.warning("session_event_rejected", route_key=event.route_key, reason=exc.message)
            return GatewayResponse.of(400, exc.message)
        except Exception as exc:
            logger.error(
                "session_event_failed",
                route_key=event.route_key,
                error=str(exc),
                error_type=type(exc).__name__,
                exc_info=True,
            )
            return GatewayResponse.of(500, "Internal server error")

    async def _on_connect(self, event: SessionEvent) -> GatewayResponse:
        # Authorization already happened in the $connect authorizer
        await self._registry.register(event.connection_id)
        return GatewayResponse.of(200, "Connected")

    async def _on_disconnect(self, event: SessionEvent) -> GatewayResponse:
        await self._registry.unregister(event.connection_id)
        return GatewayResponse.of(200, "Disconnected")

    async def _on_ping(self, event: SessionEvent) -> GatewayResponse:
        logger.info("ping_received", connection_id=event.connection_id)
        endpoint = reply_endpoint(event.domain_name, event.stage)
        try:
            await self._delivery.deliver(endpoint, event.connection_id, PONG_PAYLOAD)
        except Exception as exc:
            logger.error("ping_failed", connection_id=event.connection_id, error=str(exc))
            return GatewayResponse.of(500, "Error handling ping")
        return GatewayResponse.of(200, "Pong sent")

    async def _on_default(self, event: SessionEvent) -> GatewayResponse:
        try:
            message = json.loads(event.body or "{}")
        except ValueError as exc:
            raise InvalidMessageException("Invalid message format") from exc

        if isinstance(message, dict) and message.get("action") == PING_ACTION:
            return await self._on_ping(event)

        # Other actions are acknowledged without further work for now
        return GatewayResponse.of(200, "Message received")

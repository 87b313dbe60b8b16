"""Deployment-time rebinding of the $connect route to the Lambda authorizer.

Runs as a CloudFormation custom resource: the authorizer cannot be
attached when the API is created without a circular dependency, so the
stack creates both and this handler wires them together afterwards.
"""
from __future__ import annotations

from typing import Any, Optional

from application.dtos.deployment import CustomResourceEvent, CustomResourceResponse
from application.dtos.events import CONNECT_ROUTE
from application.ports.routes import RouteAdminPort
from core.logging_config import get_logger


logger = get_logger(__name__)

CUSTOM_AUTHORIZATION = "CUSTOM"


class RouteBindingError(Exception):
    pass


class RouteBindingService:
    def __init__(self, *, routes: RouteAdminPort, route_key: str = CONNECT_ROUTE) -> None:
        self._routes = routes
        self._route_key = route_key

    async def handle(self, event: CustomResourceEvent) -> CustomResourceResponse:
        if event.request_type not in ("Create", "Update"):
            logger.info("route_binding_skipped", request_type=event.request_type)
            return CustomResourceResponse.for_event(event, "SUCCESS")

        try:
            route_id = await self.bind(event.api_id, event.authorizer_id)
        except Exception as exc:
            logger.error("route_binding_failed", api_id=event.api_id, error=str(exc))
            return CustomResourceResponse.for_event(event, "FAILED", reason=str(exc))
        return CustomResourceResponse.for_event(event, "SUCCESS", data={"RouteId": route_id})

    async def bind(self, api_id: Optional[str], authorizer_id: Optional[str]) -> str:
        """Point the route at ``authorizer_id``; a no-op when already bound."""
        if not api_id or not authorizer_id:
            raise RouteBindingError("Missing required IDs for route update")

        route = await self._find_route(api_id)
        if route is None:
            raise RouteBindingError(f"{self._route_key} route not found")
        route_id = route.get("RouteId")
        if not route_id:
            raise RouteBindingError("Missing required IDs for route update")

        if (
            route.get("AuthorizationType") == CUSTOM_AUTHORIZATION
            and route.get("AuthorizerId") == authorizer_id
        ):
            logger.info("route_already_bound", api_id=api_id, route_id=route_id)
            return route_id

        await self._routes.update_route_authorizer(api_id, route_id, authorizer_id)
        logger.info("route_bound", api_id=api_id, route_id=route_id, authorizer_id=authorizer_id)
        return route_id

    async def _find_route(self, api_id: str) -> Optional[dict[str, Any]]:
        for route in await self._routes.list_routes(api_id):
            if route.get("RouteKey") == self._route_key:
                return route
        return None

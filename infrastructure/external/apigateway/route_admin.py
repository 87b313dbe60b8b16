"""apigatewayv2 implementation of RouteAdminPort."""
from __future__ import annotations

from functools import partial
from typing import Any

import anyio

from core.logging_config import get_logger


logger = get_logger(__name__)


class ApiGatewayRouteAdmin:
    def __init__(self, client: Any) -> None:
        """
        Args:
            client: boto3 ``apigatewayv2`` client
        """
        self.client = client

    async def list_routes(self, api_id: str) -> list[dict[str, Any]]:
        routes: list[dict[str, Any]] = []
        kwargs: dict[str, Any] = {"ApiId": api_id}
        while True:
            response = await anyio.to_thread.run_sync(partial(self.client.get_routes, **kwargs))
            routes.extend(response.get("Items", []))
            token = response.get("NextToken")
            if not token:
                break
            kwargs["NextToken"] = token
        logger.debug("routes_listed", api_id=api_id, count=len(routes))
        return routes

    async def update_route_authorizer(self, api_id: str, route_id: str, authorizer_id: str) -> None:
        await anyio.to_thread.run_sync(
            partial(
                self.client.update_route,
                ApiId=api_id,
                RouteId=route_id,
                AuthorizationType="CUSTOM",
                AuthorizerId=authorizer_id,
            )
        )

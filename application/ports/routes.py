"""Gateway route administration port (deployment time only)."""
from __future__ import annotations

from typing import Any, Protocol


class RouteAdminPort(Protocol):
    async def list_routes(self, api_id: str) -> list[dict[str, Any]]:
        """Every route of the API, as returned by the control plane."""
        ...

    async def update_route_authorizer(self, api_id: str, route_id: str, authorizer_id: str) -> None:
        ...


__all__ = ["RouteAdminPort"]

"""API Gateway v2 control-plane adapters."""

from .route_admin import ApiGatewayRouteAdmin

__all__ = ["ApiGatewayRouteAdmin"]

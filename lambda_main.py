"""
Lambda 入口

- handler:               WebSocket 会话事件 + SQS 广播批次（同一个函数）
- authorizer_handler:    $connect REQUEST 授权
- update_route_handler:  CloudFormation 自定义资源，重新绑定 $connect 授权器
"""
import asyncio
from typing import Any, Optional

import structlog

from api.dependencies import RelayServices, build_authorizer_service, build_relay_services
from api.events import resolve_event
from application.dtos.auth import AuthorizationRequest
from application.dtos.deployment import CustomResourceEvent
from application.dtos.events import BroadcastBatchEvent, SessionEvent
from application.services.route_binding_service import RouteBindingService
from core.config import settings
from core.logging_config import configure_logging, get_logger
from core.response import GatewayResponse


configure_logging()
logger = get_logger(__name__)

# Built on first invocation, reused by warm containers
_services: Optional[RelayServices] = None


def get_services() -> RelayServices:
    global _services
    if _services is None:
        _services = build_relay_services(settings)
        logger.info(
            "relay_initialized",
            table=settings.TABLE_NAME or None,
            endpoint=_services.broadcast.endpoint,
            fanout_max_concurrency=settings.FANOUT_MAX_CONCURRENCY,
        )
    return _services


def set_services(services: Optional[RelayServices]) -> None:
    """Replace the cached services (tests, local runners)."""
    global _services
    _services = services


def _bind_invocation(context: Any, **extra: Any) -> None:
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        aws_request_id=getattr(context, "aws_request_id", None),
        **extra,
    )


async def dispatch(raw_event: Any) -> dict[str, Any]:
    event = resolve_event(raw_event)
    services = get_services()

    if isinstance(event, BroadcastBatchEvent):
        structlog.contextvars.bind_contextvars(records=len(event.records))
        result = await services.broadcast.handle_batch(event)
        return {
            **GatewayResponse.of(200, "SQS messages processed").to_gateway(),
            "batchItemFailures": result.batch_item_failures(),
        }

    if isinstance(event, SessionEvent):
        structlog.contextvars.bind_contextvars(
            connection_id=event.connection_id,
            route_key=event.route_key,
        )
        response = await services.session.handle(event)
        return response.to_gateway()

    logger.error("unknown_event_type", keys=event.keys)
    return GatewayResponse.of(400, "Unknown event type").to_gateway()


def handler(event: Any, context: Any = None) -> dict[str, Any]:
    _bind_invocation(context)
    return asyncio.run(dispatch(event))


def authorizer_handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    _bind_invocation(context, function="authorizer")
    result = build_authorizer_service(settings).authorize(AuthorizationRequest.from_event(event))
    return result.to_gateway()


async def _update_route(event: dict[str, Any]) -> dict[str, Any]:
    from infrastructure.external.apigateway import ApiGatewayRouteAdmin
    from infrastructure.external.aws import get_client

    service = RouteBindingService(routes=ApiGatewayRouteAdmin(get_client("apigatewayv2")))
    response = await service.handle(CustomResourceEvent.model_validate(event))
    logger.info("custom_resource_response", status=response.status, reason=response.reason)
    return response.to_cloudformation()


def update_route_handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    _bind_invocation(context, function="update_route")
    return asyncio.run(_update_route(event))

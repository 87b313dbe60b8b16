"""
依赖装配 - 组装注册表、推送、广播与会话服务

Lambda 入口与运维 HTTP API 共用同一套装配逻辑。
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from application.ports.push import PushClientFactory
from application.ports.queue import BroadcastQueuePort
from application.services.authorizer_service import AuthorizerService
from application.services.broadcast_service import BroadcastService
from application.services.delivery_service import DeliveryService
from application.services.registry_service import RegistryService
from application.services.session_service import SessionService
from core.config import Settings, settings as default_settings
from core.logging_config import get_logger
from domain.connection import ConnectionRepository


logger = get_logger(__name__)


@dataclass
class RelayServices:
    registry: RegistryService
    delivery: DeliveryService
    broadcast: BroadcastService
    session: SessionService
    publisher: BroadcastQueuePort


def build_repository(cfg: Settings) -> ConnectionRepository:
    if cfg.use_dynamodb:
        from infrastructure.external.aws import get_resource
        from infrastructure.repositories.connection_repository import DynamoDBConnectionRepository

        table = get_resource("dynamodb").Table(cfg.TABLE_NAME)
        logger.info("registry_backend_selected", backend="dynamodb", table=cfg.TABLE_NAME)
        return DynamoDBConnectionRepository(table)

    from infrastructure.repositories.inmemory_connection_repository import InMemoryConnectionRepository

    logger.info("registry_backend_selected", backend="memory")
    return InMemoryConnectionRepository()


def build_publisher(cfg: Settings, broadcast: BroadcastService) -> BroadcastQueuePort:
    if cfg.QUEUE_URL:
        from infrastructure.external.aws import get_client
        from infrastructure.external.queue import SqsBroadcastQueue

        logger.info("broadcast_publisher_selected", provider="sqs")
        return SqsBroadcastQueue(get_client("sqs"), cfg.QUEUE_URL)

    from infrastructure.external.queue import InProcessBroadcastQueue

    logger.info("broadcast_publisher_selected", provider="inprocess")
    return InProcessBroadcastQueue(broadcast)


def build_relay_services(
    cfg: Optional[Settings] = None,
    *,
    repository: Optional[ConnectionRepository] = None,
    client_factory: Optional[PushClientFactory] = None,
    publisher: Optional[BroadcastQueuePort] = None,
) -> RelayServices:
    """Wire the relay; overrides allow fakes in tests and local runs."""
    cfg = cfg or default_settings
    if client_factory is None:
        from infrastructure.external.push import get_push_client

        client_factory = get_push_client

    registry = RegistryService(
        repository=repository or build_repository(cfg),
        ttl_seconds=cfg.CONNECTION_TTL_SECONDS,
    )
    delivery = DeliveryService(client_factory=client_factory, registry=registry)
    broadcast = BroadcastService(
        registry=registry,
        delivery=delivery,
        endpoint=cfg.WEBSOCKET_ENDPOINT,
        max_concurrency=cfg.FANOUT_MAX_CONCURRENCY,
    )
    session = SessionService(registry=registry, delivery=delivery)
    return RelayServices(
        registry=registry,
        delivery=delivery,
        broadcast=broadcast,
        session=session,
        publisher=publisher or build_publisher(cfg, broadcast),
    )


def build_authorizer_service(cfg: Optional[Settings] = None) -> AuthorizerService:
    cfg = cfg or default_settings
    return AuthorizerService(
        expected_token=cfg.AUTH_TOKEN,
        principal_id=cfg.AUTH_PRINCIPAL_ID,
        context=cfg.AUTH_CONTEXT,
    )


def get_relay_services(request: Request) -> RelayServices:
    svc = getattr(request.app.state, "relay", None)
    if svc is None:
        raise RuntimeError("Relay services not initialized. Ensure lifespan sets app.state.relay.")
    return svc


async def get_registry_service(request: Request) -> RegistryService:
    return get_relay_services(request).registry


async def get_publisher(request: Request) -> BroadcastQueuePort:
    return get_relay_services(request).publisher

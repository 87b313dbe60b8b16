"""API Gateway Management API push client."""
from __future__ import annotations

from functools import partial
from typing import Any

import anyio

from core.logging_config import get_logger
from domain.common.exceptions import ConnectionGoneException, DeliveryFailedException
from infrastructure.external.aws import error_code, http_status


logger = get_logger(__name__)

GONE_CODES = {"GoneException", "410"}


class ApiGatewayPushClient:
    """Posts to ``@connections/{id}`` on one management endpoint."""

    def __init__(self, client: Any, endpoint: str):
        """
        Args:
            client: boto3 ``apigatewaymanagementapi`` client bound to ``endpoint``
            endpoint: https://{domain}/{stage}
        """
        self.client = client
        self.endpoint = endpoint

    async def post_to_connection(self, connection_id: str, data: bytes) -> None:
        try:
            # Sync SDK call off the event loop
            await anyio.to_thread.run_sync(
                partial(
                    self.client.post_to_connection,
                    ConnectionId=connection_id,
                    Data=data,
                )
            )
        except Exception as e:
            self._handle_exception(e, connection_id)

    def _handle_exception(self, e: Exception, connection_id: str) -> None:
        """Map SDK errors to delivery exceptions."""
        code = error_code(e)
        if code in GONE_CODES or http_status(e) == 410:
            raise ConnectionGoneException(connection_id) from e
        raise DeliveryFailedException(connection_id, str(e), provider_code=code or None) from e

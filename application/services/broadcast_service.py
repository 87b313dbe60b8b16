"""Broadcast fan-out engine.

One inbound message -> one enumeration of the registry -> one independent
delivery per registered connection. Deliveries run concurrently, bounded
by ``max_concurrency``; the broadcast completes when all of them settle,
whatever their individual outcomes.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from application.dtos.broadcast import BatchResult, BroadcastResult, normalize_broadcast_payload
from application.dtos.events import BroadcastBatchEvent
from application.services.delivery_service import DeliveryService, normalize_endpoint
from application.services.registry_service import RegistryService
from core.logging_config import get_logger


logger = get_logger(__name__)


class BroadcastService:
    def __init__(
        self,
        *,
        registry: RegistryService,
        delivery: DeliveryService,
        endpoint: Optional[str],
        max_concurrency: int = 50,
    ) -> None:
        self._registry = registry
        self._delivery = delivery
        self._endpoint = normalize_endpoint(endpoint) if endpoint else None
        self._max_concurrency = max(1, int(max_concurrency))

    @property
    def endpoint(self) -> Optional[str]:
        return self._endpoint

    async def broadcast(self, raw_body: str) -> BroadcastResult:
        """Relay one queue body to every registered connection.

        Registry read errors propagate so the queue can redeliver; per
        recipient failures are logged and counted.
        """
        connection_ids = await self._registry.list_connection_ids()
        if not connection_ids:
            logger.info("broadcast_no_connections")
            return BroadcastResult()

        payload = normalize_broadcast_payload(raw_body)

        if not self._endpoint:
            logger.error("broadcast_endpoint_missing", connections=len(connection_ids))
            return BroadcastResult(total=len(connection_ids), skipped=True)

        endpoint = self._endpoint
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _send(connection_id: str) -> None:
            async with semaphore:
                await self._delivery.deliver(endpoint, connection_id, payload)

        outcomes = await asyncio.gather(
            *(_send(cid) for cid in connection_ids),
            return_exceptions=True,
        )

        failed = 0
        for connection_id, outcome in zip(connection_ids, outcomes):
            if isinstance(outcome, BaseException):
                failed += 1
                logger.error(
                    "broadcast_delivery_failed",
                    connection_id=connection_id,
                    error=str(outcome),
                    error_type=type(outcome).__name__,
                )

        result = BroadcastResult(
            total=len(connection_ids),
            delivered=len(connection_ids) - failed,
            failed=failed,
        )
        logger.info(
            "broadcast_completed",
            total=result.total,
            delivered=result.delivered,
            failed=result.failed,
        )
        return result

    async def handle_batch(self, event: BroadcastBatchEvent) -> BatchResult:
        """Process each queued record as its own broadcast, in order."""
        result = BatchResult()
        for record in event.records:
            logger.info("broadcast_record_processing", message_id=record.message_id)
            try:
                await self.broadcast(record.body)
            except Exception as exc:
                # Reported back as a partial batch failure; the queue's
                # redrive policy decides whether it is retried or dead-lettered.
                logger.error(
                    "broadcast_record_failed",
                    message_id=record.message_id,
                    error=str(exc),
                    error_type=type(exc).__name__,
                    exc_info=True,
                )
                result.failed_message_ids.append(record.message_id)
                continue
            result.processed += 1
        return result

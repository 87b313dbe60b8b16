import asyncio

import pytest

from application.dtos.events import BroadcastBatchEvent, BroadcastRecord
from application.services.broadcast_service import BroadcastService
from application.services.delivery_service import DeliveryService
from domain.common.exceptions import ConnectionGoneException, DeliveryFailedException, RegistryException


pytestmark = pytest.mark.asyncio

BROADCAST_ENDPOINT = "https://abc123.execute-api.us-east-1.amazonaws.com/dev"


async def _register(relay, *ids):
    for cid in ids:
        await relay.registry.register(cid)


async def test_broadcast_attempts_one_delivery_per_connection(relay, push_hub):
    await _register(relay, "a", "b", "c")

    result = await relay.broadcast.broadcast('{"data": {"msg": "hi"}}')

    assert sorted(push_hub.recipients()) == ["a", "b", "c"]
    assert all(endpoint == BROADCAST_ENDPOINT for endpoint, _, _ in push_hub.calls)
    assert all(payload == {"msg": "hi"} for _, _, payload in push_hub.calls)
    assert (result.total, result.delivered, result.failed) == (3, 3, 0)


async def test_gone_recipient_is_purged_and_others_still_receive(relay, push_hub):
    await _register(relay, "a", "b", "c", "d")
    push_hub.failures["a"] = ConnectionGoneException("a")

    await relay.broadcast.broadcast("hello")

    assert sorted(push_hub.recipients()) == ["a", "b", "c", "d"]
    assert sorted(await relay.registry.list_connection_ids()) == ["b", "c", "d"]


async def test_transient_failure_is_isolated_per_recipient(relay, push_hub):
    await _register(relay, "a", "b")
    push_hub.failures["a"] = DeliveryFailedException("a", "internal error")

    result = await relay.broadcast.broadcast('{"x": 1}')

    assert sorted(push_hub.recipients()) == ["a", "b"]
    assert (result.delivered, result.failed) == (1, 1)
    # not gone, so the record stays
    assert sorted(await relay.registry.list_connection_ids()) == ["a", "b"]


async def test_raw_text_is_wrapped(relay, push_hub):
    await _register(relay, "a", "b")

    await relay.broadcast.broadcast("hello")

    assert [payload for _, _, payload in push_hub.calls] == [{"text": "hello"}, {"text": "hello"}]


async def test_empty_registry_is_noop(relay, push_hub):
    result = await relay.broadcast.broadcast("hello")
    assert push_hub.calls == []
    assert result.total == 0


async def test_missing_endpoint_skips_delivery(relay, push_hub):
    await _register(relay, "a")
    service = BroadcastService(registry=relay.registry, delivery=relay.delivery, endpoint=None)

    result = await service.broadcast("hello")

    assert result.skipped is True
    assert push_hub.calls == []


async def test_fanout_width_is_bounded(relay):
    await _register(relay, *[f"c{i}" for i in range(10)])
    in_flight = 0
    peak = 0

    class SlowClient:
        async def post_to_connection(self, connection_id, data):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1

    delivery = DeliveryService(client_factory=lambda endpoint: SlowClient(), registry=relay.registry)
    service = BroadcastService(
        registry=relay.registry, delivery=delivery, endpoint=BROADCAST_ENDPOINT, max_concurrency=3
    )

    result = await service.broadcast("hello")

    assert result.delivered == 10
    assert peak <= 3


async def test_batch_processes_each_record_as_its_own_broadcast(relay, push_hub):
    await _register(relay, "a", "b")
    event = BroadcastBatchEvent(records=[
        BroadcastRecord(message_id="m1", body="one"),
        BroadcastRecord(message_id="m2", body='{"data": "two"}'),
    ])

    result = await relay.broadcast.handle_batch(event)

    assert result.processed == 2
    assert result.failed_message_ids == []
    assert [p for _, _, p in push_hub.calls] == [{"text": "one"}, {"text": "one"}, "two", "two"]


async def test_registry_read_failure_marks_record_failed(push_hub, relay):
    class BrokenRegistry:
        async def list_connection_ids(self):
            raise RegistryException("scan", "throttled")

    service = BroadcastService(registry=BrokenRegistry(), delivery=relay.delivery, endpoint=BROADCAST_ENDPOINT)
    event = BroadcastBatchEvent(records=[BroadcastRecord(message_id="m1", body="x")])

    result = await service.handle_batch(event)

    assert result.processed == 0
    assert result.batch_item_failures() == [{"itemIdentifier": "m1"}]
    assert push_hub.calls == []

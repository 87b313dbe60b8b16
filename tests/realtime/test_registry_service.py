from datetime import datetime, timedelta, timezone

import pytest

from application.services.registry_service import RegistryService
from domain.common.exceptions import RegistryException


pytestmark = pytest.mark.asyncio


class _FailingRepository:
    async def delete(self, connection_id):
        raise RegistryException(f"delete {connection_id}", "table unavailable")


async def test_register_then_list_includes_connection(relay):
    await relay.registry.register("conn-1")
    assert await relay.registry.list_connection_ids() == ["conn-1"]


async def test_unregister_removes_connection_from_next_listing(relay):
    await relay.registry.register("conn-1")
    await relay.registry.register("conn-2")
    await relay.registry.unregister("conn-1")
    assert await relay.registry.list_connection_ids() == ["conn-2"]


async def test_unregister_absent_connection_is_noop(relay):
    await relay.registry.unregister("never-registered")
    assert await relay.registry.list_connection_ids() == []


async def test_register_sets_one_year_expiry(repository):
    registry = RegistryService(repository=repository)
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    connection = await registry.register("conn-1", now=now)
    assert connection.connected_at == now
    assert connection.expires_at == now + timedelta(days=365)


async def test_reregister_overwrites_record(repository):
    registry = RegistryService(repository=repository)
    first = datetime.now(timezone.utc) - timedelta(hours=1)
    await registry.register("conn-1", now=first)
    second = await registry.register("conn-1")
    stored = await registry.get("conn-1")
    assert stored.connected_at == second.connected_at
    assert len(await registry.list_connections()) == 1


async def test_expired_records_are_not_listed(repository):
    registry = RegistryService(repository=repository, ttl_seconds=60)
    await registry.register("old", now=datetime.now(timezone.utc) - timedelta(minutes=5))
    await registry.register("fresh")
    assert await registry.list_connection_ids() == ["fresh"]


async def test_purge_stale_swallows_store_errors():
    registry = RegistryService(repository=_FailingRepository())
    assert await registry.purge_stale("conn-1") is False


async def test_unregister_propagates_store_errors():
    registry = RegistryService(repository=_FailingRepository())
    with pytest.raises(RegistryException):
        await registry.unregister("conn-1")

from datetime import datetime, timezone

import pytest
from botocore.exceptions import ClientError

from domain.common.exceptions import RegistryException
from domain.connection import Connection
from infrastructure.repositories.connection_repository import DynamoDBConnectionRepository


pytestmark = pytest.mark.asyncio


class FakeTable:
    """Minimal stand-in for a boto3 ``dynamodb.Table`` with paged scans."""

    def __init__(self, page_size=2):
        self.items = {}
        self.page_size = page_size
        self.scan_calls = []

    def put_item(self, Item):
        self.items[Item["connectionId"]] = dict(Item)

    def delete_item(self, Key):
        self.items.pop(Key["connectionId"], None)

    def get_item(self, Key):
        item = self.items.get(Key["connectionId"])
        return {"Item": item} if item else {}

    def scan(self, **kwargs):
        self.scan_calls.append(kwargs)
        keys = sorted(self.items)
        start = 0
        if "ExclusiveStartKey" in kwargs:
            start = keys.index(kwargs["ExclusiveStartKey"]["connectionId"]) + 1
        page = keys[start:start + self.page_size]
        if kwargs.get("ProjectionExpression") == "connectionId":
            items = [{"connectionId": k} for k in page]
        else:
            items = [self.items[k] for k in page]
        response = {"Items": items}
        if start + self.page_size < len(keys):
            response["LastEvaluatedKey"] = {"connectionId": page[-1]}
        return response


class ThrottledTable(FakeTable):
    def scan(self, **kwargs):
        raise ClientError(
            {"Error": {"Code": "ProvisionedThroughputExceededException", "Message": "slow down"}},
            "Scan",
        )


async def test_put_writes_ttl_item():
    table = FakeTable()
    repo = DynamoDBConnectionRepository(table)
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    await repo.put(Connection.open("C1", now=now))

    item = table.items["C1"]
    assert item["connectedAt"] == "2024-01-01T00:00:00+00:00"
    assert item["ttl"] == int(now.timestamp()) + 365 * 24 * 60 * 60


async def test_get_round_trips_item():
    table = FakeTable()
    repo = DynamoDBConnectionRepository(table)
    connection = Connection.open("C1", now=datetime(2024, 1, 1, tzinfo=timezone.utc))
    await repo.put(connection)

    assert await repo.get("C1") == connection
    assert await repo.get("missing") is None


async def test_listing_follows_every_page():
    table = FakeTable(page_size=2)
    repo = DynamoDBConnectionRepository(table)
    for cid in ("a", "b", "c", "d", "e"):
        await repo.put(Connection.open(cid))

    ids = await repo.list_connection_ids()

    assert ids == ["a", "b", "c", "d", "e"]
    assert len(table.scan_calls) == 3
    assert all(call["ProjectionExpression"] == "connectionId" for call in table.scan_calls)


async def test_delete_missing_key_is_noop():
    table = FakeTable()
    repo = DynamoDBConnectionRepository(table)
    await repo.delete("never-there")
    assert table.items == {}


async def test_client_errors_become_registry_errors():
    repo = DynamoDBConnectionRepository(ThrottledTable())

    with pytest.raises(RegistryException) as exc_info:
        await repo.list_connection_ids()

    assert exc_info.value.details["provider_code"] == "ProvisionedThroughputExceededException"
    assert isinstance(exc_info.value.__cause__, ClientError)

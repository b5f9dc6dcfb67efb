import asyncio

import mongomock
import pytest
from pymongo.errors import ServerSelectionTimeoutError

from stemforum.services.database import ConnectionManager, DatabaseUnavailableError


class FlakyFactory:
    """Client factory failing the first ``failures`` calls"""

    def __init__(self, failures=0):
        self.failures = failures
        self.calls = 0
        self.client = mongomock.MongoClient()

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise ServerSelectionTimeoutError("connection refused")
        return self.client


@pytest.mark.asyncio
async def test_ensure_connected_returns_database_and_creates_indexes():
    factory = FlakyFactory()
    manager = ConnectionManager(factory, database_name="forum")

    db = await manager.ensure_connected()

    assert db.name == "forum"
    assert manager.is_connected
    indexes = db.articles.index_information().values()
    assert any(ix["key"] == [("articleId", 1)] and ix.get("unique") for ix in indexes)
    manager.close()


@pytest.mark.asyncio
async def test_ensure_connected_is_memoized():
    factory = FlakyFactory()
    manager = ConnectionManager(factory, database_name="forum")

    first = await manager.ensure_connected()
    second = await manager.ensure_connected()

    assert first is second
    assert factory.calls == 1


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_attempt():
    factory = FlakyFactory()
    manager = ConnectionManager(factory, database_name="forum")

    results = await asyncio.gather(*(manager.ensure_connected() for _ in range(5)))

    assert factory.calls == 1
    assert all(db is results[0] for db in results)


@pytest.mark.asyncio
async def test_failed_attempt_is_retried_on_next_call():
    factory = FlakyFactory(failures=1)
    manager = ConnectionManager(factory, database_name="forum")

    with pytest.raises(DatabaseUnavailableError):
        await manager.ensure_connected()
    assert not manager.is_connected

    db = await manager.ensure_connected()

    assert db.name == "forum"
    assert factory.calls == 2


@pytest.mark.asyncio
async def test_close_forgets_connection():
    factory = FlakyFactory()
    manager = ConnectionManager(factory, database_name="forum")
    await manager.ensure_connected()

    manager.close()

    assert not manager.is_connected
    await manager.ensure_connected()
    assert factory.calls == 2

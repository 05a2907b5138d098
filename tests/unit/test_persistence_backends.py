"""Key/value backend tests."""

import pytest

from freightflow.persistence import (
    InMemoryBackend,
    SQLiteBackend,
    StorageQuotaExceeded,
    get_backend,
    get_draft_store,
)
from freightflow.config import FreightflowConfig


@pytest.mark.asyncio
async def test_inmemory_backend_quota():
    backend = InMemoryBackend(max_bytes=10)
    await backend.set("k", "12345")
    with pytest.raises(StorageQuotaExceeded):
        await backend.set("other", "123456789")
    await backend.set("k", "123456789")
    assert await backend.get("k") == "123456789"


@pytest.mark.asyncio
async def test_sqlite_backend_crud(tmp_path):
    backend = SQLiteBackend(tmp_path / "drafts.db")

    assert await backend.get("draft") is None
    await backend.set("draft", '{"a": 1}')
    await backend.set("draft", '{"a": 2}')
    assert await backend.get("draft") == '{"a": 2}'

    await backend.delete("draft")
    await backend.delete("draft")
    assert await backend.get("draft") is None
    await backend.close()


@pytest.mark.asyncio
async def test_sqlite_backend_survives_reopen(tmp_path):
    path = tmp_path / "drafts.db"
    first = SQLiteBackend(path)
    await first.set("draft", "payload")
    await first.close()

    second = SQLiteBackend(path)
    assert await second.get("draft") == "payload"
    await second.close()


def test_redis_backend_construction():
    from freightflow.persistence.redis import RedisBackend

    backend = RedisBackend(host="cache", port=6380, ttl_seconds=60)
    assert backend.host == "cache"
    assert backend.port == 6380
    assert backend.ttl_seconds == 60


def test_get_backend_and_draft_store_from_config(tmp_path):
    config = FreightflowConfig(
        draft_store={
            "primary": "sqlite",
            "fallback": "inmemory",
            "sqlite_path": str(tmp_path / "d.db"),
            "staleness_seconds": 120,
        }
    )

    assert get_backend("none", config) is None
    store = get_draft_store(config=config)
    assert isinstance(store.primary, SQLiteBackend)
    assert isinstance(store.fallback, InMemoryBackend)
    assert store.staleness_millis == 120_000

    with pytest.raises(ValueError):
        get_backend("dynamo", config)

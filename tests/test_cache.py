# tests/test_cache.py

import threading

import pytest
from unittest.mock import AsyncMock

from app.core.cache import LocalCacheStore, RedisCacheStore, build_cache_store
from app.core.config import ConfigError, Settings
from app.services.auth import MockSessionStore

async def test_local_cache_roundtrip():
    cache = LocalCacheStore()
    assert await cache.get("summary") == (None, False)

    await cache.set("summary", "{}", 45)
    assert await cache.get("summary") == ("{}", True)

    await cache.delete("summary")
    await cache.delete("summary")  # повторное удаление не ошибка
    assert await cache.get("summary") == (None, False)


async def test_redis_cache_delegates_to_client():
    client = AsyncMock()
    client.get.return_value = None
    cache = RedisCacheStore(client)

    assert await cache.get("summary") == (None, False)

    client.get.return_value = '{"memberCount": 1}'
    assert await cache.get("summary") == ('{"memberCount": 1}', True)

    await cache.set("summary", "{}", 45)
    client.set.assert_awaited_once_with("summary", "{}", ex=45)

    await cache.delete("summary")
    client.delete.assert_awaited_once_with("summary")

    await cache.ping()
    client.ping.assert_awaited_once()

    await cache.close()
    client.aclose.assert_awaited_once()


async def test_summary_survives_cache_failures(client, app_state, mocker):
    mocker.patch.object(app_state.cache, "get", side_effect=ConnectionError("cache down"))
    mocker.patch.object(app_state.cache, "set", side_effect=ConnectionError("cache down"))

    response = await client.get("/api/v1/summary")
    assert response.json()["code"] == 200
    assert response.json()["data"]["memberCount"] == 0


async def test_corrupted_cache_entry_is_recomputed(client, app_state):
    await app_state.cache.set("merchant_ops:summary", "not-json", 45)

    response = await client.get("/api/v1/summary")
    assert response.json()["code"] == 200
    assert response.json()["data"]["orderCount"] == 0


def test_build_cache_store_by_mode():
    local = Settings(_env_file=None, APP_ENV="local", CACHE_MODE="local")
    assert isinstance(build_cache_store(local), LocalCacheStore)

    remote = Settings(_env_file=None, APP_ENV="local", CACHE_MODE="redis", REDIS_URL="redis://127.0.0.1:6379/0")
    assert isinstance(build_cache_store(remote), RedisCacheStore)

    broken = Settings(_env_file=None, APP_ENV="local", CACHE_MODE="memcached")
    with pytest.raises(ConfigError):
        build_cache_store(broken)


def test_in_memory_stores_use_single_exclusive_lock():
    # Обычный Lock: повторный захват из того же потока невозможен, RW-семантики нет
    exclusive_lock_type = type(threading.Lock())
    assert type(LocalCacheStore()._lock) is exclusive_lock_type
    assert type(MockSessionStore()._lock) is exclusive_lock_type

    lock = LocalCacheStore()._lock
    assert lock.acquire(blocking=False)
    try:
        assert not lock.acquire(blocking=False)
    finally:
        lock.release()

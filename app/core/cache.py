# app/core/cache.py

import logging
import threading
from typing import Protocol

import redis.asyncio as redis

from app.core.config import ConfigError, Settings

logger = logging.getLogger(__name__)


class CacheStore(Protocol):
    """Минимальный набор операций кеша, которым пользуется сервис."""

    async def ping(self) -> None: ...

    async def get(self, key: str) -> tuple[str | None, bool]: ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def close(self) -> None: ...


class LocalCacheStore:
    """
    Кеш в памяти процесса для local-окружения.
    Одна эксклюзивная блокировка (не reader/writer) и на чтение, и на запись.
    TTL не соблюдается: запись живет до явного удаления.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._data: dict[str, str] = {}

    async def ping(self) -> None:
        return None

    async def get(self, key: str) -> tuple[str | None, bool]:
        with self._lock:
            if key in self._data:
                return self._data[key], True
            return None, False

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        with self._lock:
            self._data[key] = value

    async def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    async def close(self) -> None:
        return None


class RedisCacheStore:
    """Обертка над асинхронным клиентом Redis."""

    def __init__(self, client: redis.Redis):
        self.client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisCacheStore":
        # decode_responses=True автоматически декодирует ответы из байтов в строки
        client = redis.Redis.from_url(url, decode_responses=True, socket_timeout=3)
        return cls(client)

    async def ping(self) -> None:
        await self.client.ping()

    async def get(self, key: str) -> tuple[str | None, bool]:
        value = await self.client.get(key)
        if value is None:
            return None, False
        return value, True

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self.client.set(key, value, ex=ttl_seconds)

    async def delete(self, key: str) -> None:
        await self.client.delete(key)

    async def close(self) -> None:
        await self.client.aclose()


def build_cache_store(settings: Settings) -> CacheStore:
    """Выбирает реализацию кеша по CACHE_MODE. Вызывается один раз при старте."""
    if settings.CACHE_MODE == "local":
        logger.info("Using in-process cache store.")
        return LocalCacheStore()
    if settings.CACHE_MODE == "redis":
        logger.info("Using Redis cache store.")
        return RedisCacheStore.from_url(settings.REDIS_URL)
    raise ConfigError("unsupported cache mode")

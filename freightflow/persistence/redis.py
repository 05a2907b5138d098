"""Redis implementation of the key/value backend."""

from __future__ import annotations

from typing import Any, Optional

try:
    import redis.asyncio as redis
    from redis.exceptions import RedisError, ResponseError
except ImportError:
    redis = None

from .base import KeyValueBackend, StorageError, StorageQuotaExceeded


class RedisBackend(KeyValueBackend):
    """Redis-backed snapshot storage shared across processes."""

    name = "redis"

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        password: Optional[str] = None,
        ttl_seconds: Optional[int] = None,
    ) -> None:
        if redis is None:
            raise ImportError("redis package is required for RedisBackend")

        self.host = host
        self.port = port
        self.db = db
        self.password = password
        self.ttl_seconds = ttl_seconds
        self._redis: Optional[Any] = None

    async def connect(self) -> None:
        """Connect to Redis."""
        self._redis = redis.Redis(
            host=self.host,
            port=self.port,
            db=self.db,
            password=self.password,
            decode_responses=True,
        )

    async def close(self) -> None:
        """Disconnect from Redis."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    async def _client(self) -> Any:
        if not self._redis:
            await self.connect()
        return self._redis

    async def get(self, key: str) -> Optional[str]:
        client = await self._client()
        try:
            return await client.get(key)
        except RedisError as e:
            raise StorageError(str(e)) from e

    async def set(self, key: str, value: str) -> None:
        client = await self._client()
        try:
            await client.set(key, value, ex=self.ttl_seconds)
        except ResponseError as e:
            if "OOM" in str(e):
                raise StorageQuotaExceeded(str(e)) from e
            raise StorageError(str(e)) from e
        except RedisError as e:
            raise StorageError(str(e)) from e

    async def delete(self, key: str) -> None:
        client = await self._client()
        try:
            await client.delete(key)
        except RedisError as e:
            raise StorageError(str(e)) from e

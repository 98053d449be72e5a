"""Redis-backed settings store. Use when REDIS_URL is set."""

import json
import logging
from typing import Any

from redis.exceptions import RedisError

from baby_tracker.errors import StorageUnavailable
from baby_tracker.persistence.settings_store import BaseSettingsStore

logger = logging.getLogger(__name__)

KEY_PREFIX = "baby_tracker"


class RedisSettingsStore(BaseSettingsStore):
    """Redis-backed key-value settings. Values are stored as JSON strings."""

    def __init__(self, redis_url: str, default_name: str = "Baby") -> None:
        super().__init__(default_name)
        self._redis_url = redis_url
        self._client = None

    def _get_client(self):
        """Lazy-init Redis client."""
        if self._client is None:
            import redis.asyncio as redis

            self._client = redis.from_url(
                self._redis_url,
                decode_responses=True,
            )
        return self._client

    def _key(self, key: str) -> str:
        return f"{KEY_PREFIX}:settings:{key}"

    async def get(self, key: str, default: Any = None) -> Any:
        try:
            data = await self._get_client().get(self._key(key))
        except RedisError as e:
            logger.error("Redis settings get failed: %s", e)
            raise StorageUnavailable(f"Redis get failed: {e}") from e
        if data is None:
            return default
        try:
            return json.loads(data)
        except json.JSONDecodeError:
            logger.warning("Non-JSON value under %s, returning raw string", key)
            return data

    async def set(self, key: str, value: Any) -> None:
        try:
            await self._get_client().set(self._key(key), json.dumps(value))
        except RedisError as e:
            logger.error("Redis settings set failed: %s", e)
            raise StorageUnavailable(f"Redis set failed: {e}") from e

    async def delete(self, key: str) -> bool:
        try:
            removed = await self._get_client().delete(self._key(key))
        except RedisError as e:
            logger.error("Redis settings delete failed: %s", e)
            raise StorageUnavailable(f"Redis delete failed: {e}") from e
        return bool(removed)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

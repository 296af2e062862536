import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from files_manager.core.exceptions import InternalError

logger = logging.getLogger("files-manager")


class SessionStore:
    """Key-value store with per-key expiry, backed by Redis."""

    def __init__(self, url: str | None = None, client=None):
        if url is None and client is None:
            raise ValueError("Either a Redis URL or a client is required")
        self.url = url
        self.client = client

    async def connect(self) -> None:
        if self.client is None:
            self.client = aioredis.from_url(self.url, decode_responses=True)
        await self.client.ping()
        logger.info("Session store connected")

    async def is_alive(self) -> bool:
        if self.client is None:
            return False
        try:
            return bool(await self.client.ping())
        except (RedisError, OSError) as e:
            logger.warning("Session store ping failed: %s", e)
            return False

    async def get(self, key: str) -> str | None:
        try:
            value = await self.client.get(key)
        except RedisError as e:
            logger.error("Session store GET failed: %s", e)
            raise InternalError()
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await self.client.set(key, value, ex=ttl_seconds)
        except RedisError as e:
            logger.error("Session store SET failed: %s", e)
            raise InternalError()

    async def delete(self, key: str) -> None:
        try:
            await self.client.delete(key)
        except RedisError as e:
            logger.error("Session store DEL failed: %s", e)
            raise InternalError()

    async def close(self) -> None:
        if self.client is not None:
            await self.client.aclose()
            self.client = None

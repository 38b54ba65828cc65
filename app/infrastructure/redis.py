"""Async Redis backend for per-chat conversation history."""

import logging
from typing import Optional

import redis.asyncio as redis

from ..consultant.schemas.common import ConversationTurn
from .session_store import SessionStore

logger = logging.getLogger(__name__)


class RedisSessionStore(SessionStore):
    """History kept in one Redis list per chat, trimmed to the newest turns."""

    def __init__(self, max_turns: int = 20, ttl_seconds: int = 86400) -> None:
        """Initialize Redis store (connection created via connect())."""
        self.redis_client: Optional[redis.Redis] = None
        self.max_turns = max_turns
        self.redis_ttl = ttl_seconds

    @staticmethod
    def _key(chat_id: str) -> str:
        return f"chat:{chat_id}:turns"

    async def connect(
        self,
        redis_host: str,
        redis_password: str = "",
        redis_port: int = 6379,
        redis_ssl: bool = False,
    ) -> None:
        """Create async Redis connection.

        Args:
            redis_host: Redis server hostname
            redis_password: Redis password/access key
            redis_port: Redis port
            redis_ssl: Enable SSL/TLS connection

        Raises:
            RuntimeError: If the server cannot be reached
        """
        try:
            self.redis_client = redis.Redis(
                host=redis_host,
                port=redis_port,
                password=redis_password or None,
                ssl=redis_ssl,
                ssl_cert_reqs="required" if redis_ssl else None,
                decode_responses=True,
                socket_timeout=5,
                socket_connect_timeout=5,
                max_connections=10,
            )
            await self.redis_client.ping()
            logger.info(f"Redis connection successful: {redis_host}:{redis_port}")
        except redis.RedisError as e:
            logger.error(f"Redis connection failed: {e}")
            self.redis_client = None
            raise RuntimeError(f"Failed to connect to Redis: {e}") from e

    async def close(self) -> None:
        """Close Redis connection."""
        if self.redis_client:
            await self.redis_client.aclose()
            logger.info("Redis connection closed")

    def _client(self) -> redis.Redis:
        if self.redis_client is None:
            raise RuntimeError("Redis session store is not connected")
        return self.redis_client

    async def load(self, chat_id: str) -> list[ConversationTurn]:
        raw_turns = await self._client().lrange(self._key(chat_id), 0, -1)
        return [ConversationTurn.model_validate_json(raw) for raw in raw_turns]

    async def append(self, chat_id: str, *turns: ConversationTurn) -> None:
        if not turns:
            return
        key = self._key(chat_id)
        async with self._client().pipeline(transaction=True) as pipeline:
            pipeline.rpush(key, *(turn.model_dump_json() for turn in turns))
            pipeline.ltrim(key, -self.max_turns, -1)
            pipeline.expire(key, self.redis_ttl)
            await pipeline.execute()
        logger.debug(f"Appended {len(turns)} turns to chat {chat_id}")

    async def clear(self, chat_id: str) -> None:
        await self._client().delete(self._key(chat_id))

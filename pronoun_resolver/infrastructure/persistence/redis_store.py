"""
Redis persistence backend.

Architecture:
    RedisBackend (Public API, PersistenceBackend protocol)
        └── ConnectionManager (connection pool lifecycle)

Values are JSON-encoded with orjson. Redis errors are wrapped in
PersistenceKeyError and connection failures in PersistenceConnectionError;
both propagate to the caller of the override operation.
"""

from typing import Any

import orjson
import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool
from redis.exceptions import ConnectionError, RedisError, TimeoutError

from pronoun_resolver.core.config.constants import Stage
from pronoun_resolver.core.config.settings import PersistenceSettings, get_settings
from pronoun_resolver.core.exceptions import PersistenceConnectionError, PersistenceKeyError
from pronoun_resolver.core.logging.logger import get_logger

logger = get_logger(__name__)


class ConnectionManager:
    """
    Manages the Redis connection pool.

    Responsibility: Connection establishment, pooling, and cleanup.
    """

    def __init__(self, settings: PersistenceSettings):
        self._settings = settings
        self._pool: ConnectionPool | None = None
        self._client: redis.Redis | None = None

    async def connect(self) -> redis.Redis:
        """
        Establish the pooled connection and verify it with PING.

        Raises:
            PersistenceConnectionError: If connection fails
        """
        if self._client is not None:
            return self._client

        try:
            self._pool = ConnectionPool(
                host=self._settings.REDIS_HOST,
                port=self._settings.REDIS_PORT,
                db=self._settings.REDIS_DB,
                password=self._settings.REDIS_PASSWORD,
                max_connections=self._settings.REDIS_MAX_CONNECTIONS,
                socket_connect_timeout=self._settings.REDIS_SOCKET_CONNECT_TIMEOUT,
                socket_timeout=self._settings.REDIS_SOCKET_TIMEOUT,
                retry_on_timeout=True,
                decode_responses=False,
            )
            client = redis.Redis(connection_pool=self._pool)
            await client.ping()
            self._client = client

            logger.info(
                "Redis connected successfully",
                stage=Stage.STORE_CONNECT,
                host=self._settings.REDIS_HOST,
                port=self._settings.REDIS_PORT,
            )
            return client

        except (ConnectionError, TimeoutError) as e:
            logger.error("Failed to connect to Redis", stage=Stage.STORE_CONNECT, error=str(e))
            if self._pool is not None:
                await self._pool.disconnect()
                self._pool = None
            raise PersistenceConnectionError(
                f"Failed to connect to Redis: {e}",
                details={"host": self._settings.REDIS_HOST, "port": self._settings.REDIS_PORT},
            ) from e

    async def disconnect(self) -> None:
        """Close the client and its pool."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

        if self._pool is not None:
            await self._pool.disconnect()
            self._pool = None

        logger.info("Redis disconnected", stage=Stage.STORE_DISCONNECT)

    def is_connected(self) -> bool:
        return self._client is not None


class RedisBackend:
    """
    Redis-backed PersistenceBackend.

    Usage:
        backend = RedisBackend()
        await backend.connect()
        await backend.set("pronoundb-local-override:123", "tt")
        await backend.disconnect()

    Operations connect lazily, so an explicit ``connect()`` is optional.
    """

    def __init__(self, settings: PersistenceSettings | None = None, client: redis.Redis | None = None):
        """
        Args:
            settings: Persistence settings (defaults to the global settings)
            client: Pre-built Redis client, bypassing the pool (used by tests)
        """
        self._settings = settings or get_settings().persistence
        self._conn_mgr = ConnectionManager(self._settings)
        self._client = client
        self._injected = client is not None

    async def connect(self) -> None:
        if self._client is None:
            self._client = await self._conn_mgr.connect()

    async def disconnect(self) -> None:
        if self._injected and self._client is not None:
            await self._client.aclose()
            self._injected = False
        await self._conn_mgr.disconnect()
        self._client = None

    async def _redis(self) -> redis.Redis:
        await self.connect()
        return self._client

    async def get(self, key: str) -> Any | None:
        client = await self._redis()
        try:
            raw = await client.get(key)
        except RedisError as e:
            logger.error("Redis GET failed", stage=Stage.STORE_OPERATION, key=key, error=str(e))
            raise PersistenceKeyError(f"Redis GET failed: {e}", details={"key": key}) from e

        if raw is None:
            return None
        try:
            return orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            raise PersistenceKeyError(f"Stored value for {key} is not valid JSON", details={"key": key}) from e

    async def set(self, key: str, value: Any) -> None:
        client = await self._redis()
        try:
            await client.set(key, orjson.dumps(value))
        except (RedisError, TypeError) as e:
            logger.error("Redis SET failed", stage=Stage.STORE_OPERATION, key=key, error=str(e))
            raise PersistenceKeyError(f"Redis SET failed: {e}", details={"key": key}) from e

    async def delete(self, key: str) -> bool:
        return await self.delete_many([key]) > 0

    async def delete_many(self, keys: list[str]) -> int:
        if not keys:
            return 0
        client = await self._redis()
        try:
            return await client.delete(*keys)
        except RedisError as e:
            logger.error("Redis DELETE failed", stage=Stage.STORE_OPERATION, keys=keys, error=str(e))
            raise PersistenceKeyError(f"Redis DELETE failed: {e}", details={"keys": keys}) from e

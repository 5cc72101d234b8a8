"""
Unit Tests for Persistence Backends

Tests InMemoryBackend, RedisBackend (against a mocked redis client) and
the backend factory.
"""

from unittest.mock import AsyncMock, patch

import orjson
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError

from pronoun_resolver.core.config.settings import PersistenceSettings
from pronoun_resolver.core.exceptions import (
    ConfigurationError,
    PersistenceConnectionError,
    PersistenceError,
    PersistenceKeyError,
)
from pronoun_resolver.infrastructure.persistence.factory import create_persistence_backend
from pronoun_resolver.infrastructure.persistence.memory_store import InMemoryBackend
from pronoun_resolver.infrastructure.persistence.redis_store import ConnectionManager, RedisBackend


@pytest.fixture
def redis_client():
    client = AsyncMock()
    client.get.return_value = None
    client.delete.return_value = 0
    return client


@pytest.fixture
def redis_backend(redis_client):
    return RedisBackend(PersistenceSettings(), client=redis_client)


@pytest.mark.unit
class TestInMemoryBackend:
    """Test suite for InMemoryBackend."""

    @pytest.mark.asyncio
    async def test_get_missing_key_returns_none(self):
        assert await InMemoryBackend().get("missing") is None

    @pytest.mark.asyncio
    async def test_set_then_get(self):
        backend = InMemoryBackend()

        await backend.set("k", ["a", "b"])

        assert await backend.get("k") == ["a", "b"]

    @pytest.mark.asyncio
    async def test_stored_values_are_copies(self):
        """Test that mutating a read value does not change the store."""
        backend = InMemoryBackend({"k": ["a"]})

        value = await backend.get("k")
        value.append("b")

        assert await backend.get("k") == ["a"]

    @pytest.mark.asyncio
    async def test_null_value_is_stored(self):
        backend = InMemoryBackend()

        await backend.set("k", None)

        assert backend.keys() == ["k"]
        assert await backend.get("k") is None

    @pytest.mark.asyncio
    async def test_unserializable_value_raises(self):
        with pytest.raises(PersistenceKeyError):
            await InMemoryBackend().set("k", object())

    @pytest.mark.asyncio
    async def test_delete_and_delete_many(self):
        backend = InMemoryBackend({"a": 1, "b": 2, "c": 3})

        assert await backend.delete("a") is True
        assert await backend.delete("a") is False
        assert await backend.delete_many(["b", "c", "zzz"]) == 2
        assert backend.keys() == []


@pytest.mark.unit
class TestRedisBackend:
    """Test suite for RedisBackend."""

    @pytest.mark.asyncio
    async def test_get_decodes_json(self, redis_backend, redis_client):
        redis_client.get.return_value = b'"tt"'

        assert await redis_backend.get("pronoundb-local-override:1") == "tt"
        redis_client.get.assert_awaited_once_with("pronoundb-local-override:1")

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, redis_backend):
        assert await redis_backend.get("nothing") is None

    @pytest.mark.asyncio
    async def test_get_corrupt_value_raises(self, redis_backend, redis_client):
        redis_client.get.return_value = b"not json"

        with pytest.raises(PersistenceKeyError):
            await redis_backend.get("k")

    @pytest.mark.asyncio
    async def test_set_encodes_json(self, redis_backend, redis_client):
        await redis_backend.set("index", ["1", "2"])

        redis_client.set.assert_awaited_once_with("index", orjson.dumps(["1", "2"]))

    @pytest.mark.asyncio
    async def test_redis_error_is_wrapped(self, redis_backend, redis_client):
        redis_client.set.side_effect = RedisError("READONLY")

        with pytest.raises(PersistenceKeyError) as exc_info:
            await redis_backend.set("k", "v")

        assert isinstance(exc_info.value, PersistenceError)
        assert exc_info.value.details["key"] == "k"

    @pytest.mark.asyncio
    async def test_delete_many_uses_single_command(self, redis_backend, redis_client):
        redis_client.delete.return_value = 2

        assert await redis_backend.delete_many(["a", "b", "c"]) == 2
        redis_client.delete.assert_awaited_once_with("a", "b", "c")

    @pytest.mark.asyncio
    async def test_delete_many_empty_skips_redis(self, redis_backend, redis_client):
        assert await redis_backend.delete_many([]) == 0
        redis_client.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_disconnect_closes_injected_client(self, redis_backend, redis_client):
        await redis_backend.disconnect()
        await redis_backend.disconnect()

        redis_client.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_single_key(self, redis_backend, redis_client):
        redis_client.delete.return_value = 1

        assert await redis_backend.delete("k") is True


@pytest.mark.unit
class TestConnectionManager:
    """Test suite for ConnectionManager."""

    @pytest.mark.asyncio
    async def test_connect_failure_is_wrapped(self):
        manager = ConnectionManager(PersistenceSettings(REDIS_HOST="redis.invalid"))

        with patch("pronoun_resolver.infrastructure.persistence.redis_store.redis.Redis") as redis_cls:
            redis_cls.return_value.ping = AsyncMock(side_effect=RedisConnectionError("refused"))

            with pytest.raises(PersistenceConnectionError) as exc_info:
                await manager.connect()

        assert exc_info.value.details["host"] == "redis.invalid"
        assert not manager.is_connected()

    @pytest.mark.asyncio
    async def test_failed_connect_releases_pool(self):
        manager = ConnectionManager(PersistenceSettings())
        module = "pronoun_resolver.infrastructure.persistence.redis_store"

        with patch(f"{module}.ConnectionPool") as pool_cls, patch(f"{module}.redis.Redis") as redis_cls:
            pool_cls.return_value.disconnect = AsyncMock()
            redis_cls.return_value.ping = AsyncMock(side_effect=RedisConnectionError("refused"))

            with pytest.raises(PersistenceConnectionError):
                await manager.connect()

        pool_cls.return_value.disconnect.assert_awaited_once()
        assert manager._pool is None

    @pytest.mark.asyncio
    async def test_connect_is_reused(self):
        manager = ConnectionManager(PersistenceSettings())

        with patch("pronoun_resolver.infrastructure.persistence.redis_store.redis.Redis") as redis_cls:
            redis_cls.return_value.ping = AsyncMock(return_value=True)

            first = await manager.connect()
            second = await manager.connect()

        assert first is second
        assert redis_cls.call_count == 1
        assert manager.is_connected()


@pytest.mark.unit
class TestBackendFactory:
    """Test suite for create_persistence_backend."""

    def test_memory_backend(self, test_settings):
        assert isinstance(create_persistence_backend(test_settings), InMemoryBackend)

    def test_redis_backend(self, mock_settings):
        mock_settings.PERSISTENCE_BACKEND = "redis"
        mock_settings.persistence = PersistenceSettings(PERSISTENCE_BACKEND="redis")

        assert isinstance(create_persistence_backend(mock_settings), RedisBackend)

    def test_unknown_backend_raises(self, mock_settings):
        mock_settings.PERSISTENCE_BACKEND = "sqlite"

        with pytest.raises(ConfigurationError) as exc_info:
            create_persistence_backend(mock_settings)

        assert exc_info.value.details["available"] == ["memory", "redis"]

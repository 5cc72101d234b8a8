"""
Local pronoun overrides.

Architecture:
    OverrideStore (durable reads/writes through a PersistenceBackend)
        ├── OverrideCache (in-memory mirror of overrides read this session)
        └── ResultCache   (invalidated whenever an override changes)

Storage layout:
    "<prefix>:<key>"  -> pronoun code string, or null when explicitly cleared
    "<index key>"     -> JSON list of every key that has an override record

Every mutation goes through ``OverrideStore.set`` / ``clear_all``, which
update the mirror as well as the backend; ``set`` does so before its first
await. Once a key is primed the mirror is authoritative for it and the
backend is never read for it again.
"""

import asyncio

from pronoun_resolver.core.config.constants import (
    OVERRIDE_INDEX_KEY,
    OVERRIDE_KEY_PREFIX,
    Stage,
)
from pronoun_resolver.core.interfaces.persistence import PersistenceBackend
from pronoun_resolver.core.logging.logger import get_logger
from pronoun_resolver.domain.pronouns import PronounCode
from pronoun_resolver.resolution.result_cache import ResultCache

logger = get_logger(__name__)


class OverrideCache:
    """
    Mirror of overrides already known this session.

    A key that is absent has not been read yet. A key that is present maps
    to its override, which may be None (no override / explicitly cleared).
    """

    def __init__(self):
        self._entries: dict[str, PronounCode | None] = {}

    def is_primed(self, key: str) -> bool:
        return key in self._entries

    def get_now(self, key: str) -> PronounCode | None:
        return self._entries.get(key)

    def prime(self, key: str, value: PronounCode | None) -> None:
        self._entries[key] = value

    def __len__(self) -> int:
        return len(self._entries)


class OverrideStore:
    """
    Durable override storage with a synchronous in-memory mirror.

    Persistence errors are not handled here; they propagate to the caller.
    """

    def __init__(
        self,
        backend: PersistenceBackend,
        result_cache: ResultCache,
        cache: OverrideCache | None = None,
        key_prefix: str = OVERRIDE_KEY_PREFIX,
        index_key: str = OVERRIDE_INDEX_KEY,
    ):
        self._backend = backend
        self._result_cache = result_cache
        self.cache = cache or OverrideCache()
        self._key_prefix = key_prefix
        self._index_key = index_key
        self._index_lock = asyncio.Lock()

    def storage_key(self, key: str) -> str:
        return f"{self._key_prefix}:{key}"

    async def get(self, key: str) -> PronounCode | None:
        """
        Return the override for ``key``, reading the backend at most once.
        """
        if self.cache.is_primed(key):
            return self.cache.get_now(key)

        raw = await self._backend.get(self.storage_key(key))

        # A concurrent set() may have primed the key while we were reading.
        if self.cache.is_primed(key):
            return self.cache.get_now(key)

        value = PronounCode.parse(raw) if raw is not None else None
        if raw is not None and value is None:
            logger.warning("Ignoring unknown stored override", stage=Stage.OVERRIDE_READ, key=key, code=raw)

        self.cache.prime(key, value)
        return value

    def get_now(self, key: str) -> PronounCode | None:
        """Synchronous mirror read; None when unknown or not yet read."""
        return self.cache.get_now(key)

    async def set(self, key: str, value: PronounCode | None) -> None:
        """
        Write an override (None clears it) and drop the cached result for key.
        """
        value = PronounCode(value) if value is not None else None

        self._result_cache.invalidate(key)
        self.cache.prime(key, value)

        async with self._index_lock:
            index = await self._read_index()
            if key not in index:
                await self._backend.set(self._index_key, [*index, key])
            await self._backend.set(self.storage_key(key), value.value if value is not None else None)

        logger.info(
            "Override written",
            stage=Stage.OVERRIDE_WRITE,
            key=key,
            code=value.value if value is not None else None,
        )

    async def clear_all(self) -> int:
        """
        Delete every indexed override and the index itself.

        Cached results for those keys are dropped as well, so the next
        resolution of each one goes to the remote source.

        Returns:
            Number of keys in the index before deletion
        """
        async with self._index_lock:
            index = await self._read_index()

            for key in index:
                self._result_cache.invalidate(key)
                self.cache.prime(key, None)

            await self._backend.delete_many([self.storage_key(key) for key in index])
            await self._backend.delete(self._index_key)

        logger.info("All overrides cleared", stage=Stage.OVERRIDE_CLEAR_ALL, count=len(index))
        return len(index)

    async def list_keys(self) -> list[str]:
        """Keys that currently have an override record."""
        return await self._read_index()

    async def _read_index(self) -> list[str]:
        index = await self._backend.get(self._index_key)
        return [key for key in index if isinstance(key, str)] if isinstance(index, list) else []

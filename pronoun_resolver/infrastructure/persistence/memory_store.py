"""
In-memory persistence backend.

Values are kept JSON-encoded so the backend behaves like a real store:
callers never share mutable objects with it, and anything that is not
JSON-serializable fails at write time.
"""

from typing import Any

import orjson

from pronoun_resolver.core.config.constants import Stage
from pronoun_resolver.core.exceptions import PersistenceKeyError
from pronoun_resolver.core.logging.logger import get_logger

logger = get_logger(__name__)


class InMemoryBackend:
    """Process-local PersistenceBackend."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, bytes] = {}
        for key, value in (initial or {}).items():
            self._data[key] = orjson.dumps(value)

    async def get(self, key: str) -> Any | None:
        raw = self._data.get(key)
        return None if raw is None else orjson.loads(raw)

    async def set(self, key: str, value: Any) -> None:
        try:
            self._data[key] = orjson.dumps(value)
        except TypeError as e:
            logger.error("In-memory SET failed", stage=Stage.STORE_OPERATION, key=key, error=str(e))
            raise PersistenceKeyError(f"Value for {key} is not serializable: {e}", details={"key": key}) from e

    async def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    async def delete_many(self, keys: list[str]) -> int:
        return sum([await self.delete(key) for key in keys])

    def keys(self) -> list[str]:
        """All stored keys, in insertion order."""
        return list(self._data)

"""
Persistence Backend Protocol

This module defines the abstract protocol for durable key-value storage
used by the override store.

Architectural Decision: Protocol-based abstraction
- Enables multiple backends (Redis, in-memory)
- Facilitates testing with in-memory implementations
- Type-safe interface with runtime checking
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class PersistenceBackend(Protocol):
    """
    Protocol for durable key-value storage of JSON-compatible values.

    Implementations:
    - RedisBackend: Redis-backed storage
    - InMemoryBackend: process-local storage for tests and ephemeral use

    Absent keys and keys holding JSON ``null`` both read back as None.
    """

    async def get(self, key: str) -> Any | None:
        """
        Get a stored value.

        Raises:
            PersistenceKeyError: If the operation fails
        """
        ...

    async def set(self, key: str, value: Any) -> None:
        """
        Store a JSON-compatible value.

        Raises:
            PersistenceKeyError: If the operation fails
        """
        ...

    async def delete(self, key: str) -> bool:
        """
        Delete one key.

        Returns:
            True if the key existed
        """
        ...

    async def delete_many(self, keys: list[str]) -> int:
        """
        Delete several keys.

        Returns:
            Number of keys that existed
        """
        ...

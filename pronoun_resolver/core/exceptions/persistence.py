"""
Persistence-Related Exceptions

All exceptions related to durable override storage. These propagate to
the caller of the override operations.
"""

from pronoun_resolver.core.exceptions.base import ResolverBaseError


class PersistenceError(ResolverBaseError):
    """Base exception for persistence errors."""
    pass


class PersistenceConnectionError(PersistenceError):
    """
    Raised when unable to connect to the persistence backend.

    Common causes:
    - Redis server is down
    - Incorrect host/port configuration
    - Authentication failure
    """
    pass


class PersistenceKeyError(PersistenceError):
    """
    Raised when a storage key operation fails.

    Common causes:
    - Operation timeout
    - Stored value cannot be decoded
    """
    pass

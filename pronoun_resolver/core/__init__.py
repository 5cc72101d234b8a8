"""
Core Module

Foundational components: configuration, logging, exceptions, and interfaces.
"""

from .exceptions import (
    ConfigurationError,
    LookupConnectionError,
    LookupHTTPError,
    LookupTimeoutError,
    MalformedResponseError,
    PersistenceConnectionError,
    PersistenceError,
    PersistenceKeyError,
    RemoteLookupError,
    ResolverBaseError,
)
from .logging import (
    bind_batch_id,
    clear_batch_id,
    get_batch_id,
    get_logger,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "bind_batch_id",
    "get_batch_id",
    "clear_batch_id",
    "ResolverBaseError",
    "ConfigurationError",
    "RemoteLookupError",
    "LookupConnectionError",
    "LookupTimeoutError",
    "LookupHTTPError",
    "MalformedResponseError",
    "PersistenceError",
    "PersistenceConnectionError",
    "PersistenceKeyError",
]

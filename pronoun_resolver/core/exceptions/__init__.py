"""
Exception Module

Structured exception hierarchy for the pronoun resolver.

Module Structure:
-----------------
- **base.py**: ResolverBaseError base class + ConfigurationError
- **lookup.py**: Remote lookup transport exceptions
- **persistence.py**: Durable override storage exceptions

Usage:
------
```python
from pronoun_resolver.core.exceptions import PersistenceError, RemoteLookupError
```
"""

from pronoun_resolver.core.exceptions.base import ConfigurationError, ResolverBaseError
from pronoun_resolver.core.exceptions.lookup import (
    LookupConnectionError,
    LookupHTTPError,
    LookupTimeoutError,
    MalformedResponseError,
    RemoteLookupError,
)
from pronoun_resolver.core.exceptions.persistence import (
    PersistenceConnectionError,
    PersistenceError,
    PersistenceKeyError,
)

__all__ = [
    # Base
    "ResolverBaseError",
    "ConfigurationError",
    # Lookup
    "RemoteLookupError",
    "LookupConnectionError",
    "LookupTimeoutError",
    "LookupHTTPError",
    "MalformedResponseError",
    # Persistence
    "PersistenceError",
    "PersistenceConnectionError",
    "PersistenceKeyError",
]

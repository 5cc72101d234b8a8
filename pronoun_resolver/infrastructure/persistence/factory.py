"""
Persistence Backend Factory

Selects the override storage backend from the PERSISTENCE_BACKEND setting.
"""

from pronoun_resolver.core.config.constants import PersistenceBackendType
from pronoun_resolver.core.config.settings import Settings, get_settings
from pronoun_resolver.core.exceptions import ConfigurationError
from pronoun_resolver.core.interfaces.persistence import PersistenceBackend
from pronoun_resolver.infrastructure.persistence.memory_store import InMemoryBackend
from pronoun_resolver.infrastructure.persistence.redis_store import RedisBackend


def create_persistence_backend(settings: Settings | None = None) -> PersistenceBackend:
    """
    Build the configured persistence backend.

    Raises:
        ConfigurationError: If PERSISTENCE_BACKEND names an unknown backend
    """
    settings = settings or get_settings()
    backend_type = str(settings.PERSISTENCE_BACKEND).lower()

    if backend_type == PersistenceBackendType.MEMORY.value:
        return InMemoryBackend()
    if backend_type == PersistenceBackendType.REDIS.value:
        return RedisBackend(settings.persistence)

    raise ConfigurationError(
        f"Unknown persistence backend: {settings.PERSISTENCE_BACKEND}",
        details={"available": [t.value for t in PersistenceBackendType]},
    )

from .factory import create_persistence_backend
from .memory_store import InMemoryBackend
from .redis_store import RedisBackend

__all__ = [
    "InMemoryBackend",
    "RedisBackend",
    "create_persistence_backend",
]

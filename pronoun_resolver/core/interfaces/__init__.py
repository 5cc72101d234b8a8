from .lookup import LookupTransport
from .persistence import PersistenceBackend

__all__ = [
    "LookupTransport",
    "PersistenceBackend",
]

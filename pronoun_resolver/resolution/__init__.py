from .coalescer import BatchDispatcher, DebounceTimer, RequestCoalescer
from .factory import create_resolver
from .override_store import OverrideCache, OverrideStore
from .resolver import Resolver
from .result_cache import ResultCache

__all__ = [
    "BatchDispatcher",
    "DebounceTimer",
    "OverrideCache",
    "OverrideStore",
    "RequestCoalescer",
    "Resolver",
    "ResultCache",
    "create_resolver",
]

"""
Pronoun Resolver - public API

Architecture:
    Resolver
        ├── OverrideStore / OverrideCache (local overrides win)
        ├── ResultCache                   (session results, never expire)
        └── RequestCoalescer
                └── BatchDispatcher → LookupTransport

Resolve algorithm:
    override (non-None) → ResultCache hit → join the pending batch

Each Resolver owns all of its state, so independent instances (one per
application, one per test) never share caches or queues.

``resolve`` is infallible: transport failures surface as
PronounCode.UNSPECIFIED and are observable only through the logs.
"""

import asyncio
from typing import Any

from pronoun_resolver.core.config.constants import Stage
from pronoun_resolver.core.config.settings import Settings, get_settings
from pronoun_resolver.core.exceptions import PersistenceError
from pronoun_resolver.core.interfaces.lookup import LookupTransport
from pronoun_resolver.core.interfaces.persistence import PersistenceBackend
from pronoun_resolver.core.logging.logger import get_logger
from pronoun_resolver.domain.pronouns import PronounCode
from pronoun_resolver.resolution.coalescer import BatchDispatcher, RequestCoalescer
from pronoun_resolver.resolution.override_store import OverrideCache, OverrideStore
from pronoun_resolver.resolution.result_cache import ResultCache

logger = get_logger(__name__)


class Resolver:
    """
    Resolves pronoun codes for entity keys with override-first semantics.

    Usage:
        async with Resolver(PronounDBClient(), InMemoryBackend()) as resolver:
            code = await resolver.resolve("123456789")
            cached = resolver.peek("123456789")
    """

    def __init__(
        self,
        transport: LookupTransport,
        backend: PersistenceBackend,
        settings: Settings | None = None,
        *,
        window: float | None = None,
        owns_resources: bool = False,
    ):
        """
        Args:
            transport: Remote lookup collaborator
            backend: Durable storage for overrides
            settings: Settings (defaults to the global settings)
            window: Quiescence window in seconds, overriding the setting
            owns_resources: Close transport and backend in ``close()``
        """
        settings = settings or get_settings()

        self._transport = transport
        self._backend = backend
        self._owns_resources = owns_resources

        self.result_cache = ResultCache()
        self.override_cache = OverrideCache()
        self.overrides = OverrideStore(
            backend,
            self.result_cache,
            self.override_cache,
            key_prefix=settings.OVERRIDE_KEY_PREFIX,
            index_key=settings.OVERRIDE_INDEX_KEY,
        )
        self.dispatcher = BatchDispatcher(transport, self.result_cache)
        self.coalescer = RequestCoalescer(
            self.dispatcher,
            window if window is not None else settings.COALESCE_WINDOW_SECONDS,
        )

    async def __aenter__(self) -> "Resolver":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    async def resolve(self, key: str) -> PronounCode:
        """
        Resolve the pronoun code for ``key``.

        Never raises for lookup failures; returns PronounCode.UNSPECIFIED
        when no value is available.
        """
        override = await self._read_override(key)
        if override is not None:
            logger.debug("Override hit", stage=Stage.OVERRIDE_LOOKUP, key=key)
            return override

        cached = self.result_cache.get(key)
        if cached is not None:
            logger.debug("Result cache hit", stage=Stage.RESULT_CACHE, key=key)
            return cached

        return await self._fetch(key)

    def peek(self, key: str) -> PronounCode | None:
        """
        Best currently known value for ``key`` without any I/O.

        Override mirror first, then the result cache, else None.
        """
        override = self.overrides.get_now(key)
        if override is not None:
            return override
        return self.result_cache.peek(key)

    async def _read_override(self, key: str) -> PronounCode | None:
        try:
            return await self.overrides.get(key)
        except PersistenceError as e:
            # Unprimed on failure, so the next resolve reads the backend again.
            logger.warning(
                "Override read failed, resolving remotely",
                stage=Stage.OVERRIDE_LOOKUP,
                key=key,
                error=str(e),
            )
            return None

    async def _fetch(self, key: str) -> PronounCode:
        future: asyncio.Future[PronounCode] = asyncio.get_running_loop().create_future()

        def _waiter(value: PronounCode) -> None:
            if not future.done():
                future.set_result(value)

        joined = self.coalescer.enqueue(key, _waiter)
        logger.debug("Lookup queued", stage=Stage.ENQUEUE, key=key, new_batch_member=joined)
        return await future

    # -------------------------------------------------------------------------
    # Overrides
    # -------------------------------------------------------------------------

    async def set_override(self, key: str, value: PronounCode | str | None) -> None:
        """Set (or with None, clear) the local override for ``key``."""
        await self.overrides.set(key, PronounCode(value) if value is not None else None)

    async def get_override(self, key: str) -> PronounCode | None:
        return await self.overrides.get(key)

    def get_override_now(self, key: str) -> PronounCode | None:
        return self.overrides.get_now(key)

    async def clear_all_overrides(self) -> int:
        """Remove every persisted override; returns how many were removed."""
        return await self.overrides.clear_all()

    # -------------------------------------------------------------------------
    # Cache bypass (opt-in; the default is one resolution per session)
    # -------------------------------------------------------------------------

    def invalidate(self, key: str) -> bool:
        """Forget the cached result for ``key`` so it is looked up again."""
        removed = self.result_cache.invalidate(key)
        if removed:
            logger.info("Cached result invalidated", stage=Stage.CACHE_BYPASS, key=key)
        return removed

    def invalidate_unresolved(self) -> int:
        """Forget every cached "no value" result, e.g. after a network outage."""
        count = self.result_cache.invalidate_unresolved()
        logger.info("Unresolved results invalidated", stage=Stage.CACHE_BYPASS, count=count)
        return count

    async def refresh(self, key: str) -> PronounCode:
        """Invalidate ``key`` and resolve it again."""
        self.invalidate(key)
        return await self.resolve(key)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def flush(self) -> None:
        """Send the pending batch immediately and wait for all in-flight batches."""
        await self.coalescer.flush()

    async def close(self) -> None:
        await self.coalescer.close()

        if self._owns_resources:
            close_transport = getattr(self._transport, "close", None)
            if close_transport is not None:
                await close_transport()
            disconnect = getattr(self._backend, "disconnect", None)
            if disconnect is not None:
                await disconnect()

    def stats(self) -> dict[str, Any]:
        return {
            "result_cache": self.result_cache.stats(),
            "overrides_known": len(self.override_cache),
            "pending_keys": len(self.coalescer.pending_keys),
            "in_flight_batches": self.coalescer.in_flight,
            "batches_sent": self.dispatcher.batches_sent,
        }

"""
Request coalescing and batch dispatch.

Architecture:
    RequestCoalescer (per-key waiter queues + one debounce timer)
        ├── DebounceTimer   (schedule / reset / fire on the event loop)
        └── BatchDispatcher (one transport call per batch, fan-out to waiters)

Algorithm:
1. enqueue(key): a key that is already queued only gains a waiter; a new key
   gets a queue and (re)starts the debounce timer
2. once no new key has arrived for one window, the timer fires
3. the whole queue is drained in one step, so keys enqueued while the batch
   is in flight start a fresh batch
4. the dispatcher sends the distinct keys in one lookup and hands every
   waiter of every key exactly one value

Everything runs on one event loop; queue mutation never spans an await, so
no locks are needed.
"""

import asyncio
import time
import uuid
from collections.abc import Callable, Mapping

from pronoun_resolver.core.config.constants import Stage
from pronoun_resolver.core.interfaces.lookup import LookupTransport
from pronoun_resolver.core.logging.logger import bind_batch_id, clear_batch_id, get_logger
from pronoun_resolver.domain.pronouns import NO_VALUE, PronounCode
from pronoun_resolver.resolution.result_cache import ResultCache

logger = get_logger(__name__)

Waiter = Callable[[PronounCode], None]
Batch = dict[str, list[Waiter]]


class DebounceTimer:
    """
    Single-shot timer that restarts every time it is scheduled.

    Must be scheduled from within a running event loop.
    """

    def __init__(self, delay: float, callback: Callable[[], None]):
        self._delay = delay
        self._callback = callback
        self._handle: asyncio.TimerHandle | None = None

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self) -> None:
        """Arm the timer, restarting the countdown if already armed."""
        self.reset()
        self._handle = asyncio.get_running_loop().call_later(self._delay, self.fire)

    def reset(self) -> None:
        """Disarm the timer without running the callback."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def fire(self) -> None:
        """Disarm the timer and run the callback now."""
        self.reset()
        self._callback()


class BatchDispatcher:
    """
    Sends one batch to the lookup transport and fans the result out.

    ``dispatch`` never raises on transport failure: any exception becomes the
    "no value" sentinel for every key of the batch, and that sentinel is
    cached so the batch is not retried for the rest of the session.
    """

    def __init__(self, transport: LookupTransport, result_cache: ResultCache):
        self._transport = transport
        self._result_cache = result_cache
        self.batches_sent = 0

    async def dispatch(
        self, batch: Batch, epochs: Mapping[str, int] | None = None
    ) -> dict[str, PronounCode]:
        """
        Resolve one drained batch.

        Args:
            batch: key -> waiters, as taken from the queue
            epochs: ResultCache epochs captured when the batch was drained;
                keys invalidated since then are answered but not cached
        """
        if not batch:
            return {}

        keys = set(batch)
        if epochs is None:
            epochs = self._result_cache.snapshot(keys)
        bind_batch_id(uuid.uuid4().hex[:12])
        start = time.perf_counter()
        self.batches_sent += 1

        logger.info(
            "Dispatching batch",
            stage=Stage.DISPATCH,
            key_count=len(keys),
            waiter_count=sum(len(waiters) for waiters in batch.values()),
        )

        try:
            response = await self._transport.lookup(keys)
            answered = self._interpret(response, keys)
            self._cache_results(answered, epochs)
            results = {key: answered.get(key, NO_VALUE) for key in keys}

            logger.info(
                "Batch resolved",
                stage=Stage.DISPATCH,
                key_count=len(keys),
                answered=len(answered),
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )

        except asyncio.CancelledError:
            self.settle(batch, {})
            clear_batch_id()
            raise

        except Exception as e:
            logger.error(
                "Bulk lookup failed, resolving batch as unspecified",
                stage=Stage.FALLBACK,
                key_count=len(keys),
                error_type=type(e).__name__,
                error=str(e),
            )
            results = {key: NO_VALUE for key in keys}
            self._cache_results(results, epochs)

        self.settle(batch, results)
        clear_batch_id()
        return results

    def _cache_results(self, results: Mapping[str, PronounCode], epochs: Mapping[str, int]) -> None:
        stale = self._result_cache.update(results, epochs)
        if stale:
            logger.info(
                "Discarding results invalidated while in flight",
                stage=Stage.DISPATCH,
                keys=sorted(stale),
            )

    def settle(self, batch: Batch, results: Mapping[str, PronounCode]) -> None:
        """
        Invoke every waiter once, in registration order.

        Keys missing from ``results`` receive the sentinel. A waiter that
        raises is logged and does not affect the others.
        """
        for key, waiters in batch.items():
            value = results.get(key, NO_VALUE)
            for waiter in waiters:
                try:
                    waiter(value)
                except Exception:
                    logger.exception("Waiter callback failed", stage=Stage.FANOUT, key=key)

    def snapshot(self, batch: Batch) -> dict[str, int]:
        return self._result_cache.snapshot(batch)

    @staticmethod
    def _interpret(response: Mapping[str, object], keys: set[str]) -> dict[str, PronounCode]:
        if not isinstance(response, Mapping):
            raise TypeError(f"lookup returned {type(response).__name__}, expected a mapping")

        answered: dict[str, PronounCode] = {}
        for key in keys:
            raw = response.get(key)
            if raw is None:
                continue
            code = PronounCode.parse(raw)
            answered[key] = code if code is not None else NO_VALUE
        return answered


class RequestCoalescer:
    """
    Deduplicates and batches lookups arriving within one quiescence window.
    """

    def __init__(self, dispatcher: BatchDispatcher, window: float):
        self._dispatcher = dispatcher
        self._queue: Batch = {}
        self._timer = DebounceTimer(window, self._on_quiescent)
        self._in_flight: set[asyncio.Task] = set()

    @property
    def pending_keys(self) -> list[str]:
        return list(self._queue)

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    @property
    def timer(self) -> DebounceTimer:
        return self._timer

    def enqueue(self, key: str, waiter: Waiter) -> bool:
        """
        Register ``waiter`` for ``key``.

        Returns:
            True if the key joined the pending batch, False if it was
            already queued and only gained a waiter
        """
        waiters = self._queue.get(key)
        if waiters is not None:
            waiters.append(waiter)
            return False

        self._queue[key] = [waiter]
        self._timer.schedule()
        return True

    def drain(self) -> Batch:
        """Take the pending queue, leaving an empty one behind."""
        batch, self._queue = self._queue, {}
        return batch

    def _on_quiescent(self) -> None:
        batch = self.drain()
        if not batch:
            return

        epochs = self._dispatcher.snapshot(batch)
        task = asyncio.get_running_loop().create_task(self._dispatcher.dispatch(batch, epochs))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def flush(self) -> None:
        """Dispatch the pending batch now and wait for every in-flight batch."""
        if self._timer.pending:
            self._timer.fire()
        elif self._queue:
            self._on_quiescent()

        if self._in_flight:
            await asyncio.gather(*self._in_flight, return_exceptions=True)

    async def close(self) -> None:
        """
        Stop batching. Queued waiters get the sentinel (not cached) and
        in-flight batches are awaited.
        """
        self._timer.reset()
        batch = self.drain()
        if batch:
            logger.info("Settling queued lookups on shutdown", stage=Stage.SHUTDOWN, key_count=len(batch))
            self._dispatcher.settle(batch, {})

        if self._in_flight:
            await asyncio.gather(*self._in_flight, return_exceptions=True)

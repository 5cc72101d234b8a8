"""
Session result cache.

Maps entity key -> resolved PronounCode. Entries are only written by a
completed dispatch (success or fallback) and never expire; they are removed
only when an override changes or a caller explicitly bypasses the cache.

Every invalidation bumps the key's epoch. A dispatch snapshots the epochs of
its keys when the batch is drained and writes back only keys whose epoch is
unchanged, so a result that was in flight across an invalidation is never
cached.
"""

from collections.abc import Iterable, Iterator, Mapping

from pronoun_resolver.domain.pronouns import NO_VALUE, PronounCode


class ResultCache:
    """In-memory key -> PronounCode map with hit/miss counters."""

    def __init__(self):
        self._entries: dict[str, PronounCode] = {}
        self._epochs: dict[str, int] = {}
        self._hits = 0
        self._misses = 0
        self._stale_writes = 0

    def get(self, key: str) -> PronounCode | None:
        value = self._entries.get(key)
        if value is None:
            self._misses += 1
        else:
            self._hits += 1
        return value

    def peek(self, key: str) -> PronounCode | None:
        """Read without touching the counters."""
        return self._entries.get(key)

    def epoch(self, key: str) -> int:
        return self._epochs.get(key, 0)

    def snapshot(self, keys: Iterable[str]) -> dict[str, int]:
        """Current epoch of each key, taken when a batch leaves the queue."""
        return {key: self.epoch(key) for key in keys}

    def update(
        self,
        results: Mapping[str, PronounCode],
        epochs: Mapping[str, int] | None = None,
    ) -> list[str]:
        """
        Merge ``results`` into the cache.

        With ``epochs``, keys invalidated since the snapshot are skipped.

        Returns:
            Keys that were skipped as stale
        """
        stale = []
        for key, value in results.items():
            if epochs is not None and self.epoch(key) != epochs.get(key, 0):
                stale.append(key)
                continue
            self._entries[key] = value
        self._stale_writes += len(stale)
        return stale

    def invalidate(self, key: str) -> bool:
        self._epochs[key] = self.epoch(key) + 1
        return self._entries.pop(key, None) is not None

    def invalidate_unresolved(self) -> int:
        """Drop every entry holding the "no value" sentinel."""
        stale = [key for key, value in self._entries.items() if value is NO_VALUE]
        for key in stale:
            self.invalidate(key)
        return len(stale)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def stats(self) -> dict[str, float]:
        total = self._hits + self._misses
        return {
            "size": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": self._hits / total if total else 0.0,
            "stale_writes": self._stale_writes,
        }

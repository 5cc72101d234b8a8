"""
Lookup Transport Test Factory

Fake LookupTransport and PersistenceBackend implementations with call
recording, for exercising the resolver without network or Redis.
"""

import asyncio
from collections.abc import Mapping
from typing import Any

from pronoun_resolver.domain.pronouns import PronounCode
from pronoun_resolver.infrastructure.persistence.memory_store import InMemoryBackend


class RecordingTransport:
    """
    LookupTransport that answers from a fixed mapping and records every call.

    Args:
        responses: key -> code answered by the fake remote source
        error: exception raised on every call instead of answering
        gate: optional event every call waits on before answering
    """

    def __init__(
        self,
        responses: Mapping[str, Any] | None = None,
        error: Exception | None = None,
        gate: asyncio.Event | None = None,
    ):
        self.responses = dict(responses or {})
        self.error = error
        self.gate = gate
        self.calls: list[set[str]] = []

    async def lookup(self, keys: set[str]) -> dict[str, Any]:
        self.calls.append(set(keys))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return {key: self.responses[key] for key in keys if key in self.responses}

    @property
    def call_count(self) -> int:
        return len(self.calls)


class CountingBackend(InMemoryBackend):
    """InMemoryBackend that counts reads per storage key."""

    def __init__(self, initial: dict[str, Any] | None = None):
        super().__init__(initial)
        self.reads: dict[str, int] = {}

    async def get(self, key: str) -> Any | None:
        self.reads[key] = self.reads.get(key, 0) + 1
        return await super().get(key)


class TransportTestFactory:
    """Factory for creating transport test doubles."""

    @staticmethod
    def answering(**codes: PronounCode | str) -> RecordingTransport:
        return RecordingTransport(responses=codes)

    @staticmethod
    def failing(error: Exception | None = None) -> RecordingTransport:
        return RecordingTransport(error=error or ConnectionError("PronounDB unreachable"))

    @staticmethod
    def gated(responses: Mapping[str, Any] | None = None) -> RecordingTransport:
        return RecordingTransport(responses=responses, gate=asyncio.Event())


async def wait_until(predicate, timeout: float = 1.0, interval: float = 0.005) -> None:
    """Poll ``predicate`` until it is true or fail after ``timeout`` seconds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(interval)

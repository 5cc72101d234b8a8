"""
Test fixtures for the pronoun resolver test suite.
"""

from .transport_factory import (
    CountingBackend,
    RecordingTransport,
    TransportTestFactory,
    wait_until,
)

__all__ = [
    "CountingBackend",
    "RecordingTransport",
    "TransportTestFactory",
    "wait_until",
]

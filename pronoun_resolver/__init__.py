"""
pronoun_resolver

Batched, cached pronoun resolution with durable local overrides.

    from pronoun_resolver import create_resolver

    async with create_resolver() as resolver:
        code = await resolver.resolve("123456789")
"""

from pronoun_resolver.domain.pronouns import (
    NO_VALUE,
    PRONOUN_MAPPING,
    PronounCode,
    PronounsFormat,
    format_pronouns,
)
from pronoun_resolver.resolution.factory import create_resolver
from pronoun_resolver.resolution.resolver import Resolver

__version__ = "1.0.0"

__all__ = [
    "NO_VALUE",
    "PRONOUN_MAPPING",
    "PronounCode",
    "PronounsFormat",
    "Resolver",
    "create_resolver",
    "format_pronouns",
]

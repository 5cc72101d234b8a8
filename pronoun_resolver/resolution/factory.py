"""
Resolver Factory

Builds a Resolver wired to the configured transport and persistence backend.
"""

from pronoun_resolver.core.config.settings import Settings, get_settings
from pronoun_resolver.infrastructure.lookup.pronoundb_client import PronounDBClient
from pronoun_resolver.infrastructure.persistence.factory import create_persistence_backend
from pronoun_resolver.resolution.resolver import Resolver


def create_resolver(settings: Settings | None = None) -> Resolver:
    """
    Create a Resolver from settings.

    The returned resolver owns its HTTP client and persistence backend and
    releases both in ``close()``.

    Example:
        async with create_resolver() as resolver:
            code = await resolver.resolve("123456789")
    """
    settings = settings or get_settings()
    return Resolver(
        PronounDBClient(settings.lookup),
        create_persistence_backend(settings),
        settings,
        owns_resources=True,
    )

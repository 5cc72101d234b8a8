"""
Remote Lookup Protocol

Abstracts the remote source of pronoun codes so the batching core never
depends on a concrete transport.
"""

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from pronoun_resolver.domain.pronouns import PronounCode


@runtime_checkable
class LookupTransport(Protocol):
    """
    Protocol for bulk lookup transports.

    Implementations:
    - PronounDBClient: HTTP lookup against the PronounDB bulk endpoint

    Contract assumed by the batch dispatcher:
    - called at most once per dispatch window with the distinct keys
    - may omit keys it has no answer for (treated as "no value")
    - signals failure by raising; the dispatcher converts any exception into
      the "no value" sentinel for the whole batch
    """

    async def lookup(self, keys: set[str]) -> Mapping[str, PronounCode]:
        """
        Resolve a batch of keys.

        Args:
            keys: Distinct entity keys

        Returns:
            Mapping of key -> code for the keys the source knows about

        Raises:
            RemoteLookupError: On transport or payload failure
        """
        ...

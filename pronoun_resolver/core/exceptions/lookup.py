"""
Remote Lookup Exceptions

Raised by lookup transports. The batch dispatcher converts every one of
these into the "no value" sentinel for the affected batch, so they are
only ever seen by code that talks to a transport directly.
"""

from pronoun_resolver.core.exceptions.base import ResolverBaseError


class RemoteLookupError(ResolverBaseError):
    """Base exception for remote lookup failures."""
    pass


class LookupConnectionError(RemoteLookupError):
    """
    Raised when the lookup service cannot be reached.

    Common causes:
    - DNS failure or service down
    - Network connectivity issues
    """
    pass


class LookupTimeoutError(RemoteLookupError):
    """Raised when the lookup service does not answer within the timeout."""
    pass


class LookupHTTPError(RemoteLookupError):
    """Raised when the lookup service answers with a non-2xx status."""
    pass


class MalformedResponseError(RemoteLookupError):
    """
    Raised when the lookup response cannot be interpreted.

    Common causes:
    - Body is not JSON
    - Body is JSON but not an object of id -> code
    """
    pass

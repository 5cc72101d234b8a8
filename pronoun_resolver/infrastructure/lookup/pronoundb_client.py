"""
PronounDB Bulk Lookup Client

HTTP implementation of the LookupTransport protocol against the PronounDB
bulk endpoint:

    GET {base_url}/api/v1/lookup-bulk?platform=discord&ids=1,2,3
    Accept: application/json
    X-PronounDB-Source: <source>

    200 {"1": "hh", "3": "tt"}

Architecture:
    PronounDBClient (Public API)
        ├── httpx.AsyncClient (pooled connections, own timeout)
        ├── tenacity retry (transient connect/timeout failures only)
        └── payload parsing (JSON object -> PronounCode mapping)

The client owns its timeout and retry budget. When both are exhausted it
raises a RemoteLookupError subclass; the batch dispatcher turns that into
the "no value" sentinel for every key of the batch.
"""

from __future__ import annotations

from collections.abc import Iterable

import httpx
import orjson
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from pronoun_resolver.core.config.constants import (
    PRONOUNDB_BULK_LOOKUP_PATH,
    PRONOUNDB_SOURCE_HEADER,
    Stage,
)
from pronoun_resolver.core.config.settings import LookupSettings, get_settings
from pronoun_resolver.core.exceptions import (
    LookupConnectionError,
    LookupHTTPError,
    LookupTimeoutError,
    MalformedResponseError,
)
from pronoun_resolver.core.logging.logger import get_logger
from pronoun_resolver.domain.pronouns import NO_VALUE, PronounCode

logger = get_logger(__name__)


class PronounDBClient:
    """
    Async PronounDB bulk lookup client.

    Usage:
        async with PronounDBClient() as client:
            codes = await client.lookup({"123", "456"})

    The underlying httpx client is created lazily on first use, so the
    client may also be used without the context manager as long as
    ``close()`` is awaited on shutdown.
    """

    def __init__(
        self,
        config: LookupSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            config: Lookup settings (defaults to the global settings)
            transport: Optional httpx transport, used by tests to stub the network
        """
        self.config = config or get_settings().lookup
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        logger.info(
            "PronounDB client initialized",
            base_url=self.config.PRONOUNDB_BASE_URL,
            platform=self.config.PRONOUNDB_PLATFORM,
            timeout=self.config.LOOKUP_TIMEOUT,
            max_retries=self.config.LOOKUP_MAX_RETRIES,
        )

    async def __aenter__(self) -> PronounDBClient:
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.PRONOUNDB_BASE_URL,
                timeout=httpx.Timeout(self.config.LOOKUP_TIMEOUT),
                limits=httpx.Limits(
                    max_connections=self.config.LOOKUP_MAX_CONNECTIONS,
                    max_keepalive_connections=max(1, self.config.LOOKUP_MAX_CONNECTIONS // 2),
                ),
                headers={
                    "Accept": "application/json",
                    PRONOUNDB_SOURCE_HEADER: self.config.PRONOUNDB_SOURCE,
                },
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the pooled HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def build_params(self, keys: Iterable[str]) -> dict[str, str]:
        """Query parameters for one bulk request. Keys are sent sorted."""
        return {
            "platform": self.config.PRONOUNDB_PLATFORM,
            "ids": ",".join(sorted(keys)),
        }

    async def lookup(self, keys: set[str]) -> dict[str, PronounCode]:
        """
        Look up pronoun codes for a batch of keys.

        Args:
            keys: Distinct entity keys

        Returns:
            Mapping of requested key -> PronounCode; keys PronounDB does not
            know are omitted

        Raises:
            LookupConnectionError: Service unreachable after all retries
            LookupTimeoutError: Service timed out after all retries
            LookupHTTPError: Non-2xx response
            MalformedResponseError: Response body is not a JSON object
        """
        if not keys:
            return {}

        params = self.build_params(keys)

        logger.debug(
            "Sending bulk lookup",
            stage=Stage.HTTP_REQUEST,
            key_count=len(keys),
        )

        try:
            response = await self._execute_with_retry(params)

        except httpx.ConnectError as e:
            raise LookupConnectionError(
                f"Cannot connect to PronounDB at {self.config.PRONOUNDB_BASE_URL}",
                details={"original_error": str(e), "key_count": len(keys)},
            ) from e

        except httpx.TimeoutException as e:
            raise LookupTimeoutError(
                f"PronounDB request timed out after {self.config.LOOKUP_TIMEOUT}s",
                details={"timeout": self.config.LOOKUP_TIMEOUT, "key_count": len(keys)},
            ) from e

        except httpx.HTTPStatusError as e:
            raise LookupHTTPError(
                f"PronounDB returned HTTP {e.response.status_code}",
                details={
                    "status_code": e.response.status_code,
                    "response_text": e.response.text[:500] if e.response.text else None,
                },
            ) from e

        return self.parse_response(response.content, keys)

    async def _execute_with_retry(self, params: dict[str, str]) -> httpx.Response:
        """
        Execute the request, retrying transient failures.

        Retried: ConnectError, TimeoutException (exponential backoff + jitter).
        Not retried: HTTP status errors, which would fail again.
        """
        client = self._ensure_client()

        @retry(
            stop=stop_after_attempt(self.config.LOOKUP_MAX_RETRIES),
            wait=wait_exponential_jitter(
                initial=self.config.LOOKUP_RETRY_BASE_DELAY,
                max=self.config.LOOKUP_RETRY_MAX_DELAY,
            ),
            retry=retry_if_exception_type((httpx.ConnectError, httpx.TimeoutException)),
            reraise=True,
        )
        async def _do_request() -> httpx.Response:
            response = await client.get(PRONOUNDB_BULK_LOOKUP_PATH, params=params)
            response.raise_for_status()
            return response

        return await _do_request()

    def parse_response(self, body: bytes, keys: set[str]) -> dict[str, PronounCode]:
        """
        Convert a response body into a code mapping.

        Entries for keys that were not requested, or whose value is not a
        string, are dropped. Unknown code strings become the sentinel.

        Raises:
            MalformedResponseError: If the body is not a JSON object
        """
        try:
            payload = orjson.loads(body)
        except orjson.JSONDecodeError as e:
            raise MalformedResponseError(
                "PronounDB response is not valid JSON",
                details={"body": body[:200].decode("utf-8", errors="replace")},
            ) from e

        if not isinstance(payload, dict):
            raise MalformedResponseError(
                "PronounDB response is not a JSON object",
                details={"payload_type": type(payload).__name__},
            )

        result: dict[str, PronounCode] = {}
        for key, raw in payload.items():
            if key not in keys or not isinstance(raw, str):
                continue
            code = PronounCode.parse(raw)
            if code is None:
                logger.warning("Unknown pronoun code", stage=Stage.HTTP_PARSE, key=key, code=raw)
                code = NO_VALUE
            result[key] = code

        logger.debug(
            "Bulk lookup parsed",
            stage=Stage.HTTP_PARSE,
            requested=len(keys),
            answered=len(result),
        )
        return result

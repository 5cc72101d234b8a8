"""
Unit Tests for PronounDBClient

Tests the bulk request shape, response parsing, error mapping and retry
behavior against an httpx.MockTransport (no network access).
"""

import asyncio

import httpx
import orjson
import pytest

from pronoun_resolver.core.exceptions import (
    LookupConnectionError,
    LookupHTTPError,
    LookupTimeoutError,
    MalformedResponseError,
    RemoteLookupError,
)
from pronoun_resolver.domain.pronouns import NO_VALUE, PronounCode
from pronoun_resolver.infrastructure.lookup.pronoundb_client import PronounDBClient
from pronoun_resolver.resolution.resolver import Resolver


class _Recorder:
    """httpx MockTransport handler that records requests."""

    def __init__(self, respond):
        self.respond = respond
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)


def _json(payload, status_code=200):
    return lambda request: httpx.Response(status_code, content=orjson.dumps(payload))


@pytest.fixture
def make_client(test_settings):
    def _make(respond):
        recorder = _Recorder(respond)
        client = PronounDBClient(test_settings.lookup, transport=httpx.MockTransport(recorder))
        return client, recorder

    return _make


@pytest.mark.unit
class TestBulkRequest:
    """Test the shape of the bulk lookup request."""

    @pytest.mark.asyncio
    async def test_request_path_params_and_headers(self, make_client):
        client, recorder = make_client(_json({}))

        async with client:
            await client.lookup({"222", "111"})

        request = recorder.requests[0]
        assert request.method == "GET"
        assert request.url.path == "/api/v1/lookup-bulk"
        assert request.url.params["platform"] == "discord"
        assert request.url.params["ids"] == "111,222"
        assert request.headers["accept"] == "application/json"
        assert request.headers["x-pronoundb-source"] == "pronoun-resolver/1.0.0"

    @pytest.mark.asyncio
    async def test_empty_key_set_sends_nothing(self, make_client):
        client, recorder = make_client(_json({}))

        assert await client.lookup(set()) == {}
        assert recorder.requests == []
        await client.close()

    def test_build_params_sorts_ids(self, make_client):
        client, _ = make_client(_json({}))

        assert client.build_params(["3", "1", "2"]) == {"platform": "discord", "ids": "1,2,3"}


@pytest.mark.unit
class TestResponseParsing:
    """Test conversion of response bodies to PronounCode mappings."""

    @pytest.mark.asyncio
    async def test_known_codes_are_parsed(self, make_client):
        client, _ = make_client(_json({"1": "hh", "2": "any"}))

        async with client:
            result = await client.lookup({"1", "2", "3"})

        assert result == {"1": PronounCode.HE_HIM, "2": PronounCode.ANY}

    def test_unknown_code_becomes_sentinel(self, make_client):
        client, _ = make_client(_json({}))

        assert client.parse_response(b'{"1": "zz"}', {"1"}) == {"1": NO_VALUE}

    def test_unrequested_and_non_string_entries_are_dropped(self, make_client):
        client, _ = make_client(_json({}))

        result = client.parse_response(b'{"1": "sh", "2": 7, "9": "hh"}', {"1", "2"})

        assert result == {"1": PronounCode.SHE_HER}

    def test_invalid_json_raises(self, make_client):
        client, _ = make_client(_json({}))

        with pytest.raises(MalformedResponseError):
            client.parse_response(b"<html>oops</html>", {"1"})

    def test_non_object_json_raises(self, make_client):
        client, _ = make_client(_json({}))

        with pytest.raises(MalformedResponseError) as exc_info:
            client.parse_response(b'["hh"]', {"1"})

        assert exc_info.value.details["payload_type"] == "list"


@pytest.mark.unit
class TestErrorMapping:
    """Test that transport failures map onto RemoteLookupError subclasses."""

    @pytest.mark.asyncio
    async def test_http_error_status_is_not_retried(self, make_client):
        client, recorder = make_client(lambda request: httpx.Response(500, text="boom"))

        with pytest.raises(LookupHTTPError) as exc_info:
            await client.lookup({"1"})

        assert exc_info.value.details["status_code"] == 500
        assert len(recorder.requests) == 1
        await client.close()

    @pytest.mark.asyncio
    async def test_connect_error_is_retried_then_raised(self, make_client):
        """Test that connection failures use the whole retry budget."""

        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        client, recorder = make_client(refuse)

        with pytest.raises(LookupConnectionError):
            await client.lookup({"1"})

        assert len(recorder.requests) == 3
        await client.close()

    @pytest.mark.asyncio
    async def test_timeout_is_mapped(self, make_client):
        def stall(request):
            raise httpx.ReadTimeout("read timed out", request=request)

        client, _ = make_client(stall)

        with pytest.raises(LookupTimeoutError) as exc_info:
            await client.lookup({"1"})

        assert isinstance(exc_info.value, RemoteLookupError)
        await client.close()

    @pytest.mark.asyncio
    async def test_transient_failure_then_success(self, make_client):
        attempts = []

        def flaky(request):
            attempts.append(request)
            if len(attempts) == 1:
                raise httpx.ConnectError("reset", request=request)
            return httpx.Response(200, content=b'{"1": "tt"}')

        client, _ = make_client(flaky)

        assert await client.lookup({"1"}) == {"1": PronounCode.THEY_THEM}
        assert len(attempts) == 2
        await client.close()


@pytest.mark.unit
class TestClientWithResolver:
    """End-to-end: Resolver over the HTTP client."""

    @pytest.mark.asyncio
    async def test_burst_becomes_one_http_request(self, make_client, test_settings, backend):
        client, recorder = make_client(_json({"1": "hh", "2": "sh"}))

        async with Resolver(client, backend, test_settings, owns_resources=True) as resolver:
            results = await asyncio.gather(
                resolver.resolve("1"), resolver.resolve("2"), resolver.resolve("3")
            )

        assert results == [PronounCode.HE_HIM, PronounCode.SHE_HER, NO_VALUE]
        assert len(recorder.requests) == 1
        assert recorder.requests[0].url.params["ids"] == "1,2,3"

    @pytest.mark.asyncio
    async def test_server_error_resolves_to_sentinel(self, make_client, test_settings, backend):
        client, _ = make_client(lambda request: httpx.Response(503))

        async with Resolver(client, backend, test_settings, owns_resources=True) as resolver:
            assert await resolver.resolve("1") is NO_VALUE

"""
Unit tests for the resilient HTTP client.

Covers retry bounds, linear backoff, per-attempt timeouts, status and
content-type mapping, and response contracts.
"""
import asyncio
import json
from typing import Any, Dict, List
from unittest.mock import AsyncMock, call

import httpx
import pytest
from pydantic import ValidationError

from fareplay.core.constants import USER_AGENT
from fareplay.core.errors import (
    CanonicalizationError,
    HttpStatusError,
    ResponseValidationError,
    TransportError,
    UnexpectedContentTypeError,
)
from fareplay.core.http import HttpClientConfig, create_http_client
from fareplay.schemas import ApiResponse, CasinoStats


class TestHttpClientConfig:

    def test_defaults(self):
        config = HttpClientConfig(base_url="https://discovery.test")

        assert config.timeout == 30000
        assert config.retries == 3
        assert config.retry_delay == 1000
        assert config.headers == {}

    def test_trailing_slash_trimmed(self):
        assert HttpClientConfig(base_url="https://discovery.test/").base_url == "https://discovery.test"

    @pytest.mark.parametrize("base_url", ["ftp://discovery.test", "discovery.test", ""])
    def test_rejects_non_http_urls(self, base_url):
        with pytest.raises(ValidationError):
            HttpClientConfig(base_url=base_url)

    def test_rejects_negative_retries(self):
        with pytest.raises(ValidationError):
            HttpClientConfig(base_url="https://discovery.test", retries=-1)

    def test_frozen(self):
        config = HttpClientConfig(base_url="https://discovery.test")

        with pytest.raises(ValidationError):
            config.retries = 10

    def test_factory_ignores_unset_options(self):
        client = create_http_client(base_url="https://discovery.test", timeout=None, retries=5)

        assert client.config.retries == 5
        assert client.config.timeout == 30000


class TestRequests:
    """Test request building."""

    @pytest.mark.asyncio
    async def test_default_headers(self, make_http_client):
        seen: List[httpx.Request] = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"ok": True})

        client = make_http_client(handler, headers={"Authorization": "Bearer token"})
        await client.get("/ping")

        headers = seen[0].headers
        assert headers["content-type"] == "application/json"
        assert headers["accept"] == "application/json"
        assert headers["user-agent"] == USER_AGENT
        assert headers["authorization"] == "Bearer token"

    @pytest.mark.asyncio
    async def test_per_request_header_override(self, make_http_client):
        seen: List[httpx.Request] = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={})

        client = make_http_client(handler)
        await client.get("/ping", headers={"Accept": "application/vnd.fare+json"})

        assert seen[0].headers["accept"] == "application/vnd.fare+json"
        assert client.default_headers["Accept"] == "application/json"

    def test_default_headers_read_only(self, make_http_client):
        client = make_http_client(lambda request: httpx.Response(200, json={}))

        with pytest.raises(TypeError):
            client.default_headers["X-Extra"] = "1"

    @pytest.mark.asyncio
    async def test_path_and_query_params(self, make_http_client):
        seen: List[httpx.Request] = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=[])

        client = make_http_client(handler)
        await client.get("api/casinos", params={"limit": 5, "active": True, "status": "online", "skip": None})

        url = seen[0].url
        assert url.path == "/api/casinos"
        assert url.params["limit"] == "5"
        assert url.params["active"] == "true"
        assert url.params["status"] == "online"
        assert "skip" not in url.params

    @pytest.mark.asyncio
    async def test_json_body(self, make_http_client):
        bodies: List[Dict[str, Any]] = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(201, json={"created": True})

        client = make_http_client(handler)
        result = await client.post("/items", body={"name": "Café"})

        assert bodies == [{"name": "Café"}]
        assert result == {"created": True}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("verb", ["put", "patch", "delete"])
    async def test_verbs(self, make_http_client, verb):
        methods: List[str] = []

        def handler(request):
            methods.append(request.method)
            return httpx.Response(200, json={})

        client = make_http_client(handler)
        await getattr(client, verb)("/items/1", body={"a": 1})

        assert methods == [verb.upper()]

    @pytest.mark.asyncio
    async def test_non_finite_body_rejected(self, make_http_client):
        requests: List[httpx.Request] = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={})

        client = make_http_client(handler)

        with pytest.raises(CanonicalizationError):
            await client.post("/items", body={"value": float("nan")})

        assert requests == []


class TestRetries:
    """Test retry bound, backoff and timeout isolation."""

    @pytest.mark.asyncio
    async def test_always_timing_out(self, make_http_client):
        """retries=2 with a hanging server makes exactly 3 attempts, then fails."""
        attempts = 0

        async def handler(request):
            nonlocal attempts
            attempts += 1
            await asyncio.sleep(5)
            return httpx.Response(200, json={})

        client = make_http_client(handler, retries=2, retry_delay=100, timeout=20)
        client._sleep = AsyncMock()

        with pytest.raises(TransportError) as exc_info:
            await client.get("/slow")

        assert attempts == 3
        assert exc_info.value.attempts == 3
        assert isinstance(exc_info.value.cause, asyncio.TimeoutError)
        assert client._sleep.await_args_list == [call(0.1), call(0.2)]

    @pytest.mark.asyncio
    async def test_network_errors_retried(self, make_http_client):
        attempts = 0

        def handler(request):
            nonlocal attempts
            attempts += 1
            raise httpx.ConnectError("connection refused", request=request)

        client = make_http_client(handler, retries=3, retry_delay=50)
        client._sleep = AsyncMock()

        with pytest.raises(TransportError) as exc_info:
            await client.post("/items", body={})

        assert attempts == 4
        assert isinstance(exc_info.value.cause, httpx.ConnectError)
        # Linear backoff: delay * (attempt + 1)
        assert client._sleep.await_args_list == [call(0.05), call(0.1), call(0.15)]

    @pytest.mark.asyncio
    async def test_no_retries(self, make_http_client):
        attempts = 0

        def handler(request):
            nonlocal attempts
            attempts += 1
            raise httpx.ReadError("reset", request=request)

        client = make_http_client(handler, retries=0)
        client._sleep = AsyncMock()

        with pytest.raises(TransportError):
            await client.get("/items")

        assert attempts == 1
        client._sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_recovers_after_timeout(self, make_http_client):
        """A timed-out attempt does not affect the next one."""
        attempts = 0

        async def handler(request):
            nonlocal attempts
            attempts += 1
            if attempts == 1:
                await asyncio.sleep(5)
            return httpx.Response(200, json={"attempt": attempts})

        client = make_http_client(handler, retries=1, retry_delay=0, timeout=20)

        assert await client.get("/flaky") == {"attempt": 2}
        assert attempts == 2

    @pytest.mark.asyncio
    async def test_status_errors_not_retried(self, make_http_client):
        attempts = 0

        def handler(request):
            nonlocal attempts
            attempts += 1
            return httpx.Response(503, json={"message": "overloaded"})

        client = make_http_client(handler, retries=3)
        client._sleep = AsyncMock()

        with pytest.raises(HttpStatusError) as exc_info:
            await client.get("/items")

        assert attempts == 1
        assert exc_info.value.status_code == 503
        assert exc_info.value.message == "overloaded"
        client._sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_redirect_loop(self, make_http_client):
        """Too many redirects fails at once as a TransportError."""
        attempts = 0

        def handler(request):
            nonlocal attempts
            attempts += 1
            return httpx.Response(302, headers={"Location": "/loop"})

        client = make_http_client(handler, retries=2)
        client._sleep = AsyncMock()

        with pytest.raises(TransportError) as exc_info:
            await client.get("/loop")

        assert exc_info.value.attempts == 1
        assert isinstance(exc_info.value.cause, httpx.TooManyRedirects)
        assert attempts > 1
        client._sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_bad_content_encoding(self, make_http_client):
        def handler(request):
            return httpx.Response(
                200,
                headers={"Content-Type": "application/json", "Content-Encoding": "gzip"},
                content=b"not gzip",
            )

        client = make_http_client(handler, retries=1)

        with pytest.raises(TransportError) as exc_info:
            await client.get("/items")

        assert isinstance(exc_info.value.cause, httpx.DecodingError)


class TestResponseMapping:
    """Test status, content-type and contract handling."""

    @pytest.mark.asyncio
    async def test_error_envelope(self, make_http_client):
        """A 401 error envelope maps to HttpStatusError with the server's code and message."""
        body = {"success": False, "error": {"code": "INVALID_SIGNATURE", "message": "bad sig"}}
        client = make_http_client(lambda request: httpx.Response(401, json=body))

        with pytest.raises(HttpStatusError) as exc_info:
            await client.post("/v1/casinos/heartbeat", body={})

        error = exc_info.value
        assert error.status_code == 401
        assert error.code == "INVALID_SIGNATURE"
        assert error.message == "bad sig"
        assert str(error) == "HTTP 401 [INVALID_SIGNATURE] bad sig"

    @pytest.mark.asyncio
    async def test_error_details(self, make_http_client):
        body = {"error": {"code": "VALIDATION_ERROR", "message": "invalid", "details": {"field": "url"}}}
        client = make_http_client(lambda request: httpx.Response(400, json=body))

        with pytest.raises(HttpStatusError) as exc_info:
            await client.get("/items")

        assert exc_info.value.details == {"field": "url"}

    @pytest.mark.asyncio
    async def test_top_level_error_fields(self, make_http_client):
        body = {"code": "RATE_LIMITED", "message": "slow down"}
        client = make_http_client(lambda request: httpx.Response(429, json=body))

        with pytest.raises(HttpStatusError) as exc_info:
            await client.get("/items")

        assert exc_info.value.code == "RATE_LIMITED"
        assert exc_info.value.message == "slow down"

    @pytest.mark.asyncio
    async def test_non_json_error_body(self, make_http_client):
        client = make_http_client(
            lambda request: httpx.Response(502, text="<html>upstream down</html>", headers={"content-type": "text/html"})
        )

        with pytest.raises(HttpStatusError) as exc_info:
            await client.get("/items")

        error = exc_info.value
        assert error.message == "HTTP 502: Bad Gateway"
        assert error.body == "<html>upstream down</html>"
        assert error.code is None

    @pytest.mark.asyncio
    async def test_success_without_json(self, make_http_client):
        client = make_http_client(lambda request: httpx.Response(200, text="OK"))

        with pytest.raises(UnexpectedContentTypeError) as exc_info:
            await client.get("/items")

        assert exc_info.value.status_code == 200
        assert exc_info.value.content_type.startswith("text/plain")

    @pytest.mark.asyncio
    async def test_json_with_charset(self, make_http_client):
        client = make_http_client(
            lambda request: httpx.Response(
                200,
                content=b'{"a": 1}',
                headers={"content-type": "application/json; charset=utf-8"},
            )
        )

        assert await client.get("/items") == {"a": 1}

    @pytest.mark.asyncio
    async def test_malformed_json(self, make_http_client):
        client = make_http_client(
            lambda request: httpx.Response(200, content=b"{not json", headers={"content-type": "application/json"})
        )

        with pytest.raises(ResponseValidationError):
            await client.get("/items")

    @pytest.mark.asyncio
    async def test_contract_validated(self, make_http_client):
        body = {
            "success": True,
            "timestamp": 1,
            "data": {"totalCasinos": 10, "onlineCasinos": 4, "heartbeatsLast24h": 1200},
        }
        client = make_http_client(lambda request: httpx.Response(200, json=body))

        envelope = await client.get("/api/casinos/stats", contract=ApiResponse[CasinoStats])

        assert envelope.success is True
        assert envelope.data.online_casinos == 4
        assert envelope.data.heartbeats_last24h == 1200

    @pytest.mark.asyncio
    async def test_contract_mismatch(self, make_http_client):
        body = {"success": True, "timestamp": 1, "data": {"totalCasinos": "many"}}
        client = make_http_client(lambda request: httpx.Response(200, json=body))

        with pytest.raises(ResponseValidationError) as exc_info:
            await client.get("/api/casinos/stats", contract=ApiResponse[CasinoStats])

        locations = {issue["loc"] for issue in exc_info.value.issues}
        assert ("data", "totalCasinos") in locations
        assert ("data", "onlineCasinos") in locations

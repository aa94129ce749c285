"""
Resilient HTTP Client

Async JSON client for the Discovery Service with per-attempt timeouts,
linear retry backoff, typed error mapping, and response contracts.

Request lifecycle:
    Pending -> InFlight -> Succeeded
                        -> Retrying -> InFlight ...   (network error / timeout)
                        -> Failed                     (retries exhausted)

- Every attempt has its own deadline; exceeding it cancels that attempt only.
- Before attempt n+1 (n = 0-based failed attempt) the client waits
  retry_delay * (n + 1) milliseconds.
- Completed exchanges are never retried: a non-2xx status becomes an
  HttpStatusError straight away.

Example:
    client = HttpClient(HttpClientConfig(base_url="https://discovery.fareplay.io"))
    stats = await client.get("/api/casinos/stats", contract=ApiResponse[CasinoStats])
"""

import asyncio
import json
import logging
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from fareplay.core.constants import (
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_RETRIES,
    DEFAULT_RETRY_DELAY,
    USER_AGENT,
)
from fareplay.core.errors import (
    CanonicalizationError,
    HttpStatusError,
    ResponseValidationError,
    TransportError,
    UnexpectedContentTypeError,
)
from fareplay.core.http.contracts import Contract, validate_response

logger = logging.getLogger(__name__)

QueryValue = Union[str, int, float, bool]

# Failures that mean the exchange never completed
_RETRYABLE_ERRORS = (httpx.TransportError, asyncio.TimeoutError)


class HttpClientConfig(BaseModel):
    """
    Transport configuration. Immutable once built.

    Times are in milliseconds.
    """
    model_config = ConfigDict(frozen=True)

    base_url: str = Field(..., description="Service base URL (http or https)")
    timeout: int = Field(DEFAULT_HTTP_TIMEOUT, gt=0, description="Per-attempt timeout (ms)")
    retries: int = Field(DEFAULT_RETRIES, ge=0, description="Retries after the first attempt")
    retry_delay: int = Field(DEFAULT_RETRY_DELAY, ge=0, description="Backoff unit (ms)")
    headers: Dict[str, str] = Field(default_factory=dict, description="Extra default headers")

    @field_validator("base_url")
    @classmethod
    def _check_base_url(cls, value: str) -> str:
        value = value.strip()
        if not value.lower().startswith(("http://", "https://")):
            raise ValueError(f"base_url must start with http:// or https://, got {value!r}")
        return value.rstrip("/")


def _encode_query(params: Optional[Mapping[str, Any]]) -> Optional[Dict[str, str]]:
    """Render query values as text; booleans become "true"/"false"."""
    if not params:
        return None
    encoded = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            encoded[key] = "true" if value else "false"
        else:
            encoded[key] = str(value)
    return encoded


def _encode_body(body: Any) -> Optional[bytes]:
    if body is None:
        return None
    if isinstance(body, BaseModel):
        body = body.model_dump(mode="json", by_alias=True, exclude_none=True)
    try:
        text = json.dumps(body, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise CanonicalizationError(f"Request body has no JSON representation: {e}") from e
    return text.encode("utf-8")


def _is_json(content_type: Optional[str]) -> bool:
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


class HttpClient:
    """
    Typed async HTTP client with timeouts, retries, and response contracts.

    Each attempt opens its own httpx.AsyncClient, so a cancelled attempt never
    shares connection state with the next one.
    """

    def __init__(
        self,
        config: HttpClientConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            config: Transport configuration
            transport: Optional httpx transport used for every attempt
                (e.g. httpx.MockTransport in tests)
        """
        self.config = config
        self.base_url = config.base_url
        self._transport = transport
        self._default_headers = MappingProxyType({
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
            **config.headers,
        })

    @property
    def default_headers(self) -> Mapping[str, str]:
        """Read-only view of the headers sent with every request."""
        return self._default_headers

    # --- internals -------------------------------------------------------

    def _build_url(self, path: str) -> str:
        clean_path = path if path.startswith("/") else f"/{path}"
        return f"{self.base_url}{clean_path}"

    async def _sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    async def _send_once(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        params: Optional[Dict[str, str]],
        content: Optional[bytes],
    ) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.timeout / 1000),
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            return await client.request(
                method,
                url,
                headers=headers,
                params=params,
                content=content,
            )

    async def _send_with_retry(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        params: Optional[Dict[str, str]] = None,
        content: Optional[bytes] = None,
    ) -> httpx.Response:
        """
        Send a request, retrying network failures and timeouts.

        Raises:
            TransportError: After retries + 1 failed attempts, or at once
                for other httpx errors (redirect loops, decoding)
        """
        max_attempts = self.config.retries + 1
        deadline = self.config.timeout / 1000
        last_error: Optional[BaseException] = None

        for attempt in range(max_attempts):
            logger.debug(f"{method} {url} (attempt {attempt + 1}/{max_attempts})")
            try:
                return await asyncio.wait_for(
                    self._send_once(method, url, headers, params, content),
                    timeout=deadline,
                )
            except _RETRYABLE_ERRORS as e:
                last_error = e
                if isinstance(e, (asyncio.TimeoutError, httpx.TimeoutException)):
                    reason = "timed out"
                else:
                    reason = str(e) or type(e).__name__

                if attempt < self.config.retries:
                    delay_ms = self.config.retry_delay * (attempt + 1)
                    logger.warning(
                        f"{method} {url} failed on attempt {attempt + 1}/{max_attempts} "
                        f"({reason}); retrying in {delay_ms}ms"
                    )
                    await self._sleep(delay_ms / 1000)
                else:
                    logger.error(f"{method} {url} failed after {max_attempts} attempts ({reason})")
            except httpx.HTTPError as e:
                # Redirect loops, bad content encoding; not retried
                logger.error(f"{method} {url} failed on attempt {attempt + 1}/{max_attempts} ({e})")
                raise TransportError(
                    f"{method} {url} failed: {str(e) or type(e).__name__}",
                    attempts=attempt + 1,
                    cause=e,
                ) from e

        message = str(last_error) or type(last_error).__name__
        if isinstance(last_error, asyncio.TimeoutError):
            message = f"Request timed out after {self.config.timeout}ms"
        raise TransportError(
            f"{method} {url} failed: {message}",
            attempts=max_attempts,
            cause=last_error,
        ) from last_error

    def _status_error(self, response: httpx.Response) -> HttpStatusError:
        """Map a non-2xx response to HttpStatusError."""
        message = f"HTTP {response.status_code}: {response.reason_phrase}"
        code = None
        details = None
        raw_body = None

        body: Any = None
        if _is_json(response.headers.get("content-type")):
            try:
                body = response.json()
            except ValueError:
                raw_body = response.text
        else:
            raw_body = response.text

        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict):
                message = error.get("message") or body.get("message") or message
                code = error.get("code") or body.get("code")
                details = error.get("details", body.get("details"))
            else:
                message = body.get("message") or (error if isinstance(error, str) else None) or message
                code = body.get("code")
                details = body.get("details")

        return HttpStatusError(
            str(message),
            status_code=response.status_code,
            code=code,
            details=details,
            body=raw_body,
        )

    def _parse_response(self, response: httpx.Response, contract: Optional[Contract]) -> Any:
        """
        Map a completed response to a validated value or a typed error.

        Raises:
            HttpStatusError: Non-2xx status
            UnexpectedContentTypeError: 2xx without a JSON content type
            ResponseValidationError: Body is not JSON or fails the contract
        """
        if not response.is_success:
            error = self._status_error(response)
            logger.warning(f"{response.request.method} {response.request.url} -> {error}")
            raise error

        content_type = response.headers.get("content-type")
        if not _is_json(content_type):
            raise UnexpectedContentTypeError(response.status_code, content_type)

        try:
            data = response.json()
        except ValueError as e:
            raise ResponseValidationError(
                "JSON",
                [{"loc": (), "msg": f"Invalid JSON body: {e}", "type": "json_invalid", "input": response.text[:256]}],
            ) from e

        return validate_response(data, contract)

    # --- public API ------------------------------------------------------

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, QueryValue]] = None,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        contract: Optional[Contract] = None,
    ) -> Any:
        """
        Perform a request and return the contract-validated body.

        Args:
            method: HTTP method
            path: Path relative to base_url
            params: Query parameters
            body: JSON-compatible body (dict, list, or pydantic model)
            headers: Per-request header overrides
            contract: Expected response shape (see contracts module)

        Returns:
            Validated response value

        Raises:
            TransportError, HttpStatusError, UnexpectedContentTypeError,
            ResponseValidationError, CanonicalizationError (body not JSON)
        """
        merged_headers = {**self._default_headers, **(headers or {})}
        response = await self._send_with_retry(
            method.upper(),
            self._build_url(path),
            merged_headers,
            params=_encode_query(params),
            content=_encode_body(body),
        )
        return self._parse_response(response, contract)

    async def get(
        self,
        path: str,
        params: Optional[Mapping[str, QueryValue]] = None,
        headers: Optional[Mapping[str, str]] = None,
        contract: Optional[Contract] = None,
    ) -> Any:
        """GET request with optional query parameters."""
        return await self.request("GET", path, params=params, headers=headers, contract=contract)

    async def post(
        self,
        path: str,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        contract: Optional[Contract] = None,
    ) -> Any:
        """POST request."""
        return await self.request("POST", path, body=body, headers=headers, contract=contract)

    async def put(
        self,
        path: str,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        contract: Optional[Contract] = None,
    ) -> Any:
        """PUT request."""
        return await self.request("PUT", path, body=body, headers=headers, contract=contract)

    async def patch(
        self,
        path: str,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        contract: Optional[Contract] = None,
    ) -> Any:
        """PATCH request."""
        return await self.request("PATCH", path, body=body, headers=headers, contract=contract)

    async def delete(
        self,
        path: str,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
        contract: Optional[Contract] = None,
    ) -> Any:
        """DELETE request."""
        return await self.request("DELETE", path, body=body, headers=headers, contract=contract)


def create_http_client(
    config: Optional[HttpClientConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    **options: Any,
) -> HttpClient:
    """
    Create an HttpClient from a config object or keyword options.

    Options left as None fall back to the defaults.

    Example:
        >>> client = create_http_client(base_url="https://discovery.fareplay.io", retries=5)
    """
    if config is None:
        config = HttpClientConfig(**{k: v for k, v in options.items() if v is not None})
    return HttpClient(config, transport=transport)

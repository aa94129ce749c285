"""
Discovery Client

Registry operations against the Discovery Service: registration, signed
updates, lookups, listing and statistics.
"""

import logging
from typing import Any, List, Mapping, Optional, Union
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from fareplay.core.config import Settings, get_settings
from fareplay.core.constants import DEFAULT_DISCOVERY_URL, SIGNATURE_FIELD
from fareplay.core.errors import EmptyDataError, HttpStatusError, PayloadValidationError
from fareplay.core.http.client import create_http_client
from fareplay.core.http.contracts import describe_issues
from fareplay.core.signed_request import SignedRequestSender, check_payload, unwrap_envelope
from fareplay.core.signing import create_signed_payload, get_keypair_from_private_key, to_json_compatible
from fareplay.schemas.casino import (
    CasinoFilters,
    CasinoList,
    CasinoMetadata,
    CasinoStats,
    CasinoUpdateRequest,
    RegistrationRequest,
)
from fareplay.schemas.protocol import ApiResponse

logger = logging.getLogger(__name__)

CASINOS_PATH = "/api/casinos"
REGISTER_PATH = f"{CASINOS_PATH}/register"
STATS_PATH = f"{CASINOS_PATH}/stats"


def _segment(value: str) -> str:
    return quote(str(value), safe="")


class DiscoveryClient:
    """
    Client for the Discovery Service API.

    Handles casino registration, updates, and queries.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_DISCOVERY_URL,
        api_key: Optional[str] = None,
        timeout: Optional[int] = None,
        retries: Optional[int] = None,
        retry_delay: Optional[int] = None,
        headers: Optional[Mapping[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Discovery Service base URL
            api_key: Optional bearer token sent with every request
            timeout: Per-attempt timeout (ms)
            retries: Retries after the first attempt
            retry_delay: Linear backoff unit (ms)
            headers: Extra default headers
            transport: Optional httpx transport (tests)
        """
        default_headers = dict(headers or {})
        if api_key:
            default_headers["Authorization"] = f"Bearer {api_key}"

        self.http = create_http_client(
            base_url=base_url,
            timeout=timeout,
            retries=retries,
            retry_delay=retry_delay,
            headers=default_headers,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "DiscoveryClient":
        """Build a client from FAREPLAY_* settings."""
        settings = settings or get_settings()
        return cls(
            base_url=settings.discovery_url,
            api_key=settings.api_key,
            timeout=settings.http_timeout,
            retries=settings.http_retries,
            retry_delay=settings.http_retry_delay,
            transport=transport,
        )

    async def register_casino(
        self,
        request: Union[RegistrationRequest, Mapping[str, Any]],
        private_key: Optional[str] = None,
    ) -> CasinoMetadata:
        """
        Register a new casino.

        When `private_key` is given and the request has no signature, the
        request is signed here (and `publicKey` filled in if missing).

        Args:
            request: Registration request or its fields
            private_key: Base58 secret key of the casino

        Returns:
            The registered casino metadata

        Raises:
            PayloadValidationError: If the request does not match its schema
            KeyDecodeError: If the private key is malformed
        """
        if isinstance(request, RegistrationRequest):
            body = request.to_wire()
        else:
            body = to_json_compatible(dict(request))

        if private_key and not body.get(SIGNATURE_FIELD):
            body.setdefault("publicKey", get_keypair_from_private_key(private_key).public_key)
            body = create_signed_payload(body, private_key)

        check_payload(body, RegistrationRequest)

        logger.info(f"Registering casino {body.get('name')!r} ({body.get('publicKey')})")
        envelope = await self.http.post(
            REGISTER_PATH,
            body=body,
            contract=ApiResponse[CasinoMetadata],
        )
        return unwrap_envelope(envelope, "registration")

    async def update_casino(
        self,
        casino_id: str,
        changes: Mapping[str, Any],
        private_key: str,
    ) -> CasinoMetadata:
        """
        Update an existing casino with a signed request.

        Args:
            casino_id: Casino ID (sent in the body as casinoId)
            changes: Fields to change (name, url, status, metadata)
            private_key: Base58 secret key of the casino

        Returns:
            The updated casino metadata
        """
        sender = SignedRequestSender(self.http, private_key, identity={"casinoId": casino_id})
        return await sender.send(
            "PATCH",
            CASINOS_PATH,
            changes,
            data_contract=CasinoMetadata,
            payload_contract=CasinoUpdateRequest,
        )

    def _filters(self, filters: Union[CasinoFilters, Mapping[str, Any], None]) -> Optional[CasinoFilters]:
        if filters is None or isinstance(filters, CasinoFilters):
            return filters
        try:
            return CasinoFilters.model_validate(dict(filters))
        except ValidationError as e:
            raise PayloadValidationError("Invalid casino filters", describe_issues(e)) from e

    async def list_casinos(
        self,
        filters: Union[CasinoFilters, Mapping[str, Any], None] = None,
    ) -> CasinoList:
        """
        Get one page of casinos with its paging information.

        Raises:
            PayloadValidationError: If the filters are invalid
            EmptyDataError: If the response carries no data
        """
        validated = self._filters(filters)
        envelope = await self.http.get(
            CASINOS_PATH,
            params=validated.to_query_params() if validated else None,
            contract=ApiResponse[CasinoList],
        )
        return unwrap_envelope(envelope, "casino listing")

    async def get_casinos(
        self,
        filters: Union[CasinoFilters, Mapping[str, Any], None] = None,
    ) -> List[CasinoMetadata]:
        """
        Get casinos matching optional filters.

        Returns:
            List of casino metadata (empty when the service returns no data)
        """
        try:
            page = await self.list_casinos(filters)
        except EmptyDataError:
            return []
        return page.casinos

    async def get_casino(self, casino_id: str) -> CasinoMetadata:
        envelope = await self.http.get(
            f"{CASINOS_PATH}/{_segment(casino_id)}",
            contract=ApiResponse[CasinoMetadata],
        )
        return unwrap_envelope(envelope, f"casino {casino_id}")

    async def get_casino_by_public_key(self, public_key: str) -> CasinoMetadata:
        envelope = await self.http.get(
            f"{CASINOS_PATH}/by-key/{_segment(public_key)}",
            contract=ApiResponse[CasinoMetadata],
        )
        return unwrap_envelope(envelope, f"casino with public key {public_key}")

    async def delete_casino(self, casino_id: str) -> None:
        await self.http.delete(f"{CASINOS_PATH}/{_segment(casino_id)}")
        logger.info(f"Deleted casino {casino_id}")

    async def casino_exists(self, casino_id: str) -> bool:
        """
        Check if a casino exists.

        Returns:
            True if the casino exists, False if the service answers 404

        Raises:
            Any other error from get_casino
        """
        try:
            await self.get_casino(casino_id)
        except HttpStatusError as e:
            if e.status_code == 404:
                return False
            raise
        return True

    async def get_stats(self) -> CasinoStats:
        """Get statistics about casinos in the network."""
        envelope = await self.http.get(STATS_PATH, contract=ApiResponse[CasinoStats])
        return unwrap_envelope(envelope, "stats")

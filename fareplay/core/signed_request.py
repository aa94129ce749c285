"""
Signed Requests

Builds, signs and submits mutating requests, then unwraps the standard
response envelope.

Flow for SignedRequestSender.send():
    1. Merge caller fields with identity fields (identity wins)
    2. Add `timestamp` (ms since epoch) if absent
    3. Canonicalize and sign; attach `signature`
    4. Optionally check the signed body against a request schema
    5. Submit with contract ApiResponse[data_contract]
    6. Return the envelope's `data`

Example:
    sender = SignedRequestSender(http, private_key, identity={"casinoId": casino_id})
    result = await sender.send("POST", "/v1/casinos/heartbeat", {"status": "online"},
                               data_contract=HeartbeatResponse)
"""

import logging
import time
from typing import Any, Dict, Mapping, Optional

from pydantic import TypeAdapter, ValidationError

from fareplay.core.errors import ApiError, EmptyDataError, PayloadValidationError
from fareplay.core.http.client import HttpClient
from fareplay.core.http.contracts import Contract, contract_name, describe_issues
from fareplay.core.signing import (
    create_signed_payload,
    get_keypair_from_private_key,
    to_json_compatible,
)
from fareplay.schemas.protocol import ApiResponse

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _field(envelope: Any, name: str) -> Any:
    if isinstance(envelope, Mapping):
        return envelope.get(name)
    return getattr(envelope, name, None)


def unwrap_envelope(envelope: Any, what: str = "request") -> Any:
    """
    Extract `data` from a response envelope.

    Accepts a validated ApiResponse or a plain dict.

    Args:
        envelope: Response envelope
        what: Short description of the operation, for error messages

    Returns:
        The envelope's data

    Raises:
        ApiError: If the envelope reports success=false with an error
        EmptyDataError: If the envelope carries no data
    """
    error = _field(envelope, "error")
    if _field(envelope, "success") is False and error is not None:
        raise ApiError(
            str(_field(error, "message") or f"{what} failed"),
            code=_field(error, "code"),
            details=_field(error, "details"),
        )

    data = _field(envelope, "data")
    if data is None:
        raise EmptyDataError(f"No data returned from {what}")
    return data


def check_payload(payload: Mapping[str, Any], contract: Contract) -> Any:
    """
    Check an outgoing payload against its request schema.

    Returns:
        The validated payload (a model instance for model contracts)

    Raises:
        PayloadValidationError: If the payload does not match
    """
    try:
        return TypeAdapter(contract).validate_python(dict(payload))
    except ValidationError as e:
        issues = describe_issues(e)
        raise PayloadValidationError(
            f"Invalid {contract_name(contract)} payload: {issues[0]['msg'] if issues else e}",
            issues,
        ) from e


class SignedRequestSender:
    """
    Signs request bodies with a fixed key and identity and submits them.
    """

    def __init__(
        self,
        http: HttpClient,
        private_key: str,
        identity: Optional[Mapping[str, Any]] = None,
    ):
        """
        Initialize the sender.

        Args:
            http: Transport used to submit requests
            private_key: Base58 64-byte Ed25519 secret key
            identity: Fields merged into every payload (e.g. {"casinoId": ...})

        Raises:
            KeyDecodeError: If the private key is malformed
        """
        self._http = http
        self._private_key = private_key
        self._identity = dict(identity or {})
        self.public_key = get_keypair_from_private_key(private_key).public_key

    def sign(
        self,
        fields: Mapping[str, Any],
        identity: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Merge identity fields and a timestamp into `fields` and sign the result.

        Top-level None values are dropped. Identity fields override caller
        fields of the same name.

        Args:
            fields: Payload fields
            identity: Per-call identity, merged over the sender's identity

        Returns:
            Signed payload in plain JSON types

        Raises:
            CanonicalizationError: If the payload has no canonical form
        """
        merged = {k: v for k, v in fields.items() if v is not None}
        merged.update(self._identity)
        if identity:
            merged.update(identity)
        if merged.get("timestamp") is None:
            merged["timestamp"] = _now_ms()

        return create_signed_payload(to_json_compatible(merged), self._private_key)

    async def send(
        self,
        method: str,
        path: str,
        fields: Mapping[str, Any],
        data_contract: Optional[Contract] = None,
        identity: Optional[Mapping[str, Any]] = None,
        payload_contract: Optional[Contract] = None,
    ) -> Any:
        """
        Sign `fields`, submit them and return the response data.

        Args:
            method: HTTP method
            path: Request path
            fields: Payload fields
            data_contract: Expected shape of the envelope's data
            identity: Per-call identity fields
            payload_contract: Request schema the signed body must satisfy

        Returns:
            The validated `data` of the response envelope

        Raises:
            PayloadValidationError: If the signed body fails payload_contract
            TransportError, HttpStatusError, UnexpectedContentTypeError,
            ResponseValidationError: From the transport
            ApiError: If the envelope reports a failure
            EmptyDataError: If the envelope carries no data
        """
        signed = self.sign(fields, identity)
        if payload_contract is not None:
            check_payload(signed, payload_contract)

        logger.debug(f"Sending signed {method} {path} as {self.public_key}")
        envelope = await self._http.request(
            method,
            path,
            body=signed,
            contract=ApiResponse[data_contract if data_contract is not None else Any],
        )
        return unwrap_envelope(envelope, what=f"{method} {path}")

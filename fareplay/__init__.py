"""
fareplay

Python SDK for the Fare Protocol: register casinos with the Discovery
Service and report their health with Ed25519-signed heartbeats.
"""

from fareplay.clients import CasinoClient, DiscoveryClient, HeartbeatScheduler
from fareplay.core.constants import SDK_VERSION
from fareplay.core.errors import (
    ApiError,
    CanonicalizationError,
    EmptyDataError,
    FareSdkError,
    HttpStatusError,
    KeyDecodeError,
    PayloadValidationError,
    ResponseValidationError,
    TransportError,
    UnexpectedContentTypeError,
)
from fareplay.core.http import HttpClient, HttpClientConfig, create_http_client
from fareplay.core.signed_request import SignedRequestSender, unwrap_envelope
from fareplay.core.signing import (
    KeyPair,
    canonicalize,
    create_signed_payload,
    generate_keypair,
    get_keypair_from_private_key,
    is_valid_public_key,
    is_valid_signature,
    sign_message,
    verify_signature,
    verify_signed_payload,
)
from fareplay.schemas import (
    FARE_PROTOCOL_SPEC,
    FARE_PROTOCOL_VERSION,
    ApiResponse,
    CasinoDetails,
    CasinoFilters,
    CasinoMetadata,
    CasinoStatus,
    ErrorCodes,
    GameType,
    HeartbeatMetrics,
    HeartbeatResponse,
    RegistrationRequest,
)

__version__ = SDK_VERSION

__all__ = [
    "__version__",
    "SDK_VERSION",
    # Clients
    "CasinoClient",
    "DiscoveryClient",
    "HeartbeatScheduler",
    # Transport
    "HttpClient",
    "HttpClientConfig",
    "create_http_client",
    "SignedRequestSender",
    "unwrap_envelope",
    # Signing
    "KeyPair",
    "canonicalize",
    "create_signed_payload",
    "generate_keypair",
    "get_keypair_from_private_key",
    "is_valid_public_key",
    "is_valid_signature",
    "sign_message",
    "verify_signature",
    "verify_signed_payload",
    # Errors
    "FareSdkError",
    "KeyDecodeError",
    "CanonicalizationError",
    "PayloadValidationError",
    "TransportError",
    "ApiError",
    "HttpStatusError",
    "UnexpectedContentTypeError",
    "ResponseValidationError",
    "EmptyDataError",
    # Schemas
    "FARE_PROTOCOL_SPEC",
    "FARE_PROTOCOL_VERSION",
    "ApiResponse",
    "CasinoDetails",
    "CasinoFilters",
    "CasinoMetadata",
    "CasinoStatus",
    "ErrorCodes",
    "GameType",
    "HeartbeatMetrics",
    "HeartbeatResponse",
    "RegistrationRequest",
]

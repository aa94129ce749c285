"""
Protocol schemas

The response envelope shared by every Discovery Service endpoint, and the
error codes the service reports in it.
"""
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from pydantic import PositiveInt

from fareplay.schemas.common import FareModel

FARE_PROTOCOL_VERSION = "1.0.0"
FARE_PROTOCOL_SPEC = "fare_protocol_v1.0.0"

T = TypeVar("T")


class ErrorCodes(str, Enum):
    """Error codes used across the protocol."""
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    CASINO_NOT_FOUND = "CASINO_NOT_FOUND"
    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    RATE_LIMITED = "RATE_LIMITED"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    CASINO_ALREADY_EXISTS = "CASINO_ALREADY_EXISTS"
    VALIDATION_ERROR = "VALIDATION_ERROR"


class ApiErrorBody(FareModel):
    code: str
    message: str
    details: Optional[Any] = None


class ApiResponse(FareModel, Generic[T]):
    """
    Standard response envelope.

    Parametrize with the expected data shape, e.g. ApiResponse[CasinoMetadata].
    `data` is optional in the envelope itself; callers that need it use
    unwrap_envelope (see fareplay.core.signed_request).
    """
    success: bool
    data: Optional[T] = None
    error: Optional[ApiErrorBody] = None
    timestamp: PositiveInt

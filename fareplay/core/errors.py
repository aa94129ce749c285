"""
SDK Error Types

Every failure that leaves the SDK is an instance of FareSdkError, so callers
can catch the whole family or branch on a specific kind:

    KeyDecodeError              malformed key material (local, never retried)
    CanonicalizationError       payload cannot be rendered canonically
    PayloadValidationError      outgoing payload failed its schema
    TransportError              network failure / timeout after all retries
    ApiError                    server reported a failure in its envelope
      HttpStatusError           ... with a non-2xx status code
    UnexpectedContentTypeError  2xx response that is not JSON
    ResponseValidationError     JSON response that does not match its contract
    EmptyDataError              success envelope without `data`

Signature verification failures are NOT exceptions: verify helpers return False.
"""

from typing import Any, Dict, List, Optional


class FareSdkError(Exception):
    """Base class for all SDK errors."""


class KeyDecodeError(FareSdkError, ValueError):
    """Raised when key material does not decode to a valid Ed25519 key."""


class CanonicalizationError(FareSdkError, ValueError):
    """Raised when a payload contains values with no canonical JSON form."""


class PayloadValidationError(FareSdkError):
    """
    Raised when an outgoing payload fails its schema before being sent.

    Attributes:
        issues: List of {loc, msg, type} dicts describing each mismatch
    """

    def __init__(self, message: str, issues: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.issues = issues or []


class TransportError(FareSdkError):
    """
    Raised when a request could not complete: network failures and timeouts
    after exhausting all retries, or a protocol-level httpx error.

    Carries no server payload: the exchange never completed.

    Attributes:
        attempts: Number of attempts made
        cause: The exception raised by the last attempt
    """

    def __init__(self, message: str, attempts: int = 0, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.attempts = attempts
        self.cause = cause


class ApiError(FareSdkError):
    """
    Raised when the server reports a failure.

    Attributes:
        message: Server-supplied message (or a generic fallback)
        code: Server error code (e.g. "INVALID_SIGNATURE"), if any
        details: Server-supplied details, if any
    """

    def __init__(self, message: str, code: Optional[str] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class HttpStatusError(ApiError):
    """
    Raised when the server responds with a non-2xx status code.

    Attributes:
        status_code: HTTP status code
        body: Raw response text when the body was not JSON
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        code: Optional[str] = None,
        details: Any = None,
        body: Optional[str] = None,
    ):
        super().__init__(message, code=code, details=details)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        return f"HTTP {self.status_code} {super().__str__()}"


class UnexpectedContentTypeError(FareSdkError):
    """Raised when a successful response does not carry a JSON content type."""

    def __init__(self, status_code: int, content_type: Optional[str]):
        super().__init__(
            f"Expected JSON response, got content type {content_type or 'none'!r} "
            f"(HTTP {status_code})"
        )
        self.status_code = status_code
        self.content_type = content_type


class ResponseValidationError(FareSdkError):
    """
    Raised when a JSON response does not match the expected contract.

    Attributes:
        issues: List of {loc, msg, type} dicts describing each mismatch
        contract: Name of the contract that was checked
    """

    def __init__(self, contract: str, issues: List[Dict[str, Any]]):
        summary = "; ".join(
            f"{'.'.join(str(part) for part in issue.get('loc', ())) or '<root>'}: {issue.get('msg')}"
            for issue in issues[:5]
        )
        super().__init__(f"Response validation failed for {contract}: {summary}")
        self.contract = contract
        self.issues = issues


class EmptyDataError(FareSdkError):
    """Raised when a success envelope carries no `data`."""

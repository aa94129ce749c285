"""
HTTP transport for the Discovery Service.
"""

from fareplay.core.http.client import (
    HttpClient,
    HttpClientConfig,
    create_http_client,
)
from fareplay.core.http.contracts import (
    Contract,
    validate_response,
)

__all__ = [
    "HttpClient",
    "HttpClientConfig",
    "create_http_client",
    "Contract",
    "validate_response",
]

"""
Signature Verification

Verifies Ed25519 signatures over messages and signed payloads.

Verification is total: every helper here returns False for any malformed
input (bad base58, wrong key or signature length, non-text values,
uncanonicalizable payloads) as well as for a cryptographic mismatch.
Callers branch on trust decisions and treat "invalid" and "unparseable" alike.
"""

import logging
from typing import Any, Mapping, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from fareplay.core.constants import (
    PUBLIC_KEY_LENGTH,
    SIGNATURE_FIELD,
    SIGNATURE_LENGTH,
)
from fareplay.core.errors import CanonicalizationError
from fareplay.core.signing.canonical import canonicalize
from fareplay.core.signing.keys import decode_base58_exact

logger = logging.getLogger(__name__)


def verify_signature(
    message: Union[str, bytes],
    signature: str,
    public_key: str,
) -> bool:
    """
    Verify an Ed25519 signature over a message.

    Args:
        message: Text (verified as UTF-8) or raw bytes
        signature: Base58-encoded 64-byte signature
        public_key: Base58-encoded 32-byte public key

    Returns:
        True if the signature is valid, False otherwise (never raises)
    """
    public_bytes = decode_base58_exact(public_key, PUBLIC_KEY_LENGTH)
    if public_bytes is None:
        return False

    signature_bytes = decode_base58_exact(signature, SIGNATURE_LENGTH)
    if signature_bytes is None:
        return False

    if isinstance(message, str):
        message_bytes = message.encode("utf-8")
    elif isinstance(message, (bytes, bytearray, memoryview)):
        message_bytes = bytes(message)
    else:
        return False

    try:
        key = Ed25519PublicKey.from_public_bytes(public_bytes)
        key.verify(signature_bytes, message_bytes)
    except InvalidSignature:
        return False
    except ValueError as e:
        logger.debug(f"Rejected malformed public key: {e}")
        return False

    return True


def verify_signed_payload(payload: Mapping[str, Any], public_key: str) -> bool:
    """
    Verify a payload produced by create_signed_payload.

    The "signature" field is stripped, the remaining fields are canonicalized,
    and the signature is checked against them. Any added, removed, or changed
    field (at any depth) makes verification fail; key order does not.

    Args:
        payload: Signed payload including "signature"
        public_key: Base58-encoded 32-byte public key

    Returns:
        True if the signature is valid, False otherwise (never raises)
    """
    if not isinstance(payload, Mapping):
        return False

    signature = payload.get(SIGNATURE_FIELD)
    if not isinstance(signature, str):
        return False

    try:
        message = canonicalize(payload)
    except CanonicalizationError as e:
        logger.debug(f"Rejected uncanonicalizable payload: {e}")
        return False

    return verify_signature(message, signature, public_key)

"""
Payload Signing

Signs messages and payloads with a base58 Ed25519 secret key. Ed25519
signatures are deterministic: the same key and message always produce the
same signature.
"""

from typing import Any, Dict, Mapping, Union

from fareplay.core.constants import SIGNATURE_FIELD
from fareplay.core.signing.canonical import canonicalize
from fareplay.core.signing.keys import decode_secret_key, encode_base58


def _message_bytes(message: Union[str, bytes]) -> bytes:
    if isinstance(message, str):
        return message.encode("utf-8")
    return bytes(message)


def sign_message(message: Union[str, bytes], private_key: str) -> str:
    """
    Sign a message with an Ed25519 secret key.

    Args:
        message: Text (signed as UTF-8) or raw bytes
        private_key: Base58 64-byte secret key

    Returns:
        Base58-encoded 64-byte signature

    Raises:
        KeyDecodeError: If the private key is malformed
    """
    key, _ = decode_secret_key(private_key)
    signature = key.sign(_message_bytes(message))
    return encode_base58(signature)


def create_signed_payload(payload: Mapping[str, Any], private_key: str) -> Dict[str, Any]:
    """
    Sign a payload and return a copy with the signature attached.

    The canonical form of every field except "signature" is signed, so any
    existing signature on the input is replaced. The input is not modified.

    Args:
        payload: Mapping of string keys to JSON-compatible values
        private_key: Base58 64-byte secret key

    Returns:
        New dict with the payload fields plus "signature"

    Raises:
        KeyDecodeError: If the private key is malformed
        CanonicalizationError: If the payload has no canonical form

    Example:
        >>> signed = create_signed_payload({"status": "online", "timestamp": 1000}, sk)
        >>> verify_signed_payload(signed, pk)
        True
    """
    message = canonicalize(payload)
    signature = sign_message(message, private_key)

    signed = {k: v for k, v in payload.items() if k != SIGNATURE_FIELD}
    signed[SIGNATURE_FIELD] = signature
    return signed

"""
Ed25519 Payload Signing

Canonicalization, signing and verification of request payloads.
Keys and signatures are exchanged as base58 text.
"""

from fareplay.core.signing.canonical import (
    canonicalize,
    canonical_string,
    to_json_compatible,
)
from fareplay.core.signing.keys import (
    KeyPair,
    generate_keypair,
    get_keypair_from_private_key,
    is_valid_public_key,
    is_valid_signature,
    encode_base58,
    decode_base58,
)
from fareplay.core.signing.sign import (
    sign_message,
    create_signed_payload,
)
from fareplay.core.signing.verify import (
    verify_signature,
    verify_signed_payload,
)

__all__ = [
    # Canonical form
    "canonicalize",
    "canonical_string",
    "to_json_compatible",
    # Keys
    "KeyPair",
    "generate_keypair",
    "get_keypair_from_private_key",
    "is_valid_public_key",
    "is_valid_signature",
    "encode_base58",
    "decode_base58",
    # Signing
    "sign_message",
    "create_signed_payload",
    # Verification
    "verify_signature",
    "verify_signed_payload",
]

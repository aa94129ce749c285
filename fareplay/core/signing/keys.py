"""
Ed25519 Key Management

Key generation, derivation, and base58 serialization for Ed25519 keypairs.
Uses the cryptography library for all cryptographic operations.

Key layout (same as NaCl / Solana keypairs):
    - public key: 32 raw bytes
    - secret key: 64 raw bytes = 32-byte seed || 32-byte public key

Both are exchanged as base58 text (Bitcoin alphabet).
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import base58
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from fareplay.core.constants import (
    PUBLIC_KEY_LENGTH,
    SECRET_KEY_LENGTH,
    SIGNATURE_LENGTH,
)
from fareplay.core.errors import KeyDecodeError

SEED_LENGTH = 32


@dataclass(frozen=True)
class KeyPair:
    """
    An Ed25519 keypair in base58 text form.

    Attributes:
        public_key: Base58 of the 32-byte public key
        private_key: Base58 of the 64-byte secret key (seed || public key)
    """
    public_key: str
    private_key: str

    def __repr__(self) -> str:
        # Never render the secret half
        return f"KeyPair(public_key={self.public_key!r}, private_key='***')"


def encode_base58(data: bytes) -> str:
    """Encode raw bytes as base58 text."""
    return base58.b58encode(bytes(data)).decode("ascii")


def decode_base58(text: str) -> bytes:
    """
    Decode base58 text to raw bytes.

    Raises:
        ValueError: If the text is not valid base58
    """
    if not isinstance(text, str):
        raise ValueError(f"Expected base58 text, got {type(text).__name__}")
    return base58.b58decode(text.encode("ascii"))


def decode_base58_exact(text: str, expected: int) -> Optional[bytes]:
    """Decode base58 text, returning None unless it is exactly `expected` bytes."""
    try:
        raw = decode_base58(text)
    except (ValueError, UnicodeError):
        return None
    if len(raw) != expected:
        return None
    return raw


def _raw_public_bytes(public_key: Ed25519PublicKey) -> bytes:
    return public_key.public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )


def _raw_seed_bytes(private_key: Ed25519PrivateKey) -> bytes:
    return private_key.private_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PrivateFormat.Raw,
        encryption_algorithm=serialization.NoEncryption(),
    )


def decode_secret_key(private_key: str) -> Tuple[Ed25519PrivateKey, bytes]:
    """
    Decode a base58 64-byte secret key.

    Args:
        private_key: Base58 secret key (seed || public key)

    Returns:
        Tuple of (private key object, raw 32-byte public key)

    Raises:
        KeyDecodeError: If the text is not base58, is not 64 bytes, or its
            public half does not match the key derived from its seed
    """
    try:
        raw = decode_base58(private_key)
    except (ValueError, UnicodeError) as e:
        raise KeyDecodeError(f"Invalid private key encoding: {e}") from e

    if len(raw) != SECRET_KEY_LENGTH:
        raise KeyDecodeError(
            f"Invalid private key length: {len(raw)} bytes (expected {SECRET_KEY_LENGTH})"
        )

    seed, embedded_public = raw[:SEED_LENGTH], raw[SEED_LENGTH:]
    key = Ed25519PrivateKey.from_private_bytes(seed)
    derived_public = _raw_public_bytes(key.public_key())
    if derived_public != embedded_public:
        raise KeyDecodeError("Invalid private key: public half does not match seed")

    return key, derived_public


def decode_public_key(public_key: str) -> Ed25519PublicKey:
    """
    Decode a base58 32-byte public key.

    Raises:
        KeyDecodeError: If the text is not base58 or not exactly 32 bytes
    """
    raw = decode_base58_exact(public_key, PUBLIC_KEY_LENGTH)
    if raw is None:
        raise KeyDecodeError(f"Invalid public key: {public_key!r}")
    try:
        return Ed25519PublicKey.from_public_bytes(raw)
    except ValueError as e:
        raise KeyDecodeError(f"Invalid public key: {e}") from e


def generate_keypair() -> KeyPair:
    """
    Generate a new Ed25519 keypair from the OS CSPRNG.

    Returns:
        KeyPair with base58 public and secret keys

    Example:
        >>> keypair = generate_keypair()
        >>> is_valid_public_key(keypair.public_key)
        True
    """
    key = Ed25519PrivateKey.generate()
    public = _raw_public_bytes(key.public_key())
    secret = _raw_seed_bytes(key) + public
    return KeyPair(public_key=encode_base58(public), private_key=encode_base58(secret))


def get_keypair_from_private_key(private_key: str) -> KeyPair:
    """
    Rebuild the full keypair from a base58 secret key.

    Args:
        private_key: Base58 64-byte secret key

    Returns:
        KeyPair whose public key is the last 32 bytes of the secret key

    Raises:
        KeyDecodeError: If the secret key is malformed
    """
    key, public = decode_secret_key(private_key)
    secret = _raw_seed_bytes(key) + public
    return KeyPair(public_key=encode_base58(public), private_key=encode_base58(secret))


def is_valid_public_key(public_key: str) -> bool:
    """
    Check public key format: base58 text decoding to exactly 32 bytes.

    This is a format check only; it never raises.
    """
    return decode_base58_exact(public_key, PUBLIC_KEY_LENGTH) is not None


def is_valid_signature(signature: str) -> bool:
    """
    Check signature format: base58 text decoding to exactly 64 bytes.

    This is a format check only; it never raises.
    """
    return decode_base58_exact(signature, SIGNATURE_LENGTH) is not None

"""Ed25519 key derivation from seeds."""

from typing import Union

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from .encoding import from_hex
from .types import InvalidEncoding, InvalidSeedLength, KeyPair

SEED_LENGTH = 32
PUBLIC_KEY_LENGTH = 32


def generate_seed() -> bytes:
    """Generate a new random 32-byte Ed25519 seed."""
    private_key = Ed25519PrivateKey.generate()
    return private_key.private_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PrivateFormat.Raw,
        encryption_algorithm=serialization.NoEncryption(),
    )


def derive_key_pair(seed: Union[bytes, str]) -> KeyPair:
    """Derive the Ed25519 key pair for a seed.

    The seed is the RFC 8032 private key itself, so any Ed25519
    implementation derives the same public key from it.

    Args:
        seed: 32 raw bytes, or 64 hex characters

    Raises:
        InvalidEncoding: If a hex seed cannot be decoded
        InvalidSeedLength: If the seed is not 32 bytes
    """
    if isinstance(seed, str):
        seed = from_hex(seed, field="seed")
    if len(seed) != SEED_LENGTH:
        raise InvalidSeedLength(
            f"seed must be {SEED_LENGTH} bytes, got {len(seed)}", field="seed"
        )

    signing_key = Ed25519PrivateKey.from_private_bytes(bytes(seed))
    verifying_key = signing_key.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )
    return KeyPair(signing_key=signing_key, verifying_key=verifying_key)


def public_key(seed: Union[bytes, str]) -> bytes:
    """Raw public key for a seed."""
    return derive_key_pair(seed).verifying_key


def load_public_key(value: Union[bytes, str]) -> Ed25519PublicKey:
    """Load an Ed25519 public key from raw bytes or hex."""
    if isinstance(value, str):
        value = from_hex(value, field="public_key")
    if len(value) != PUBLIC_KEY_LENGTH:
        raise InvalidEncoding(
            f"public key must be {PUBLIC_KEY_LENGTH} bytes, got {len(value)}",
            field="public_key",
        )
    return Ed25519PublicKey.from_public_bytes(bytes(value))

"""ed25519 consensus keys.

A private key is the 32-byte seed. Consensus addresses are the first
20 bytes of SHA256 over the raw public key.
"""

import os

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519

from .hash import sha256, address_hash
from ..types.common import KeyGenerationError, SigningError

SEED_SIZE = 32
PUB_KEY_SIZE = 32

def generate_private_key() -> bytes:
    """Generates a random 32-byte ed25519 seed."""
    seed = os.urandom(SEED_SIZE)
    if len(seed) != SEED_SIZE:
        raise KeyGenerationError("short read from the system random source")
    return seed

def private_key_from_secret(secret: bytes) -> bytes:
    """Derives a seed from a secret. Only for tests and fixtures."""
    return sha256(secret)

def _private_key(seed: bytes) -> ed25519.Ed25519PrivateKey:
    try:
        return ed25519.Ed25519PrivateKey.from_private_bytes(seed)
    except ValueError as e:
        raise SigningError(f"malformed ed25519 private key: {e}") from e

def public_key_from_private(seed: bytes) -> bytes:
    """Returns the raw 32-byte public key."""
    return _private_key(seed).public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )

def address_from_pubkey(pub_bytes: bytes) -> bytes:
    """20-byte consensus address of an ed25519 public key."""
    if len(pub_bytes) != PUB_KEY_SIZE:
        raise ValueError(f"ed25519 public key must be {PUB_KEY_SIZE} bytes, got {len(pub_bytes)}")
    return address_hash(pub_bytes)

def sign(message: bytes, seed: bytes) -> bytes:
    return _private_key(seed).sign(message)

def verify(message: bytes, signature: bytes, pub_bytes: bytes) -> bool:
    try:
        ed25519.Ed25519PublicKey.from_public_bytes(pub_bytes).verify(signature, message)
        return True
    except (InvalidSignature, ValueError):
        return False

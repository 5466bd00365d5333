"""secp256k1 account keys.

Keys are handled as raw bytes: 32-byte private scalars and 33-byte
compressed public keys. Signatures are 64-byte ``r || s`` with a low ``s``.
"""

import hashlib
import os

from ecdsa import SigningKey, VerifyingKey, SECP256k1, BadSignatureError # type: ignore
from ecdsa.keys import MalformedPointError # type: ignore
from ecdsa.util import sigencode_string_canonize, sigdecode_string # type: ignore

from .hash import sha256
from ..types.common import KeyGenerationError, SigningError

CURVE_ORDER = SECP256k1.order

def generate_private_key() -> bytes:
    """Generates a random 32-byte private key in [1, n-1]."""
    for _ in range(16):
        priv = os.urandom(32)
        if 0 < int.from_bytes(priv, "big") < CURVE_ORDER:
            return priv
    raise KeyGenerationError("failed to draw a valid secp256k1 scalar")

def private_key_from_secret(secret: bytes) -> bytes:
    """Derives a private key from a secret. Only for tests and fixtures."""
    fe = int.from_bytes(sha256(secret), "big")
    fe = fe % (CURVE_ORDER - 1) + 1
    return fe.to_bytes(32, "big")

def _signing_key(priv_bytes: bytes) -> SigningKey:
    try:
        return SigningKey.from_string(priv_bytes, curve=SECP256k1)
    except (MalformedPointError, ValueError) as e:
        raise SigningError(f"malformed secp256k1 private key: {e}") from e

def public_key_from_private(priv_bytes: bytes) -> bytes:
    """Returns compressed 33-byte public key from private key."""
    vk = _signing_key(priv_bytes).get_verifying_key()
    return vk.to_string("compressed")

def sign(message: bytes, priv_bytes: bytes) -> bytes:
    """Signs sha256(message) with RFC6979 nonces. Returns 64-byte (r,s) signature."""
    sk = _signing_key(priv_bytes)
    return sk.sign_deterministic(message, hashfunc=hashlib.sha256, sigencode=sigencode_string_canonize)

def verify(message: bytes, signature: bytes, pub_bytes: bytes) -> bool:
    """Verifies ECDSA signature over sha256(message)."""
    try:
        vk = VerifyingKey.from_string(pub_bytes, curve=SECP256k1)
        return vk.verify(signature, message, hashfunc=hashlib.sha256, sigdecode=sigdecode_string)
    except (BadSignatureError, MalformedPointError, ValueError):
        return False

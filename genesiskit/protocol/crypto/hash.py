import hashlib

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes

ADDRESS_LENGTH = 20

def sha256(data: bytes) -> bytes:
    """Returns SHA256 hash of bytes."""
    return hashlib.sha256(data).digest()

def sha256_hex(data: bytes) -> str:
    """Returns SHA256 hash of bytes as hex string."""
    return sha256(data).hex()

def ripemd160(data: bytes) -> bytes:
    """Returns RIPEMD160 hash of bytes."""
    try:
        h = hashlib.new('ripemd160')
    except ValueError:
        # OpenSSL 3 builds without the legacy provider
        try:
            digest = hashes.Hash(hashes.RIPEMD160())
        except UnsupportedAlgorithm as e:
            raise RuntimeError("ripemd160 digest is unavailable; cannot derive account address") from e
        digest.update(data)
        return digest.finalize()
    h.update(data)
    return h.digest()

def address_hash(data: bytes) -> bytes:
    """Truncated SHA256, used for consensus and module addresses."""
    return sha256(data)[:ADDRESS_LENGTH]

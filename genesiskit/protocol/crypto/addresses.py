import bech32 # type: ignore
from .hash import sha256, ripemd160, address_hash
from typing import Tuple, Optional

def bech32ify(prefix: str, raw: bytes) -> str:
    """Encodes raw address bytes as Bech32 with the given prefix."""
    five_bit_r = bech32.convertbits(raw, 8, 5)
    if five_bit_r is None:
        raise ValueError("Error converting to bech32 words")

    return bech32.bech32_encode(prefix, five_bit_r)

def address_bytes_from_pubkey(pub_bytes: bytes) -> bytes:
    """RIPEMD160(SHA256(pub)), the 20-byte secp256k1 account address."""
    return ripemd160(sha256(pub_bytes))

def address_from_pubkey(pub_bytes: bytes, prefix: str = "cosmos") -> str:
    """Creates Bech32 account address from a compressed secp256k1 public key."""
    return bech32ify(prefix, address_bytes_from_pubkey(pub_bytes))

def decode_address(addr: str) -> Tuple[str, bytes]:
    """Decodes Bech32 address to (prefix, raw_bytes)."""
    hrp, data = bech32.bech32_decode(addr)
    if hrp is None or data is None:
        raise ValueError(f"Invalid bech32 address: {addr!r}")

    decoded = bech32.convertbits(data, 5, 8, False)
    if decoded is None:
        raise ValueError("Error converting from bech32 words")

    return hrp, bytes(decoded)

def is_valid_address(addr: str, expected_prefix: Optional[str] = None) -> bool:
    try:
        hrp, raw = decode_address(addr)
        if expected_prefix and hrp != expected_prefix:
            return False
        return len(raw) > 0
    except ValueError:
        return False

def module_address(name: str) -> bytes:
    """Address of a module-owned account, e.g. the bonded tokens pool."""
    return address_hash(name.encode("utf-8"))

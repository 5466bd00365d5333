import base64

import pytest

from genesiskit.genesis.keys import ValidatorPrivKey, ValidatorPrivKeys
from genesiskit.protocol.crypto import ed25519, keys as secp256k1
from genesiskit.protocol.crypto.addresses import (
    address_bytes_from_pubkey, address_from_pubkey, decode_address, is_valid_address,
)
from genesiskit.protocol.types.common import PreconditionError

from conftest import (
    DEL_ACC_ADDR_0, DEL_ADDR_0, DEL_PUB_KEY_0, DEL_SECRET_0, VAL_ADDR_0, VAL_PUB_KEY_0, VAL_SECRET_0,
)


def test_consensus_key_from_secret():
    seed = ed25519.private_key_from_secret(VAL_SECRET_0)
    pub = ed25519.public_key_from_private(seed)

    assert ed25519.address_from_pubkey(pub).hex().upper() == VAL_ADDR_0
    assert base64.b64encode(pub).decode() == VAL_PUB_KEY_0


def test_account_key_from_secret():
    priv = secp256k1.private_key_from_secret(DEL_SECRET_0)
    pub = secp256k1.public_key_from_private(priv)

    assert len(pub) == 33
    assert base64.b64encode(pub).decode() == DEL_PUB_KEY_0
    assert address_bytes_from_pubkey(pub).hex().upper() == DEL_ADDR_0
    assert address_from_pubkey(pub) == DEL_ACC_ADDR_0


def test_decode_address_round_trip():
    hrp, raw = decode_address(DEL_ACC_ADDR_0)
    assert hrp == "cosmos"
    assert raw.hex().upper() == DEL_ADDR_0

    assert is_valid_address(DEL_ACC_ADDR_0, "cosmos")
    assert not is_valid_address(DEL_ACC_ADDR_0, "cosmosvaloper")
    assert not is_valid_address("cosmos1notanaddress")


def test_secp256k1_sign_verify():
    priv = secp256k1.private_key_from_secret(DEL_SECRET_0)
    pub = secp256k1.public_key_from_private(priv)

    sig = secp256k1.sign(b"hello", priv)
    assert len(sig) == 64
    # Deterministic signatures
    assert secp256k1.sign(b"hello", priv) == sig
    assert secp256k1.verify(b"hello", sig, pub)
    assert not secp256k1.verify(b"hello!", sig, pub)


def test_ed25519_sign_verify():
    seed = ed25519.private_key_from_secret(VAL_SECRET_0)
    pub = ed25519.public_key_from_private(seed)

    sig = ed25519.sign(b"block", seed)
    assert ed25519.verify(b"block", sig, pub)
    assert not ed25519.verify(b"other", sig, pub)


def test_generate_validator_keys():
    keys = ValidatorPrivKeys.generate(3)
    assert len(keys) == 3

    val_pubs = {pk.val_pub_key for pk in keys}
    del_pubs = {pk.del_pub_key for pk in keys}
    assert len(val_pubs) == 3
    assert len(del_pubs) == 3
    for pk in keys:
        assert len(pk.val) == 32
        assert len(pk.delegator) == 32


def test_generate_rejects_empty_set():
    with pytest.raises(PreconditionError, match="at least one validator"):
        ValidatorPrivKeys.generate(0)


def test_private_keys_not_in_repr():
    pk = ValidatorPrivKey.from_secrets(VAL_SECRET_0, DEL_SECRET_0)
    assert pk.delegator.hex() not in repr(pk)
    assert pk.val.hex() not in repr(pk)

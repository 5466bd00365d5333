import base64

import pytest

from genesiskit.genesis.signer import new_msg_create_validator, sign_genesis_tx, verify_genesis_tx
from genesiskit.protocol.config.params import CURRENT_NETWORK
from genesiskit.protocol.crypto import keys as secp256k1
from genesiskit.protocol.crypto.addresses import decode_address
from genesiskit.protocol.types.coins import Coin, new_coin
from genesiskit.protocol.types.common import PreconditionError, SignMode, ValidationError
from genesiskit.protocol.types.tx import SignerData, Tx, get_sign_bytes

from conftest import DEL_ACC_ADDR_0, DEL_ADDR_0, DEL_PUB_KEY_0, VAL_ADDR_0, VAL_PUB_KEY_0

CHAIN_ID = "signer-test-chain"


@pytest.fixture
def validator(val_pks):
    return val_pks.comet_genesis_validators()[0].v


@pytest.fixture
def amount():
    return new_coin(CURRENT_NETWORK.bond_denom, CURRENT_NETWORK.power_reduction)


def test_gentx_keys_are_not_mixed(val_pks, validator, amount):
    tx = sign_genesis_tx(val_pks[0].delegator, validator, amount, CHAIN_ID)

    msg = tx.body.messages[0]
    assert msg.pubkey.key == VAL_PUB_KEY_0
    assert tx.auth_info.signer_infos[0].public_key.key == DEL_PUB_KEY_0
    assert msg.pubkey.key != tx.auth_info.signer_infos[0].public_key.key

    # Delegator comes from the secp256k1 key, operator from the consensus address
    assert msg.delegator_address == DEL_ACC_ADDR_0
    assert decode_address(msg.delegator_address)[1].hex().upper() == DEL_ADDR_0
    assert decode_address(msg.validator_address)[1].hex().upper() == VAL_ADDR_0


def test_gentx_policy_constants(val_pks, validator, amount):
    tx = sign_genesis_tx(val_pks[0].delegator, validator, amount, CHAIN_ID)
    msg = tx.body.messages[0]

    assert msg.description.moniker == CURRENT_NETWORK.gentx_moniker
    assert msg.commission.rate == CURRENT_NETWORK.commission_rate
    assert msg.commission.max_rate == CURRENT_NETWORK.commission_max_rate
    assert msg.commission.max_change_rate == CURRENT_NETWORK.commission_max_change_rate
    assert msg.min_self_delegation == 1
    assert msg.value == amount


def test_gentx_signature_verifies(val_pks, validator, amount):
    tx = sign_genesis_tx(val_pks[0].delegator, validator, amount, CHAIN_ID)

    assert len(tx.signatures) == 1
    assert len(base64.b64decode(tx.signatures[0])) == 64
    assert tx.auth_info.signer_infos[0].mode_info.single.mode == SignMode.DIRECT
    assert verify_genesis_tx(tx, CHAIN_ID)


def test_signature_bound_to_chain_id(val_pks, validator, amount):
    tx = sign_genesis_tx(val_pks[0].delegator, validator, amount, CHAIN_ID)
    assert not verify_genesis_tx(tx, "another-chain")


def test_tampered_gentx_fails_verification(val_pks, validator, amount):
    tx = sign_genesis_tx(val_pks[0].delegator, validator, amount, CHAIN_ID)

    msg = tx.body.messages[0].model_copy(update={"value": Coin(denom="stake", amount=5)})
    body = tx.body.model_copy(update={"messages": [msg]})
    tampered = tx.model_copy(update={"body": body})
    assert not verify_genesis_tx(tampered, CHAIN_ID)


def test_signing_is_deterministic(val_pks, validator, amount):
    a = sign_genesis_tx(val_pks[0].delegator, validator, amount, CHAIN_ID)
    b = sign_genesis_tx(val_pks[0].delegator, validator, amount, CHAIN_ID)
    assert a == b


def test_sign_requires_chain_id(val_pks, validator, amount):
    with pytest.raises(PreconditionError, match="chain id"):
        sign_genesis_tx(val_pks[0].delegator, validator, amount, "")


def test_zero_amount_rejected(val_pks, validator):
    with pytest.raises(ValidationError, match="invalid delegation amount"):
        sign_genesis_tx(val_pks[0].delegator, validator, Coin(denom="stake", amount=0), CHAIN_ID)


def test_msg_without_delegator_fails_validation(validator, amount):
    msg = new_msg_create_validator(validator, amount)
    with pytest.raises(ValidationError, match="empty delegator"):
        msg.validate_basic(CURRENT_NETWORK.bech32_prefix_acc, CURRENT_NETWORK.bech32_prefix_val)


def test_sign_bytes_require_account_outside_genesis():
    pub = secp256k1.public_key_from_private(secp256k1.private_key_from_secret(b"x"))
    data = SignerData(chain_id=CHAIN_ID, pub_key=pub, address="")

    with pytest.raises(ValidationError, match="account number"):
        get_sign_bytes(SignMode.DIRECT, data, Tx())

    # Bound when given
    data_with_acc = SignerData(chain_id=CHAIN_ID, pub_key=pub, address="", account_number=3, sequence=1)
    assert get_sign_bytes(SignMode.DIRECT, data_with_acc, Tx()) != get_sign_bytes(
        SignMode.DIRECT, data, Tx(), allow_missing_account=True
    )


def test_gentx_without_messages_fails_verification(val_pks, validator, amount):
    tx = sign_genesis_tx(val_pks[0].delegator, validator, amount, CHAIN_ID)
    empty = tx.model_copy(update={"body": tx.body.model_copy(update={"messages": []})})

    assert not verify_genesis_tx(empty, CHAIN_ID)

# MIT License
# Copyright (c) 2025 Hashborn

from decimal import Decimal

import pytest

from genesiskit.genesis.validators import consensus_address_bytes
from genesiskit.protocol.config.params import CURRENT_NETWORK
from genesiskit.protocol.crypto.addresses import decode_address
from genesiskit.protocol.types.common import BondStatus, PreconditionError
from genesiskit.protocol.types.pubkey import AminoPubKey

from conftest import DEL_ACC_ADDR_0, VAL_ADDR_0, VAL_PUB_KEY_0


def test_comet_genesis_validators(val_pks):
    cmt_vals = val_pks.comet_genesis_validators()
    assert len(cmt_vals) == 1

    v = cmt_vals[0].v
    assert v.address == VAL_ADDR_0
    assert v.pub_key.value == VAL_PUB_KEY_0
    assert v.power == CURRENT_NETWORK.genesis_voting_power
    assert v.name == "val-0"


def test_staking_validators_share_consensus_address(val_pks):
    cmt_vals = val_pks.comet_genesis_validators()
    staking_vals, supply = cmt_vals.staking_validators()

    sv = staking_vals[0]
    hrp, operator_bytes = decode_address(sv.v.operator_address)
    assert hrp == CURRENT_NETWORK.bech32_prefix_val
    assert operator_bytes.hex().upper() == VAL_ADDR_0
    assert sv.v.consensus_pubkey.key == VAL_PUB_KEY_0

    assert sv.v.status == BondStatus.BONDED
    assert sv.v.tokens == CURRENT_NETWORK.power_reduction
    assert sv.v.delegator_shares == Decimal(1)

    assert len(supply) == 1
    assert supply[0].denom == CURRENT_NETWORK.bond_denom
    assert supply[0].amount == CURRENT_NETWORK.power_reduction


def test_supply_sums_validators():
    from genesiskit.genesis.keys import ValidatorPrivKeys

    cmt_vals = ValidatorPrivKeys.generate(4).comet_genesis_validators()
    staking_vals, supply = cmt_vals.staking_validators()

    assert len(staking_vals) == 4
    assert supply[0].amount == 4 * CURRENT_NETWORK.power_reduction
    assert staking_vals.bonded_pool_balance().coins == supply


def test_base_accounts_and_balances(staking_vals):
    accounts = staking_vals.base_accounts()
    assert [a.address for a in accounts] == [DEL_ACC_ADDR_0]
    assert accounts[0].account_number == 0
    assert accounts[0].sequence == 0

    balances = staking_vals.balances()
    assert balances[0].address == DEL_ACC_ADDR_0
    assert balances[0].coins[0].amount == staking_vals[0].v.tokens


def test_comet_validators_round_trip(val_pks, staking_vals):
    assert staking_vals.comet_validators().to_comet() == val_pks.comet_genesis_validators().to_comet()


def test_mismatched_consensus_address_rejected(val_pks):
    v = val_pks.comet_genesis_validators()[0].v
    other = AminoPubKey.ed25519(bytes(32))
    forged = v.model_copy(update={"pub_key": other})

    with pytest.raises(PreconditionError, match="does not match"):
        consensus_address_bytes(forged)

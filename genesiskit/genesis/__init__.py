# MIT License
# Copyright (c) 2025 Hashborn

"""
Genesis Construction

Builds the genesis document of a validator set and signs each
validator's self-delegation transaction.
"""

from .document import GenesisDocument
from .keys import ValidatorPrivKey, ValidatorPrivKeys
from .pipeline import (
    AuthParams, BaseAccounts, Banking, ChainID, Consensus, Distribution, GenesisDraft,
    GenesisPipeline, GenTx, Mint, ModuleState, Slashing, Stage, Staking,
    default_genesis_only_validators, gen_txs_for, seal,
)
from .signer import sign_genesis_tx, verify_genesis_tx
from .state import ModuleStateMap
from .validators import CometGenesisValidators, StakingValidators

__all__ = [
    "GenesisDocument", "ValidatorPrivKey", "ValidatorPrivKeys",
    "AuthParams", "BaseAccounts", "Banking", "ChainID", "Consensus", "Distribution", "GenesisDraft",
    "GenesisPipeline", "GenTx", "Mint", "ModuleState", "Slashing", "Stage", "Staking",
    "default_genesis_only_validators", "gen_txs_for", "seal",
    "sign_genesis_tx", "verify_genesis_tx", "ModuleStateMap",
    "CometGenesisValidators", "StakingValidators",
]

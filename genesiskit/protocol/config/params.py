# MIT License
# Copyright (c) 2025 Hashborn

from decimal import Decimal
from typing import Dict

# Module names, used as app_state keys
AUTH_MODULE = "auth"
BANK_MODULE = "bank"
STAKING_MODULE = "staking"
GENUTIL_MODULE = "genutil"
DISTRIBUTION_MODULE = "distribution"
MINT_MODULE = "mint"
SLASHING_MODULE = "slashing"
CONSENSUS_SECTION = "consensus"

BONDED_POOL_NAME = "bonded_tokens_pool"

DEFAULT_BOND_DENOM = "stake"
# Tokens backing one unit of consensus voting power
DEFAULT_POWER_REDUCTION = 10**6

class NetworkConfig:
    def __init__(self,
                 network_id: str,
                 chain_id: str,
                 bond_denom: str = DEFAULT_BOND_DENOM,
                 power_reduction: int = DEFAULT_POWER_REDUCTION,
                 bech32_prefix_acc: str = "cosmos",
                 bech32_prefix_val: str = "cosmosvaloper",
                 bech32_prefix_cons: str = "cosmosvalcons",
                 # Equal-weight genesis
                 genesis_voting_power: int = 1,
                 # Gentx policy constants
                 gentx_moniker: str = "TODO",
                 commission_rate: str = "0.1",
                 commission_max_rate: str = "0.2",
                 commission_max_change_rate: str = "0.01",
                 gentx_min_self_delegation: int = 1,
                 # Network starter
                 max_start_attempts: int = 10):
        self.network_id = network_id
        self.chain_id = chain_id
        self.bond_denom = bond_denom
        self.power_reduction = power_reduction
        self.bech32_prefix_acc = bech32_prefix_acc
        self.bech32_prefix_val = bech32_prefix_val
        self.bech32_prefix_cons = bech32_prefix_cons
        self.genesis_voting_power = genesis_voting_power
        self.gentx_moniker = gentx_moniker
        self.commission_rate = Decimal(commission_rate)
        self.commission_max_rate = Decimal(commission_max_rate)
        self.commission_max_change_rate = Decimal(commission_max_change_rate)
        self.gentx_min_self_delegation = gentx_min_self_delegation
        self.max_start_attempts = max_start_attempts

NETWORKS: Dict[str, NetworkConfig] = {
    "simapp": NetworkConfig(
        network_id="simapp",
        chain_id="simapp-chain",
    ),
    "localnet": NetworkConfig(
        network_id="localnet",
        chain_id="localnet-1",
        max_start_attempts=20,
    ),
}

# Default to simapp for now
CURRENT_NETWORK = NETWORKS["simapp"]

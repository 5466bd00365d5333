# MIT License
# Copyright (c) 2025 Hashborn

import logging
from decimal import Decimal
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from ...protocol.config.params import (
    BANK_MODULE, BONDED_POOL_NAME, CURRENT_NETWORK, DEFAULT_BOND_DENOM, STAKING_MODULE, NetworkConfig,
)
from ...protocol.crypto.addresses import bech32ify, module_address
from ...protocol.types.account import Balance
from ...protocol.types.coins import Coin, Dec, IntStr, add_coins, sub_coins
from ...protocol.types.validator import Validator
from ..state import ModuleStateMap
from .bank import BankGenesisState, sanitize_genesis_balances

logger = logging.getLogger(__name__)

class StakingParams(BaseModel):
    unbonding_time: str = "1814400s"   # 3 weeks
    max_validators: int = 100
    max_entries: int = 7
    historical_entries: int = 10000
    bond_denom: str = DEFAULT_BOND_DENOM
    min_commission_rate: Dec = Decimal(0)

class Delegation(BaseModel):
    delegator_address: str
    validator_address: str
    shares: Dec

class LastValidatorPower(BaseModel):
    address: str
    power: IntStr

class StakingGenesisState(BaseModel):
    params: StakingParams = Field(default_factory=StakingParams)
    last_total_power: IntStr = 0
    last_validator_powers: List[LastValidatorPower] = Field(default_factory=list)
    validators: List[Validator] = Field(default_factory=list)
    delegations: List[Delegation] = Field(default_factory=list)
    unbonding_delegations: List[dict] = Field(default_factory=list)
    redelegations: List[dict] = Field(default_factory=list)
    exported: bool = False

def new_genesis_state(
    params: Optional[StakingParams] = None,
    validators: Sequence[Validator] = (),
    delegations: Sequence[Delegation] = (),
) -> StakingGenesisState:
    return StakingGenesisState(
        params=params or StakingParams(),
        validators=list(validators),
        delegations=list(delegations),
    )

def bonded_pool_address(config: NetworkConfig = CURRENT_NETWORK) -> str:
    return bech32ify(config.bech32_prefix_acc, module_address(BONDED_POOL_NAME))

def bonded_pool_balance(
    validators: Sequence[Validator],
    bond_denom: str = DEFAULT_BOND_DENOM,
    config: NetworkConfig = CURRENT_NETWORK,
) -> Balance:
    """Balance of the bonded pool: the sum of all validators' tokens."""
    coins: List[Coin] = add_coins(*([Coin(denom=bond_denom, amount=v.tokens)] for v in validators))
    return Balance(address=bonded_pool_address(config), coins=coins)

def _drop_pool_credit(balances: Sequence[Balance], pool: Balance) -> List[Balance]:
    """Takes a previous staking write's credit back out of the pool balance."""
    result = []
    for bal in balances:
        if bal.address == pool.address:
            coins = sub_coins(bal.coins, pool.coins)
            if not coins:
                continue
            bal = Balance(address=bal.address, coins=coins)
        result.append(bal)
    return result

def with_staking(
    app_state: ModuleStateMap,
    params: Optional[StakingParams],
    validators: Sequence[Validator],
    delegations: Sequence[Delegation] = (),
    config: NetworkConfig = CURRENT_NETWORK,
) -> ModuleStateMap:
    """
    Writes staking state and, in the same step, credits the bonded pool
    in bank state. Staked tokens must appear in some balance or total
    supply does not add up.

    Rewriting staking state replaces its pool credit rather than adding a
    second one. Pool coins credited elsewhere (e.g. by Banking) are kept
    and merged with the staked tokens.
    """
    previous = None
    if STAKING_MODULE in app_state:
        previous = app_state.get_module(STAKING_MODULE, StakingGenesisState)

    staking_state = new_genesis_state(params, validators, delegations)
    app_state = app_state.set_module(STAKING_MODULE, staking_state)

    pool = bonded_pool_balance(validators, staking_state.params.bond_denom, config)

    bank_state = app_state.get_module(BANK_MODULE, BankGenesisState)
    balances = list(bank_state.balances)
    if previous is not None:
        old_pool = bonded_pool_balance(previous.validators, previous.params.bond_denom, config)
        balances = _drop_pool_credit(balances, old_pool)
    if pool.coins:
        balances.append(pool)
    balances = sanitize_genesis_balances(balances)
    logger.debug(f"Bonded pool {pool.address} holds {', '.join(str(c) for c in pool.coins) or 'nothing'}")

    return app_state.set_module(BANK_MODULE, bank_state.model_copy(update={"balances": balances}))

# MIT License
# Copyright (c) 2025 Hashborn

"""
Genesis Pipeline

A genesis is built by folding an ordered list of steps over an immutable
draft. Each step belongs to a stage and a pipeline only accepts steps in
stage order, so "chain id before signing" and "staking after the bank
state it patches" hold by construction:

    CHAIN_ID -> CONSENSUS -> MODULES -> ACCOUNTS -> STAKING -> GENTX

Example:
    pipeline = GenesisPipeline([
        ChainID("my-chain"),
        Consensus(cmt_vals.to_comet()),
        AuthParams(),
        BaseAccounts(staking_vals.base_accounts()),
        Staking(staking_vals),
        *gen_txs_for(staking_vals, amount),
    ])
    genesis = pipeline.run()
"""

import logging
from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Any, ClassVar, Iterable, List, Optional, Sequence, Tuple

from ..protocol.config.params import (
    AUTH_MODULE, BANK_MODULE, CURRENT_NETWORK, DISTRIBUTION_MODULE, MINT_MODULE, SLASHING_MODULE,
    NetworkConfig,
)
from ..protocol.types.account import Balance, BaseAccount
from ..protocol.types.coins import Coin
from ..protocol.types.common import PreconditionError
from ..protocol.types.tx import Tx
from ..protocol.types.validator import GenesisValidator, Validator
from .document import GenesisDocument
from .modules import auth, bank, slashing, staking
from .modules.consensus import ConsensusGenesis, ConsensusParams
from .modules.distribution import DistributionGenesisState, DistributionParams
from .modules.mint import MintGenesisState, MintParams
from .signer import sign_genesis_tx
from .state import ModuleStateMap
from .validators import CometGenesisValidator, StakingValidator, StakingValidators

logger = logging.getLogger(__name__)


class Stage(IntEnum):
    CHAIN_ID = 0
    CONSENSUS = 1
    MODULES = 2
    ACCOUNTS = 3
    STAKING = 4
    GENTX = 5


@dataclass(frozen=True)
class GenesisDraft:
    """Snapshot passed from step to step."""
    chain_id: Optional[str] = None
    consensus: Optional[ConsensusGenesis] = None
    app_state: ModuleStateMap = field(default_factory=ModuleStateMap)
    gen_txs: Tuple[Tx, ...] = ()


class Step:
    stage: ClassVar[Stage]

    def apply(self, draft: GenesisDraft, config: NetworkConfig) -> GenesisDraft:
        raise NotImplementedError


@dataclass(frozen=True)
class ChainID(Step):
    chain_id: str
    stage: ClassVar[Stage] = Stage.CHAIN_ID

    def apply(self, draft, config):
        if not self.chain_id:
            raise PreconditionError("chain id must not be empty")
        return replace(draft, chain_id=self.chain_id)


@dataclass(frozen=True)
class Consensus(Step):
    validators: Sequence[Any]
    params: Optional[ConsensusParams] = None
    stage: ClassVar[Stage] = Stage.CONSENSUS

    def apply(self, draft, config):
        vals: List[GenesisValidator] = [
            v.v if isinstance(v, CometGenesisValidator) else v for v in self.validators
        ]
        section = ConsensusGenesis(params=self.params or ConsensusParams(), validators=vals)
        return replace(draft, consensus=section)


@dataclass(frozen=True)
class AuthParams(Step):
    params: Optional[auth.AuthParams] = None
    stage: ClassVar[Stage] = Stage.MODULES

    def apply(self, draft, config):
        state = auth.new_genesis_state(self.params)
        return replace(draft, app_state=draft.app_state.set_module(AUTH_MODULE, state))


@dataclass(frozen=True)
class Banking(Step):
    params: Optional[bank.BankParams] = None
    balances: Sequence[Balance] = ()
    supply: Sequence[Coin] = ()
    denom_metadata: Sequence[bank.Metadata] = ()
    send_enabled: Sequence[bank.SendEnabled] = ()
    stage: ClassVar[Stage] = Stage.MODULES

    def apply(self, draft, config):
        state = bank.new_genesis_state(
            self.params,
            bank.sanitize_genesis_balances(self.balances),
            self.supply,
            self.denom_metadata,
            self.send_enabled,
        )
        return replace(draft, app_state=draft.app_state.set_module(BANK_MODULE, state))


@dataclass(frozen=True)
class Distribution(Step):
    params: Optional[DistributionParams] = None
    stage: ClassVar[Stage] = Stage.MODULES

    def apply(self, draft, config):
        state = DistributionGenesisState(params=self.params or DistributionParams())
        return replace(draft, app_state=draft.app_state.set_module(DISTRIBUTION_MODULE, state))


@dataclass(frozen=True)
class Mint(Step):
    params: Optional[MintParams] = None
    stage: ClassVar[Stage] = Stage.MODULES

    def apply(self, draft, config):
        state = MintGenesisState(params=self.params or MintParams(mint_denom=config.bond_denom))
        return replace(draft, app_state=draft.app_state.set_module(MINT_MODULE, state))


@dataclass(frozen=True)
class Slashing(Step):
    params: Optional[slashing.SlashingParams] = None
    signing_infos: Sequence[slashing.SigningInfo] = ()
    missed_blocks: Sequence[slashing.ValidatorMissedBlocks] = ()
    stage: ClassVar[Stage] = Stage.MODULES

    def apply(self, draft, config):
        state = slashing.new_genesis_state(self.params, self.signing_infos, self.missed_blocks)
        return replace(draft, app_state=draft.app_state.set_module(SLASHING_MODULE, state))


@dataclass(frozen=True)
class ModuleState(Step):
    """Overwrites one module's state with a caller-supplied value."""
    name: str
    state: Any
    stage: ClassVar[Stage] = Stage.MODULES

    def apply(self, draft, config):
        return replace(draft, app_state=draft.app_state.set_module(self.name, self.state))


@dataclass(frozen=True)
class BaseAccounts(Step):
    accounts: Sequence[BaseAccount]
    balances: Sequence[Balance] = ()
    stage: ClassVar[Stage] = Stage.ACCOUNTS

    def apply(self, draft, config):
        return replace(draft, app_state=auth.register_accounts(draft.app_state, self.accounts, self.balances))


@dataclass(frozen=True)
class Staking(Step):
    validators: Sequence[Any]
    delegations: Sequence[staking.Delegation] = ()
    params: Optional[staking.StakingParams] = None
    stage: ClassVar[Stage] = Stage.STAKING

    def apply(self, draft, config):
        vals: List[Validator] = [
            v.v if isinstance(v, StakingValidator) else v for v in self.validators
        ]
        params = self.params or staking.StakingParams(bond_denom=config.bond_denom)
        app_state = staking.with_staking(draft.app_state, params, vals, self.delegations, config)
        return replace(draft, app_state=app_state)


@dataclass(frozen=True)
class GenTx(Step):
    account_key: bytes = field(repr=False)
    validator: GenesisValidator
    amount: Coin
    stage: ClassVar[Stage] = Stage.GENTX

    def apply(self, draft, config):
        if not draft.chain_id:
            raise PreconditionError("GenTx applied before ChainID")
        tx = sign_genesis_tx(self.account_key, self.validator, self.amount, draft.chain_id, config)
        return replace(draft, gen_txs=draft.gen_txs + (tx,))


def gen_txs_for(validators: Iterable[StakingValidator], amount: Coin) -> List[GenTx]:
    """One self-delegation step per staking validator."""
    return [GenTx(account_key=sv.pk.delegator, validator=sv.comet, amount=amount) for sv in validators]


def _check_stage_order(steps: Sequence[Step]) -> None:
    prev: Optional[Step] = None
    for step in steps:
        if not isinstance(step, Step):
            raise PreconditionError(f"not a genesis step: {step!r}")
        if prev is not None and step.stage < prev.stage:
            raise PreconditionError(
                f"{type(step).__name__} ({step.stage.name}) cannot follow {type(prev).__name__} ({prev.stage.name})"
            )
        if prev is not None and step.stage == Stage.CHAIN_ID:
            raise PreconditionError("ChainID may only be set once")
        if prev is not None and step.stage == Stage.STAKING and prev.stage == Stage.STAKING:
            raise PreconditionError("Staking may only be configured once")
        prev = step

    has_chain_id = any(s.stage == Stage.CHAIN_ID for s in steps)
    if not has_chain_id and any(s.stage == Stage.GENTX for s in steps):
        raise PreconditionError("GenTx steps require a preceding ChainID step")


class GenesisPipeline:
    """Ordered genesis construction. Steps are validated when the pipeline is created."""

    def __init__(self, steps: Iterable[Step], config: NetworkConfig = CURRENT_NETWORK):
        self._steps: Tuple[Step, ...] = tuple(steps)
        self._config = config
        _check_stage_order(self._steps)

    @property
    def steps(self) -> Tuple[Step, ...]:
        return self._steps

    def build(self, draft: Optional[GenesisDraft] = None) -> GenesisDraft:
        draft = draft if draft is not None else GenesisDraft()
        for step in self._steps:
            draft = step.apply(draft, self._config)
            logger.debug(f"Applied {type(step).__name__} ({step.stage.name})")
        return draft

    def run(self) -> GenesisDocument:
        draft = self.build()
        genesis = seal(draft)
        logger.info(f"Built genesis for {genesis.chain_id}: {len(genesis.gen_txs)} gentxs, hash {genesis.hash()[:16]}...")
        return genesis


def seal(draft: GenesisDraft) -> GenesisDocument:
    """Folds gentxs into app state and freezes the document."""
    return GenesisDocument(
        chain_id=draft.chain_id or "",
        consensus=draft.consensus,
        app_state=draft.app_state,
        gen_txs=draft.gen_txs,
    )


def default_genesis_only_validators(
    chain_id: str,
    validators: StakingValidators,
    amount: Coin,
    config: NetworkConfig = CURRENT_NETWORK,
) -> GenesisPipeline:
    """Pipeline for a network whose only accounts are its validators' delegators."""
    return GenesisPipeline([
        ChainID(chain_id),
        Consensus(validators.comet_validators().to_comet()),
        AuthParams(),
        Banking(),
        Distribution(),
        Mint(),
        Slashing(),
        BaseAccounts(validators.base_accounts(config), validators.balances(config)),
        Staking(validators),
        *gen_txs_for(validators, amount),
    ], config=config)

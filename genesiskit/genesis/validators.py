# MIT License
# Copyright (c) 2025 Hashborn

"""
Validator Projection

Derives the two views of a validator from its key material: the
consensus-layer GenesisValidator and the staking-layer Validator. The
operator address of the staking record is built from the same consensus
address bytes as the consensus record.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Tuple

from ..protocol.config.params import CURRENT_NETWORK, NetworkConfig
from ..protocol.crypto import ed25519
from ..protocol.crypto.addresses import address_from_pubkey, bech32ify, decode_address
from ..protocol.types.account import Balance, BaseAccount
from ..protocol.types.coins import Coin, add_coins
from ..protocol.types.common import BondStatus, PreconditionError
from ..protocol.types.pubkey import AnyPubKey
from ..protocol.types.validator import GenesisValidator, Validator
from .keys import ValidatorPrivKey
from .modules.staking import bonded_pool_balance


def consensus_address_bytes(val: GenesisValidator) -> bytes:
    """Consensus address of a genesis validator, checked against its pubkey."""
    derived = ed25519.address_from_pubkey(val.pub_key.raw())
    if derived.hex().upper() != val.address.upper():
        raise PreconditionError(
            f"validator {val.name or val.address}: address {val.address} does not match its consensus public key"
        )
    return derived


@dataclass(frozen=True)
class CometGenesisValidator:
    v: GenesisValidator
    pk: ValidatorPrivKey


class CometGenesisValidators(tuple):

    def to_comet(self) -> List[GenesisValidator]:
        return [cv.v for cv in self]

    def staking_validators(self, config: NetworkConfig = CURRENT_NETWORK) -> Tuple["StakingValidators", List[Coin]]:
        """Bonded staking records, one per consensus validator, and their total supply."""
        vals = []
        supply: List[Coin] = []
        for cv in self:
            cons_addr = consensus_address_bytes(cv.v)
            operator = bech32ify(config.bech32_prefix_val, cons_addr)

            validator = Validator(
                operator_address=operator,
                consensus_pubkey=AnyPubKey.ed25519(cv.v.pub_key.raw()),
                status=BondStatus.BONDED,
                tokens=config.power_reduction,
                delegator_shares=Decimal(1),
                min_self_delegation=0,
            )
            _check_operator_address(validator, cv.v)

            vals.append(StakingValidator(v=validator, comet=cv.v, pk=cv.pk))
            supply = add_coins(supply, [Coin(denom=config.bond_denom, amount=config.power_reduction)])

        return StakingValidators(vals), supply


def _check_operator_address(validator: Validator, comet: GenesisValidator) -> None:
    try:
        _, operator_bytes = decode_address(validator.operator_address)
    except ValueError as e:
        raise PreconditionError(f"invalid operator address {validator.operator_address!r}") from e
    if operator_bytes != consensus_address_bytes(comet):
        raise PreconditionError(
            f"operator address {validator.operator_address} diverges from consensus address {comet.address}"
        )


@dataclass(frozen=True)
class StakingValidator:
    v: Validator
    comet: GenesisValidator
    pk: ValidatorPrivKey


class StakingValidators(tuple):

    def to_staking_type(self) -> List[Validator]:
        return [sv.v for sv in self]

    def comet_validators(self) -> CometGenesisValidators:
        return CometGenesisValidators(CometGenesisValidator(v=sv.comet, pk=sv.pk) for sv in self)

    def bonded_pool_balance(self, config: NetworkConfig = CURRENT_NETWORK) -> Balance:
        return bonded_pool_balance(self.to_staking_type(), config.bond_denom, config)

    def base_accounts(self, config: NetworkConfig = CURRENT_NETWORK) -> List[BaseAccount]:
        """Delegator accounts, account and sequence number zero."""
        accounts = []
        for sv in self:
            pub_key = sv.pk.del_pub_key
            accounts.append(BaseAccount(
                address=address_from_pubkey(pub_key, prefix=config.bech32_prefix_acc),
                pub_key=AnyPubKey.secp256k1(pub_key),
                account_number=0,
                sequence=0,
            ))
        return accounts

    def balances(self, config: NetworkConfig = CURRENT_NETWORK) -> List[Balance]:
        """One balance per delegator, equal to its validator's tokens."""
        return [
            Balance(
                address=address_from_pubkey(sv.pk.del_pub_key, prefix=config.bech32_prefix_acc),
                coins=[Coin(denom=config.bond_denom, amount=sv.v.tokens)],
            )
            for sv in self
        ]

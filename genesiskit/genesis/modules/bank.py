# MIT License
# Copyright (c) 2025 Hashborn

from typing import Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel, Field

from ...protocol.crypto.addresses import decode_address
from ...protocol.types.account import Balance
from ...protocol.types.coins import Coin, add_coins, validate_coins
from ...protocol.types.common import InvalidBalanceError

class SendEnabled(BaseModel):
    denom: str
    enabled: bool = True

class BankParams(BaseModel):
    send_enabled: List[SendEnabled] = Field(default_factory=list)
    default_send_enabled: bool = True

class DenomUnit(BaseModel):
    denom: str
    exponent: int = 0
    aliases: List[str] = Field(default_factory=list)

class Metadata(BaseModel):
    description: str = ""
    denom_units: List[DenomUnit] = Field(default_factory=list)
    base: str
    display: str = ""
    name: str = ""
    symbol: str = ""
    uri: str = ""
    uri_hash: str = ""

class BankGenesisState(BaseModel):
    params: BankParams = Field(default_factory=BankParams)
    balances: List[Balance] = Field(default_factory=list)
    supply: List[Coin] = Field(default_factory=list)
    denom_metadata: List[Metadata] = Field(default_factory=list)
    send_enabled: List[SendEnabled] = Field(default_factory=list)

def new_genesis_state(
    params: Optional[BankParams] = None,
    balances: Sequence[Balance] = (),
    supply: Sequence[Coin] = (),
    denom_metadata: Sequence[Metadata] = (),
    send_enabled: Sequence[SendEnabled] = (),
) -> BankGenesisState:
    return BankGenesisState(
        params=params or BankParams(),
        balances=list(balances),
        supply=list(supply),
        denom_metadata=list(denom_metadata),
        send_enabled=list(send_enabled),
    )

def _balance_key(address: str) -> bytes:
    try:
        return decode_address(address)[1]
    except ValueError as e:
        raise InvalidBalanceError(f"invalid balance address {address!r}: {e}") from e

def sanitize_genesis_balances(balances: Iterable[Balance]) -> List[Balance]:
    """
    Merges balances per address, summing coins, and orders them by
    address bytes. Negative, zero or malformed coins are rejected.
    """
    merged: Dict[str, List[Coin]] = {}
    for bal in balances:
        _balance_key(bal.address)
        for coin in bal.coins:
            coin.validate_coin()
            if coin.amount == 0:
                raise InvalidBalanceError(f"zero coin amount for {bal.address}")
        merged[bal.address] = add_coins(merged.get(bal.address, []), bal.coins)

    result = []
    for address in sorted(merged, key=_balance_key):
        coins = merged[address]
        validate_coins(coins)
        result.append(Balance(address=address, coins=coins))
    return result

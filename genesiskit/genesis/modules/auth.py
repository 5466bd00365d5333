# MIT License
# Copyright (c) 2025 Hashborn

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel, Field

from ...protocol.config.params import AUTH_MODULE, BANK_MODULE
from ...protocol.crypto.addresses import decode_address
from ...protocol.types.account import Balance, BaseAccount
from ...protocol.types.coins import IntStr
from ...protocol.types.common import DuplicateAccountError, MalformedStateError
from ..state import ModuleStateMap
from .bank import BankGenesisState, sanitize_genesis_balances

logger = logging.getLogger(__name__)

class AuthParams(BaseModel):
    max_memo_characters: IntStr = 256
    tx_sig_limit: IntStr = 7
    tx_size_cost_per_byte: IntStr = 10
    sig_verify_cost_ed25519: IntStr = 590
    sig_verify_cost_secp256k1: IntStr = 1000

class AuthGenesisState(BaseModel):
    params: AuthParams = Field(default_factory=AuthParams)
    accounts: List[BaseAccount] = Field(default_factory=list)

def new_genesis_state(params: Optional[AuthParams] = None, accounts: Sequence[BaseAccount] = ()) -> AuthGenesisState:
    return AuthGenesisState(params=params or AuthParams(), accounts=list(accounts))

def _address_key(address: str) -> bytes:
    try:
        return decode_address(address)[1]
    except ValueError as e:
        raise MalformedStateError(f"invalid account address {address!r}: {e}") from e

def sanitize_genesis_accounts(accounts: Iterable[BaseAccount]) -> List[BaseAccount]:
    """
    De-duplicates and orders genesis accounts.

    Registering the same account twice keeps one entry. Two different
    accounts claiming one address is a caller bug and is rejected.
    Ordering is by account number, then address bytes.
    """
    by_address: Dict[str, BaseAccount] = {}
    for acc in accounts:
        seen = by_address.get(acc.address)
        if seen is None:
            by_address[acc.address] = acc
        elif seen != acc:
            raise DuplicateAccountError(f"duplicate account in genesis state: {acc.address}")

    return sorted(by_address.values(), key=lambda a: (a.account_number, _address_key(a.address)))

def register_accounts(
    app_state: ModuleStateMap,
    accounts: Sequence[BaseAccount],
    balances: Sequence[Balance] = (),
) -> ModuleStateMap:
    """Merges accounts into auth state and balances into bank state."""
    auth_state = app_state.get_module(AUTH_MODULE, AuthGenesisState)
    bank_state = app_state.get_module(BANK_MODULE, BankGenesisState)

    merged_accounts = sanitize_genesis_accounts([*auth_state.accounts, *accounts])
    merged_balances = sanitize_genesis_balances([*bank_state.balances, *balances])

    logger.debug(f"Registered {len(accounts)} accounts ({len(merged_accounts)} total), {len(balances)} balances")

    app_state = app_state.set_module(AUTH_MODULE, auth_state.model_copy(update={"accounts": merged_accounts}))
    return app_state.set_module(BANK_MODULE, bank_state.model_copy(update={"balances": merged_balances}))

# MIT License
# Copyright (c) 2025 Hashborn

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .coins import Coin, IntStr
from .pubkey import AnyPubKey

BASE_ACCOUNT_TYPE_URL = "/cosmos.auth.v1beta1.BaseAccount"

class BaseAccount(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type_url: str = Field(default=BASE_ACCOUNT_TYPE_URL, alias="@type")
    address: str                      # Bech32 account address (cosmos1...)
    pub_key: Optional[AnyPubKey] = None
    # No history at genesis
    account_number: IntStr = 0
    sequence: IntStr = 0

class Balance(BaseModel):
    address: str
    coins: List[Coin] = Field(default_factory=list)

# MIT License
# Copyright (c) 2025 Hashborn

from decimal import Decimal
from typing import List

from pydantic import BaseModel, Field

from ...protocol.types.coins import Dec

class DistributionParams(BaseModel):
    community_tax: Dec = Decimal("0.02")
    base_proposer_reward: Dec = Decimal(0)
    bonus_proposer_reward: Dec = Decimal(0)
    withdraw_addr_enabled: bool = True

class FeePool(BaseModel):
    community_pool: List[dict] = Field(default_factory=list)

class DistributionGenesisState(BaseModel):
    params: DistributionParams = Field(default_factory=DistributionParams)
    fee_pool: FeePool = Field(default_factory=FeePool)
    delegator_withdraw_infos: List[dict] = Field(default_factory=list)
    previous_proposer: str = ""
    outstanding_rewards: List[dict] = Field(default_factory=list)
    validator_accumulated_commissions: List[dict] = Field(default_factory=list)
    validator_historical_rewards: List[dict] = Field(default_factory=list)
    validator_current_rewards: List[dict] = Field(default_factory=list)
    delegator_starting_infos: List[dict] = Field(default_factory=list)
    validator_slash_events: List[dict] = Field(default_factory=list)

# MIT License
# Copyright (c) 2025 Hashborn

from decimal import Decimal

from pydantic import BaseModel, Field

from ...protocol.config.params import DEFAULT_BOND_DENOM
from ...protocol.types.coins import Dec, IntStr

class Minter(BaseModel):
    inflation: Dec = Decimal("0.13")
    annual_provisions: Dec = Decimal(0)

class MintParams(BaseModel):
    mint_denom: str = DEFAULT_BOND_DENOM
    inflation_rate_change: Dec = Decimal("0.13")
    inflation_max: Dec = Decimal("0.20")
    inflation_min: Dec = Decimal("0.07")
    goal_bonded: Dec = Decimal("0.67")
    blocks_per_year: IntStr = 6311520   # 5s blocks

class MintGenesisState(BaseModel):
    minter: Minter = Field(default_factory=Minter)
    params: MintParams = Field(default_factory=MintParams)

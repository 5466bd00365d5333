# MIT License
# Copyright (c) 2025 Hashborn

from decimal import Decimal
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from ...protocol.types.coins import Dec, IntStr

class SlashingParams(BaseModel):
    signed_blocks_window: IntStr = 100
    min_signed_per_window: Dec = Decimal("0.5")
    downtime_jail_duration: str = "600s"
    slash_fraction_double_sign: Dec = Decimal("0.05")
    slash_fraction_downtime: Dec = Decimal("0.01")

class SigningInfo(BaseModel):
    address: str
    validator_signing_info: dict = Field(default_factory=dict)

class ValidatorMissedBlocks(BaseModel):
    address: str
    missed_blocks: List[dict] = Field(default_factory=list)

class SlashingGenesisState(BaseModel):
    params: SlashingParams = Field(default_factory=SlashingParams)
    signing_infos: List[SigningInfo] = Field(default_factory=list)
    missed_blocks: List[ValidatorMissedBlocks] = Field(default_factory=list)

def new_genesis_state(
    params: Optional[SlashingParams] = None,
    signing_infos: Sequence[SigningInfo] = (),
    missed_blocks: Sequence[ValidatorMissedBlocks] = (),
) -> SlashingGenesisState:
    return SlashingGenesisState(
        params=params or SlashingParams(),
        signing_infos=list(signing_infos),
        missed_blocks=list(missed_blocks),
    )

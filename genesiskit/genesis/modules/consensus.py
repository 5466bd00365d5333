# MIT License
# Copyright (c) 2025 Hashborn

from typing import List

from pydantic import BaseModel, Field

from ...protocol.types.coins import IntStr
from ...protocol.types.validator import GenesisValidator

class BlockParams(BaseModel):
    max_bytes: IntStr = 22020096
    max_gas: IntStr = -1

class EvidenceParams(BaseModel):
    max_age_num_blocks: IntStr = 100000
    max_age_duration: IntStr = 172800000000000   # 48h in ns
    max_bytes: IntStr = 1048576

class ValidatorParams(BaseModel):
    pub_key_types: List[str] = Field(default_factory=lambda: ["ed25519"])

class VersionParams(BaseModel):
    app: IntStr = 0

class ABCIParams(BaseModel):
    vote_extensions_enable_height: IntStr = 0

class ConsensusParams(BaseModel):
    block: BlockParams = Field(default_factory=BlockParams)
    evidence: EvidenceParams = Field(default_factory=EvidenceParams)
    validator: ValidatorParams = Field(default_factory=ValidatorParams)
    version: VersionParams = Field(default_factory=VersionParams)
    abci: ABCIParams = Field(default_factory=ABCIParams)

class ConsensusGenesis(BaseModel):
    """The outer ``consensus`` section of the document."""
    params: ConsensusParams = Field(default_factory=ConsensusParams)
    validators: List[GenesisValidator] = Field(default_factory=list)

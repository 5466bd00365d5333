# MIT License
# Copyright (c) 2025 Hashborn

from typing import List, Sequence

from pydantic import BaseModel, Field

from ...protocol.config.params import GENUTIL_MODULE
from ...protocol.types.tx import Tx
from ..state import ModuleStateMap

class GenutilGenesisState(BaseModel):
    gen_txs: List[Tx] = Field(default_factory=list)

def set_gen_txs(app_state: ModuleStateMap, gen_txs: Sequence[Tx]) -> ModuleStateMap:
    """Folds the signed gentxs into the genutil module entry."""
    return app_state.set_module(GENUTIL_MODULE, GenutilGenesisState(gen_txs=list(gen_txs)))

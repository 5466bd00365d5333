# MIT License
# Copyright (c) 2025 Hashborn

import logging
import os
from typing import Any, Dict, Optional, Sequence

from ..protocol.codec import canonical_json
from ..protocol.config.params import CONSENSUS_SECTION
from ..protocol.crypto.hash import sha256_hex
from ..protocol.types.common import PreconditionError
from ..protocol.types.tx import Tx
from .modules.consensus import ConsensusGenesis
from .modules.genutil import set_gen_txs
from .state import ModuleStateMap

logger = logging.getLogger(__name__)


class GenesisDocument:
    """
    Sealed genesis: chain id, consensus section, app state with gentxs.

    Immutable once built. encode() is canonical, so the same content always
    yields the same bytes and the same hash on every node.
    """

    def __init__(
        self,
        chain_id: str,
        consensus: Optional[ConsensusGenesis],
        app_state: ModuleStateMap,
        gen_txs: Sequence[Tx],
    ):
        if not chain_id:
            raise PreconditionError("cannot seal a genesis document without a chain id")
        self._chain_id = chain_id
        self._consensus = consensus
        self._gen_txs = tuple(gen_txs)
        self._app_state = set_gen_txs(app_state, self._gen_txs)
        self._encoded = canonical_json(self.to_json())

    @property
    def chain_id(self) -> str:
        return self._chain_id

    @property
    def app_state(self) -> ModuleStateMap:
        return self._app_state

    @property
    def gen_txs(self) -> Sequence[Tx]:
        return self._gen_txs

    def to_json(self) -> Dict[str, Any]:
        outer: Dict[str, Any] = {"chain_id": self._chain_id}
        if self._consensus is not None:
            outer[CONSENSUS_SECTION] = self._consensus.model_dump(mode="json", by_alias=True)
        outer["app_state"] = self._app_state.to_json()
        return outer

    def encode(self) -> bytes:
        return self._encoded

    def hash(self) -> str:
        return sha256_hex(self._encoded)

    def write(self, path: str) -> None:
        """Writes the sealed bytes to a genesis file."""
        os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
        with open(path, "wb") as f:
            f.write(self._encoded)
        logger.info(f"Wrote genesis {self.hash()[:16]}... for {self._chain_id} to {path}")

# MIT License
# Copyright (c) 2025 Hashborn

import json
import os
from dataclasses import dataclass, field, replace
from typing import List

from ..protocol.crypto import ed25519

@dataclass(frozen=True)
class NodeConfig:
    """Per-node settings handed to the consensus engine. The genesis pipeline never picks these."""
    root_dir: str
    moniker: str = "node"
    db_backend: str = "goleveldb"
    # Empty RPC address: no RPC listener
    rpc_listen_address: str = ""
    p2p_listen_address: str = "tcp://127.0.0.1:0"
    persistent_peers: List[str] = field(default_factory=list)
    # All local peers share 127.0.0.1
    allow_duplicate_ip: bool = True
    addr_book_strict: bool = False

    @property
    def config_dir(self) -> str:
        return os.path.join(self.root_dir, "config")

    @property
    def data_dir(self) -> str:
        return os.path.join(self.root_dir, "data")

    @property
    def genesis_file(self) -> str:
        return os.path.join(self.config_dir, "genesis.json")

    @property
    def priv_validator_key_file(self) -> str:
        return os.path.join(self.config_dir, "priv_validator_key.json")

    @property
    def node_key_file(self) -> str:
        return os.path.join(self.config_dir, "node_key.json")

    def with_addresses(self, p2p: str, rpc: str = "") -> "NodeConfig":
        return replace(self, p2p_listen_address=p2p, rpc_listen_address=rpc)

@dataclass(frozen=True)
class DiskConfig:
    cfg: NodeConfig
    node_key: bytes       # ed25519 seed identifying the node on the p2p layer

def new_disk_config(root_dir: str, cfg: NodeConfig) -> DiskConfig:
    """Creates the node's directory layout and a fresh node key."""
    cfg = replace(cfg, root_dir=root_dir)
    os.makedirs(cfg.config_dir, exist_ok=True)
    os.makedirs(cfg.data_dir, exist_ok=True)

    node_key = ed25519.generate_private_key()
    with open(cfg.node_key_file, "w") as f:
        json.dump({"priv_key_seed": node_key.hex(), "id": ed25519.address_from_pubkey(ed25519.public_key_from_private(node_key)).hex()}, f, indent=2)
    os.chmod(cfg.node_key_file, 0o600)

    return DiskConfig(cfg=cfg, node_key=node_key)

def write_genesis_file(path: str, genesis: bytes) -> None:
    """Writes sealed genesis bytes before any node reads them."""
    os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
    with open(path, "wb") as f:
        f.write(genesis)
    os.chmod(path, 0o600)

# MIT License
# Copyright (c) 2025 Hashborn

"""
Test Network Starter

Boundary to the consensus engine: takes sealed genesis bytes and per-node
configuration, returns running node handles or a start error.
"""

from .config import DiskConfig, NodeConfig, new_disk_config, write_genesis_file
from .network import Network, NetworkStartError, new_network
from .starter import (
    AddressExhaustedError, AddressInUseError, CometRPCInUseError, CometStarter, NodeStartError,
    StartedNode, free_tcp_addr,
)

__all__ = [
    "DiskConfig", "NodeConfig", "new_disk_config", "write_genesis_file",
    "Network", "NetworkStartError", "new_network",
    "AddressExhaustedError", "AddressInUseError", "CometRPCInUseError", "CometStarter",
    "NodeStartError", "StartedNode", "free_tcp_addr",
]

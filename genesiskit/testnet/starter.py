# MIT License
# Copyright (c) 2025 Hashborn

"""
Node Starter

Starts one consensus node from sealed genesis bytes. The consensus engine
itself is supplied as a node factory; this module owns only the parts
around it: writing the genesis file, choosing listen addresses with
bounded retries, and enforcing a single RPC listener per process.
"""

import errno
import json
import logging
import os
import socket
import threading
from typing import Callable, Optional, Protocol

from ..protocol.config.params import CURRENT_NETWORK, NetworkConfig
from ..protocol.crypto import ed25519
from .config import NodeConfig, write_genesis_file

logger = logging.getLogger(__name__)


class NodeStartError(Exception):
    """A node failed to start. The underlying error is kept as __cause__."""


class AddressExhaustedError(NodeStartError):
    pass


class CometRPCInUseError(Exception):
    """A second node in this process asked for the RPC listener."""

    def __init__(self, requester: str, holder: str):
        super().__init__(f"RPC listener already claimed by {holder}; {requester} cannot listen")
        self.requester = requester
        self.holder = holder


class AddressInUseError(OSError):
    def __init__(self, address: str):
        super().__init__(errno.EADDRINUSE, f"address already in use: {address}")
        self.address = address


class Node(Protocol):
    """Handle returned by a node factory."""

    @property
    def is_running(self) -> bool: ...

    def stop(self) -> None: ...

    def wait(self, timeout: Optional[float] = None) -> None: ...


NodeFactory = Callable[[NodeConfig, bytes, bytes], Node]
AddrChooser = Callable[[], str]


_rpc_guard = threading.Lock()
_rpc_holder: Optional[str] = None


def _claim_rpc(requester: str) -> None:
    global _rpc_holder
    with _rpc_guard:
        if _rpc_holder is not None:
            raise CometRPCInUseError(requester=requester, holder=_rpc_holder)
        _rpc_holder = requester


def _release_rpc(requester: str) -> None:
    global _rpc_holder
    with _rpc_guard:
        if _rpc_holder == requester:
            _rpc_holder = None


def free_tcp_addr(host: str = "127.0.0.1") -> str:
    """Asks the OS for a free port. Another process may take it before use."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind((host, 0))
        port = s.getsockname()[1]
    return f"tcp://{host}:{port}"


def _is_addr_in_use(e: BaseException) -> bool:
    return isinstance(e, OSError) and e.errno == errno.EADDRINUSE


class StartedNode:
    """A running node. Stopping it gives the RPC listener back."""

    def __init__(self, node: Node, cfg: NodeConfig, rpc_holder: Optional[str]):
        self._node = node
        self._cfg = cfg
        self._rpc_holder = rpc_holder
        self._lock = threading.Lock()

    @property
    def config(self) -> NodeConfig:
        return self._cfg

    @property
    def is_running(self) -> bool:
        return self._node.is_running

    def stop(self) -> None:
        try:
            self._node.stop()
        finally:
            with self._lock:
                if self._rpc_holder is not None:
                    _release_rpc(self._rpc_holder)
                    self._rpc_holder = None

    def wait(self, timeout: Optional[float] = None) -> None:
        self._node.wait(timeout)


class CometStarter:

    def __init__(
        self,
        node_factory: NodeFactory,
        cfg: NodeConfig,
        val_key: bytes,
        genesis: bytes,
        rpc_listen: bool = False,
        addr_chooser: Optional[AddrChooser] = None,
        max_attempts: Optional[int] = None,
        config: NetworkConfig = CURRENT_NETWORK,
    ):
        self.node_factory = node_factory
        self.cfg = cfg
        self.val_key = val_key
        self.genesis = genesis
        self.rpc_listen = rpc_listen
        self.addr_chooser = addr_chooser or free_tcp_addr
        self.max_attempts = max_attempts or config.max_start_attempts

    def start(self) -> StartedNode:
        """
        Starts the node, retrying address selection when a chosen address
        turns out to be taken.

        Raises:
            CometRPCInUseError: RPC requested while another node holds it
            AddressExhaustedError: every attempt hit an address in use
            NodeStartError: any other factory failure
        """
        requester = f"{self.cfg.moniker}@{self.cfg.root_dir}"
        if self.rpc_listen:
            _claim_rpc(requester)

        try:
            self._write_files()
            node, cfg = self._start_with_retries()
        except BaseException:
            if self.rpc_listen:
                _release_rpc(requester)
            raise

        return StartedNode(node, cfg, requester if self.rpc_listen else None)

    def _write_files(self) -> None:
        write_genesis_file(self.cfg.genesis_file, self.genesis)

        pub_key = ed25519.public_key_from_private(self.val_key)
        with open(self.cfg.priv_validator_key_file, "w") as f:
            json.dump({
                "address": ed25519.address_from_pubkey(pub_key).hex().upper(),
                "pub_key": pub_key.hex(),
                "priv_key_seed": self.val_key.hex(),
            }, f, indent=2)
        os.chmod(self.cfg.priv_validator_key_file, 0o600)

    def _choose_addresses(self):
        p2p = self.addr_chooser()
        if not self.rpc_listen:
            return p2p, ""
        rpc = self.addr_chooser()
        for _ in range(self.max_attempts):
            if rpc != p2p:
                break
            rpc = self.addr_chooser()
        return p2p, rpc

    def _start_with_retries(self):
        last_error: Optional[BaseException] = None
        for attempt in range(1, self.max_attempts + 1):
            p2p, rpc = self._choose_addresses()
            if rpc and rpc == p2p:
                last_error = AddressInUseError(rpc)
                logger.warning(f"{self.cfg.moniker}: could not pick distinct p2p/rpc addresses (attempt {attempt}/{self.max_attempts})")
                continue
            cfg = self.cfg.with_addresses(p2p, rpc)
            try:
                node = self.node_factory(cfg, self.genesis, self.val_key)
            except Exception as e:
                if not _is_addr_in_use(e):
                    raise NodeStartError(f"{self.cfg.moniker}: failed to start node: {e}") from e
                last_error = e
                logger.warning(f"{self.cfg.moniker}: {e} (attempt {attempt}/{self.max_attempts})")
                continue
            logger.info(f"{self.cfg.moniker}: started, p2p {p2p}" + (f", rpc {rpc}" if rpc else ""))
            return node, cfg

        raise AddressExhaustedError(
            f"{self.cfg.moniker}: no free listen address after {self.max_attempts} attempts"
        ) from last_error

# MIT License
# Copyright (c) 2025 Hashborn

import json
import logging
import os

import pytest

from genesiskit.genesis.keys import ValidatorPrivKeys
from genesiskit.genesis.pipeline import default_genesis_only_validators
from genesiskit.protocol.config.params import CURRENT_NETWORK
from genesiskit.protocol.types.coins import new_coin
from genesiskit.testnet import (
    AddressExhaustedError, AddressInUseError, CometRPCInUseError, CometStarter, NetworkStartError,
    NodeConfig, NodeStartError, new_disk_config, new_network,
)

CHAIN_ID = "comet-rpc-test"


@pytest.fixture
def val_keys():
    return ValidatorPrivKeys.generate(3)


@pytest.fixture
def genesis(val_keys):
    staking_vals, _ = val_keys.comet_genesis_validators().staking_validators()
    amount = new_coin(CURRENT_NETWORK.bond_denom, CURRENT_NETWORK.power_reduction)
    return default_genesis_only_validators(CHAIN_ID, staking_vals, amount).run().encode()


@pytest.fixture
def started():
    """Nodes started by a test; stopped afterwards so the RPC slot is free again."""
    nodes = []
    yield nodes
    for n in nodes:
        n.stop()


def starter(tmp_path, idx, node_factory, val_keys, genesis, **kw):
    disk = new_disk_config(str(tmp_path / f"node{idx}"), NodeConfig(root_dir="", moniker=f"node{idx}"))
    return CometStarter(node_factory, disk.cfg, val_keys[idx].val, genesis, **kw)


def test_genesis_written_before_node_starts(tmp_path, val_keys, genesis, started):
    seen = {}

    def factory(cfg, genesis_bytes, val_key):
        with open(cfg.genesis_file, "rb") as f:
            seen["genesis"] = f.read()
        with open(cfg.priv_validator_key_file) as f:
            seen["key"] = json.load(f)

        class Node:
            is_running = True

            def stop(self):
                self.is_running = False

            def wait(self, timeout=None):
                pass

        return Node()

    node = starter(tmp_path, 0, factory, val_keys, genesis).start()
    started.append(node)

    assert seen["genesis"] == genesis
    assert seen["key"]["priv_key_seed"] == val_keys[0].val.hex()
    assert oct(os.stat(node.config.genesis_file).st_mode & 0o777) == "0o600"
    assert node.is_running


def test_single_rpc_listener(tmp_path, node_factory, val_keys, genesis, started):
    network = new_network(3, lambda idx: starter(
        tmp_path, idx, node_factory, val_keys, genesis, rpc_listen=(idx == 0),
    ))
    started.extend(network)

    assert len(network) == 3
    assert network[0].config.rpc_listen_address
    assert all(not n.config.rpc_listen_address for n in network[1:])
    assert all(n.is_running for n in network)


def test_second_rpc_listener_fails(tmp_path, node_factory, val_keys, genesis, started):
    with pytest.raises(NetworkStartError) as exc_info:
        new_network(3, lambda idx: starter(
            tmp_path, idx, node_factory, val_keys, genesis, rpc_listen=(idx < 2),
        ))

    err = exc_info.value
    started.extend(err.network)

    assert len(err.errors) == 1
    assert isinstance(err.find(CometRPCInUseError), CometRPCInUseError)

    # The nodes that did start keep running
    assert len(err.network) == 2
    assert all(n.is_running for n in err.network)


def test_rpc_released_on_stop(tmp_path, node_factory, val_keys, genesis):
    first = starter(tmp_path, 0, node_factory, val_keys, genesis, rpc_listen=True).start()
    first.stop()

    second = starter(tmp_path, 1, node_factory, val_keys, genesis, rpc_listen=True).start()
    second.stop()
    assert not second.is_running


def test_retries_address_in_use(tmp_path, val_keys, genesis, started, addr_cycle, caplog):
    from conftest import FakeNodeFactory

    taken = "tcp://127.0.0.1:26656"
    free = "tcp://127.0.0.1:26666"
    factory = FakeNodeFactory(taken=[taken])

    with caplog.at_level(logging.WARNING):
        node = starter(
            tmp_path, 0, factory, val_keys, genesis, addr_chooser=addr_cycle(taken, taken, free),
        ).start()
    started.append(node)

    assert node.config.p2p_listen_address == free
    assert len(factory.calls) == 3
    assert "address already in use" in caplog.text


def test_address_retries_exhausted(tmp_path, val_keys, genesis, addr_cycle):
    from conftest import FakeNodeFactory

    taken = "tcp://127.0.0.1:26656"
    factory = FakeNodeFactory(taken=[taken])

    with pytest.raises(AddressExhaustedError, match="after 3 attempts") as exc_info:
        starter(
            tmp_path, 0, factory, val_keys, genesis,
            rpc_listen=True, addr_chooser=addr_cycle(taken), max_attempts=3,
        ).start()

    assert isinstance(exc_info.value.__cause__, AddressInUseError)

    # Failed start gives the RPC slot back
    node = starter(tmp_path, 1, FakeNodeFactory(), val_keys, genesis, rpc_listen=True).start()
    node.stop()


def test_other_start_failure_wrapped(tmp_path, val_keys, genesis):
    def factory(cfg, genesis_bytes, val_key):
        raise RuntimeError("app failed to load")

    with pytest.raises(NodeStartError, match="app failed to load") as exc_info:
        starter(tmp_path, 0, factory, val_keys, genesis).start()

    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert not isinstance(exc_info.value, AddressExhaustedError)


def test_network_stop(tmp_path, node_factory, val_keys, genesis):
    network = new_network(2, lambda idx: starter(tmp_path, idx, node_factory, val_keys, genesis))
    network.stop()
    network.wait(timeout=1)

    assert not any(n.is_running for n in network)
    assert node_factory.in_use == set()

import threading

import pytest

from genesiskit.genesis.keys import ValidatorPrivKey, ValidatorPrivKeys
from genesiskit.testnet.starter import AddressInUseError

VAL_SECRET_0 = b"val-secret-0"
VAL_ADDR_0 = "3F3B076353767F046477A6E0982F808C24D1870A"
VAL_PUB_KEY_0 = "ZhVhrOUHnUwYw/GlBSBrw/0X6A261gchCRYkAxGF2jk="

DEL_SECRET_0 = b"del-secret-0"
DEL_ADDR_0 = "30D7E04DA313C31B59A46408494B4272F0A9A256"
DEL_PUB_KEY_0 = "Aol+ZF9xBuZmYJrT1QFLpZBvSfr/zEKifWyg0Xi1tsFV"
DEL_ACC_ADDR_0 = "cosmos1xrt7qndrz0p3kkdyvsyyjj6zwtc2ngjky8dcpe"


@pytest.fixture
def val_pks():
    """One validator with fixed keys."""
    return ValidatorPrivKeys([ValidatorPrivKey.from_secrets(VAL_SECRET_0, DEL_SECRET_0)])


@pytest.fixture
def staking_vals(val_pks):
    cmt_vals = val_pks.comet_genesis_validators()
    vals, _ = cmt_vals.staking_validators()
    return vals


class FakeNode:
    def __init__(self, registry, addresses):
        self._registry = registry
        self._addresses = addresses
        self.is_running = True
        self.stopped = threading.Event()

    def stop(self):
        self.is_running = False
        self._registry.release(self._addresses)
        self.stopped.set()

    def wait(self, timeout=None):
        self.stopped.wait(timeout)


class FakeNodeFactory:
    """
    Stands in for the consensus engine. Listen addresses are claimed in an
    in-memory registry; a taken address fails like a real bind would.
    """

    def __init__(self, taken=()):
        self._lock = threading.Lock()
        self.in_use = set(taken)
        self.calls = []

    def release(self, addresses):
        with self._lock:
            self.in_use.difference_update(addresses)

    def __call__(self, cfg, genesis, val_key):
        addresses = [a for a in (cfg.p2p_listen_address, cfg.rpc_listen_address) if a]
        with self._lock:
            self.calls.append(cfg)
            for addr in addresses:
                if addr in self.in_use:
                    raise AddressInUseError(addr)
            self.in_use.update(addresses)
        return FakeNode(self, addresses)


@pytest.fixture
def node_factory():
    return FakeNodeFactory()


def cycle_addrs(*addrs):
    """Deterministic address chooser that repeats the given sequence."""
    state = {"i": 0}

    def choose():
        addr = addrs[state["i"] % len(addrs)]
        state["i"] += 1
        return addr

    return choose


@pytest.fixture
def addr_cycle():
    return cycle_addrs

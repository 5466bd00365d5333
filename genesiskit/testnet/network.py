# MIT License
# Copyright (c) 2025 Hashborn

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Type

from .starter import CometStarter, StartedNode

logger = logging.getLogger(__name__)


class NetworkStartError(Exception):
    """
    One or more nodes failed to start.

    errors holds every failure; network holds the nodes that did start and
    are still running, so the caller decides whether to stop them.
    """

    def __init__(self, errors: List[BaseException], network: "Network"):
        summary = "; ".join(f"{type(e).__name__}: {e}" for e in errors)
        super().__init__(f"{len(errors)} node(s) failed to start: {summary}")
        self.errors = errors
        self.network = network

    def find(self, error_type: Type[BaseException]) -> Optional[BaseException]:
        for e in self.errors:
            if isinstance(e, error_type):
                return e
        return None


class Network(tuple):
    """Started nodes, in validator order."""

    def stop(self) -> None:
        """Stops every node, then re-raises the first stop failure."""
        first_error: Optional[BaseException] = None
        for node in self:
            try:
                node.stop()
            except Exception as e:
                logger.error(f"Error stopping node {node.config.moniker}: {e}")
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error

    def wait(self, timeout: Optional[float] = None) -> None:
        for node in self:
            node.wait(timeout)


def new_network(n: int, make_starter: Callable[[int], CometStarter]) -> Network:
    """Starts n nodes in parallel, one starter per validator index."""

    def start(idx: int) -> StartedNode:
        return make_starter(idx).start()

    with ThreadPoolExecutor(max_workers=n) as pool:
        futures = [pool.submit(start, i) for i in range(n)]

    started: List[StartedNode] = []
    errors: List[BaseException] = []
    for idx, fut in enumerate(futures):
        err = fut.exception()
        if err is not None:
            logger.error(f"Node {idx} failed to start: {err}")
            errors.append(err)
        else:
            started.append(fut.result())

    if errors:
        raise NetworkStartError(errors, Network(started))

    logger.info(f"Started network of {n} nodes")
    return Network(started)

"""Start one poller per node and hand back the cluster tail."""

import asyncio
from typing import Callable, Iterable

from .config import TailConfig
from .debug_client import DebugClient, IDebugClient
from .decoder import EventDecoderRegistry
from .logging_config import get_logger
from .models import NodeDescriptor
from .poller import NodePoller
from .tail import ITail, Tail

logger = get_logger(__name__)

ClientFactory = Callable[[NodeDescriptor, str], IDebugClient]


class SpawnError(RuntimeError):
    """The cluster tail could not be wired up. No poller was started."""


async def spawn_tail(
    nodes: Iterable[NodeDescriptor],
    config: TailConfig | None = None,
    client_factory: ClientFactory = DebugClient,
    registry: EventDecoderRegistry | None = None,
) -> ITail:
    """
    Connect to every node and start polling it in the background.

    All clients are built before any poller starts, so a bad descriptor
    leaves nothing running. Returns without waiting on the pollers; events
    may already be arriving when the caller gets the tail.

    Args:
        nodes: Resolved cluster members.
        config: Poller settings. Defaults to TailConfig().
        client_factory: Builds the client for a node from (node, label).
        registry: Event decoders shared by all pollers.

    Raises:
        SpawnError: No nodes, duplicate identities, or a client failed to build.
    """
    config = config or TailConfig()
    nodes = list(nodes)
    if not nodes:
        raise SpawnError("Cluster has no nodes to tail")

    identities = [node.identity for node in nodes]
    duplicates = sorted({i for i in identities if identities.count(i) > 1})
    if duplicates:
        raise SpawnError(f"Duplicate node identities: {', '.join(duplicates)}")

    clients: list[IDebugClient] = []
    for node in nodes:
        label = f"log-tail-{node.identity}"
        try:
            clients.append(client_factory(node, label))
        except Exception as e:
            await asyncio.gather(
                *(client.aclose() for client in clients), return_exceptions=True
            )
            raise SpawnError(f"Failed to create debug client for {node}: {e}") from e

    tail = Tail()
    for node, client in zip(nodes, clients):
        poller = NodePoller(node, client, tail, config, registry)
        task = asyncio.create_task(poller.run(), name=client.label)
        tail.attach(poller, task)

    logger.info("Tailing %d nodes", len(nodes))
    return tail

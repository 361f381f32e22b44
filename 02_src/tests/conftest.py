"""Pytest configuration and fixtures."""

import asyncio
import json
import sys
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import httpx
import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def node():
    """A single node descriptor."""
    from cluster_tail.models import NodeDescriptor

    return NodeDescriptor(identity="node-1", address="10.0.0.1")


@pytest.fixture
def fast_config():
    """Poller config with short sleeps so loops spin quickly in tests."""
    from cluster_tail.config import TailConfig

    return TailConfig(
        verbose_failures=True,
        request_timeout=1.0,
        failure_backoff=0.01,
        poll_interval=0.01,
    )


@pytest.fixture
def make_raw():
    """Build RawEvents with a dict or string payload."""
    from cluster_tail.models import RawEvent

    def _make(name="committed", payload=None, timestamp=1000):
        if payload is None:
            payload = {"block_id": "abc", "round": 5, "parent_id": "xyz"}
        body = payload if isinstance(payload, str) else json.dumps(payload)
        return RawEvent(name=name, timestamp=timestamp, payload=body)

    return _make


@pytest.fixture
def mock_client():
    """Debug client whose get_events is an AsyncMock."""
    client = Mock()
    client.label = "log-tail-node-1"
    client.get_events = AsyncMock(return_value=[])
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def sim_cluster():
    """
    Simulated nodes plus a client factory routing each node to its app.

    Nodes listed in ``unreachable`` refuse every connection.
    """
    from cluster_tail.debug_client import DebugClient
    from cluster_tail.models import NodeDescriptor
    from sim import SimNode, create_sim_node_app

    def _build(identities, unreachable=()):
        sims = {identity: SimNode(identity) for identity in identities}
        nodes = [
            NodeDescriptor(identity=identity, address=f"10.0.0.{i + 1}")
            for i, identity in enumerate(identities)
        ]

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        def factory(node, label):
            if node.identity in unreachable:
                transport = httpx.MockTransport(refuse)
            else:
                transport = httpx.ASGITransport(
                    app=create_sim_node_app(sims[node.identity])
                )
            return DebugClient(node, label, transport=transport)

        return nodes, sims, factory

    return _build


@pytest.fixture
def collect():
    """Pull ``count`` events from a tail, failing if they do not arrive."""

    async def _collect(tail, count, timeout=5.0):
        events = []
        for _ in range(count):
            events.append(await tail.next_event(timeout=timeout))
        return events

    return _collect


@pytest.fixture
def wait_for():
    """Await a condition, polling the event loop."""

    async def _wait_for(predicate, timeout=5.0):
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                raise AssertionError("Condition not met in time")
            await asyncio.sleep(0.01)

    return _wait_for


@pytest_asyncio.fixture
async def tail():
    """Bare tail, stopped after the test."""
    from cluster_tail.tail import Tail

    t = Tail()
    yield t
    await t.stop()

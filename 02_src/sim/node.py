"""Simulated validator node serving the debug interface."""

import asyncio
import hashlib
import json
import time
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI

from cluster_tail.logging_config import get_logger
from cluster_tail.models import GetEventsResponse, RawEvent

logger = get_logger(__name__)

GENESIS_ID = "0" * 64


class SimNode:
    """Event log of one fake validator that commits a linear chain."""

    def __init__(self, identity: str):
        self.identity = identity
        self._round = 0
        self._head = GENESIS_ID
        self._log: list[RawEvent] = []

    @property
    def round(self) -> int:
        return self._round

    @property
    def head(self) -> str:
        return self._head

    def emit(self, name: str, payload: Any, timestamp: int | None = None) -> RawEvent:
        """Append an event. Strings are sent as-is, anything else as JSON."""
        body = payload if isinstance(payload, str) else json.dumps(payload)
        event = RawEvent(
            name=name,
            timestamp=int(time.time() * 1000) if timestamp is None else timestamp,
            payload=body,
        )
        self._log.append(event)
        return event

    def commit(self) -> RawEvent:
        """Commit the next block on top of the current head."""
        self._round += 1
        block_id = hashlib.sha256(
            f"{self.identity}:{self._round}:{self._head}".encode()
        ).hexdigest()
        event = self.emit(
            "committed",
            {"block_id": block_id, "round": self._round, "parent_id": self._head},
        )
        self._head = block_id
        return event

    def take_events(self) -> list[RawEvent]:
        """Drain the log; the debug interface reports each event once."""
        events, self._log = self._log, []
        return events


def create_sim_node_app(node: SimNode, commit_interval: float | None = None) -> FastAPI:
    """
    Create a FastAPI app exposing ``node`` at ``GET /events``.

    Args:
        node: The simulated node.
        commit_interval: If set, commit a block every this many seconds
            while the app is running.
    """

    async def _produce() -> None:
        while True:
            await asyncio.sleep(commit_interval)
            node.commit()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        task = asyncio.create_task(_produce()) if commit_interval else None
        logger.info("Sim node %s started", node.identity)
        yield
        if task:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    app = FastAPI(
        title=f"Sim node {node.identity}",
        description="Simulated validator debug interface",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.get("/events", response_model=GetEventsResponse, response_model_by_alias=True)
    async def get_events() -> GetEventsResponse:
        """Events recorded since the previous request."""
        return GetEventsResponse(events=node.take_events())

    return app

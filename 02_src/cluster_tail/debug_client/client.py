"""HTTP client for a node's debug interface."""

from typing import Protocol

import httpx
from pydantic import ValidationError

from ..models import GetEventsResponse, NodeDescriptor, RawEvent


class DebugClientError(Exception):
    """Transport-level failure talking to a debug interface."""


class IDebugClient(Protocol):
    """Request/response access to one node's recent events."""

    label: str

    async def get_events(self, timeout: float) -> list[RawEvent]:
        """Fetch events recorded since the previous request."""
        ...

    async def aclose(self) -> None:
        """Release the underlying connection pool."""
        ...


class DebugClient:
    """One labelled httpx connection pool per monitored node."""

    def __init__(
        self,
        node: NodeDescriptor,
        label: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not node.identity:
            raise ValueError("Node identity must not be empty")
        if not node.address:
            raise ValueError(f"Node {node.identity} has no address")
        if not 0 < node.port < 65536:
            raise ValueError(f"Node {node.identity} has invalid port {node.port}")

        self._node = node
        self.label = label or f"log-tail-{node.identity}"
        # Raises httpx.InvalidURL for addresses httpx cannot route to
        self._client = httpx.AsyncClient(
            base_url=node.base_url,
            headers={"User-Agent": self.label},
            transport=transport,
        )

    @property
    def node(self) -> NodeDescriptor:
        """Node this client talks to."""
        return self._node

    async def get_events(self, timeout: float) -> list[RawEvent]:
        """Fetch recent events from the node."""
        try:
            response = await self._client.get("/events", timeout=timeout)
            response.raise_for_status()
            body = GetEventsResponse.model_validate(response.json())
        except httpx.HTTPError as e:
            raise DebugClientError(f"{type(e).__name__}: {e}") from e
        except (ValidationError, ValueError) as e:
            raise DebugClientError(f"Bad response envelope: {e}") from e

        return body.events

    async def aclose(self) -> None:
        """Close the connection pool."""
        await self._client.aclose()

"""Wire models of the node debug interface."""

from pydantic import BaseModel, ConfigDict, Field


class RawEvent(BaseModel):
    """One undecoded event as returned by a node."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    timestamp: int  # milliseconds since epoch, node clock
    payload: str = Field(alias="json")  # JSON-encoded event body


class GetEventsResponse(BaseModel):
    """Response body of ``GET /events``."""

    events: list[RawEvent] = Field(default_factory=list)

"""Journal records and read results."""

from typing import Iterable, NamedTuple

from pydantic import BaseModel, ConfigDict, Field


class LoadGameRecord(BaseModel):
    """The session-start record written near the top of every journal."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    event: str = Field(description="Journal event type, always 'LoadGame' here")
    commander: str = Field(alias="Commander", description="Name of the session owner")


class ReadResult(NamedTuple):
    """Lines read from one journal and the session they belong to."""

    session: str
    lines: Iterable[str]

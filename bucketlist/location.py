"""Data models for saved places."""

from typing import List, NamedTuple
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class Coordinate(NamedTuple):
    """A geographic point as (latitude, longitude)."""
    latitude: float
    longitude: float


class Location(BaseModel):
    """A saved point of interest.

    Two locations are equal only when every field matches, which is how the
    store finds the entry to replace on update.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    name: str
    description: str = ""
    latitude: float
    longitude: float

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)


# Sample location for previews and tests
EXAMPLE_LOCATION = Location(
    name="Buckingham Palace",
    description="Lit by over 40,000 lightbulbs.",
    latitude=51.501,
    longitude=-0.141,
)

# Serializer for the whole saved collection (a JSON array of locations)
LocationCollection = TypeAdapter(List[Location])

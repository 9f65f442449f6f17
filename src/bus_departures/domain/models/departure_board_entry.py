"""Departure board entry models sent to browsers."""

from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic.alias_generators import to_camel


class FormattedDeparture(BaseModel):
    """Display-formatted next departure of a bus line."""

    model_config = ConfigDict(frozen=True)

    date: str  # YYYY-MM-DD
    time: str  # HH:MM
    remaining: str | None = None  # HH:MM:SS


class DepartureBoardEntry(BaseModel):
    """One row of the departure board."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    bus_number: str
    start_point: str
    end_point: str
    first_departure_time: str
    frequency_minutes: int
    next_departure: FormattedDeparture


# Serializes a whole board the same way for pull responses and pushes
DEPARTURE_BOARD = TypeAdapter(list[DepartureBoardEntry])

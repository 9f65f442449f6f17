"""Next departure domain model."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from bus_departures.domain.models.bus_line import BusLine


@dataclass(frozen=True)
class NextDeparture:
    """The soonest upcoming departure of a bus line."""

    bus_line: BusLine
    departure: datetime
    remaining: timedelta

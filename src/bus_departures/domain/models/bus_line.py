"""Bus line domain model."""

from dataclasses import dataclass
from datetime import time


@dataclass(frozen=True)
class BusLine:
    """A bus line with a daily repeating schedule."""

    bus_number: str
    start_point: str
    end_point: str
    first_departure_time: time  # Departure anchor, restarts every calendar day
    frequency_minutes: int  # Minutes between departures within one day

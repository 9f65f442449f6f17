"""Application services."""

from bus_departures.application.services.next_departure_calculator import (
    calculate_next_departure,
)
from bus_departures.application.services.schedule_service import ScheduleService

__all__ = ["ScheduleService", "calculate_next_departure"]

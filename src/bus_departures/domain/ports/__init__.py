"""Ports (interfaces) for the ports-and-adapters architecture."""

from bus_departures.domain.ports.departure_board_service import DepartureBoardService
from bus_departures.domain.ports.display_adapter import DisplayAdapter
from bus_departures.domain.ports.schedule_repository import ScheduleRepository

__all__ = [
    "DepartureBoardService",
    "DisplayAdapter",
    "ScheduleRepository",
]

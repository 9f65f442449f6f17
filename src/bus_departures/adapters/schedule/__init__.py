"""Schedule source adapters."""

from bus_departures.adapters.schedule.file_schedule_repository import FileScheduleRepository

__all__ = ["FileScheduleRepository"]

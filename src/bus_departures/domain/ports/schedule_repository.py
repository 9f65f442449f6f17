"""Schedule repository port."""

from typing import Protocol

from bus_departures.domain.models.bus_line import BusLine


class ScheduleRepository(Protocol):
    """Port for loading the static bus schedule."""

    async def load(self) -> list[BusLine]:
        """Load all bus lines in source order.

        Raises:
            ScheduleLoadError: The source is missing or malformed.
            ScheduleConfigurationError: A line has an invalid anchor or frequency.
        """
        ...

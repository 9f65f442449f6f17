"""Departure board service port."""

from datetime import datetime
from typing import Protocol

from bus_departures.domain.models.departure_board_entry import DepartureBoardEntry


class DepartureBoardService(Protocol):
    """Port for building the formatted departure board."""

    async def get_departure_board(self, now: datetime) -> list[DepartureBoardEntry]:
        """Build the departure board for the given instant, soonest first."""
        ...

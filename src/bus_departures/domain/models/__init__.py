"""Domain models for bus departures."""

from bus_departures.domain.models.bus_line import BusLine
from bus_departures.domain.models.client_info import ClientInfo
from bus_departures.domain.models.departure_board_entry import (
    DEPARTURE_BOARD,
    DepartureBoardEntry,
    FormattedDeparture,
)
from bus_departures.domain.models.error_details import ErrorDetails
from bus_departures.domain.models.next_departure import NextDeparture

__all__ = [
    "DEPARTURE_BOARD",
    "BusLine",
    "ClientInfo",
    "DepartureBoardEntry",
    "ErrorDetails",
    "FormattedDeparture",
    "NextDeparture",
]

"""Contracts (protocols) implemented by adapters."""

from bus_departures.domain.contracts.departure_formatter import DepartureFormatterProtocol
from bus_departures.domain.contracts.departure_pusher import DeparturePusherProtocol
from bus_departures.domain.contracts.static_file_server import StaticFileServerProtocol

__all__ = [
    "DepartureFormatterProtocol",
    "DeparturePusherProtocol",
    "StaticFileServerProtocol",
]

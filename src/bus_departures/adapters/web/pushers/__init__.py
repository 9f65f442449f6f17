"""Per-subscriber departure board pushers."""

from bus_departures.adapters.web.pushers.departure_pusher import DeparturePusher

__all__ = ["DeparturePusher"]

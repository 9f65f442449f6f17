"""Web adapters for the departure board."""

from bus_departures.adapters.web.starlette_app import StarletteWebAdapter

__all__ = ["StarletteWebAdapter"]

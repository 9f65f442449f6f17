"""Formatters for the departure board."""

from bus_departures.adapters.web.formatters.departure_formatter import DepartureFormatter

__all__ = ["DepartureFormatter"]

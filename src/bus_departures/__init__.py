"""Live bus departures dashboard."""

__version__ = "0.1.0"

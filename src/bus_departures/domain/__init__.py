"""Domain layer for bus departures."""

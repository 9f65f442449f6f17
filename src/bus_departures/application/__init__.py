"""Application layer for bus departures."""

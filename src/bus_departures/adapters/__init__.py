"""Adapters for bus departures."""

"""Formatter for departure dates, times and remaining durations."""

from datetime import datetime, timedelta

from bus_departures.domain.contracts.departure_formatter import DepartureFormatterProtocol


class DepartureFormatter(DepartureFormatterProtocol):
    """Formats departures in the zone they were computed in."""

    def format_date(self, departure: datetime) -> str:
        """Format departure date as YYYY-MM-DD."""
        return departure.strftime("%Y-%m-%d")

    def format_time(self, departure: datetime) -> str:
        """Format departure time as HH:MM."""
        return departure.strftime("%H:%M")

    def format_remaining(self, remaining: timedelta) -> str:
        """Format remaining time as HH:MM:SS, truncating fractions of a second.

        Hours are not wrapped, so a departure 30 hours away shows as "30:00:00".
        """
        total_seconds = max(int(remaining.total_seconds()), 0)
        hours, rest = divmod(total_seconds, 3600)
        minutes, seconds = divmod(rest, 60)
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"

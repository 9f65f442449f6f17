"""Protocol for formatting departures."""

from datetime import datetime, timedelta
from typing import Protocol


class DepartureFormatterProtocol(Protocol):
    """Protocol for formatting departure instants and durations for display."""

    def format_date(self, departure: datetime) -> str:
        """Format the departure date.

        Args:
            departure: The departure instant.

        Returns:
            Date string like "2024-01-15".
        """
        ...

    def format_time(self, departure: datetime) -> str:
        """Format the departure time of day.

        Args:
            departure: The departure instant.

        Returns:
            Time string like "14:30".
        """
        ...

    def format_remaining(self, remaining: timedelta) -> str:
        """Format the time left until departure.

        Args:
            remaining: Duration until departure.

        Returns:
            Duration string like "01:05:09".
        """
        ...

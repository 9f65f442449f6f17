"""Schedule service building the departure board."""

import logging
from datetime import UTC, datetime, timedelta

from bus_departures.application.services.next_departure_calculator import (
    calculate_next_departure,
)
from bus_departures.domain.contracts.departure_formatter import DepartureFormatterProtocol
from bus_departures.domain.models.departure_board_entry import (
    DepartureBoardEntry,
    FormattedDeparture,
)
from bus_departures.domain.models.next_departure import NextDeparture
from bus_departures.domain.ports.schedule_repository import ScheduleRepository

logger = logging.getLogger(__name__)


class ScheduleService:
    """Service computing each bus line's next departure, soonest first."""

    def __init__(
        self,
        schedule_repository: ScheduleRepository,
        formatter: DepartureFormatterProtocol,
    ) -> None:
        """Initialize with a schedule repository and a departure formatter."""
        self._schedule_repository = schedule_repository
        self._formatter = formatter

    async def get_next_departures(self, now: datetime) -> list[NextDeparture]:
        """Compute the next departure of every bus line.

        The schedule is loaded once per call. Results are sorted by departure
        instant; lines departing at the same instant keep their schedule order.

        Args:
            now: The current instant, timezone-aware. Its zone is the schedule zone.
        """
        if now.tzinfo is None:
            raise ValueError("now must be timezone-aware")

        bus_lines = await self._schedule_repository.load()
        now_utc = now.astimezone(UTC)

        next_departures: list[NextDeparture] = []
        for bus_line in bus_lines:
            departure = calculate_next_departure(
                now, bus_line.first_departure_time, bus_line.frequency_minutes
            )
            # Elapsed time, so measured in UTC
            remaining = max(departure.astimezone(UTC) - now_utc, timedelta(0))
            next_departures.append(
                NextDeparture(bus_line=bus_line, departure=departure, remaining=remaining)
            )

        next_departures.sort(key=lambda next_departure: next_departure.departure)
        logger.debug(f"Computed next departures for {len(next_departures)} bus line(s) at {now}")
        return next_departures

    async def get_departure_board(self, now: datetime) -> list[DepartureBoardEntry]:
        """Build the display-formatted departure board for ``now``."""
        next_departures = await self.get_next_departures(now)
        return [self._to_board_entry(next_departure) for next_departure in next_departures]

    def _to_board_entry(self, next_departure: NextDeparture) -> DepartureBoardEntry:
        bus_line = next_departure.bus_line
        return DepartureBoardEntry(
            bus_number=bus_line.bus_number,
            start_point=bus_line.start_point,
            end_point=bus_line.end_point,
            first_departure_time=bus_line.first_departure_time.strftime("%H:%M"),
            frequency_minutes=bus_line.frequency_minutes,
            next_departure=FormattedDeparture(
                date=self._formatter.format_date(next_departure.departure),
                time=self._formatter.format_time(next_departure.departure),
                remaining=self._formatter.format_remaining(next_departure.remaining),
            ),
        )

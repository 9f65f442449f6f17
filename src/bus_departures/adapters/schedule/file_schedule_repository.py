"""Schedule repository reading bus lines from a JSON or TOML file."""

from __future__ import annotations

import asyncio
import json
import logging
import re
import tomllib
from datetime import time
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from bus_departures.adapters.schedule.bus_line_record import BUS_LINE_RECORDS, BusLineRecord
from bus_departures.domain.errors import ScheduleConfigurationError, ScheduleLoadError
from bus_departures.domain.models.bus_line import BusLine

logger = logging.getLogger(__name__)

_DEPARTURE_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_departure_time(value: str) -> time:
    """Parse an "HH:MM" departure anchor.

    Raises:
        ValueError: The value is not a time of day between 00:00 and 23:59.
    """
    match = _DEPARTURE_TIME_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"expected HH:MM, got '{value}'")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"time of day out of range: '{value}'")
    return time(hour, minute)


class FileScheduleRepository:
    """Loads the bus schedule from a file on every call.

    ``.toml`` files are read as an array of ``[[buses]]`` tables, anything else
    as a JSON array. The file is re-read each time, so edits show up on the
    next tick without a restart.
    """

    def __init__(self, schedule_file: str | Path) -> None:
        """Initialize the repository.

        Args:
            schedule_file: Path to the schedule file.
        """
        self.schedule_file = Path(schedule_file)

    async def load(self) -> list[BusLine]:
        """Load all bus lines in file order."""
        try:
            raw = await asyncio.to_thread(self.schedule_file.read_bytes)
        except OSError as e:
            raise ScheduleLoadError(f"Cannot read schedule file {self.schedule_file}: {e}") from e

        data = self._parse(raw)
        try:
            records = BUS_LINE_RECORDS.validate_python(data)
        except ValidationError as e:
            raise ScheduleLoadError(
                f"Schedule file {self.schedule_file} does not contain valid bus lines: "
                f"{e.error_count()} error(s), first: {e.errors()[0]['msg']}"
            ) from e

        bus_lines = [self._to_bus_line(index, record) for index, record in enumerate(records)]
        logger.debug(f"Loaded {len(bus_lines)} bus line(s) from {self.schedule_file}")
        return bus_lines

    def _parse(self, raw: bytes) -> Any:
        """Decode the raw file content into Python data."""
        if self.schedule_file.suffix.lower() == ".toml":
            try:
                document = tomllib.loads(raw.decode("utf-8"))
            except (UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
                raise ScheduleLoadError(
                    f"Schedule file {self.schedule_file} is not valid TOML: {e}"
                ) from e
            if "buses" not in document:
                raise ScheduleLoadError(
                    f"Schedule file {self.schedule_file} has no [[buses]] tables"
                )
            return document["buses"]
        try:
            return json.loads(raw)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ScheduleLoadError(
                f"Schedule file {self.schedule_file} is not valid JSON: {e}"
            ) from e

    def _to_bus_line(self, index: int, record: BusLineRecord) -> BusLine:
        """Validate departure anchor and frequency, rejecting the whole batch on error."""
        try:
            first_departure_time = parse_departure_time(record.first_departure_time)
        except ValueError as e:
            raise ScheduleConfigurationError(
                f"Bus line #{index} ({record.bus_number}) has an invalid firstDepartureTime: {e}"
            ) from e
        if record.frequency_minutes <= 0:
            raise ScheduleConfigurationError(
                f"Bus line #{index} ({record.bus_number}) has a non-positive frequencyMinutes: "
                f"{record.frequency_minutes}"
            )
        return BusLine(
            bus_number=record.bus_number,
            start_point=record.start_point,
            end_point=record.end_point,
            first_departure_time=first_departure_time,
            frequency_minutes=record.frequency_minutes,
        )

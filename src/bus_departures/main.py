"""Main entry point for the bus departures dashboard."""

import asyncio
import logging
import sys
from datetime import datetime

from pydantic import ValidationError

from bus_departures.adapters.config import AppConfig
from bus_departures.adapters.schedule import FileScheduleRepository
from bus_departures.adapters.web import StarletteWebAdapter
from bus_departures.adapters.web.formatters import DepartureFormatter
from bus_departures.application.services import ScheduleService
from bus_departures.domain.errors import ScheduleError

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging to stderr."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


async def main() -> None:
    """Main application entry point."""
    try:
        config = AppConfig()
    except ValidationError as e:
        configure_logging()
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    configure_logging(config.log_level)

    schedule_repository = FileScheduleRepository(config.schedule_file)

    # Check the schedule once so bad data is reported before serving
    try:
        bus_lines = await schedule_repository.load()
    except ScheduleError as e:
        logger.error(f"Invalid bus schedule: {e}")
        sys.exit(1)

    logger.info(
        f"Loaded {len(bus_lines)} bus line(s) from '{config.schedule_file}', "
        f"timezone {config.timezone} (now {datetime.now(config.zone):%Y-%m-%d %H:%M})"
    )
    if not bus_lines:
        logger.warning("The bus schedule is empty, the dashboard will show no departures.")

    schedule_service = ScheduleService(schedule_repository, DepartureFormatter())
    display_adapter = StarletteWebAdapter(schedule_service, config)

    try:
        await display_adapter.start()
    finally:
        logger.info("Shutting down...")
        await display_adapter.stop()


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()

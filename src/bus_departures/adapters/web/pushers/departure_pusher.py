"""Departure pusher sending the board to one subscriber on a fixed tick."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from bus_departures.domain.contracts.departure_pusher import DeparturePusherProtocol
from bus_departures.domain.errors import ScheduleError
from bus_departures.domain.models.departure_board_entry import DEPARTURE_BOARD

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from datetime import datetime

    from bus_departures.domain.ports import DepartureBoardService

logger = logging.getLogger(__name__)


class DeparturePusher(DeparturePusherProtocol):
    """Rebuilds and sends the departure board to a single subscriber every tick.

    Ticks run sequentially in one task, so a subscriber never receives boards
    out of order. An error while building the board skips the tick; a failed
    send ends the loop.
    """

    def __init__(
        self,
        board_service: DepartureBoardService,
        send: Callable[[str], Awaitable[None]],
        clock: Callable[[], datetime],
        interval_seconds: float = 1.0,
        subscriber_id: str = "anonymous",
    ) -> None:
        """Initialize the pusher.

        Args:
            board_service: Service building the departure board.
            send: Coroutine function delivering a JSON text frame to the subscriber.
            clock: Returns the current instant in the schedule timezone.
            interval_seconds: Seconds between ticks.
            subscriber_id: Identifier used in log messages.
        """
        self.board_service = board_service
        self.send = send
        self.clock = clock
        self.interval_seconds = interval_seconds
        self.subscriber_id = subscriber_id
        self.pushed_count = 0
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        """Whether the push loop is still active."""
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the push loop."""
        if self.running:
            logger.warning(f"Departure pusher for subscriber {self.subscriber_id} already running")
            return

        self._task = asyncio.create_task(self._push_loop())
        logger.debug(f"Started departure pusher for subscriber {self.subscriber_id}")

    async def stop(self) -> None:
        """Stop the push loop and wait until it has finished."""
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                logger.debug(f"Departure pusher for subscriber {self.subscriber_id} cancelled")
        self._task = None
        logger.debug(f"Stopped departure pusher for subscriber {self.subscriber_id}")

    async def _push_loop(self) -> None:
        """Push immediately, then once per interval until stopped or the send fails."""
        while await self.push_once():
            await asyncio.sleep(self.interval_seconds)

    async def push_once(self) -> bool:
        """Run one tick.

        Returns:
            False when the subscriber can no longer be reached, True otherwise.
        """
        try:
            board = await self.board_service.get_departure_board(self.clock())
        except ScheduleError as e:
            logger.error(f"Skipping push to subscriber {self.subscriber_id}: {e}")
            return True
        except Exception:
            logger.exception(
                f"Unexpected error building departures for subscriber {self.subscriber_id}, "
                "skipping push"
            )
            return True

        payload = DEPARTURE_BOARD.dump_json(board, by_alias=True).decode("utf-8")
        try:
            await self.send(payload)
        except Exception as e:
            logger.warning(
                f"Failed to push departures to subscriber {self.subscriber_id}, "
                f"stopping updates: {e}"
            )
            return False

        self.pushed_count += 1
        return True

"""Tests for DeparturePusher behavior."""

import asyncio
import json
import logging
from datetime import UTC, datetime, time

import pytest

from bus_departures.adapters.web.formatters import DepartureFormatter
from bus_departures.adapters.web.pushers import DeparturePusher
from bus_departures.application.services import ScheduleService
from bus_departures.domain.errors import ScheduleConfigurationError, ScheduleLoadError
from tests.test_services import MockScheduleRepository, make_bus_line

FIXED_NOW = datetime(2024, 1, 15, 8, 30, tzinfo=UTC)


class RecordingSender:
    """Collects pushed frames, optionally failing after a number of sends."""

    def __init__(self, fail_after: int | None = None) -> None:
        self.frames: list[str] = []
        self.fail_after = fail_after

    async def __call__(self, text: str) -> None:
        if self.fail_after is not None and len(self.frames) >= self.fail_after:
            raise RuntimeError("socket closed")
        self.frames.append(text)


@pytest.fixture
def repo() -> MockScheduleRepository:
    """Repository with two bus lines."""
    return MockScheduleRepository(
        [make_bus_line("late", time(10, 0)), make_bus_line("soon", time(9, 0))]
    )


def _pusher(
    repo: MockScheduleRepository, sender: RecordingSender, interval: float = 0.01
) -> DeparturePusher:
    return DeparturePusher(
        board_service=ScheduleService(repo, DepartureFormatter()),
        send=sender,
        clock=lambda: FIXED_NOW,
        interval_seconds=interval,
        subscriber_id="test",
    )


@pytest.mark.asyncio
async def test_push_once_sends_sorted_board_as_json(repo: MockScheduleRepository) -> None:
    """Given a schedule, when pushing once, then the sorted board is sent as a JSON array."""
    sender = RecordingSender()
    pusher = _pusher(repo, sender)

    assert await pusher.push_once() is True

    payload = json.loads(sender.frames[0])
    assert [entry["busNumber"] for entry in payload] == ["soon", "late"]
    assert payload[0]["nextDeparture"] == {
        "date": "2024-01-15",
        "time": "09:00",
        "remaining": "00:30:00",
    }
    assert pusher.pushed_count == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error", [ScheduleLoadError("file gone"), ScheduleConfigurationError("bad anchor")]
)
async def test_schedule_error_skips_tick_without_stopping(error: Exception) -> None:
    """Given a failing schedule, when pushing, then nothing is sent and the loop continues."""
    sender = RecordingSender()
    pusher = _pusher(MockScheduleRepository(error=error), sender)

    assert await pusher.push_once() is True
    assert sender.frames == []


@pytest.mark.asyncio
async def test_unexpected_error_is_logged_and_loop_keeps_running(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Given an unexpected build failure, when ticking, then it is logged and the loop continues."""
    sender = RecordingSender()
    pusher = _pusher(MockScheduleRepository(error=RuntimeError("boom")), sender)

    with caplog.at_level(logging.ERROR):
        await pusher.start()
        await asyncio.sleep(0.05)
        assert pusher.running is True
        await pusher.stop()

    assert sender.frames == []
    assert any(
        record.exc_info is not None and "Unexpected error" in record.getMessage()
        for record in caplog.records
    )


@pytest.mark.asyncio
async def test_huge_frequency_line_is_pushed() -> None:
    """Given a line whose frequency spans many days, when pushing, then tomorrow's anchor is sent."""
    sender = RecordingSender()
    pusher = _pusher(MockScheduleRepository([make_bus_line("rare", time(8, 0), 10**12)]), sender)

    assert await pusher.push_once() is True

    payload = json.loads(sender.frames[0])
    assert payload[0]["nextDeparture"]["date"] == "2024-01-16"
    assert payload[0]["nextDeparture"]["time"] == "08:00"


@pytest.mark.asyncio
async def test_send_failure_ends_loop(repo: MockScheduleRepository) -> None:
    """Given a broken socket, when the send fails, then the push loop ends by itself."""
    sender = RecordingSender(fail_after=2)
    pusher = _pusher(repo, sender)

    await pusher.start()
    for _ in range(100):
        if not pusher.running:
            break
        await asyncio.sleep(0.01)

    assert pusher.running is False
    assert len(sender.frames) == 2
    await pusher.stop()


@pytest.mark.asyncio
async def test_loop_pushes_repeatedly_until_stopped(repo: MockScheduleRepository) -> None:
    """Given a running pusher, when ticks pass, then boards keep arriving until stop."""
    sender = RecordingSender()
    pusher = _pusher(repo, sender)

    await pusher.start()
    for _ in range(100):
        if len(sender.frames) >= 3:
            break
        await asyncio.sleep(0.01)
    await pusher.stop()
    delivered = len(sender.frames)

    assert delivered >= 3
    assert pusher.running is False
    await asyncio.sleep(0.05)
    assert len(sender.frames) == delivered


@pytest.mark.asyncio
async def test_stop_cancels_within_one_tick(repo: MockScheduleRepository) -> None:
    """Given a long interval, when stopping, then the loop ends without waiting for the next tick."""
    sender = RecordingSender()
    pusher = _pusher(repo, sender, interval=60)

    await pusher.start()
    await asyncio.sleep(0.01)
    await asyncio.wait_for(pusher.stop(), timeout=1)

    assert pusher.running is False
    assert len(sender.frames) == 1


@pytest.mark.asyncio
async def test_start_twice_keeps_single_loop(repo: MockScheduleRepository) -> None:
    """Given a running pusher, when starting again, then no second loop is created."""
    sender = RecordingSender()
    pusher = _pusher(repo, sender, interval=60)

    await pusher.start()
    await pusher.start()
    await asyncio.sleep(0.01)
    await pusher.stop()

    assert len(sender.frames) == 1

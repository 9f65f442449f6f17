"""Tests for the push subscriber registry."""

import asyncio
from unittest.mock import MagicMock

import pytest

from bus_departures.adapters.web.state import SubscriberRegistry


class FakePusher:
    """Pusher double recording lifecycle calls."""

    def __init__(self, subscriber_id: str, send: object) -> None:
        self.subscriber_id = subscriber_id
        self.send = send
        self.started = False
        self.stopped = False

    @property
    def running(self) -> bool:
        return self.started and not self.stopped

    async def start(self) -> None:
        self.started = True

    async def stop(self) -> None:
        self.stopped = True


def _make_connection(ip: str = "192.0.2.1") -> MagicMock:
    connection = MagicMock()
    connection.scope = {
        "client": (ip, 12345),
        "headers": [(b"user-agent", b"TestBrowser/1.0")],
    }
    return connection


@pytest.fixture
def pushers() -> list[FakePusher]:
    """Pushers created by the registry under test."""
    return []


@pytest.fixture
def registry(pushers: list[FakePusher]) -> SubscriberRegistry:
    """Registry building fake pushers."""

    def factory(subscriber_id: str, send: object) -> FakePusher:
        pusher = FakePusher(subscriber_id, send)
        pushers.append(pusher)
        return pusher

    return SubscriberRegistry(factory)


@pytest.mark.asyncio
async def test_subscribe_registers_and_starts_pusher(
    registry: SubscriberRegistry, pushers: list[FakePusher]
) -> None:
    """Given a connection, when subscribing, then it is registered with a running pusher."""
    connection = _make_connection()

    async with registry.subscribe(connection) as subscription:
        assert subscription.subscriber_id in registry
        assert len(registry) == 1
        assert subscription.client_info.ip == "192.0.2.1"
        assert subscription.client_info.user_agent == "TestBrowser/1.0"
        assert pushers[0].running
        assert pushers[0].send is connection.send_text


@pytest.mark.asyncio
async def test_leaving_scope_stops_pusher_and_unregisters(
    registry: SubscriberRegistry, pushers: list[FakePusher]
) -> None:
    """Given an active subscriber, when its scope exits, then its pusher stops and it is removed."""
    async with registry.subscribe(_make_connection()) as subscription:
        subscriber_id = subscription.subscriber_id

    assert subscriber_id not in registry
    assert len(registry) == 0
    assert pushers[0].stopped


@pytest.mark.asyncio
async def test_error_inside_scope_still_cleans_up(
    registry: SubscriberRegistry, pushers: list[FakePusher]
) -> None:
    """Given an error while connected, when the scope exits, then cleanup still happens."""
    with pytest.raises(RuntimeError, match="boom"):
        async with registry.subscribe(_make_connection()):
            raise RuntimeError("boom")

    assert len(registry) == 0
    assert pushers[0].stopped


@pytest.mark.asyncio
async def test_subscribers_are_independent(
    registry: SubscriberRegistry, pushers: list[FakePusher]
) -> None:
    """Given two subscribers, when one leaves, then the other keeps running."""
    first_left = asyncio.Event()
    release_second = asyncio.Event()

    async def first() -> None:
        async with registry.subscribe(_make_connection("192.0.2.1")):
            pass
        first_left.set()

    async def second() -> None:
        async with registry.subscribe(_make_connection("192.0.2.2")):
            await release_second.wait()

    second_task = asyncio.create_task(second())
    await asyncio.sleep(0)
    await first()
    await first_left.wait()

    assert len(registry) == 1
    running = [pusher for pusher in pushers if pusher.running]
    assert len(running) == 1

    release_second.set()
    await second_task
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_close_all_stops_every_pusher(
    registry: SubscriberRegistry, pushers: list[FakePusher]
) -> None:
    """Given active subscribers, when closing all, then every pusher stops and the registry empties."""
    release = asyncio.Event()

    async def hold() -> None:
        async with registry.subscribe(_make_connection()):
            await release.wait()

    tasks = [asyncio.create_task(hold()) for _ in range(3)]
    await asyncio.sleep(0)
    assert len(registry) == 3

    await registry.close_all()

    assert len(registry) == 0
    assert all(pusher.stopped for pusher in pushers)
    release.set()
    await asyncio.gather(*tasks)

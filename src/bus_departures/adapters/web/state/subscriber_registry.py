"""Registry of push subscribers and their pushers."""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from bus_departures.adapters.web.client_info import get_client_info_from_connection

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from bus_departures.domain.contracts.departure_pusher import DeparturePusherProtocol
    from bus_departures.domain.models.client_info import ClientInfo

    PusherFactory = Callable[[str, Callable[[str], Awaitable[None]]], DeparturePusherProtocol]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Subscription:
    """An active push subscriber."""

    subscriber_id: str
    client_info: ClientInfo
    pusher: DeparturePusherProtocol


class SubscriberRegistry:
    """Tracks connected push subscribers keyed by connection identity.

    A subscriber exists only inside :meth:`subscribe`; leaving the block stops
    its pusher and removes it, whatever the reason for leaving.
    """

    def __init__(self, pusher_factory: PusherFactory) -> None:
        """Initialize the registry.

        Args:
            pusher_factory: Builds a pusher from a subscriber id and a send function.
        """
        self._pusher_factory = pusher_factory
        self._subscriptions: dict[str, Subscription] = {}

    def __len__(self) -> int:
        return len(self._subscriptions)

    def __contains__(self, subscriber_id: object) -> bool:
        return subscriber_id in self._subscriptions

    @property
    def subscriber_ids(self) -> list[str]:
        """Identifiers of all active subscribers."""
        return list(self._subscriptions)

    @asynccontextmanager
    async def subscribe(self, connection: Any) -> AsyncIterator[Subscription]:
        """Register a connection and push departures to it for the duration of the block.

        Args:
            connection: An accepted WebSocket-like object with ``send_text`` and ``scope``.
        """
        subscriber_id = uuid.uuid4().hex[:12]
        client_info = get_client_info_from_connection(connection)
        pusher = self._pusher_factory(subscriber_id, connection.send_text)
        subscription = Subscription(
            subscriber_id=subscriber_id, client_info=client_info, pusher=pusher
        )

        self._subscriptions[subscriber_id] = subscription
        logger.info(
            f"Subscriber {subscriber_id} connected from ip={client_info.ip}, "
            f"agent={client_info.user_agent}, total connected: {len(self._subscriptions)}"
        )
        try:
            await pusher.start()
            yield subscription
        finally:
            await self._remove(subscriber_id)

    async def close_all(self) -> None:
        """Stop every pusher and forget all subscribers."""
        for subscriber_id in self.subscriber_ids:
            await self._remove(subscriber_id)

    async def _remove(self, subscriber_id: str) -> None:
        """Stop the subscriber's pusher and drop it. Idempotent."""
        subscription = self._subscriptions.pop(subscriber_id, None)
        if subscription is None:
            return
        await subscription.pusher.stop()
        logger.info(
            f"Subscriber {subscriber_id} disconnected, total connected: {len(self._subscriptions)}"
        )

"""Connection state for the web adapter."""

from bus_departures.adapters.web.state.subscriber_registry import (
    Subscription,
    SubscriberRegistry,
)

__all__ = ["SubscriberRegistry", "Subscription"]

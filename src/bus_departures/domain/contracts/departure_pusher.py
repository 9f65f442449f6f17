"""Protocol for pushing departure boards to a subscriber."""

from typing import Protocol


class DeparturePusherProtocol(Protocol):
    """Protocol for a per-subscriber repeating push loop."""

    @property
    def running(self) -> bool:
        """Whether the push loop is still active."""
        ...

    async def start(self) -> None:
        """Start pushing updates."""
        ...

    async def stop(self) -> None:
        """Stop pushing updates and wait for the loop to finish."""
        ...

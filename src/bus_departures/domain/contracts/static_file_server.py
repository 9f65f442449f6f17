"""Protocol for static file serving."""

from typing import Any, Protocol


class StaticFileServerProtocol(Protocol):
    """Protocol for serving static files."""

    def build_routes(self) -> list[Any]:
        """Build the routes serving the static asset root.

        Returns:
            Routes to append after all application routes.
        """
        ...

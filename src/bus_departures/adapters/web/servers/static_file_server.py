"""Static file server for the dashboard's HTML, CSS and JavaScript."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from starlette.routing import BaseRoute, Mount
from starlette.staticfiles import StaticFiles

from bus_departures.domain.contracts.static_file_server import StaticFileServerProtocol

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, MutableMapping

logger = logging.getLogger(__name__)

CACHE_CONTROL = b"public, max-age=60, must-revalidate"


class StaticFileCacheApp:
    """ASGI app wrapper that adds cache headers to static file responses.

    WebSocket connections to unknown paths are closed instead of reaching
    StaticFiles, which only speaks HTTP.
    """

    def __init__(self, static_files: StaticFiles) -> None:
        """Initialize with a StaticFiles instance."""
        self.static_files = static_files

    async def __call__(
        self,
        scope: dict[str, Any],
        receive: Callable[[], Awaitable[dict[str, Any]]],
        send: Callable[[MutableMapping[str, Any]], Awaitable[None]],
    ) -> None:
        """Handle ASGI request and add cache headers."""
        if scope["type"] == "websocket":
            await send({"type": "websocket.close", "code": 1008})
            return

        async def send_with_cache_headers(message: MutableMapping[str, Any]) -> None:
            """Add cache headers before sending response."""
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                if not any(header[0].lower() == b"cache-control" for header in headers):
                    headers.append((b"cache-control", CACHE_CONTROL))
                    message["headers"] = headers
            await send(message)

        await self.static_files(scope, receive, send_with_cache_headers)


class StaticFileServer(StaticFileServerProtocol):
    """Serves the static asset root at ``/``, with ``index.html`` as the landing page."""

    def __init__(self, static_dir: str | Path = "public") -> None:
        """Initialize the server.

        Args:
            static_dir: Asset root. Relative paths are tried against the working
                directory first, then against the project root.
        """
        self.static_dir = Path(static_dir)

    def resolve_static_dir(self) -> Path | None:
        """Return the first existing candidate for the asset root."""
        if self.static_dir.is_absolute():
            candidates = [self.static_dir]
        else:
            candidates = [
                Path.cwd() / self.static_dir,
                Path(__file__).parent.parent.parent.parent.parent.parent / self.static_dir,
            ]

        for path in candidates:
            if path.is_dir():
                return path

        logger.warning(f"Static directory not found at any of: {[str(p) for p in candidates]}")
        return None

    def build_routes(self) -> list[BaseRoute]:
        """Build the catch-all mount for the asset root.

        Must be placed after all other routes since it matches every path.
        """
        static_path = self.resolve_static_dir()
        if static_path is None:
            return []

        static_files = StaticFiles(directory=str(static_path), html=True)
        logger.info(f"Serving static files from {static_path} with 1-minute cache headers")
        return [Mount("/", app=StaticFileCacheApp(static_files), name="static")]

"""Servers for static assets."""

from bus_departures.adapters.web.servers.static_file_server import (
    StaticFileCacheApp,
    StaticFileServer,
)

__all__ = ["StaticFileCacheApp", "StaticFileServer"]

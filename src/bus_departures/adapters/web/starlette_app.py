"""Starlette web adapter serving the departure board."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import TYPE_CHECKING, Any

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.routing import Route, WebSocketRoute

from bus_departures.adapters.config import AppConfig
from bus_departures.domain.errors import ScheduleConfigurationError, ScheduleLoadError
from bus_departures.domain.models.departure_board_entry import DEPARTURE_BOARD
from bus_departures.domain.models.error_details import ErrorDetails
from bus_departures.domain.ports import DisplayAdapter

from .pushers import DeparturePusher
from .rate_limit_middleware import RateLimitMiddleware
from .servers import StaticFileServer
from .state import SubscriberRegistry

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from starlette.requests import Request
    from starlette.websockets import WebSocket

    from bus_departures.domain.ports import DepartureBoardService

logger = logging.getLogger(__name__)

DEPARTURES_PATH = "/next-departure"


class StarletteWebAdapter(DisplayAdapter):
    """Serves the departure board over HTTP pull, WebSocket push and static assets."""

    def __init__(
        self,
        board_service: DepartureBoardService,
        config: AppConfig,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the web adapter.

        Args:
            board_service: Service building the departure board.
            config: Application configuration.
            clock: Returns the current instant. Defaults to the wall clock in the
                configured timezone.
        """
        if not isinstance(config, AppConfig):
            raise TypeError("config must be an AppConfig instance")
        if not callable(getattr(board_service, "get_departure_board", None)):
            raise TypeError("board_service must implement DepartureBoardService protocol")

        self.board_service = board_service
        self.config = config
        zone = config.zone
        self.clock: Callable[[], datetime] = clock or (lambda: datetime.now(zone))
        self.subscribers = SubscriberRegistry(self._create_pusher)
        self._server: Any | None = None

    def _create_pusher(
        self, subscriber_id: str, send: Callable[[str], Awaitable[None]]
    ) -> DeparturePusher:
        return DeparturePusher(
            board_service=self.board_service,
            send=send,
            clock=self.clock,
            interval_seconds=self.config.push_interval_seconds,
            subscriber_id=subscriber_id,
        )

    def create_app(self) -> Starlette:
        """Build the ASGI application."""
        routes = [
            Route(DEPARTURES_PATH, self.next_departure, methods=["GET"]),
            Route("/healthz", self.healthz, methods=["GET"]),
            # The dashboard connects to ws://<host>/
            WebSocketRoute("/", self.departures_websocket),
            WebSocketRoute("/ws", self.departures_websocket),
        ]
        # Static mount matches everything, so it goes last
        routes.extend(StaticFileServer(self.config.static_dir).build_routes())

        middleware = [
            Middleware(
                RateLimitMiddleware,
                requests_per_minute=self.config.rate_limit_per_minute,
                limited_paths=(DEPARTURES_PATH,),
            )
        ]
        return Starlette(routes=routes, middleware=middleware, lifespan=self._lifespan)

    @asynccontextmanager
    async def _lifespan(self, _app: Starlette) -> AsyncIterator[None]:
        yield
        await self.subscribers.close_all()

    async def next_departure(self, _request: Request) -> Response:
        """Return the current departure board as JSON."""
        try:
            board = await self.board_service.get_departure_board(self.clock())
        except ScheduleLoadError as e:
            return self._error_response("schedule_unavailable", e, status_code=503)
        except ScheduleConfigurationError as e:
            return self._error_response("schedule_invalid", e, status_code=500)
        except Exception:
            logger.exception("Unexpected error while building departure board")
            details = ErrorDetails(
                error="internal_error",
                reason="Unexpected error while building the departure board",
                status_code=500,
            )
            return JSONResponse(details.model_dump(), status_code=500)

        return Response(
            content=DEPARTURE_BOARD.dump_json(board, by_alias=True),
            media_type="application/json",
        )

    def _error_response(self, error: str, exc: Exception, status_code: int) -> JSONResponse:
        logger.error(f"Failed to build departure board ({error}): {exc}")
        details = ErrorDetails(error=error, reason=str(exc), status_code=status_code)
        return JSONResponse(details.model_dump(), status_code=status_code)

    async def healthz(self, _request: Request) -> Response:
        """Health check endpoint for load balancers and monitoring."""
        return PlainTextResponse("Ok")

    async def departures_websocket(self, websocket: WebSocket) -> None:
        """Push the departure board to the connected browser until it disconnects."""
        await websocket.accept()
        async with self.subscribers.subscribe(websocket):
            # Client messages are ignored
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break

    async def start(self) -> None:
        """Start the web server."""
        import uvicorn

        app = self.create_app()
        server_config = uvicorn.Config(
            app,
            host=self.config.host,
            port=self.config.port,
            log_level=self.config.log_level.lower(),
        )
        self._server = uvicorn.Server(server_config)
        logger.info(f"Serving departure board on http://{self.config.host}:{self.config.port}")
        await self._server.serve()

    async def stop(self) -> None:
        """Stop the web server and all push subscribers."""
        await self.subscribers.close_all()
        if self._server:
            self._server.should_exit = True

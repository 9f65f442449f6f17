"""Rate limiting middleware for Starlette using throttled-py."""

import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from throttled import RateLimiterType, Throttled, rate_limiter, store

from bus_departures.adapters.web.client_info import get_client_info_from_scope
from bus_departures.domain.models.error_details import ErrorDetails

logger = logging.getLogger(__name__)

DEFAULT_RETRY_AFTER_SECONDS = 60.0


def extract_client_ip(request: Request) -> str:
    """Extract client IP address from request, supporting X-Forwarded-For header."""
    return get_client_info_from_scope(request.scope).ip


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Limits requests per IP address on selected paths.

    Static assets and WebSocket connections are never limited; only a path equal
    to one of ``limited_paths``, or below it, counts against the quota.
    """

    def __init__(
        self,
        app: Callable,
        requests_per_minute: int = 100,
        limited_paths: Iterable[str] = ("/next-departure",),
    ) -> None:
        """Initialize rate limiting middleware.

        Args:
            app: The ASGI application to wrap.
            requests_per_minute: Maximum number of requests allowed per IP per minute,
                0 disables limiting.
            limited_paths: Paths the limit applies to, sub-paths included.
        """
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.limited_paths = tuple(limited_paths)
        # Each IP gets its own Throttled key on a shared store and quota
        self.rate_limiter_store = store.MemoryStore()
        self.quota = (
            rate_limiter.per_min(requests_per_minute, burst=requests_per_minute)
            if requests_per_minute > 0
            else None
        )
        if self.quota is None:
            logger.info("Rate limiting disabled")
            return
        logger.info(
            f"Rate limiting enabled: {requests_per_minute} requests per minute per IP "
            f"on {list(self.limited_paths)}"
        )

    def is_limited(self, path: str) -> bool:
        """Whether requests to ``path`` count against the quota."""
        if self.quota is None:
            return False
        return any(
            path == limited or path.startswith(f"{limited.rstrip('/')}/")
            for limited in self.limited_paths
        )

    def _extract_retry_after(self, result: Any) -> float:
        """Extract retry_after value from rate limit result."""
        state = getattr(result, "state", None)
        retry_after = getattr(state, "retry_after", None)
        if retry_after is None:
            retry_after = getattr(result, "retry_after", None)
        return float(retry_after) if retry_after is not None else DEFAULT_RETRY_AFTER_SECONDS

    def _create_rate_limit_response(self, client_ip: str, retry_after: float) -> Response:
        """Create rate limit exceeded response."""
        logger.warning(f"Rate limit exceeded for IP {client_ip}, retry after {retry_after} seconds")
        error = ErrorDetails(
            error="rate_limited",
            reason="Rate limit exceeded. Please try again later.",
            status_code=429,
        )
        return JSONResponse(
            error.model_dump(),
            status_code=429,
            headers={"Retry-After": str(max(int(retry_after), 1))},
        )

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Process request and enforce rate limiting on limited paths."""
        if not self.is_limited(request.url.path):
            return await call_next(request)

        client_ip = extract_client_ip(request)
        throttle = Throttled(
            key=client_ip,
            using=RateLimiterType.TOKEN_BUCKET.value,
            quota=self.quota,
            store=self.rate_limiter_store,
        )

        # limit() reports the outcome without raising
        result = throttle.limit()
        if result.limited:
            return self._create_rate_limit_response(client_ip, self._extract_retry_after(result))

        response: Response = await call_next(request)
        return response

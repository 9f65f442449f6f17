"""Utilities for extracting client information from ASGI connections.

Used when logging subscriber connects and disconnects, so they must never
raise on odd scopes.
"""

from __future__ import annotations

from typing import Any

from bus_departures.domain.models.client_info import ClientInfo

_MAX_USER_AGENT_LENGTH = 200


def _decode_header_value(value: Any) -> str:
    """Decode a header value into a readable string."""
    if isinstance(value, bytes):
        return value.decode("latin1", errors="replace")
    return str(value)


def get_client_info_from_scope(scope: Any) -> ClientInfo:
    """Extract client IP and user agent from an ASGI scope-like mapping.

    The first address in X-Forwarded-For wins over the direct peer address.
    Missing values fall back to ``"unknown"``.
    """
    if not isinstance(scope, dict):
        return ClientInfo(ip="unknown", user_agent="unknown")

    user_agent = "unknown"
    forwarded_for: str | None = None

    for name, value in scope.get("headers") or []:
        decoded_name = _decode_header_value(name).lower()
        if decoded_name == "user-agent":
            user_agent = _decode_header_value(value)
            if len(user_agent) > _MAX_USER_AGENT_LENGTH:
                user_agent = f"{user_agent[: _MAX_USER_AGENT_LENGTH - 3]}..."
        elif decoded_name == "x-forwarded-for":
            forwarded_for = _decode_header_value(value)

    ip = "unknown"
    first_forwarded = forwarded_for.split(",")[0].strip() if forwarded_for else ""
    if first_forwarded:
        ip = first_forwarded
    else:
        client = scope.get("client")
        if isinstance(client, (list, tuple)) and client and isinstance(client[0], (str, bytes)):
            ip = _decode_header_value(client[0])

    return ClientInfo(ip=ip, user_agent=user_agent)


def get_client_info_from_connection(connection: Any) -> ClientInfo:
    """Extract client info from an object exposing an ASGI ``scope`` attribute."""
    return get_client_info_from_scope(getattr(connection, "scope", None))

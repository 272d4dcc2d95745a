"""Correlation ID middleware.

Propagates X-Correlation-ID so that authorization decisions logged for one
request can be tied together. Uses raw ASGI (no BaseHTTPMiddleware).
"""

import uuid
from contextvars import ContextVar
from typing import Callable

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> str | None:
    """Return the correlation id of the request being handled, if any."""
    return _correlation_id.get()


def _get_header(scope: dict, name: str) -> str | None:
    """Return first header value for name (case-insensitive)."""
    want = name.lower().encode()
    for k, v in scope.get("headers", []):
        if k.lower() == want:
            return v.decode("utf-8", errors="replace")
    return None


def CorrelationIDMiddleware(
    app: Callable, header_name: str = "X-Correlation-ID"
) -> Callable:
    """Add or forward the correlation id header and expose it to logging. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        correlation_id = _get_header(scope, header_name) or str(uuid.uuid4())
        scope.setdefault("state", {})["correlation_id"] = correlation_id
        token = _correlation_id.set(correlation_id)

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((header_name.encode(), correlation_id.encode()))
                message["headers"] = headers
            await send(message)

        try:
            await app(scope, receive, send_wrapper)
        finally:
            _correlation_id.reset(token)

    return asgi_app

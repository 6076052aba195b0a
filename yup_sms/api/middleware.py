"""Middleware for request context."""

import uuid
from contextvars import ContextVar
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

_request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)


def get_current_request_id() -> str | None:
    """Get the request ID of the request being handled, if any."""
    return _request_id_ctx.get()


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware that tags every request with a request ID."""

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Process request inside a request ID context.

        Args:
            request: FastAPI request
            call_next: Next middleware/handler

        Returns:
            Response with an ``X-Request-ID`` header
        """
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = _request_id_ctx.set(request_id)
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            _request_id_ctx.reset(token)

"""
Correlation ID Middleware for request tracing
Every request carries a correlation ID, echoed back in the response headers
and attached to each log line written while the request is handled
"""

import uuid
from contextvars import ContextVar
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import config

correlation_id_ctx: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> Optional[str]:
    """Get the correlation ID from the current context"""
    return correlation_id_ctx.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID in the current context"""
    correlation_id_ctx.set(correlation_id)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Middleware to handle correlation IDs for request tracing

    - Reuses the caller's correlation ID header or generates a new one
    - Stores it in context and on request.state
    - Adds it to response headers
    """

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get(
            config.correlation_id_header,
            str(uuid.uuid4())
        )

        set_correlation_id(correlation_id)
        request.state.correlation_id = correlation_id

        response = await call_next(request)
        response.headers[config.correlation_id_header] = correlation_id

        return response

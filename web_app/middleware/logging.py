"""Logging middleware."""

import time
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable, Optional

from shortlinks.common.logging_config import get_logger


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging."""

    def __init__(self, app, logger: Optional[logging.Logger] = None):
        super().__init__(app)
        self.logger = logger or get_logger("web")

    async def dispatch(self, request: Request, call_next: Callable):
        """Log request and response."""
        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        identity = getattr(request.state, "identity", None)
        user = identity.id if identity else "anonymous"

        self.logger.debug(f"Request: {request.method} {request.url.path} from {client_ip} as {user}")

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        self.logger.info(
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - User: {user} - Duration: {duration_ms:.2f}ms"
        )

        return response

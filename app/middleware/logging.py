"""Request logging middleware with per-request correlation ids."""
import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger("app.requests")

CORRELATION_HEADER = "X-Correlation-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        start = time.time()

        response = await call_next(request)

        duration_ms = round((time.time() - start) * 1000, 2)
        logger.info(
            f"[{correlation_id}] {request.method} {request.url.path} "
            f"status={response.status_code} duration_ms={duration_ms}"
        )
        response.headers[CORRELATION_HEADER] = correlation_id
        return response

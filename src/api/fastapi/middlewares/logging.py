import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from src.utils.logging import Logger

QUIET_PATHS = {"/", "/api/health", "/api/ping", "/metrics"}


class LogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.id = request_id

        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        extra = {
            "method": request.method,
            "url": str(request.url),
            "request_id": request_id,
            "github_event": request.headers.get("x-github-event", "none"),
            "github_delivery": request.headers.get("x-github-delivery", "none"),
            "ip": request.client.host if request.client else "unknown",
        }
        request_logger = Logger("FastAPIApp", extra)
        request_logger.info("Incoming Request")

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            request_logger.error("Error in request processing", extra={"error": str(e)})
            raise

        request_logger.info(
            "Response",
            extra={
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        return response

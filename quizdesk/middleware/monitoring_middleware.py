import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from quizdesk.core.logging import get_api_logger
from quizdesk.core.config import settings

api_logger = get_api_logger(__name__)


class MonitoringMiddleware(BaseHTTPMiddleware):
    """Correlation ids, request/response logging and timing headers"""

    def __init__(self, app):
        super().__init__(app)
        self.excluded_paths = {"/health", "/docs", "/redoc", "/openapi.json"}

    def _get_client_ip(self, request: Request) -> str:
        """Get client IP with proxy support"""
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip

        return request.client.host if request.client else "unknown"

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.excluded_paths:
            return await call_next(request)

        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        start_time = time.perf_counter()

        if settings.ENABLE_REQUEST_LOGGING:
            api_logger.log_request(
                method=request.method,
                path=request.url.path,
                client_ip=self._get_client_ip(request),
                correlation_id=correlation_id
            )

        try:
            response = await call_next(request)
        except Exception:
            api_logger.log_response(
                method=request.method,
                path=request.url.path,
                status_code=500,
                response_time_ms=(time.perf_counter() - start_time) * 1000,
                correlation_id=correlation_id
            )
            # Re-raise to be handled by the exception handlers
            raise

        response_time_ms = (time.perf_counter() - start_time) * 1000
        response.headers["X-Correlation-ID"] = correlation_id
        response.headers["X-Response-Time"] = f"{response_time_ms:.2f}ms"

        if settings.ENABLE_REQUEST_LOGGING:
            api_logger.log_response(
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                response_time_ms=response_time_ms,
                correlation_id=correlation_id
            )

        return response

"""
Audit Middleware - Request/response logging for monitoring.

Every HTTP request is logged with method, path, status code, duration
and client address. Admin mutations (POST, PATCH, DELETE under /admin)
are logged at INFO with an ADMIN tag, rejected ones included, so knowledge
base edits can be traced back to a request.
"""
import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from src.core.logging_config import get_logger

logger = get_logger(__name__)

QUIET_PATHS = ("/health", "/health/ready")

ADMIN_PREFIX = "/admin"
MUTATING_METHODS = ("POST", "PUT", "PATCH", "DELETE")


class AuditMiddleware(BaseHTTPMiddleware):
    """Log timing and metadata for every request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and log audit information."""
        start_time = time.time()

        method = request.method
        path = request.url.path
        client_ip = request.client.host if request.client else "unknown"

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.time() - start_time
            logger.error(
                f"REQUEST FAILED: {method} {path} "
                f"client={client_ip} duration={duration:.3f}s error={e}"
            )
            raise

        duration = time.time() - start_time
        self._log_request(method, path, response.status_code, duration, client_ip)
        response.headers["X-Response-Time"] = f"{duration:.3f}s"

        return response

    def _log_request(
        self,
        method: str,
        path: str,
        status_code: int,
        duration: float,
        client_ip: str
    ) -> None:
        """Log request details at a level matching the outcome."""
        if path in QUIET_PATHS:
            logger.debug(
                f"HEALTH: {path} status={status_code} duration={duration:.3f}s"
            )
            return

        if path.startswith(ADMIN_PREFIX) and method in MUTATING_METHODS and status_code < 500:
            logger.info(
                f"ADMIN: {method} {path} "
                f"status={status_code} duration={duration:.3f}s client={client_ip}"
            )
            return

        if status_code >= 500:
            log_fn = logger.error
        elif status_code >= 400:
            log_fn = logger.warning
        else:
            log_fn = logger.info

        log_fn(
            f"REQUEST: {method} {path} "
            f"status={status_code} duration={duration:.3f}s client={client_ip}"
        )


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Add security headers to all responses.

    Headers added:
    - X-Content-Type-Options: nosniff
    - X-Frame-Options: DENY
    - Referrer-Policy: strict-origin-when-cross-origin
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response

"""
Request logging middleware with request id propagation.
"""

import logging
import time
import contextvars
from typing import Dict
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

# Context variable for request ID
request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar('request_id', default='no-request-id')


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging."""

    SLOW_REQUEST_THRESHOLD = 2.0

    def __init__(self, app, log_requests: bool = True, log_responses: bool = True):
        super().__init__(app)
        self.log_requests = log_requests
        self.log_responses = log_responses

    async def dispatch(self, request: Request, call_next):
        """Log request and response, tagging both with a request id."""
        request_id = request.headers.get("x-request-id") or str(uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)

        start_time = time.time()

        if self.log_requests:
            self._log_request(request)

        try:
            response = await call_next(request)

            process_time = time.time() - start_time
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Process-Time"] = f"{process_time:.4f}"

            if self.log_responses:
                self._log_response(request, response, process_time)

            return response

        except Exception as exc:
            process_time = time.time() - start_time
            logger.error(
                f"Request exception: {type(exc).__name__}",
                extra={
                    "exception_type": type(exc).__name__,
                    "process_time": process_time,
                    "method": request.method,
                    "path": request.url.path,
                },
                exc_info=True
            )
            raise
        finally:
            request_id_var.reset(token)

    def _log_request(self, request: Request):
        request_info = {
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client_ip": self._get_client_ip(request),
        }

        if request.url.path in ["/health", "/", "/docs", "/redoc"]:
            logger.debug(f"Health check: {request.method} {request.url.path}", extra=request_info)
        else:
            logger.info(f"API request: {request.method} {request.url.path}", extra=request_info)

    def _log_response(self, request: Request, response: Response, process_time: float):
        response_info: Dict[str, object] = {
            "status_code": response.status_code,
            "process_time": process_time,
        }

        if 200 <= response.status_code < 300:
            logger.info(f"Response: {response.status_code} ({process_time:.4f}s)", extra=response_info)
        elif 400 <= response.status_code < 500:
            logger.warning(f"Client error: {response.status_code} ({process_time:.4f}s)", extra=response_info)
        else:
            logger.error(f"Server error: {response.status_code} ({process_time:.4f}s)", extra=response_info)

        if process_time > self.SLOW_REQUEST_THRESHOLD:
            logger.warning(
                f"Slow request detected: {request.method} {request.url.path} took {process_time:.4f}s",
                extra={"slow_request": True, "process_time": process_time}
            )

    def _get_client_ip(self, request: Request) -> str:
        """Extract client IP address from request."""
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        return request.client.host if request.client else "unknown"

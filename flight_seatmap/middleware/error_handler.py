"""
Error handling middleware for the flight seat map service.
"""

import logging
import traceback
from datetime import datetime, timezone
from uuid import uuid4

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from pydantic import ValidationError as PydanticValidationError

from ..utils.exceptions import (
    SeatmapError,
    ErrorCode,
    ValidationError,
    NotFoundError
)

logger = logging.getLogger(__name__)

HTTP_422_UNPROCESSABLE = 422


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Middleware turning uncaught exceptions into JSON error responses."""

    STATUS_MAP = {
        ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
        ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
        ErrorCode.SELECTION_FULL: status.HTTP_409_CONFLICT,
        ErrorCode.MALFORMED_SEAT_CODE: HTTP_422_UNPROCESSABLE,
        ErrorCode.SEAT_NOT_AVAILABLE: status.HTTP_409_CONFLICT,
        ErrorCode.SESSION_LIMIT_EXCEEDED: status.HTTP_429_TOO_MANY_REQUESTS,
    }

    def __init__(self, app, debug: bool = False):
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next):
        """Process request and handle any exceptions."""
        try:
            return await call_next(request)
        except Exception as exc:
            return self._handle_exception(request, exc, str(uuid4()))

    def _handle_exception(self, request: Request, exc: Exception, error_id: str) -> JSONResponse:
        self._log_error(request, exc, error_id)

        if isinstance(exc, SeatmapError):
            return self._error_response(exc, error_id, self._get_status_code_for_error(exc))
        elif isinstance(exc, PydanticValidationError):
            return self._handle_validation_error(exc, error_id)
        else:
            return self._handle_unexpected_error(exc, error_id)

    def _handle_validation_error(self, exc: PydanticValidationError, error_id: str) -> JSONResponse:
        """Handle Pydantic validation errors."""
        field_errors = {}

        for error in exc.errors():
            field_path = ".".join(str(loc) for loc in error["loc"])
            field_errors.setdefault(field_path, []).append(error["msg"])

        validation_error = ValidationError("Request validation failed", field_errors=field_errors)
        return self._error_response(validation_error, error_id, HTTP_422_UNPROCESSABLE)

    def _handle_unexpected_error(self, exc: Exception, error_id: str) -> JSONResponse:
        """Handle unexpected errors."""
        seatmap_error = SeatmapError(
            "An unexpected error occurred",
            error_code=ErrorCode.INTERNAL_ERROR,
            details={"error_type": type(exc).__name__} if self.debug else None
        )

        response_data = self._error_body(seatmap_error, error_id)

        # Include stack trace in debug mode
        if self.debug:
            response_data["debug"] = {
                "exception": str(exc),
                "traceback": traceback.format_exc()
            }

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=response_data
        )

    def _error_response(self, exc: SeatmapError, error_id: str, status_code: int) -> JSONResponse:
        return JSONResponse(status_code=status_code, content=self._error_body(exc, error_id))

    def _error_body(self, exc: SeatmapError, error_id: str) -> dict:
        return {
            "error": exc.to_dict(),
            "error_id": error_id,
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    def _get_status_code_for_error(self, exc: SeatmapError) -> int:
        """Map error codes to HTTP status codes."""
        return self.STATUS_MAP.get(exc.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR)

    def _log_error(self, request: Request, exc: Exception, error_id: str):
        request_info = {
            "method": request.method,
            "path": request.url.path,
        }

        if isinstance(exc, (ValidationError, NotFoundError)):
            logger.warning(
                f"Client error [{error_id}]: {exc.message}",
                extra={"error_id": error_id, "error_code": exc.error_code.value, "request": request_info}
            )
        elif isinstance(exc, SeatmapError):
            logger.error(
                f"Business error [{error_id}]: {exc.message}",
                extra={"error_id": error_id, "error_code": exc.error_code.value, "request": request_info}
            )
        else:
            logger.error(
                f"Unexpected error [{error_id}]: {exc}",
                extra={"error_id": error_id, "error_type": type(exc).__name__, "request": request_info},
                exc_info=True
            )

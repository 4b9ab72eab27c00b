"""
Custom exceptions for the flight seat map service.
"""

from typing import Any, Dict, Optional, List
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error codes for the service."""

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"

    # Seat selection errors
    SELECTION_FULL = "SELECTION_FULL"
    MALFORMED_SEAT_CODE = "MALFORMED_SEAT_CODE"
    SEAT_NOT_AVAILABLE = "SEAT_NOT_AVAILABLE"

    # Capacity errors
    SESSION_LIMIT_EXCEEDED = "SESSION_LIMIT_EXCEEDED"


class SeatmapError(Exception):
    """Base exception class for the seat map service."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None
    ):
        """Initialize the exception with comprehensive error information."""
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.suggestions = suggestions or []
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        result = {
            "error_code": self.error_code.value,
            "message": self.message,
        }

        if self.details:
            result["details"] = self.details

        if self.suggestions:
            result["suggestions"] = self.suggestions

        return result


class ValidationError(SeatmapError):
    """Exception raised for validation errors."""

    def __init__(self, message: str, field_errors: Optional[Dict[str, List[str]]] = None, **kwargs):
        super().__init__(
            message,
            error_code=ErrorCode.VALIDATION_ERROR,
            details={"field_errors": field_errors} if field_errors else None,
            **kwargs
        )
        self.field_errors = field_errors or {}


class NotFoundError(SeatmapError):
    """Base exception for resource not found errors."""

    def __init__(self, message: str, resource_type: Optional[str] = None, resource_id: Optional[str] = None, **kwargs):
        super().__init__(
            message,
            error_code=ErrorCode.NOT_FOUND,
            details={"resource_type": resource_type, "resource_id": resource_id} if resource_type else None,
            **kwargs
        )


class SelectionSessionNotFoundError(NotFoundError):
    """Exception raised when a seat selection session is not found."""

    def __init__(self, session_id: str, **kwargs):
        super().__init__(
            f"Seat selection session {session_id} not found",
            resource_type="seat_selection_session",
            resource_id=session_id,
            suggestions=["Start a new seat selection for the flight"],
            **kwargs
        )


class BusinessLogicError(SeatmapError):
    """Base exception for business logic violations."""
    pass


class SelectionFullError(BusinessLogicError):
    """
    Raised when a seat is added beyond the required passenger count.

    Delivered to the host as a notice; the selection is left untouched.
    """

    def __init__(self, required_count: int, seat_id: Optional[str] = None, **kwargs):
        super().__init__(
            f"You can only select {required_count} seat(s)",
            error_code=ErrorCode.SELECTION_FULL,
            details={"required_count": required_count, "seat_id": seat_id},
            suggestions=["Deselect a seat before choosing another one"],
            **kwargs
        )


class MalformedSeatCodeError(BusinessLogicError):
    """Raised when a seat code has no leading row number."""

    def __init__(self, code: str, seat_id: Optional[str] = None, **kwargs):
        super().__init__(
            f"Seat code {code!r} has no row number",
            error_code=ErrorCode.MALFORMED_SEAT_CODE,
            details={"code": code, "seat_id": seat_id},
            **kwargs
        )
        self.code = code
        self.seat_id = seat_id


class SeatNotAvailableError(BusinessLogicError):
    """Raised when selected seats were taken before the selection was confirmed."""

    def __init__(self, seat_ids: List[str], **kwargs):
        super().__init__(
            f"Seat(s) {', '.join(seat_ids)} are no longer available",
            error_code=ErrorCode.SEAT_NOT_AVAILABLE,
            details={"seat_ids": seat_ids},
            suggestions=["Choose a different seat", "Refresh seat availability"],
            **kwargs
        )
        self.seat_ids = seat_ids


class SessionLimitError(SeatmapError):
    """Exception raised when too many selection sessions are open."""

    def __init__(self, limit: int, **kwargs):
        super().__init__(
            f"Too many active seat selection sessions (limit {limit})",
            error_code=ErrorCode.SESSION_LIMIT_EXCEEDED,
            details={"limit": limit},
            suggestions=["Close finished selections", "Try again later"],
            **kwargs
        )

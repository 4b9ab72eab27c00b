"""
Common schemas for API responses and error handling.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class ErrorDetail(BaseModel):
    """Schema for detailed error information."""

    error_code: str = Field(..., description="Error code for programmatic handling")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error context")
    suggestions: Optional[List[str]] = Field(None, description="Helpful suggestions for resolving the error")


class ErrorResponse(BaseModel):
    """Schema for API error responses."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "error": {
                        "error_code": "NOT_FOUND",
                        "message": "Seat selection session 3f2a not found",
                        "details": {
                            "resource_type": "seat_selection_session",
                            "resource_id": "3f2a"
                        },
                        "suggestions": ["Start a new seat selection for the flight"]
                    },
                    "error_id": "0b7e2c1e-4a55-4d43-9a61-3b0f6d1f4d11",
                    "timestamp": "2026-01-01T12:00:00+00:00"
                }
            ]
        }
    )

    error: ErrorDetail
    error_id: Optional[str] = None
    timestamp: Optional[str] = None


class HealthStatus(BaseModel):
    """Schema for health check responses."""

    status: str = Field(..., description="Overall health status")
    service: str = Field(..., description="Service name")
    active_sessions: int = Field(..., description="Number of open seat selection sessions")

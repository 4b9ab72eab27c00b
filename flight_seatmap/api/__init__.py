"""API endpoints for the flight seat map service."""

from fastapi import APIRouter
from .seat_selections import router as seat_selections_router

# Create main API router
api_router = APIRouter(prefix="/api/v1")

api_router.include_router(seat_selections_router)

__all__ = ["api_router"]

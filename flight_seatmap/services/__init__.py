"""Seat map services for the flight seat map service."""

from .layout_service import derive_layout, parse_seat_code
from .seat_selector import SeatSelector, ToggleOutcome
from .selection_session_service import SelectionSessionService

__all__ = ["derive_layout", "parse_seat_code", "SeatSelector", "ToggleOutcome", "SelectionSessionService"]

"""
Domain models for the flight seat map.
"""

from .seat import Seat, SeatStatus, SeatClass
from .layout import LayoutCell, SeatRow, SeatLayout

__all__ = [
    "Seat",
    "SeatStatus",
    "SeatClass",
    "LayoutCell",
    "SeatRow",
    "SeatLayout",
]

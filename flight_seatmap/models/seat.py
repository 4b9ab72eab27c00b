"""
Seat model for a flight's seat inventory.
"""

import enum

from pydantic import BaseModel, ConfigDict, Field


class SeatStatus(str, enum.Enum):
    """Enumeration for seat status."""
    AVAILABLE = "available"
    HELD = "held"
    OCCUPIED = "occupied"


class SeatClass(str, enum.Enum):
    """Enumeration for cabin class."""
    FIRST = "first"
    BUSINESS = "business"
    ECONOMY = "economy"


class Seat(BaseModel):
    """
    One bookable position on a flight.

    Seats are immutable snapshots; the inventory store is the only writer of
    ``status`` and a changed seat arrives as a new record in a new snapshot.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Opaque seat identifier, unique per flight")
    code: str = Field(..., description="Raw position code, e.g. '12A'")
    status: SeatStatus = SeatStatus.AVAILABLE
    seat_class: SeatClass = SeatClass.ECONOMY

    @property
    def is_available(self) -> bool:
        """Check if the seat can be selected."""
        return self.status == SeatStatus.AVAILABLE

    def __repr__(self) -> str:
        return f"<Seat(id={self.id}, code='{self.code}', status={self.status.value})>"

"""
Pydantic schemas for seat selection.
"""

from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from flight_seatmap.models import Seat, SeatClass, SeatStatus

# Vocabulary used by the inventory store's seat table.
STORE_STATUS_ALIASES = {
    "disponible": SeatStatus.AVAILABLE,
    "reservado": SeatStatus.HELD,
    "ocupado": SeatStatus.OCCUPIED,
}

STORE_CLASS_ALIASES = {
    "primera_clase": SeatClass.FIRST,
    "ejecutiva": SeatClass.BUSINESS,
    "economica": SeatClass.ECONOMY,
}


class SeatRecord(BaseModel):
    """
    Seat record as delivered by the inventory store.

    Accepts both this service's field names and the store's native columns
    (``numero_asiento``, ``estado``, ``tipo_asiento``).
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Seat identifier")
    code: str = Field(
        ...,
        validation_alias=AliasChoices("code", "numero_asiento"),
        description="Raw position code, e.g. '12A'"
    )
    status: SeatStatus = Field(
        SeatStatus.AVAILABLE,
        validation_alias=AliasChoices("status", "estado")
    )
    seat_class: SeatClass = Field(
        SeatClass.ECONOMY,
        validation_alias=AliasChoices("seat_class", "tipo_asiento")
    )

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("status", mode="before")
    @classmethod
    def map_store_status(cls, value: Any) -> Any:
        if isinstance(value, str):
            return STORE_STATUS_ALIASES.get(value.lower(), value.lower())
        return value

    @field_validator("seat_class", mode="before")
    @classmethod
    def map_store_class(cls, value: Any) -> Any:
        if isinstance(value, str):
            return STORE_CLASS_ALIASES.get(value.lower(), value.lower())
        return value

    def to_seat(self) -> Seat:
        return Seat(id=self.id, code=self.code, status=self.status, seat_class=self.seat_class)


def check_unique_seat_ids(seats: Optional[List[SeatRecord]]) -> Optional[List[SeatRecord]]:
    if seats is None:
        return seats
    seen = set()
    for record in seats:
        if record.id in seen:
            raise ValueError(f"duplicate seat id {record.id}")
        seen.add(record.id)
    return seats


class SelectionCreateRequest(BaseModel):
    """Schema for starting a seat selection on a flight."""
    flight_id: str = Field(..., min_length=1, description="Flight identifier")
    required_count: int = Field(..., ge=1, description="Number of passengers")
    seats: List[SeatRecord] = Field(default_factory=list, description="Current seat snapshot")

    @field_validator("seats")
    @classmethod
    def unique_seat_ids(cls, seats):
        return check_unique_seat_ids(seats)


class SeatSnapshotRequest(BaseModel):
    """Schema for a replacement seat snapshot."""
    seats: List[SeatRecord]

    @field_validator("seats")
    @classmethod
    def unique_seat_ids(cls, seats):
        return check_unique_seat_ids(seats)


class ToggleSeatRequest(BaseModel):
    """Schema for toggling one seat."""
    seat_id: str = Field(..., min_length=1)


class RequiredCountRequest(BaseModel):
    """Schema for changing the passenger count."""
    required_count: int = Field(..., ge=1)


class ProceedRequest(BaseModel):
    """Schema for confirming a selection, optionally against a fresh snapshot."""
    seats: Optional[List[SeatRecord]] = None

    @field_validator("seats")
    @classmethod
    def unique_seat_ids(cls, seats):
        return check_unique_seat_ids(seats)


class SeatCellResponse(BaseModel):
    """Schema for one seat cell in the seat map."""
    id: str
    code: str
    column: str
    status: SeatStatus
    seat_class: SeatClass
    is_selected: bool
    is_selectable: bool
    display_state: str


class SeatRowResponse(BaseModel):
    """Schema for one seat map row."""
    row_number: int
    seat_class: Optional[SeatClass] = None
    aisle_after: Optional[int] = None
    seats: List[SeatCellResponse]


class SelectedSeatResponse(BaseModel):
    """Schema for a selected seat, in selection order."""
    id: str
    code: str
    seat_class: SeatClass


class SelectionStateResponse(BaseModel):
    """Schema for the full state of a seat selection session."""
    session_id: str
    flight_id: str
    required_count: int
    rows: List[SeatRowResponse]
    max_columns: int
    skipped_codes: List[str]
    selection: List[SelectedSeatResponse]
    is_complete: bool
    summary: str
    proceeded: bool
    notices: List[Dict[str, Any]]


class ToggleResponse(SelectionStateResponse):
    """Schema for a toggle result."""
    outcome: str

"""
Derived seat map layout.
"""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict

from .seat import Seat, SeatClass


class LayoutCell(BaseModel):
    """A seat placed in the grid together with its parsed column label."""

    model_config = ConfigDict(frozen=True)

    column: str
    seat: Seat


class SeatRow(BaseModel):
    """One row of the seat map, cells ordered by column label."""

    model_config = ConfigDict(frozen=True)

    row_number: int
    cells: Tuple[LayoutCell, ...]

    @property
    def seats(self) -> Tuple[Seat, ...]:
        return tuple(cell.seat for cell in self.cells)

    @property
    def seat_class(self) -> Optional[SeatClass]:
        """Cabin label of the row, taken from its first seat."""
        return self.cells[0].seat.seat_class if self.cells else None

    @property
    def aisle_after(self) -> Optional[int]:
        """Index of the cell after which the aisle gap is drawn."""
        if len(self.cells) < 2:
            return None
        return len(self.cells) // 2 - 1


class SeatLayout(BaseModel):
    """Rows ascending by row number, plus the codes that could not be placed."""

    model_config = ConfigDict(frozen=True)

    rows: Tuple[SeatRow, ...] = ()
    skipped_codes: Tuple[str, ...] = ()

    @property
    def max_columns(self) -> int:
        return max((len(row.cells) for row in self.rows), default=0)

    @property
    def seat_count(self) -> int:
        return sum(len(row.cells) for row in self.rows)

    def row(self, row_number: int) -> Optional[SeatRow]:
        for row in self.rows:
            if row.row_number == row_number:
                return row
        return None

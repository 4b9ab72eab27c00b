"""
Seat map layout derivation.

Turns a flat seat list into rows and columns by splitting each raw seat code
("12A") into a numeric row and a column label.
"""

import logging
import re
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from flight_seatmap.models import LayoutCell, Seat, SeatLayout, SeatRow
from flight_seatmap.utils.exceptions import MalformedSeatCodeError

logger = logging.getLogger(__name__)

SEAT_CODE_PATTERN = re.compile(r"^(\d+)(.*)$")


def parse_seat_code(code: str, seat_id: Optional[str] = None) -> Tuple[int, str]:
    """
    Split a raw seat code into its row number and column label.

    Args:
        code: Raw position code such as "12A"
        seat_id: Seat identifier, only used for error reporting

    Returns:
        Tuple of (row number, column label)

    Raises:
        MalformedSeatCodeError: If the code has no leading digit run
    """
    match = SEAT_CODE_PATTERN.match(code.strip())
    if not match:
        raise MalformedSeatCodeError(code, seat_id=seat_id)
    return int(match.group(1)), match.group(2)


def derive_layout(
    seats: Iterable[Seat],
    on_malformed: Optional[Callable[[MalformedSeatCodeError], None]] = None
) -> SeatLayout:
    """
    Group seats into rows sorted by row number, each sorted by column label.

    Seats with a malformed code are left out of the grid and listed in
    ``skipped_codes``; they never abort the layout of the remaining seats.
    The result depends only on the set of seats, not on their input order.

    Args:
        seats: Seat snapshot for one flight
        on_malformed: Optional callback receiving each malformed code error

    Returns:
        Derived seat layout
    """
    rows: Dict[int, List[LayoutCell]] = {}
    skipped: List[str] = []

    for seat in seats:
        try:
            row_number, column = parse_seat_code(seat.code, seat_id=seat.id)
        except MalformedSeatCodeError as exc:
            logger.warning(f"Skipping seat {seat.id} with malformed code {seat.code!r}")
            skipped.append(seat.code)
            if on_malformed:
                on_malformed(exc)
            continue

        rows.setdefault(row_number, []).append(LayoutCell(column=column, seat=seat))

    # Seat id breaks ties between duplicate column labels.
    return SeatLayout(
        rows=tuple(
            SeatRow(
                row_number=row_number,
                cells=tuple(sorted(cells, key=lambda cell: (cell.column, cell.seat.id)))
            )
            for row_number, cells in sorted(rows.items())
        ),
        skipped_codes=tuple(sorted(skipped))
    )

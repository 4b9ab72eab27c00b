"""
Seat selection state machine for one flight.

The selector owns the current seat snapshot, the layout derived from it and
the ordered set of seats picked by the user. Every change to the selection is
reported through ``on_selection_change`` as a fresh tuple.
"""

import enum
import logging
from typing import Callable, Collection, Dict, Iterable, List, Optional, Tuple, Union

from flight_seatmap.models import Seat, SeatLayout
from flight_seatmap.services.layout_service import derive_layout
from flight_seatmap.utils.exceptions import (
    SeatmapError, SelectionFullError, SeatNotAvailableError, ValidationError
)

logger = logging.getLogger(__name__)

Selection = Tuple[Seat, ...]
SelectionCallback = Callable[[Selection], None]
ProceedCallback = Callable[[], None]
NoticeCallback = Callable[[SeatmapError], None]
AvailabilityCheck = Callable[[Selection], Iterable[str]]


def duplicate_seat_ids(seats: Iterable[Seat]) -> List[str]:
    """Ids that occur more than once, in order of first repetition."""
    seen = set()
    duplicates: List[str] = []
    for seat in seats:
        if seat.id in seen and seat.id not in duplicates:
            duplicates.append(seat.id)
        seen.add(seat.id)
    return duplicates


class ToggleOutcome(str, enum.Enum):
    """Result of a toggle request."""
    ADDED = "added"
    REMOVED = "removed"
    IGNORED = "ignored"
    REJECTED_FULL = "rejected_full"


class SeatSelector:
    """Bounded, insertion-ordered seat selection over a live seat snapshot."""

    def __init__(
        self,
        seats: Iterable[Seat],
        required_count: int,
        on_selection_change: SelectionCallback,
        on_proceed: ProceedCallback,
        on_notice: Optional[NoticeCallback] = None,
        availability_check: Optional[AvailabilityCheck] = None
    ):
        """
        Initialize the selector.

        Args:
            seats: Initial seat snapshot for the flight
            required_count: Number of seats to pick, one per passenger
            on_selection_change: Called with the new selection after every change
            on_proceed: Called when a complete selection is confirmed
            on_notice: Called with non-fatal user-facing notices
            availability_check: Returns ids of selected seats that were taken
                meanwhile; consulted before proceeding
        """
        self._validate_required_count(required_count)
        self._required_count = required_count
        self._on_selection_change = on_selection_change
        self._on_proceed = on_proceed
        self._on_notice = on_notice
        self._availability_check = availability_check
        self._selection: List[Seat] = []
        self._seats: Tuple[Seat, ...] = ()
        self._seats_by_id: Dict[str, Seat] = {}
        self._layout = SeatLayout()
        self._load_seats(seats)

    @property
    def seats(self) -> Tuple[Seat, ...]:
        return self._seats

    @property
    def layout(self) -> SeatLayout:
        return self._layout

    @property
    def selection(self) -> Selection:
        return tuple(self._selection)

    @property
    def required_count(self) -> int:
        return self._required_count

    @property
    def is_complete(self) -> bool:
        return len(self._selection) == self._required_count

    @property
    def selected_codes(self) -> Tuple[str, ...]:
        return tuple(seat.code for seat in self._selection)

    def is_selected(self, seat_id: str) -> bool:
        return any(seat.id == seat_id for seat in self._selection)

    def summary(self) -> str:
        """Human-readable progress line, e.g. "2 / 3: 12A, 12B"."""
        progress = f"{len(self._selection)} / {self._required_count}"
        if not self._selection:
            return progress
        return f"{progress}: {', '.join(self.selected_codes)}"

    def toggle(self, seat: Union[Seat, str]) -> ToggleOutcome:
        """
        Add or remove a seat from the selection.

        The seat is resolved by id against the current snapshot, so a record
        that a refresh has since invalidated cannot be selected.
        """
        seat_id = seat if isinstance(seat, str) else seat.id
        current = self._seats_by_id.get(seat_id)

        if current is None or not current.is_available:
            logger.debug(f"Ignoring toggle of unavailable seat {seat_id}")
            return ToggleOutcome.IGNORED

        if self.is_selected(seat_id):
            self._selection = [s for s in self._selection if s.id != seat_id]
            self._notify_selection()
            return ToggleOutcome.REMOVED

        if len(self._selection) >= self._required_count:
            self._emit_notice(SelectionFullError(self._required_count, seat_id=seat_id))
            return ToggleOutcome.REJECTED_FULL

        self._selection.append(current)
        self._notify_selection()
        return ToggleOutcome.ADDED

    def reset(self) -> None:
        """Clear the selection."""
        self._selection = []
        self._notify_selection()

    def request_proceed(self) -> bool:
        """
        Confirm the selection if it holds exactly ``required_count`` seats.

        Returns:
            True if ``on_proceed`` was invoked
        """
        if not self.is_complete:
            logger.debug(
                f"Proceed refused: {len(self._selection)} of {self._required_count} seats selected"
            )
            return False

        if self._availability_check is not None:
            selected_ids = {seat.id for seat in self._selection}
            taken = selected_ids.intersection(self._availability_check(self.selection))
            if taken:
                self._drop_from_selection(taken)
                self._emit_notice(SeatNotAvailableError(sorted(taken)))
                return False

        self._on_proceed()
        return True

    def replace_seats(self, seats: Iterable[Seat]) -> None:
        """
        Accept a newer seat snapshot and reconcile the selection with it.

        Selected seats that disappeared or are no longer available are
        dropped; the host is notified once if the selection shrank.
        """
        self._load_seats(seats)

        kept = []
        stale = []
        for selected in self._selection:
            fresh = self._seats_by_id.get(selected.id)
            if fresh is not None and fresh.is_available:
                kept.append(fresh)
            else:
                stale.append(selected.id)

        self._selection = kept
        if stale:
            logger.info(f"Dropped stale selected seats after refresh: {', '.join(stale)}")
            self._notify_selection()

    def set_required_count(self, required_count: int) -> None:
        """Change the passenger count; a different count resets the selection."""
        self._validate_required_count(required_count)
        if required_count == self._required_count:
            return
        self._required_count = required_count
        self.reset()

    def load_flight(self, seats: Iterable[Seat], required_count: Optional[int] = None) -> None:
        """Start a new selection episode on another flight's seat snapshot."""
        if required_count is not None:
            self._validate_required_count(required_count)
        self._load_seats(seats)
        if required_count is not None:
            self._required_count = required_count
        self.reset()

    def _load_seats(self, seats: Iterable[Seat]) -> None:
        snapshot = tuple(seats)
        seats_by_id = {seat.id: seat for seat in snapshot}
        if len(seats_by_id) != len(snapshot):
            raise ValidationError(
                "Seat ids must be unique within a flight",
                field_errors={"seats": [f"duplicate id {seat_id}" for seat_id in duplicate_seat_ids(snapshot)]}
            )
        self._seats = snapshot
        self._seats_by_id = seats_by_id
        self._layout = derive_layout(self._seats, on_malformed=self._emit_notice)

    def _drop_from_selection(self, seat_ids: Collection[str]) -> None:
        remaining = [seat for seat in self._selection if seat.id not in seat_ids]
        if len(remaining) != len(self._selection):
            self._selection = remaining
            self._notify_selection()

    def _notify_selection(self) -> None:
        self._on_selection_change(tuple(self._selection))

    def _emit_notice(self, notice: SeatmapError) -> None:
        logger.info(f"Seat selection notice {notice.error_code.value}: {notice.message}")
        if self._on_notice:
            self._on_notice(notice)

    @staticmethod
    def _validate_required_count(required_count: int) -> None:
        if required_count < 1:
            raise ValidationError(
                "Required seat count must be at least 1",
                field_errors={"required_count": ["must be >= 1"]}
            )

"""
Selection session service holding one seat selector per open seat map.
"""

import logging
import time
from functools import lru_cache
from typing import Callable, Dict, List, Optional, Set
from uuid import uuid4

from flight_seatmap.config import get_settings
from flight_seatmap.models import Seat, SeatStatus
from flight_seatmap.schemas.seat import (
    SeatCellResponse, SeatRecord, SeatRowResponse, SelectedSeatResponse,
    SelectionStateResponse, ToggleResponse
)
from flight_seatmap.services.seat_selector import Selection, SeatSelector, ToggleOutcome
from flight_seatmap.utils.exceptions import (
    SeatmapError, SelectionSessionNotFoundError, SessionLimitError, ValidationError
)
from flight_seatmap.utils.logging_config import log_business_event

logger = logging.getLogger(__name__)


class SelectionSession:
    """A seat selector plus everything its callbacks reported."""

    def __init__(
        self,
        session_id: str,
        flight_id: str,
        seats: List[Seat],
        required_count: int,
        last_access: float = 0.0
    ):
        self.session_id = session_id
        self.flight_id = flight_id
        self.proceeded = False
        self.last_access = last_access
        self.last_selection: Selection = ()
        self.notices: List[SeatmapError] = []
        # Seats of the snapshot supplied with a proceed request, by id
        self.proceed_snapshot: Optional[Dict[str, Seat]] = None
        self.selector = SeatSelector(
            seats,
            required_count,
            on_selection_change=self._record_selection,
            on_proceed=self._record_proceed,
            on_notice=self.notices.append,
            availability_check=self._taken_in_proceed_snapshot
        )

    def is_expired(self, now: float, ttl_seconds: float) -> bool:
        return now - self.last_access > ttl_seconds

    def _taken_in_proceed_snapshot(self, selection: Selection) -> Set[str]:
        if self.proceed_snapshot is None:
            return set()
        taken = set()
        for seat in selection:
            fresh = self.proceed_snapshot.get(seat.id)
            if fresh is None or not fresh.is_available:
                taken.add(seat.id)
        return taken

    def _record_selection(self, selection: Selection) -> None:
        self.last_selection = selection
        self.proceeded = False

    def _record_proceed(self) -> None:
        if self.proceeded:
            return
        self.proceeded = True
        log_business_event(
            "seat_selection_confirmed",
            {
                "flight_id": self.flight_id,
                "seat_ids": [seat.id for seat in self.last_selection],
            },
            session_id=self.session_id
        )

    def drain_notices(self) -> List[SeatmapError]:
        notices = list(self.notices)
        self.notices.clear()
        return notices


class SelectionSessionService:
    """Service class for seat selection sessions kept in process memory."""

    def __init__(
        self,
        max_active_sessions: Optional[int] = None,
        max_required_count: Optional[int] = None,
        session_ttl_seconds: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize the service with its capacity limits.

        Limits left as None fall back to the application settings. Sessions
        untouched for longer than ``session_ttl_seconds`` are discarded.
        """
        settings = get_settings()
        self.max_active_sessions = (
            max_active_sessions if max_active_sessions is not None else settings.max_active_sessions
        )
        self.max_required_count = (
            max_required_count if max_required_count is not None else settings.max_required_count
        )
        self.session_ttl_seconds = (
            session_ttl_seconds if session_ttl_seconds is not None else settings.session_ttl_seconds
        )
        self._clock = clock
        self._sessions: Dict[str, SelectionSession] = {}

    @property
    def active_sessions(self) -> int:
        return len(self._sessions)

    def create_session(
        self,
        flight_id: str,
        seats: List[SeatRecord],
        required_count: int
    ) -> SelectionStateResponse:
        """
        Open a seat selection for a flight.

        Args:
            flight_id: Flight identifier
            seats: Current seat snapshot for the flight
            required_count: Number of passengers

        Returns:
            Initial selection state

        Raises:
            ValidationError: If the passenger count exceeds the limit
            SessionLimitError: If too many sessions are open
        """
        self._check_required_count(required_count)
        self._purge_expired()
        if len(self._sessions) >= self.max_active_sessions:
            raise SessionLimitError(self.max_active_sessions)

        session_id = str(uuid4())
        session = SelectionSession(
            session_id,
            flight_id,
            [record.to_seat() for record in seats],
            required_count,
            last_access=self._clock()
        )
        self._sessions[session_id] = session

        log_business_event(
            "seat_selection_started",
            {"flight_id": flight_id, "required_count": required_count, "seat_total": len(seats)},
            session_id=session_id
        )
        return self._build_state(session)

    def get_state(self, session_id: str) -> SelectionStateResponse:
        return self._build_state(self._get_session(session_id))

    def toggle(self, session_id: str, seat_id: str) -> ToggleResponse:
        session = self._get_session(session_id)
        outcome = session.selector.toggle(seat_id)
        state = self._build_state(session)
        return ToggleResponse(**state.model_dump(), outcome=outcome.value)

    def reset(self, session_id: str) -> SelectionStateResponse:
        session = self._get_session(session_id)
        session.selector.reset()
        return self._build_state(session)

    def replace_seats(self, session_id: str, seats: List[SeatRecord]) -> SelectionStateResponse:
        session = self._get_session(session_id)
        session.selector.replace_seats([record.to_seat() for record in seats])
        return self._build_state(session)

    def set_required_count(self, session_id: str, required_count: int) -> SelectionStateResponse:
        session = self._get_session(session_id)
        self._check_required_count(required_count)
        session.selector.set_required_count(required_count)
        return self._build_state(session)

    def proceed(self, session_id: str, seats: Optional[List[SeatRecord]] = None) -> SelectionStateResponse:
        """
        Confirm the selection.

        A supplied snapshot is checked against the selection before the
        confirmation: selected seats it reports taken are dropped with a
        SEAT_NOT_AVAILABLE notice and the confirmation is refused. The
        snapshot then replaces the session's seats.
        """
        session = self._get_session(session_id)
        if seats is None:
            session.selector.request_proceed()
            return self._build_state(session)

        fresh_seats = [record.to_seat() for record in seats]
        session.proceed_snapshot = {seat.id: seat for seat in fresh_seats}
        try:
            session.selector.request_proceed()
        finally:
            session.proceed_snapshot = None
        session.selector.replace_seats(fresh_seats)
        return self._build_state(session)

    def close_session(self, session_id: str) -> None:
        self._get_session(session_id)
        del self._sessions[session_id]
        logger.info(f"Closed seat selection session {session_id}")

    def _get_session(self, session_id: str) -> SelectionSession:
        self._purge_expired()
        session = self._sessions.get(session_id)
        if session is None:
            raise SelectionSessionNotFoundError(session_id)
        session.last_access = self._clock()
        return session

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [
            session_id for session_id, session in self._sessions.items()
            if session.is_expired(now, self.session_ttl_seconds)
        ]
        for session_id in expired:
            del self._sessions[session_id]
        if expired:
            logger.info(f"Discarded {len(expired)} expired seat selection sessions")

    def _check_required_count(self, required_count: int) -> None:
        if required_count > self.max_required_count:
            raise ValidationError(
                f"Cannot select more than {self.max_required_count} seats",
                field_errors={"required_count": [f"must be <= {self.max_required_count}"]}
            )

    def _build_state(self, session: SelectionSession) -> SelectionStateResponse:
        selector = session.selector
        layout = selector.layout

        rows = []
        for row in layout.rows:
            cells = []
            for cell in row.cells:
                is_selected = selector.is_selected(cell.seat.id)
                cells.append(SeatCellResponse(
                    id=cell.seat.id,
                    code=cell.seat.code,
                    column=cell.column,
                    status=cell.seat.status,
                    seat_class=cell.seat.seat_class,
                    is_selected=is_selected,
                    is_selectable=cell.seat.status == SeatStatus.AVAILABLE,
                    display_state="selected" if is_selected else cell.seat.status.value
                ))
            rows.append(SeatRowResponse(
                row_number=row.row_number,
                seat_class=row.seat_class,
                aisle_after=row.aisle_after,
                seats=cells
            ))

        return SelectionStateResponse(
            session_id=session.session_id,
            flight_id=session.flight_id,
            required_count=selector.required_count,
            rows=rows,
            max_columns=layout.max_columns,
            skipped_codes=list(layout.skipped_codes),
            selection=[
                SelectedSeatResponse(id=seat.id, code=seat.code, seat_class=seat.seat_class)
                for seat in selector.selection
            ],
            is_complete=selector.is_complete,
            summary=selector.summary(),
            proceeded=session.proceeded,
            notices=[notice.to_dict() for notice in session.drain_notices()]
        )


@lru_cache()
def get_selection_session_service() -> SelectionSessionService:
    """Get the process-wide selection session service."""
    return SelectionSessionService()

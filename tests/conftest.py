import pytest
from fastapi.testclient import TestClient

from flight_seatmap.models import SeatStatus
from flight_seatmap.services.seat_selector import SeatSelector
from flight_seatmap.services.selection_session_service import (
    SelectionSessionService, get_selection_session_service
)
from tests.factories import SelectionRecorder, make_seat


@pytest.fixture
def recorder():
    return SelectionRecorder()


@pytest.fixture
def make_selector(recorder):
    def _make(seats, required_count, **kwargs):
        return SeatSelector(
            seats,
            required_count,
            on_selection_change=recorder.on_selection_change,
            on_proceed=recorder.on_proceed,
            on_notice=recorder.on_notice,
            **kwargs
        )

    return _make


@pytest.fixture
def scenario_seats():
    return [
        make_seat('12A'),
        make_seat('12B'),
        make_seat('12C', status=SeatStatus.OCCUPIED),
    ]


@pytest.fixture
def session_service():
    return SelectionSessionService(max_active_sessions=3, max_required_count=4)


@pytest.fixture
def client(session_service):
    from flight_seatmap.main import app

    app.dependency_overrides[get_selection_session_service] = lambda: session_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

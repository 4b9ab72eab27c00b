import random

import pytest

from flight_seatmap.models import SeatClass, SeatStatus
from flight_seatmap.services.seat_selector import ToggleOutcome
from flight_seatmap.utils.exceptions import (
    MalformedSeatCodeError, SeatNotAvailableError, SelectionFullError, ValidationError
)
from tests.factories import make_seat


# ============================================================================
# Test toggle
# ============================================================================


@pytest.mark.unit
class TestToggle:
    """Test adding and removing seats"""

    def test_booking_walkthrough(self, make_selector, recorder, scenario_seats):
        # Given: 12A and 12B available, 12C occupied, two passengers
        selector = make_selector(scenario_seats, 2)

        # When/Then: Walk through a typical sequence
        assert selector.toggle('12A') == ToggleOutcome.ADDED
        assert recorder.last_ids == ['12A']

        assert selector.toggle('12C') == ToggleOutcome.IGNORED
        assert len(recorder.selections) == 1

        assert selector.toggle('12B') == ToggleOutcome.ADDED
        assert recorder.last_ids == ['12A', '12B']

        assert selector.toggle('12A') == ToggleOutcome.REMOVED
        assert recorder.last_ids == ['12B']

        assert selector.request_proceed() is False
        assert recorder.proceed_count == 0

    def test_full_selection_rejects_with_notice(self, make_selector, recorder):
        # Given: One passenger with a seat already chosen
        selector = make_selector([make_seat('1A'), make_seat('1B')], 1)
        selector.toggle('1A')

        # When: Try to add a second seat
        outcome = selector.toggle('1B')

        # Then: Nothing changes and a SELECTION_FULL notice is delivered
        assert outcome == ToggleOutcome.REJECTED_FULL
        assert [seat.id for seat in selector.selection] == ['1A']
        assert len(recorder.selections) == 1
        assert len(recorder.notices) == 1
        assert isinstance(recorder.notices[0], SelectionFullError)
        assert recorder.notices[0].details['required_count'] == 1

    def test_removal_always_allowed_when_full(self, make_selector, recorder):
        selector = make_selector([make_seat('1A'), make_seat('1B')], 2)
        selector.toggle('1A')
        selector.toggle('1B')

        assert selector.toggle('1A') == ToggleOutcome.REMOVED
        assert recorder.last_ids == ['1B']

    def test_readded_seat_goes_to_the_end(self, make_selector, recorder):
        # Given: Three seats picked in order
        selector = make_selector([make_seat(code) for code in ['3A', '3B', '3C']], 3)
        for code in ['3A', '3B', '3C']:
            selector.toggle(code)

        # When: Remove the first one and pick it again
        selector.toggle('3A')
        selector.toggle('3A')

        # Then: It is now last in the passenger order
        assert recorder.last_ids == ['3B', '3C', '3A']

    def test_toggle_resolves_against_current_snapshot(self, make_selector, recorder):
        # Given: The caller still holds an available record of 5A
        stale_record = make_seat('5A')
        selector = make_selector([stale_record], 1)
        selector.replace_seats([make_seat('5A', status=SeatStatus.HELD)])

        # When: Toggle with the stale record
        outcome = selector.toggle(stale_record)

        # Then: The newer snapshot wins
        assert outcome == ToggleOutcome.IGNORED
        assert selector.selection == ()
        assert recorder.selections == []

    def test_unknown_seat_is_ignored(self, make_selector, recorder):
        selector = make_selector([make_seat('1A')], 1)

        assert selector.toggle('99Z') == ToggleOutcome.IGNORED
        assert recorder.selections == []

    def test_snapshots_are_immutable_tuples(self, make_selector, recorder):
        selector = make_selector([make_seat('1A'), make_seat('1B')], 2)

        selector.toggle('1A')
        first_snapshot = recorder.selections[-1]
        selector.toggle('1B')

        assert isinstance(first_snapshot, tuple)
        assert [seat.id for seat in first_snapshot] == ['1A']
        assert recorder.selections[-1] == selector.selection

    @pytest.mark.parametrize('required_count', [1, 2, 3])
    def test_selection_never_exceeds_required_count(self, make_selector, recorder, required_count):
        # Given: A mixed cabin and a random stream of toggles
        statuses = [SeatStatus.AVAILABLE, SeatStatus.AVAILABLE, SeatStatus.HELD, SeatStatus.OCCUPIED]
        seats = [
            make_seat(f'{row}{column}', status=statuses[(row + ord(column)) % len(statuses)])
            for row in range(1, 5)
            for column in 'ABCD'
        ]
        selector = make_selector(seats, required_count)
        rng = random.Random(required_count)

        # When/Then: The bound holds after every step
        for _ in range(300):
            selector.toggle(rng.choice(seats).id)
            assert len(selector.selection) <= required_count

        assert all(len(snapshot) <= required_count for snapshot in recorder.selections)
        assert all(seat.is_available for seat in selector.selection)


# ============================================================================
# Test reset, proceed and passenger count
# ============================================================================


@pytest.mark.unit
class TestResetAndProceed:
    """Test clearing and confirming the selection"""

    def test_reset_notifies_empty_selection(self, make_selector, recorder, scenario_seats):
        selector = make_selector(scenario_seats, 2)
        selector.toggle('12A')

        selector.reset()

        assert selector.selection == ()
        assert recorder.selections[-1] == ()

    def test_proceed_only_when_complete(self, make_selector, recorder, scenario_seats):
        # Given: Two passengers
        selector = make_selector(scenario_seats, 2)

        # Then: Proceed is refused until both seats are picked
        assert selector.request_proceed() is False
        selector.toggle('12A')
        assert selector.request_proceed() is False
        selector.toggle('12B')
        assert selector.request_proceed() is True

        assert recorder.proceed_count == 1
        assert [seat.id for seat in selector.selection] == ['12A', '12B']

    def test_changing_required_count_resets_selection(self, make_selector, recorder, scenario_seats):
        selector = make_selector(scenario_seats, 2)
        selector.toggle('12A')

        selector.set_required_count(1)

        assert selector.required_count == 1
        assert selector.selection == ()
        assert recorder.selections[-1] == ()

    def test_same_required_count_keeps_selection(self, make_selector, recorder, scenario_seats):
        selector = make_selector(scenario_seats, 2)
        selector.toggle('12A')

        selector.set_required_count(2)

        assert [seat.id for seat in selector.selection] == ['12A']
        assert len(recorder.selections) == 1

    @pytest.mark.parametrize('required_count', [0, -1])
    def test_invalid_required_count(self, make_selector, scenario_seats, required_count):
        with pytest.raises(ValidationError):
            make_selector(scenario_seats, required_count)

        selector = make_selector(scenario_seats, 1)
        with pytest.raises(ValidationError):
            selector.set_required_count(required_count)

    def test_load_flight_starts_new_episode(self, make_selector, recorder, scenario_seats):
        # Given: A selection on the first flight
        selector = make_selector(scenario_seats, 2)
        selector.toggle('12A')

        # When: Switch to another flight with three passengers
        selector.load_flight([make_seat('30A'), make_seat('30B')], required_count=3)

        # Then: The selection is cleared and the new layout is shown
        assert selector.selection == ()
        assert selector.required_count == 3
        assert recorder.selections[-1] == ()
        assert [row.row_number for row in selector.layout.rows] == [30]

    def test_summary(self, make_selector, scenario_seats):
        selector = make_selector(scenario_seats, 2)
        assert selector.summary() == '0 / 2'

        selector.toggle('12B')
        selector.toggle('12A')

        assert selector.summary() == '2 / 2: 12B, 12A'
        assert selector.selected_codes == ('12B', '12A')


# ============================================================================
# Test refresh reconciliation
# ============================================================================


@pytest.mark.unit
class TestReplaceSeats:
    """Test reconciling the selection with a newer seat snapshot"""

    def test_seat_taken_by_another_booking_is_dropped(self, make_selector, recorder, scenario_seats):
        # Given: 12A and 12B selected
        selector = make_selector(scenario_seats, 2)
        selector.toggle('12A')
        selector.toggle('12B')
        notifications_before = len(recorder.selections)

        # When: A refresh marks 12B occupied
        selector.replace_seats([
            make_seat('12A'),
            make_seat('12B', status=SeatStatus.OCCUPIED),
            make_seat('12C', status=SeatStatus.OCCUPIED),
        ])

        # Then: 12B is dropped with exactly one notification
        assert [seat.id for seat in selector.selection] == ['12A']
        assert len(recorder.selections) == notifications_before + 1
        assert recorder.last_ids == ['12A']

    def test_seat_missing_from_snapshot_is_dropped(self, make_selector, recorder, scenario_seats):
        selector = make_selector(scenario_seats, 2)
        selector.toggle('12A')
        selector.toggle('12B')

        selector.replace_seats([make_seat('12B')])

        assert recorder.last_ids == ['12B']

    def test_unchanged_selection_does_not_notify(self, make_selector, recorder, scenario_seats):
        selector = make_selector(scenario_seats, 2)
        selector.toggle('12A')

        selector.replace_seats(scenario_seats + [make_seat('13A')])

        assert len(recorder.selections) == 1
        assert [row.row_number for row in selector.layout.rows] == [12, 13]

    def test_surviving_seats_take_fresh_records(self, make_selector, scenario_seats):
        selector = make_selector(scenario_seats, 2)
        selector.toggle('12A')

        selector.replace_seats([make_seat('12A', seat_class=SeatClass.BUSINESS)])

        assert selector.selection[0].seat_class == SeatClass.BUSINESS

    def test_refresh_with_malformed_code_reports_notice(self, make_selector, recorder):
        selector = make_selector([make_seat('1A')], 1)

        selector.replace_seats([make_seat('1A'), make_seat('GALLEY', seat_id='g1')])

        assert selector.layout.skipped_codes == ('GALLEY',)
        assert any(isinstance(notice, MalformedSeatCodeError) for notice in recorder.notices)


# ============================================================================
# Test seat id uniqueness
# ============================================================================


@pytest.mark.unit
class TestDuplicateSeatIds:
    """Test that one seat id never maps to two cells"""

    def test_constructor_rejects_duplicate_ids(self, make_selector):
        with pytest.raises(ValidationError) as exc_info:
            make_selector([make_seat('1A', seat_id='x'), make_seat('1B', seat_id='x')], 1)

        assert exc_info.value.field_errors == {'seats': ['duplicate id x']}

    def test_refresh_with_duplicate_ids_keeps_previous_state(self, make_selector, recorder, scenario_seats):
        # Given: 12A selected
        selector = make_selector(scenario_seats, 2)
        selector.toggle('12A')
        layout_before = selector.layout

        # When: A refresh carries the same id on two seats
        with pytest.raises(ValidationError):
            selector.replace_seats([make_seat('12A'), make_seat('12B', seat_id='12A')])

        # Then: Nothing changed and a toggle still marks a single cell
        assert selector.layout == layout_before
        assert recorder.last_ids == ['12A']
        selector.toggle('12B')
        selected_cells = [
            cell.seat.code for row in selector.layout.rows for cell in row.cells
            if selector.is_selected(cell.seat.id)
        ]
        assert selected_cells == ['12A', '12B']

    def test_load_flight_with_duplicate_ids_keeps_required_count(self, make_selector, scenario_seats):
        selector = make_selector(scenario_seats, 2)

        with pytest.raises(ValidationError):
            selector.load_flight([make_seat('1A', seat_id='x'), make_seat('1B', seat_id='x')], 1)

        assert selector.required_count == 2
        assert [seat.id for seat in selector.seats] == ['12A', '12B', '12C']


# ============================================================================
# Test final availability check
# ============================================================================


@pytest.mark.unit
class TestAvailabilityCheck:
    """Test re-checking a complete selection before proceeding"""

    def test_taken_seat_blocks_proceed(self, make_selector, recorder, scenario_seats):
        # Given: A check reporting 12B as taken
        selector = make_selector(scenario_seats, 2, availability_check=lambda selection: ['12B'])
        selector.toggle('12A')
        selector.toggle('12B')

        # When: Proceed
        proceeded = selector.request_proceed()

        # Then: 12B is dropped and the user is told why
        assert proceeded is False
        assert recorder.proceed_count == 0
        assert recorder.last_ids == ['12A']
        assert isinstance(recorder.notices[-1], SeatNotAvailableError)
        assert recorder.notices[-1].seat_ids == ['12B']

    def test_clear_check_proceeds(self, make_selector, recorder, scenario_seats):
        checked = []

        def check(selection):
            checked.append([seat.id for seat in selection])
            return []

        selector = make_selector(scenario_seats, 2, availability_check=check)
        selector.toggle('12A')
        selector.toggle('12B')

        assert selector.request_proceed() is True
        assert checked == [['12A', '12B']]
        assert recorder.proceed_count == 1

    def test_ids_outside_selection_are_ignored(self, make_selector, recorder, scenario_seats):
        selector = make_selector(scenario_seats, 1, availability_check=lambda selection: ['12C'])
        selector.toggle('12A')

        assert selector.request_proceed() is True
        assert recorder.notices == []

"""
Тесты окна календаря, навигации и построения сетки.
"""

from datetime import date, timedelta
from uuid import uuid4

import pytest

from hotel_backoffice.calendar_view.domain import (
    CalendarGridBuilder,
    CalendarWindow,
    ViewMode,
    next_anchor,
    previous_anchor,
    week_start,
    window_for,
)
from hotel_backoffice.reservations.domain import AvailabilityService
from hotel_backoffice.shared_kernel import ReservationStatus


@pytest.fixture
def builder(uow, settings) -> CalendarGridBuilder:
    return CalendarGridBuilder(
        room_repository=uow.rooms,
        availability=AvailabilityService(uow.reservations),
        settings=settings,
    )


class TestWindow:
    @pytest.mark.parametrize(
        "anchor, expected",
        [
            (date(2024, 3, 11), date(2024, 3, 11)),
            (date(2024, 3, 13), date(2024, 3, 11)),
            (date(2024, 3, 17), date(2024, 3, 11)),
            (date(2024, 3, 1), date(2024, 2, 26)),
        ],
    )
    def test_week_starts_on_monday(self, anchor, expected):
        assert week_start(anchor) == expected

    def test_week_window(self, settings):
        window = window_for(date(2024, 3, 13), ViewMode.WEEK, settings)

        assert window.start == date(2024, 3, 11)
        assert window.end == date(2024, 3, 17)
        assert len(window.days) == 7

    def test_month_window_is_rolling_thirty_days(self, settings):
        window = window_for(date(2024, 3, 13), ViewMode.MONTH, settings)

        assert window.start == date(2024, 3, 11)
        assert window.length == 30
        assert window.end == date(2024, 4, 9)

    def test_window_membership(self):
        window = CalendarWindow(start=date(2024, 3, 11), length=7)

        assert date(2024, 3, 17) in window
        assert date(2024, 3, 18) not in window

    @pytest.mark.parametrize("view_mode, shift", [(ViewMode.WEEK, 7), (ViewMode.MONTH, 30)])
    def test_navigation_shifts_by_window_length(self, settings, view_mode, shift):
        anchor = date(2024, 3, 13)

        assert next_anchor(anchor, view_mode, settings) == anchor + timedelta(days=shift)
        assert previous_anchor(anchor, view_mode, settings) == anchor - timedelta(
            days=shift
        )

    def test_next_window_starts_seven_days_later(self, settings):
        anchor = date(2024, 3, 13)
        current = window_for(anchor, ViewMode.WEEK, settings)
        following = window_for(
            next_anchor(anchor, ViewMode.WEEK, settings), ViewMode.WEEK, settings
        )

        assert following.start == current.start + timedelta(days=7)


class TestGrid:
    def test_arrival_of_next_guest_replaces_departing_one(
        self, builder, room_101, make_reservation
    ):
        make_reservation(room_101, date(2024, 3, 10), date(2024, 3, 13))
        second = make_reservation(room_101, date(2024, 3, 13), date(2024, 3, 15))

        grid = builder.build_grid(date(2024, 3, 13))
        cell = grid.cell(room_101.id, date(2024, 3, 13))

        assert [entry.reservation for entry in cell.entries] == [second]
        assert cell.entries[0].is_arrival
        assert not grid.cell(room_101.id, date(2024, 3, 14)).entries[0].is_arrival
        assert not grid.cell(room_101.id, date(2024, 3, 15)).is_occupied

    def test_first_day_of_window_shows_ongoing_stay(
        self, builder, room_101, make_reservation
    ):
        stay = make_reservation(room_101, date(2024, 3, 8), date(2024, 3, 12))

        cell = builder.build_grid(date(2024, 3, 13)).cell(room_101.id, date(2024, 3, 11))

        assert cell.entries[0].reservation == stay
        assert not cell.entries[0].is_arrival

    def test_double_booking_is_visible(self, builder, room_101, make_reservation):
        make_reservation(room_101, date(2024, 3, 11), date(2024, 3, 14))
        make_reservation(room_101, date(2024, 3, 12), date(2024, 3, 13))

        grid = builder.build_grid(date(2024, 3, 13))

        assert grid.cell(room_101.id, date(2024, 3, 12)).is_double_booked
        assert not grid.cell(room_101.id, date(2024, 3, 13)).is_double_booked

    def test_inactive_reservations_are_still_drawn(
        self, builder, room_101, make_reservation
    ):
        make_reservation(
            room_101, date(2024, 3, 11), date(2024, 3, 12), ReservationStatus.CANCELLED
        )

        cell = builder.build_grid(date(2024, 3, 13)).cell(room_101.id, date(2024, 3, 11))

        assert cell.entries[0].reservation.status == ReservationStatus.CANCELLED

    def test_grid_shape(self, builder, room_101, room_102):
        grid = builder.build_grid(date(2024, 3, 13), ViewMode.MONTH)

        assert len(grid.rows) == 2
        assert all(len(row.cells) == 30 for row in grid.rows)
        assert grid.rows[0].cells[0].day == date(2024, 3, 11)
        assert grid.days == grid.window.days

    def test_room_filter(self, builder, room_101, room_102):
        grid = builder.build_grid(date(2024, 3, 13), room_filter=room_102.id)

        assert [row.room.id for row in grid.rows] == [room_102.id]
        assert grid.cell(room_101.id, date(2024, 3, 13)) is None

    def test_unknown_room_filter_gives_empty_grid(self, builder, room_101):
        grid = builder.build_grid(date(2024, 3, 13), room_filter=uuid4())

        assert grid.rows == ()
        assert len(grid.days) == 7

    def test_cell_outside_window(self, builder, room_101):
        grid = builder.build_grid(date(2024, 3, 13))

        assert grid.cell(room_101.id, date(2024, 3, 18)) is None

    def test_building_is_repeatable(self, builder, room_101, make_reservation):
        make_reservation(room_101, date(2024, 3, 10), date(2024, 3, 13))

        assert builder.build_grid(date(2024, 3, 13)) == builder.build_grid(
            date(2024, 3, 13)
        )

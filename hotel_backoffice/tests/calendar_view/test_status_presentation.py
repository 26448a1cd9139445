from datetime import date

import pytest

from hotel_backoffice.calendar_view import presentation
from hotel_backoffice.shared_kernel import ReservationStatus, RoomStatus, RoomType


@pytest.mark.parametrize(
    "status, label, color",
    [
        (ReservationStatus.CONFIRMED, "Подтверждено", "bg-green-500"),
        (ReservationStatus.PENDING, "В ожидании", "bg-amber-500"),
        (ReservationStatus.CANCELLED, "Отменено", "bg-red-500"),
        (ReservationStatus.COMPLETED, "Завершено", "bg-blue-500"),
        ("confirmed", "Подтверждено", "bg-green-500"),
    ],
)
def test_reservation_status(status, label, color):
    look = presentation.reservation_status_presentation(status)
    assert look.label == label
    assert look.color == color


def test_unknown_status_is_neutral():
    look = presentation.reservation_status_presentation("waitlist")
    assert look.label == "waitlist"
    assert look.color == "bg-gray-500"
    assert look.badge == "bg-gray-100 text-gray-800"


def test_missing_status_is_neutral():
    look = presentation.reservation_status_presentation(None)
    assert look.label == "—"
    assert look.color == "bg-gray-500"


def test_room_status():
    assert presentation.room_status_presentation(RoomStatus.CLEANING).label == "Уборка"
    assert presentation.room_status_presentation("broken").label == "broken"


def test_room_type_label():
    assert presentation.room_type_label(RoomType.SUITE) == "Люкс"
    assert presentation.room_type_label("penthouse") == "penthouse"


def test_legend_order():
    assert [status for status, _ in presentation.legend()] == [
        ReservationStatus.CONFIRMED,
        ReservationStatus.PENDING,
        ReservationStatus.CANCELLED,
        ReservationStatus.COMPLETED,
    ]


def test_titles():
    assert (
        presentation.week_title(date(2024, 2, 26), date(2024, 3, 3))
        == "26 фев - 03 мар 2024"
    )
    assert presentation.month_title(date(2024, 5, 2)) == "Май 2024"
    assert presentation.weekday_label(date(2024, 3, 17)) == "Вс"

"""
Отображение статусов и подписи календаря.

Таблицы соответствия статус -> подпись и цвет. Неизвестные значения
показываются нейтрально, без исключений: это подсказки отрисовки,
а не управляющая логика.
"""

from datetime import date
from enum import Enum
from typing import Dict, List, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict

from ..shared_kernel import ReservationStatus, RoomStatus, RoomType

T_Status = TypeVar("T_Status", bound=Enum)


class StatusPresentation(BaseModel):
    """Подпись, цвет полосы в календаре и классы значка."""

    model_config = ConfigDict(frozen=True)

    label: str
    color: str
    badge: str


def _palette(label: str, tone: str) -> StatusPresentation:
    return StatusPresentation(
        label=label, color=f"bg-{tone}-500", badge=f"bg-{tone}-100 text-{tone}-800"
    )


NEUTRAL_TONE = "gray"

RESERVATION_STATUS_PRESENTATION: Dict[ReservationStatus, StatusPresentation] = {
    ReservationStatus.CONFIRMED: _palette("Подтверждено", "green"),
    ReservationStatus.PENDING: _palette("В ожидании", "amber"),
    ReservationStatus.CANCELLED: _palette("Отменено", "red"),
    ReservationStatus.COMPLETED: _palette("Завершено", "blue"),
}

ROOM_STATUS_PRESENTATION: Dict[RoomStatus, StatusPresentation] = {
    RoomStatus.AVAILABLE: _palette("Свободен", "green"),
    RoomStatus.OCCUPIED: _palette("Занят", "red"),
    RoomStatus.MAINTENANCE: _palette("Обслуживание", "gray"),
    RoomStatus.CLEANING: _palette("Уборка", "blue"),
    RoomStatus.RESERVED: _palette("Забронирован", "amber"),
}

ROOM_TYPE_LABELS: Dict[RoomType, str] = {
    RoomType.SIMPLE: "Одноместный",
    RoomType.DOUBLE: "Двухместный",
    RoomType.SUITE: "Люкс",
    RoomType.FAMILY: "Семейный",
    RoomType.DELUXE: "Делюкс",
}

# Неделя начинается с понедельника (date.weekday() == 0)
WEEKDAY_LABELS = ("Пн", "Вт", "Ср", "Чт", "Пт", "Сб", "Вс")

MONTH_NAMES = (
    "Январь", "Февраль", "Март", "Апрель", "Май", "Июнь",
    "Июль", "Август", "Сентябрь", "Октябрь", "Ноябрь", "Декабрь",
)  # fmt: skip

MONTH_ABBREVIATIONS = (
    "янв", "фев", "мар", "апр", "мая", "июн",
    "июл", "авг", "сен", "окт", "ноя", "дек",
)  # fmt: skip


def _lookup(
    table: Dict[T_Status, StatusPresentation],
    status_class: Type[T_Status],
    status: Union[T_Status, str, None],
) -> StatusPresentation:
    try:
        return table[status_class(status)]
    except (ValueError, KeyError, TypeError):
        raw = getattr(status, "value", status)
        return _palette(str(raw) if raw is not None else "—", NEUTRAL_TONE)


def reservation_status_presentation(
    status: Union[ReservationStatus, str, None],
) -> StatusPresentation:
    return _lookup(RESERVATION_STATUS_PRESENTATION, ReservationStatus, status)


def room_status_presentation(
    status: Union[RoomStatus, str, None],
) -> StatusPresentation:
    return _lookup(ROOM_STATUS_PRESENTATION, RoomStatus, status)


def room_type_label(room_type: Union[RoomType, str]) -> str:
    try:
        return ROOM_TYPE_LABELS[RoomType(room_type)]
    except (ValueError, KeyError):
        return str(getattr(room_type, "value", room_type))


def legend() -> List[Tuple[ReservationStatus, StatusPresentation]]:
    """Легенда календаря в порядке отображения."""
    return list(RESERVATION_STATUS_PRESENTATION.items())


def weekday_label(day: date) -> str:
    return WEEKDAY_LABELS[day.weekday()]


def week_title(start: date, end: date) -> str:
    """Например: "10 мар - 16 мар 2024"."""
    return (
        f"{start.day:02d} {MONTH_ABBREVIATIONS[start.month - 1]} - "
        f"{end.day:02d} {MONTH_ABBREVIATIONS[end.month - 1]} {end.year}"
    )


def month_title(anchor: date) -> str:
    """Например: "Март 2024"."""
    return f"{MONTH_NAMES[anchor.month - 1]} {anchor.year}"

"""
Доменная модель календаря бронирований.

Окно календаря (неделя или скользящие 30 дней от понедельника),
навигация по окнам и построение сетки "номер x день".
"""

from datetime import date, timedelta
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..config import HotelSettings
from ..reservations.domain import AvailabilityService, Reservation, Room
from ..shared_kernel import EntityId, as_date

if TYPE_CHECKING:
    from ..reservations.interfaces import IClock, ILogger, IRoomRepository


class ViewMode(str, Enum):
    """Режимы отображения календаря."""

    WEEK = "week"
    # Не календарный месяц: скользящее окно той же длины от понедельника недели
    MONTH = "month"


class CalendarWindow(BaseModel):
    """Отображаемый диапазон дней."""

    model_config = ConfigDict(frozen=True)

    start: date
    length: int = Field(..., gt=0)

    @property
    def end(self) -> date:
        """Последний отображаемый день (включительно)."""
        return self.start + timedelta(days=self.length - 1)

    @property
    def days(self) -> List[date]:
        return [self.start + timedelta(days=i) for i in range(self.length)]

    def __contains__(self, day: date) -> bool:
        return self.start <= as_date(day) <= self.end


def week_start(anchor: date) -> date:
    """Понедельник, приходящийся на дату или предшествующий ей."""
    anchor = as_date(anchor)
    return anchor - timedelta(days=anchor.weekday())


def window_length(view_mode: ViewMode, settings: Optional[HotelSettings] = None) -> int:
    settings = settings or HotelSettings()
    if ViewMode(view_mode) == ViewMode.WEEK:
        return settings.week_days
    return settings.month_window_days


def window_for(
    anchor: date, view_mode: ViewMode, settings: Optional[HotelSettings] = None
) -> CalendarWindow:
    return CalendarWindow(
        start=week_start(anchor), length=window_length(view_mode, settings)
    )


def previous_anchor(
    anchor: date, view_mode: ViewMode, settings: Optional[HotelSettings] = None
) -> date:
    """Сдвиг якоря на одно окно назад."""
    return as_date(anchor) - timedelta(days=window_length(view_mode, settings))


def next_anchor(
    anchor: date, view_mode: ViewMode, settings: Optional[HotelSettings] = None
) -> date:
    """Сдвиг якоря на одно окно вперед."""
    return as_date(anchor) + timedelta(days=window_length(view_mode, settings))


def today_anchor(clock: "IClock") -> date:
    return clock.today()


class CellEntry(BaseModel):
    """Бронирование в ячейке с признаком дня заезда."""

    model_config = ConfigDict(frozen=True)

    reservation: Reservation
    is_arrival: bool


class GridCell(BaseModel):
    model_config = ConfigDict(frozen=True)

    day: date
    entries: Tuple[CellEntry, ...] = ()

    @property
    def is_occupied(self) -> bool:
        return bool(self.entries)

    @property
    def is_double_booked(self) -> bool:
        return len(self.entries) > 1


class GridRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    room: Room
    cells: Tuple[GridCell, ...]


class CalendarGrid(BaseModel):
    """Матрица "номер x день" для отрисовки."""

    model_config = ConfigDict(frozen=True)

    anchor: date
    view_mode: ViewMode
    room_filter: Optional[EntityId] = None
    window: CalendarWindow
    rows: Tuple[GridRow, ...]

    @property
    def days(self) -> List[date]:
        return self.window.days

    def row_for(self, room_id: EntityId) -> Optional[GridRow]:
        for row in self.rows:
            if row.room.id == room_id:
                return row
        return None

    def cell(self, room_id: EntityId, day: date) -> Optional[GridCell]:
        row = self.row_for(room_id)
        if row is None or as_date(day) not in self.window:
            return None
        return row.cells[(as_date(day) - self.window.start).days]


class CalendarGridBuilder:
    """Доменный сервис построения сетки календаря."""

    def __init__(
        self,
        room_repository: "IRoomRepository",
        availability: AvailabilityService,
        settings: Optional[HotelSettings] = None,
        logger: Optional["ILogger"] = None,
    ):
        self._rooms = room_repository
        self._availability = availability
        self._settings = settings or HotelSettings()
        self._logger = logger

    def _rows_rooms(self, room_filter: Optional[EntityId]) -> List[Room]:
        rooms = self._rooms.list_all()
        if room_filter is None:
            return rooms
        selected = [room for room in rooms if room.id == room_filter]
        if not selected and self._logger is not None:
            self._logger.debug(
                "Фильтр календаря не совпал ни с одним номером", room_filter=room_filter
            )
        return selected

    def build_cell(self, room: Room, day: date) -> GridCell:
        entries = tuple(
            CellEntry(
                reservation=reservation, is_arrival=reservation.is_arrival_day(day)
            )
            for reservation in self._availability.occupancy_on(room.id, day)
        )
        return GridCell(day=day, entries=entries)

    def build_grid(
        self,
        anchor: date,
        view_mode: ViewMode = ViewMode.WEEK,
        room_filter: Optional[EntityId] = None,
    ) -> CalendarGrid:
        """Строит сетку для окна, вычисленного от якоря."""
        anchor = as_date(anchor)
        window = window_for(anchor, view_mode, self._settings)
        days = window.days
        rows = tuple(
            GridRow(room=room, cells=tuple(self.build_cell(room, day) for day in days))
            for room in self._rows_rooms(room_filter)
        )
        return CalendarGrid(
            anchor=anchor,
            view_mode=view_mode,
            room_filter=room_filter,
            window=window,
            rows=rows,
        )

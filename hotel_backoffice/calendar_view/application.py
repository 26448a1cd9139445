"""
Прикладной слой календаря.

Превращает сетку календаря в DTO для отрисовки: заголовок окна,
колонки дней, строки номеров, ячейки с бронированиями и легенду.
"""

from datetime import date
from typing import List, Optional, Tuple

from pydantic import BaseModel

from ..config import HotelSettings
from ..reservations import interfaces as ports
from ..reservations.domain import AvailabilityService, Reservation
from ..reservations.infrastructure import StdLibLogger, SystemClock
from ..shared_kernel import EntityId, ReservationStatus, RoomType
from . import presentation
from .domain import (
    CalendarGrid,
    CalendarGridBuilder,
    CellEntry,
    ViewMode,
    next_anchor,
    previous_anchor,
    today_anchor,
)


class DayColumnDTO(BaseModel):
    day: date
    weekday_label: str
    label: str
    is_today: bool


class CellEntryDTO(BaseModel):
    reservation_id: EntityId
    label: str
    status: ReservationStatus
    color: str
    is_arrival: bool
    tooltip: str


class CellDTO(BaseModel):
    day: date
    is_today: bool
    entries: List[CellEntryDTO]


class RowDTO(BaseModel):
    room_id: EntityId
    room_number: str
    room_type: RoomType
    room_type_label: str
    cells: List[CellDTO]


class LegendItemDTO(BaseModel):
    status: ReservationStatus
    label: str
    color: str


class CalendarViewDTO(BaseModel):
    """Представление календаря для экрана."""

    anchor: date
    view_mode: ViewMode
    title: str
    window_start: date
    window_end: date
    room_filter: Optional[EntityId]
    columns: List[DayColumnDTO]
    rows: List[RowDTO]
    legend: List[LegendItemDTO]


def reservation_label(reservation: Reservation) -> str:
    """Короткая подпись бронирования в ячейке."""
    return f"Бр. #{reservation.id.hex[:8]}"


class CalendarApplicationService:
    """Сервис приложения для экрана календаря."""

    def __init__(
        self,
        uow: ports.IHotelUnitOfWork,
        clock: Optional[ports.IClock] = None,
        settings: Optional[HotelSettings] = None,
        logger: Optional[ports.ILogger] = None,
    ):
        self._uow = uow
        self._clock = clock or SystemClock()
        self._settings = settings or HotelSettings()
        self._logger = logger or StdLibLogger("hotel_backoffice.calendar")
        self._builder = CalendarGridBuilder(
            room_repository=self._uow.rooms,
            availability=AvailabilityService(self._uow.reservations),
            settings=self._settings,
            logger=self._logger,
        )

    @property
    def builder(self) -> CalendarGridBuilder:
        return self._builder

    def build_grid(
        self,
        anchor: date,
        view_mode: ViewMode = ViewMode.WEEK,
        room_filter: Optional[EntityId] = None,
    ) -> CalendarGrid:
        return self._builder.build_grid(anchor, view_mode, room_filter)

    # Навигация: чистые преобразования якоря

    def previous(self, anchor: date, view_mode: ViewMode) -> date:
        return previous_anchor(anchor, view_mode, self._settings)

    def next(self, anchor: date, view_mode: ViewMode) -> date:
        return next_anchor(anchor, view_mode, self._settings)

    def today(self) -> date:
        return today_anchor(self._clock)

    def room_filter_options(self) -> List[Tuple[EntityId, str]]:
        """Варианты выбора номера для фильтра календаря."""
        return [
            (room.id, f"Номер {room.number}") for room in self._uow.rooms.list_all()
        ]

    def render(
        self,
        anchor: Optional[date] = None,
        view_mode: ViewMode = ViewMode.WEEK,
        room_filter: Optional[EntityId] = None,
    ) -> CalendarViewDTO:
        """Строит сетку и готовит ее к отрисовке."""
        current = self._clock.today()
        anchor = anchor or current
        grid = self.build_grid(anchor, view_mode, room_filter)
        window = grid.window

        if grid.view_mode == ViewMode.WEEK:
            title = presentation.week_title(window.start, window.end)
        else:
            # Заголовок месяца берется от якоря, а не от начала окна
            title = presentation.month_title(grid.anchor)

        columns = [
            DayColumnDTO(
                day=day,
                weekday_label=presentation.weekday_label(day),
                label=day.strftime("%d.%m"),
                is_today=day == current,
            )
            for day in window.days
        ]
        rows = [
            RowDTO(
                room_id=row.room.id,
                room_number=row.room.number,
                room_type=row.room.type,
                room_type_label=presentation.room_type_label(row.room.type),
                cells=[
                    CellDTO(
                        day=cell.day,
                        is_today=cell.day == current,
                        entries=[self._entry_dto(entry) for entry in cell.entries],
                    )
                    for cell in row.cells
                ],
            )
            for row in grid.rows
        ]
        legend = [
            LegendItemDTO(status=status, label=item.label, color=item.color)
            for status, item in presentation.legend()
        ]
        self._logger.debug(
            "Календарь построен",
            view_mode=grid.view_mode.value,
            window_start=window.start,
            rooms=len(rows),
        )
        return CalendarViewDTO(
            anchor=grid.anchor,
            view_mode=grid.view_mode,
            title=title,
            window_start=window.start,
            window_end=window.end,
            room_filter=room_filter,
            columns=columns,
            rows=rows,
            legend=legend,
        )

    def _entry_dto(self, entry: CellEntry) -> CellEntryDTO:
        reservation = entry.reservation
        look = presentation.reservation_status_presentation(reservation.status)
        date_format = self._settings.date_format
        tooltip = (
            f"Бронирование #{reservation.id.hex[:8]}\n"
            f"с {reservation.arrival_date.strftime(date_format)} "
            f"по {reservation.departure_date.strftime(date_format)}"
        )
        return CellEntryDTO(
            reservation_id=reservation.id,
            label=reservation_label(reservation),
            status=reservation.status,
            color=look.color,
            is_arrival=entry.is_arrival,
            tooltip=tooltip,
        )

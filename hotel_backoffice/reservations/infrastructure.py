"""
Инфраструктурный слой контекста бронирования.

Содержит реализации репозиториев в памяти, логгер поверх ``logging``,
источники текущей даты и единицу работы.
"""

import bisect
import json
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from ..config import HotelSettings
from ..shared_kernel import ConflictException, EntityId, NotFoundException, today
from . import interfaces as ports
from .domain import Client, Reservation, Room

# (дата заезда, время создания, id) - ключ сортировки во вторичном индексе
_IndexEntry = Tuple[date, datetime, EntityId]


class InMemoryRoomRepository(ports.IRoomRepository):
    """Реализация репозитория номеров в памяти."""

    def __init__(self):
        self._rooms: Dict[EntityId, Room] = {}

    def add(self, room: Room) -> None:
        if room.id in self._rooms:
            raise ConflictException(f"Номер с id {room.id} уже существует")
        if self.find_by_number(room.number) is not None:
            raise ConflictException(f"Номер {room.number} уже существует")
        self._rooms[room.id] = room

    def get_by_id(self, room_id: EntityId) -> Room:
        if room_id not in self._rooms:
            raise NotFoundException("Номер", room_id)
        return self._rooms[room_id]

    def find_by_id(self, room_id: EntityId) -> Optional[Room]:
        return self._rooms.get(room_id)

    def update(self, room: Room) -> None:
        if room.id not in self._rooms:
            raise NotFoundException("Номер", room.id)
        same_number = self.find_by_number(room.number)
        if same_number is not None and same_number.id != room.id:
            raise ConflictException(f"Номер {room.number} уже существует")
        self._rooms[room.id] = room

    def delete(self, room_id: EntityId) -> Room:
        if room_id not in self._rooms:
            raise NotFoundException("Номер", room_id)
        return self._rooms.pop(room_id)

    def list_all(self) -> List[Room]:
        return list(self._rooms.values())

    def find_by_number(self, number: str) -> Optional[Room]:
        key = number.strip().lower()
        for room in self._rooms.values():
            if room.number.lower() == key:
                return room
        return None

    def snapshot(self) -> Dict[EntityId, Room]:
        return dict(self._rooms)

    def restore(self, state: Dict[EntityId, Room]) -> None:
        self._rooms = dict(state)


class InMemoryClientRepository(ports.IClientRepository):
    """Реализация репозитория клиентов в памяти."""

    def __init__(self):
        self._clients: Dict[EntityId, Client] = {}

    def add(self, client: Client) -> None:
        if client.id in self._clients:
            raise ConflictException(f"Клиент с id {client.id} уже существует")
        self._clients[client.id] = client

    def get_by_id(self, client_id: EntityId) -> Client:
        if client_id not in self._clients:
            raise NotFoundException("Клиент", client_id)
        return self._clients[client_id]

    def find_by_id(self, client_id: EntityId) -> Optional[Client]:
        return self._clients.get(client_id)

    def update(self, client: Client) -> None:
        if client.id not in self._clients:
            raise NotFoundException("Клиент", client.id)
        self._clients[client.id] = client

    def delete(self, client_id: EntityId) -> Client:
        if client_id not in self._clients:
            raise NotFoundException("Клиент", client_id)
        return self._clients.pop(client_id)

    def list_all(self) -> List[Client]:
        return list(self._clients.values())

    def snapshot(self) -> Dict[EntityId, Client]:
        return dict(self._clients)

    def restore(self, state: Dict[EntityId, Client]) -> None:
        self._clients = dict(state)


class InMemoryReservationRepository(ports.IReservationRepository):
    """
    Реализация репозитория бронирований в памяти.

    Помимо словаря id -> бронирование держит индекс номер -> бронирования,
    упорядоченные по дате заезда, чтобы построение сетки не перебирало
    все бронирования отеля.
    """

    def __init__(self):
        self._reservations: Dict[EntityId, Reservation] = {}
        self._by_room: Dict[EntityId, List[_IndexEntry]] = {}
        self._room_of: Dict[EntityId, EntityId] = {}

    def add(self, reservation: Reservation) -> None:
        if reservation.id in self._reservations:
            raise ConflictException(
                f"Бронирование с id {reservation.id} уже существует"
            )
        self._reservations[reservation.id] = reservation
        self._index(reservation)

    def get_by_id(self, reservation_id: EntityId) -> Reservation:
        if reservation_id not in self._reservations:
            raise NotFoundException("Бронирование", reservation_id)
        return self._reservations[reservation_id]

    def update(self, reservation: Reservation) -> None:
        if reservation.id not in self._reservations:
            raise NotFoundException("Бронирование", reservation.id)
        self._unindex(reservation.id)
        self._reservations[reservation.id] = reservation
        self._index(reservation)

    def delete(self, reservation_id: EntityId) -> Reservation:
        if reservation_id not in self._reservations:
            raise NotFoundException("Бронирование", reservation_id)
        self._unindex(reservation_id)
        return self._reservations.pop(reservation_id)

    def list_all(self) -> List[Reservation]:
        return list(self._reservations.values())

    def find_by_client(self, client_id: EntityId) -> List[Reservation]:
        return [
            reservation
            for reservation in self._reservations.values()
            if reservation.client_id == client_id
        ]

    def find_by_room(
        self, room_id: EntityId, arriving_on_or_before: Optional[date] = None
    ) -> List[Reservation]:
        entries = self._by_room.get(room_id, [])
        if arriving_on_or_before is not None:
            end = bisect.bisect_right(
                entries, arriving_on_or_before, key=lambda entry: entry[0]
            )
            entries = entries[:end]
        return [self._reservations[entry[2]] for entry in entries]

    def snapshot(self) -> Dict[EntityId, Reservation]:
        return dict(self._reservations)

    def restore(self, state: Dict[EntityId, Reservation]) -> None:
        self._reservations = {}
        self._by_room = {}
        self._room_of = {}
        for reservation in state.values():
            self.add(reservation)

    def _index(self, reservation: Reservation) -> None:
        entry = (reservation.arrival_date, reservation.created_at, reservation.id)
        bisect.insort(self._by_room.setdefault(reservation.room_id, []), entry)
        self._room_of[reservation.id] = reservation.room_id

    def _unindex(self, reservation_id: EntityId) -> None:
        # Ищем по id: сохраненный объект мог быть изменен на месте
        room_id = self._room_of.pop(reservation_id)
        entries = self._by_room[room_id]
        entries[:] = [entry for entry in entries if entry[2] != reservation_id]
        if not entries:
            del self._by_room[room_id]


class StdLibLogger(ports.ILogger):
    """Логгер поверх стандартного ``logging``; контекст пишется как JSON."""

    def __init__(self, name: str = "hotel_backoffice"):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, message: str, context: Dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        if context:
            message = (
                f"{message} | {json.dumps(context, default=str, ensure_ascii=False)}"
            )
        self._logger.log(level, message)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)


def configure_logging(settings: HotelSettings) -> None:
    """Настраивает корневой логгер пакета один раз."""
    logger = logging.getLogger("hotel_backoffice")
    logger.setLevel(settings.log_level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
        logger.addHandler(handler)


class SystemClock(ports.IClock):
    """Текущая дата по системным часам."""

    def today(self) -> date:
        return today()


class FixedClock(ports.IClock):
    """Часы с заданной датой (для тестов и демонстраций)."""

    def __init__(self, fixed_date: date):
        self._date = fixed_date

    def today(self) -> date:
        return self._date

    def set(self, new_date: date) -> None:
        self._date = new_date


class HotelUnitOfWork(ports.IHotelUnitOfWork):
    """
    Единица работы бэк-офиса.

    Фиксация запоминает состояние хранилища, откат возвращает
    последнее зафиксированное состояние.
    """

    def __init__(
        self,
        rooms_repo: Optional[InMemoryRoomRepository] = None,
        clients_repo: Optional[InMemoryClientRepository] = None,
        reservations_repo: Optional[InMemoryReservationRepository] = None,
        logger: Optional[ports.ILogger] = None,
    ):
        self._rooms = rooms_repo or InMemoryRoomRepository()
        self._clients = clients_repo or InMemoryClientRepository()
        self._reservations = reservations_repo or InMemoryReservationRepository()
        self._logger = logger or StdLibLogger("hotel_backoffice.uow")
        self._committed = self._take_snapshot()

    @property
    def rooms(self) -> InMemoryRoomRepository:
        return self._rooms

    @property
    def clients(self) -> InMemoryClientRepository:
        return self._clients

    @property
    def reservations(self) -> InMemoryReservationRepository:
        return self._reservations

    def _take_snapshot(self) -> Tuple[Dict, Dict, Dict]:
        return (
            self._rooms.snapshot(),
            self._clients.snapshot(),
            self._reservations.snapshot(),
        )

    def commit(self) -> None:
        """Фиксирует все изменения."""
        self._committed = self._take_snapshot()
        self._logger.debug("HotelUnitOfWork committed")

    def rollback(self) -> None:
        """Откатывает изменения к последней фиксации."""
        rooms, clients, reservations = self._committed
        self._rooms.restore(rooms)
        self._clients.restore(clients)
        self._reservations.restore(reservations)
        self._logger.warning("HotelUnitOfWork rolled back")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()
        return False  # Пробрасываем исключение дальше, если оно было

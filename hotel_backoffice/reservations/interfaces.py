"""
Интерфейсы (порты) для контекста бронирования.
"""

from __future__ import annotations

from datetime import date
from typing import Any, List, Optional, Protocol

from ..shared_kernel import EntityId
from .domain import Client, Reservation, Room


class ILogger(Protocol):
    """Интерфейс для логгера."""

    def info(self, message: str, **kwargs: Any) -> None: ...
    def error(self, message: str, **kwargs: Any) -> None: ...
    def warning(self, message: str, **kwargs: Any) -> None: ...
    def debug(self, message: str, **kwargs: Any) -> None: ...


class IClock(Protocol):
    """Источник текущей даты."""

    def today(self) -> date: ...


class IRoomRepository(Protocol):
    """Интерфейс репозитория для номеров."""

    def add(self, room: Room) -> None: ...
    def get_by_id(self, room_id: EntityId) -> Room: ...
    def find_by_id(self, room_id: EntityId) -> Optional[Room]: ...
    def update(self, room: Room) -> None: ...
    def delete(self, room_id: EntityId) -> Room: ...
    def list_all(self) -> List[Room]: ...
    def find_by_number(self, number: str) -> Optional[Room]: ...


class IClientRepository(Protocol):
    """Интерфейс репозитория для клиентов."""

    def add(self, client: Client) -> None: ...
    def get_by_id(self, client_id: EntityId) -> Client: ...
    def find_by_id(self, client_id: EntityId) -> Optional[Client]: ...
    def update(self, client: Client) -> None: ...
    def delete(self, client_id: EntityId) -> Client: ...
    def list_all(self) -> List[Client]: ...


class IReservationRepository(Protocol):
    """Интерфейс репозитория для бронирований."""

    def add(self, reservation: Reservation) -> None: ...
    def get_by_id(self, reservation_id: EntityId) -> Reservation: ...
    def update(self, reservation: Reservation) -> None: ...
    def delete(self, reservation_id: EntityId) -> Reservation: ...
    def list_all(self) -> List[Reservation]: ...
    def find_by_client(self, client_id: EntityId) -> List[Reservation]: ...
    def find_by_room(
        self, room_id: EntityId, arriving_on_or_before: Optional[date] = None
    ) -> List[Reservation]: ...


class IHotelUnitOfWork(Protocol):
    """Интерфейс Unit of Work для бэк-офиса."""

    @property
    def rooms(self) -> IRoomRepository: ...
    @property
    def clients(self) -> IClientRepository: ...
    @property
    def reservations(self) -> IReservationRepository: ...

    def __enter__(self) -> IHotelUnitOfWork: ...
    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None: ...
    def commit(self) -> None: ...
    def rollback(self) -> None: ...

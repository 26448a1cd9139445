"""
Общие фикстуры тестов бэк-офиса.
"""

from datetime import date
from decimal import Decimal

import pytest

from hotel_backoffice.calendar_view.application import CalendarApplicationService
from hotel_backoffice.config import HotelSettings
from hotel_backoffice.reservations.application import (
    ClientApplicationService,
    ReservationApplicationService,
    RoomApplicationService,
)
from hotel_backoffice.reservations.domain import Client, Reservation, Room
from hotel_backoffice.reservations.infrastructure import FixedClock, HotelUnitOfWork
from hotel_backoffice.shared_kernel import Money, ReservationStatus, RoomType


@pytest.fixture
def settings() -> HotelSettings:
    return HotelSettings()


@pytest.fixture
def clock() -> FixedClock:
    """Среда, 13 марта 2024."""
    return FixedClock(date(2024, 3, 13))


@pytest.fixture
def uow() -> HotelUnitOfWork:
    return HotelUnitOfWork()


@pytest.fixture
def room_101(uow: HotelUnitOfWork) -> Room:
    room = Room(
        number="101",
        type=RoomType.DOUBLE,
        floor=1,
        price_per_night=Money(amount=Decimal("100")),
        capacity=2,
    )
    uow.rooms.add(room)
    uow.commit()
    return room


@pytest.fixture
def room_102(uow: HotelUnitOfWork) -> Room:
    room = Room(
        number="102",
        type=RoomType.SUITE,
        floor=1,
        price_per_night=Money(amount=Decimal("250")),
        capacity=4,
    )
    uow.rooms.add(room)
    uow.commit()
    return room


@pytest.fixture
def client(uow: HotelUnitOfWork) -> Client:
    client = Client(
        first_name="Иван",
        last_name="Иванов",
        email="ivan.ivanov@example.com",
        phone="+79101234567",
    )
    uow.clients.add(client)
    uow.commit()
    return client


@pytest.fixture
def make_reservation(uow: HotelUnitOfWork, client: Client):
    """Фабрика бронирований, сразу сохраняемых в хранилище."""

    def factory(
        room: Room,
        arrival: date,
        departure: date,
        status: ReservationStatus = ReservationStatus.CONFIRMED,
    ) -> Reservation:
        reservation = Reservation(
            room_id=room.id,
            client_id=client.id,
            arrival_date=arrival,
            departure_date=departure,
            status=status,
            total_price=Money(amount=Decimal("0")),
        )
        uow.reservations.add(reservation)
        uow.commit()
        return reservation

    return factory


@pytest.fixture
def room_service(uow: HotelUnitOfWork) -> RoomApplicationService:
    return RoomApplicationService(uow)


@pytest.fixture
def client_service(
    uow: HotelUnitOfWork, settings: HotelSettings
) -> ClientApplicationService:
    return ClientApplicationService(uow, settings=settings)


@pytest.fixture
def reservation_service(
    uow: HotelUnitOfWork, clock: FixedClock, settings: HotelSettings
) -> ReservationApplicationService:
    return ReservationApplicationService(uow, clock=clock, settings=settings)


@pytest.fixture
def calendar_service(
    uow: HotelUnitOfWork, clock: FixedClock, settings: HotelSettings
) -> CalendarApplicationService:
    return CalendarApplicationService(uow, clock=clock, settings=settings)

from datetime import timedelta
from decimal import Decimal
from typing import Any, Dict, Optional
from uuid import UUID

from .calendar_view.application import CalendarApplicationService
from .config import HotelSettings
from .reservations import interfaces as ports
from .reservations.application import (
    ClientApplicationService,
    ReservationApplicationService,
    RoomApplicationService,
)
from .reservations.domain import Client, PricingCalculator, Reservation, Room
from .reservations.infrastructure import (
    HotelUnitOfWork,
    StdLibLogger,
    SystemClock,
    configure_logging,
)
from .shared_kernel import Money, ReservationStatus, RoomStatus, RoomType


def bootstrap_app(
    settings: Optional[HotelSettings] = None,
    clock: Optional[ports.IClock] = None,
    uow: Optional[HotelUnitOfWork] = None,
) -> Dict[str, Any]:
    """Создает и настраивает все компоненты приложения."""
    settings = settings or HotelSettings.from_env()
    configure_logging(settings)
    clock = clock or SystemClock()

    # 1. Единица работы: хранилище номеров, клиентов и бронирований
    uow = uow or HotelUnitOfWork(logger=StdLibLogger("hotel_backoffice.uow"))

    # 2. Сервисы, получающие зависимости явно
    return {
        "settings": settings,
        "clock": clock,
        "uow": uow,
        "room_service": RoomApplicationService(uow),
        "client_service": ClientApplicationService(uow, settings=settings),
        "reservation_service": ReservationApplicationService(
            uow, clock=clock, settings=settings
        ),
        "calendar_service": CalendarApplicationService(
            uow, clock=clock, settings=settings
        ),
    }


def seed_demo_data(
    uow: HotelUnitOfWork, clock: ports.IClock, currency: str = "EUR"
) -> None:
    """Заполняет хранилище небольшим демонстрационным отелем."""

    def price(amount: str) -> Money:
        return Money(amount=Decimal(amount), currency=currency)

    rooms = [
        Room(
            id=UUID("11111111-1111-1111-1111-111111111111"),
            number="101",
            type=RoomType.SIMPLE,
            floor=1,
            price_per_night=price("80"),
            capacity=1,
            features={"WiFi", "TV"},
        ),
        Room(
            id=UUID("22222222-2222-2222-2222-222222222222"),
            number="102",
            type=RoomType.DOUBLE,
            floor=1,
            price_per_night=price("120"),
            capacity=2,
            features={"WiFi", "TV", "Кондиционер"},
        ),
        Room(
            id=UUID("33333333-3333-3333-3333-333333333333"),
            number="201",
            type=RoomType.SUITE,
            floor=2,
            price_per_night=price("250"),
            capacity=4,
            status=RoomStatus.CLEANING,
            features={"WiFi", "TV", "Мини-бар", "Джакузи", "Вид на море"},
        ),
    ]
    clients = [
        Client(
            id=UUID("aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa"),
            first_name="Иван",
            last_name="Иванов",
            email="ivan.ivanov@example.com",
            phone="+79101234567",
            document_type="Паспорт",
            document_number="1234567890",
        ),
        Client(
            id=UUID("bbbbbbbb-bbbb-bbbb-bbbb-bbbbbbbbbbbb"),
            first_name="Петр",
            last_name="Петров",
            email="petr.petrov@example.com",
            phone="+79111234567",
        ),
    ]
    for room in rooms:
        uow.rooms.add(room)
    for client in clients:
        uow.clients.add(client)

    start = clock.today()
    stays = [
        (rooms[0], clients[0], 0, 3, ReservationStatus.CONFIRMED),
        (rooms[1], clients[1], 2, 5, ReservationStatus.PENDING),
        (rooms[0], clients[1], 3, 6, ReservationStatus.CONFIRMED),
    ]
    for room, client, offset, nights, status in stays:
        arrival = start + timedelta(days=offset)
        departure = arrival + timedelta(days=nights)
        uow.reservations.add(
            Reservation(
                room_id=room.id,
                client_id=client.id,
                arrival_date=arrival,
                departure_date=departure,
                guests=1,
                status=status,
                total_price=PricingCalculator.compute_price(room, arrival, departure),
            )
        )
    uow.commit()

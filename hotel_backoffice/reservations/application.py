"""
Прикладной слой контекста бронирования.

Содержит сервисы приложения, которые координируют взаимодействие
экранов бэк-офиса и доменной модели. Сервисы не выбрасывают доменные
исключения наружу: результат операции возвращается как ``OperationResult``.
"""

from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Callable, List, Optional

from pydantic import BaseModel, Field

from ..config import HotelSettings
from ..shared_kernel import (
    ConflictException,
    DomainException,
    EntityId,
    Money,
    NotFoundException,
    ReservationStatus,
    RoomStatus,
    RoomType,
    SessionContext,
)
from . import interfaces as ports
from .domain import (
    AvailabilityService,
    Client,
    ClientDraft,
    ClientPatch,
    DeletionPolicy,
    PricingCalculator,
    Reservation,
    ReservationDraft,
    ReservationPatch,
    Room,
    RoomDraft,
    RoomPatch,
    apply_patch,
)
from .infrastructure import StdLibLogger, SystemClock

NOT_AVAILABLE = "N/A"


# Результат операции


class ErrorCode(str, Enum):
    """Категории ошибок, видимые слою представления."""

    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    VALIDATION = "validation"


class ErrorInfo(BaseModel):
    code: ErrorCode
    message: str


class OperationResult(BaseModel):
    """Результат операции: данные или типизированная ошибка, плюс предупреждения."""

    success: bool
    data: Any = None
    error: Optional[ErrorInfo] = None
    warnings: List[str] = Field(default_factory=list)

    @classmethod
    def ok(cls, data: Any = None, warnings: Optional[List[str]] = None):
        return cls(success=True, data=data, warnings=warnings or [])

    @classmethod
    def fail(cls, code: ErrorCode, message: str) -> "OperationResult":
        return cls(success=False, error=ErrorInfo(code=code, message=message))

    @classmethod
    def from_exception(cls, exc: DomainException) -> "OperationResult":
        if isinstance(exc, NotFoundException):
            code = ErrorCode.NOT_FOUND
        elif isinstance(exc, ConflictException):
            code = ErrorCode.CONFLICT
        else:
            code = ErrorCode.VALIDATION
        return cls.fail(code, str(exc))


# DTO для исходящих данных


class RoomDTO(BaseModel):
    """DTO для представления номера."""

    id: EntityId
    number: str
    type: RoomType
    floor: int
    price_per_night: Money
    capacity: int
    status: RoomStatus
    features: List[str]
    description: Optional[str]
    image_url: Optional[str]

    @classmethod
    def from_domain(cls, room: Room) -> "RoomDTO":
        """Создает DTO из доменной модели."""
        return cls(
            id=room.id,
            number=room.number,
            type=room.type,
            floor=room.floor,
            price_per_night=room.price_per_night,
            capacity=room.capacity,
            status=room.status,
            features=sorted(room.features),
            description=room.description,
            image_url=room.image_url,
        )


class ClientDTO(BaseModel):
    """DTO для представления клиента."""

    id: EntityId
    last_name: str
    first_name: str
    full_name: str
    email: str
    phone: str
    street: Optional[str]
    city: Optional[str]
    postal_code: Optional[str]
    country: Optional[str]
    birth_date: Optional[date]
    document_type: Optional[str]
    document_number: Optional[str]
    created_at: datetime
    reservation_count: int = 0

    @classmethod
    def from_domain(cls, client: Client, reservation_count: int = 0) -> "ClientDTO":
        """Создает DTO из доменной модели."""
        return cls(
            id=client.id,
            last_name=client.last_name,
            first_name=client.first_name,
            full_name=client.full_name,
            email=client.email,
            phone=client.phone,
            street=client.street,
            city=client.city,
            postal_code=client.postal_code,
            country=client.country,
            birth_date=client.birth_date,
            document_type=client.document_type,
            document_number=client.document_number,
            created_at=client.created_at,
            reservation_count=reservation_count,
        )


class ReservationDTO(BaseModel):
    """DTO бронирования; висячие ссылки показываются как "N/A"."""

    id: EntityId
    room_id: EntityId
    room_number: str
    client_id: EntityId
    client_name: str
    client_email: str
    arrival_date: date
    departure_date: date
    nights: int
    guests: int
    status: ReservationStatus
    total_price: Money
    comments: Optional[str]
    created_at: datetime

    @classmethod
    def from_domain(
        cls,
        reservation: Reservation,
        room: Optional[Room] = None,
        client: Optional[Client] = None,
    ) -> "ReservationDTO":
        """Создает DTO из доменной модели."""
        return cls(
            id=reservation.id,
            room_id=reservation.room_id,
            room_number=room.number if room else NOT_AVAILABLE,
            client_id=reservation.client_id,
            client_name=client.full_name if client else NOT_AVAILABLE,
            client_email=client.email if client else NOT_AVAILABLE,
            arrival_date=reservation.arrival_date,
            departure_date=reservation.departure_date,
            nights=reservation.nights,
            guests=reservation.guests,
            status=reservation.status,
            total_price=reservation.total_price,
            comments=reservation.comments,
            created_at=reservation.created_at,
        )


def _contains(value: Optional[str], term: str) -> bool:
    return value is not None and term in value.lower()


class _ApplicationService:
    """Общая обвязка: фиксация, откат и журналирование операций."""

    def __init__(
        self,
        uow: ports.IHotelUnitOfWork,
        logger: Optional[ports.ILogger] = None,
    ):
        self._uow = uow
        self._logger = logger or StdLibLogger(f"hotel_backoffice.{type(self).__name__}")

    def _run(
        self,
        operation: str,
        action: Callable[[], OperationResult],
        session: Optional[SessionContext] = None,
    ) -> OperationResult:
        session = session or SessionContext.anonymous()
        try:
            result = action()
            self._uow.commit()
        except DomainException as e:
            self._uow.rollback()
            self._logger.warning(
                f"Операция {operation} отклонена: {e}", user=session.display_name
            )
            return OperationResult.from_exception(e)
        self._logger.info(f"Операция {operation} выполнена", user=session.display_name)
        for warning in result.warnings:
            self._logger.warning(warning, operation=operation)
        return result


# Сервисы приложения


class RoomApplicationService(_ApplicationService):
    """Сервис приложения для работы с номерами."""

    def list_rooms(self) -> List[RoomDTO]:
        return [RoomDTO.from_domain(room) for room in self._uow.rooms.list_all()]

    def get_room(self, room_id: EntityId) -> OperationResult:
        """Возвращает информацию о номере."""
        room = self._uow.rooms.find_by_id(room_id)
        if room is None:
            return OperationResult.fail(
                ErrorCode.NOT_FOUND, str(NotFoundException("Номер", room_id))
            )
        return OperationResult.ok(RoomDTO.from_domain(room))

    def search_rooms(self, term: str = "") -> List[RoomDTO]:
        """Поиск по номеру, описанию и типу."""
        term = term.strip().lower()
        return [
            RoomDTO.from_domain(room)
            for room in self._uow.rooms.list_all()
            if term in room.number.lower()
            or _contains(room.description, term)
            or term in room.type.value
        ]

    def create_room(
        self, draft: RoomDraft, session: Optional[SessionContext] = None
    ) -> OperationResult:
        def action() -> OperationResult:
            room = draft.build()
            self._uow.rooms.add(room)
            return OperationResult.ok(RoomDTO.from_domain(room))

        return self._run("create_room", action, session)

    def update_room(
        self,
        room_id: EntityId,
        patch: RoomPatch,
        session: Optional[SessionContext] = None,
    ) -> OperationResult:
        def action() -> OperationResult:
            room = apply_patch(self._uow.rooms.get_by_id(room_id), patch)
            self._uow.rooms.update(room)
            return OperationResult.ok(RoomDTO.from_domain(room))

        return self._run("update_room", action, session)

    def delete_room(
        self, room_id: EntityId, session: Optional[SessionContext] = None
    ) -> OperationResult:
        """Удаляет номер; бронирования номера не удаляются и не блокируют удаление."""

        def action() -> OperationResult:
            room = self._uow.rooms.delete(room_id)
            dangling = DeletionPolicy.dangling_after_room_deletion(
                room, self._uow.reservations.find_by_room(room_id)
            )
            warnings = []
            if dangling:
                warnings.append(
                    f"Номер {room.number} удален, бронирований без номера: "
                    f"{len(dangling)}"
                )
            return OperationResult.ok(RoomDTO.from_domain(room), warnings)

        return self._run("delete_room", action, session)


class ClientApplicationService(_ApplicationService):
    """Сервис приложения для работы с клиентами."""

    def __init__(
        self,
        uow: ports.IHotelUnitOfWork,
        settings: Optional[HotelSettings] = None,
        logger: Optional[ports.ILogger] = None,
    ):
        super().__init__(uow, logger)
        self._settings = settings or HotelSettings()

    def new_draft(self) -> ClientDraft:
        """Черновик клиента со страной по умолчанию."""
        return ClientDraft(country=self._settings.default_country)

    def reservation_count(self, client_id: EntityId) -> int:
        return len(self._uow.reservations.find_by_client(client_id))

    def _to_dto(self, client: Client) -> ClientDTO:
        return ClientDTO.from_domain(client, self.reservation_count(client.id))

    def list_clients(self) -> List[ClientDTO]:
        return [self._to_dto(client) for client in self._uow.clients.list_all()]

    def get_client(self, client_id: EntityId) -> OperationResult:
        """Возвращает информацию о клиенте."""
        client = self._uow.clients.find_by_id(client_id)
        if client is None:
            return OperationResult.fail(
                ErrorCode.NOT_FOUND, str(NotFoundException("Клиент", client_id))
            )
        return OperationResult.ok(self._to_dto(client))

    def search_clients(self, term: str = "") -> List[ClientDTO]:
        """Поиск по фамилии, имени, email и телефону."""
        term = term.strip().lower()
        return [
            self._to_dto(client)
            for client in self._uow.clients.list_all()
            if term in client.last_name.lower()
            or term in client.first_name.lower()
            or term in client.email.lower()
            or term in client.phone
        ]

    def create_client(
        self, draft: ClientDraft, session: Optional[SessionContext] = None
    ) -> OperationResult:
        def action() -> OperationResult:
            client = draft.build()
            self._uow.clients.add(client)
            return OperationResult.ok(self._to_dto(client))

        return self._run("create_client", action, session)

    def update_client(
        self,
        client_id: EntityId,
        patch: ClientPatch,
        session: Optional[SessionContext] = None,
    ) -> OperationResult:
        def action() -> OperationResult:
            client = apply_patch(self._uow.clients.get_by_id(client_id), patch)
            self._uow.clients.update(client)
            return OperationResult.ok(self._to_dto(client))

        return self._run("update_client", action, session)

    def delete_client(
        self, client_id: EntityId, session: Optional[SessionContext] = None
    ) -> OperationResult:
        """Удаляет клиента, если на него не ссылается ни одно бронирование."""

        def action() -> OperationResult:
            client = self._uow.clients.get_by_id(client_id)
            DeletionPolicy.ensure_client_deletable(
                client, self._uow.reservations.find_by_client(client_id)
            )
            self._uow.clients.delete(client_id)
            return OperationResult.ok(ClientDTO.from_domain(client))

        return self._run("delete_client", action, session)


class ReservationApplicationService(_ApplicationService):
    """Сервис приложения для работы с бронированиями."""

    def __init__(
        self,
        uow: ports.IHotelUnitOfWork,
        clock: Optional[ports.IClock] = None,
        settings: Optional[HotelSettings] = None,
        logger: Optional[ports.ILogger] = None,
    ):
        super().__init__(uow, logger)
        self._clock = clock or SystemClock()
        self._settings = settings or HotelSettings()
        self._availability = AvailabilityService(self._uow.reservations)

    @property
    def availability(self) -> AvailabilityService:
        return self._availability

    def _to_dto(self, reservation: Reservation) -> ReservationDTO:
        return ReservationDTO.from_domain(
            reservation,
            room=self._uow.rooms.find_by_id(reservation.room_id),
            client=self._uow.clients.find_by_id(reservation.client_id),
        )

    def list_reservations(self) -> List[ReservationDTO]:
        return [self._to_dto(r) for r in self._uow.reservations.list_all()]

    def get_reservation(self, reservation_id: EntityId) -> OperationResult:
        """Возвращает информацию о бронировании."""
        try:
            reservation = self._uow.reservations.get_by_id(reservation_id)
        except NotFoundException as e:
            return OperationResult.from_exception(e)
        return OperationResult.ok(self._to_dto(reservation))

    def search_reservations(
        self, term: str = "", status: Optional[ReservationStatus] = None
    ) -> List[ReservationDTO]:
        """Поиск по номеру комнаты, имени и email клиента, дате заезда; фильтр по статусу."""
        term = term.strip().lower()
        result = []
        for reservation in self._uow.reservations.list_all():
            if status is not None and reservation.status != status:
                continue
            dto = self._to_dto(reservation)
            arrival = reservation.arrival_date.strftime(
                self._settings.search_date_format
            )
            if (
                term in dto.room_number.lower()
                or term in dto.client_name.lower()
                or term in dto.client_email.lower()
                or term in arrival
            ):
                result.append(dto)
        return result

    def occupancy_on(self, room_id: EntityId, day: date) -> List[ReservationDTO]:
        return [
            self._to_dto(r) for r in self._availability.occupancy_on(room_id, day)
        ]

    def new_draft(self) -> ReservationDraft:
        """Черновик с датами по умолчанию от текущего дня."""
        arrival = self._clock.today()
        return ReservationDraft(
            arrival_date=arrival,
            departure_date=arrival + timedelta(days=1),
            total_price=Money(amount=0, currency=self._settings.currency),
        )

    def compute_price(
        self, room_id: EntityId, arrival: date, departure: date
    ) -> OperationResult:
        room = self._uow.rooms.find_by_id(room_id)
        if room is None:
            return OperationResult.fail(
                ErrorCode.NOT_FOUND, str(NotFoundException("Номер", room_id))
            )
        return OperationResult.ok(
            PricingCalculator.compute_price(room, arrival, departure)
        )

    def _check_references(self, reservation: Reservation) -> Room:
        room = self._uow.rooms.get_by_id(reservation.room_id)
        self._uow.clients.get_by_id(reservation.client_id)
        return room

    def _stay_warnings(self, reservation: Reservation, room: Room) -> List[str]:
        warnings = []
        overlapping = self._availability.find_overlapping(
            reservation.room_id,
            reservation.arrival_date,
            reservation.departure_date,
            exclude_reservation_id=reservation.id,
        )
        if reservation.is_active() and overlapping:
            # Двойное бронирование не запрещено, только сообщается
            warnings.append(
                f"Номер {room.number} уже забронирован на эти даты "
                f"({len(overlapping)} пересечение(й))"
            )
        if reservation.guests > room.capacity:
            warnings.append(
                f"Превышена вместимость номера {room.number} "
                f"(макс. {room.capacity} человек)"
            )
        return warnings

    def create_reservation(
        self, draft: ReservationDraft, session: Optional[SessionContext] = None
    ) -> OperationResult:
        def action() -> OperationResult:
            reservation = draft.build()
            room = self._check_references(reservation)
            if not draft.price_overridden:
                # Цена всегда считается по номеру из хранилища
                reservation.total_price = PricingCalculator.compute_price(
                    room, reservation.arrival_date, reservation.departure_date
                )
            warnings = self._stay_warnings(reservation, room)
            self._uow.reservations.add(reservation)
            return OperationResult.ok(self._to_dto(reservation), warnings)

        return self._run("create_reservation", action, session)

    def update_reservation(
        self,
        reservation_id: EntityId,
        patch: ReservationPatch,
        session: Optional[SessionContext] = None,
    ) -> OperationResult:
        """
        Обновляет бронирование.

        Если меняются номер или даты, а цена в патче не задана,
        стоимость пересчитывается. Проверяются только ссылки, заданные
        в патче: бронирование удаленного номера можно, например, отменить.
        """

        def action() -> OperationResult:
            reservation = apply_patch(
                self._uow.reservations.get_by_id(reservation_id), patch
            )
            changed = patch.model_fields_set
            if "client_id" in changed:
                self._uow.clients.get_by_id(reservation.client_id)
            if "room_id" in changed:
                room = self._uow.rooms.get_by_id(reservation.room_id)
            else:
                room = self._uow.rooms.find_by_id(reservation.room_id)
            if room is None:
                warnings = []
            else:
                if patch.touches_pricing() and "total_price" not in changed:
                    reservation.total_price = PricingCalculator.compute_price(
                        room, reservation.arrival_date, reservation.departure_date
                    )
                warnings = self._stay_warnings(reservation, room)
            self._uow.reservations.update(reservation)
            return OperationResult.ok(self._to_dto(reservation), warnings)

        return self._run("update_reservation", action, session)

    def delete_reservation(
        self, reservation_id: EntityId, session: Optional[SessionContext] = None
    ) -> OperationResult:
        def action() -> OperationResult:
            reservation = self._uow.reservations.delete(reservation_id)
            return OperationResult.ok(self._to_dto(reservation))

        return self._run("delete_reservation", action, session)

"""
Доменная модель контекста бронирования.

Содержит сущности (номер, клиент, бронирование), черновики для форм,
расчет стоимости и доменные сервисы для проверки занятости номеров.
"""

import math
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Set, Type, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationError,
    field_validator,
    model_validator,
)

from ..shared_kernel import (
    BusinessRuleValidationException,
    ConflictException,
    DateRange,
    EntityId,
    Money,
    ReservationStatus,
    RoomStatus,
    RoomType,
    as_date,
    generate_id,
    now,
    today,
)

if TYPE_CHECKING:
    from .interfaces import IReservationRepository

T_Model = TypeVar("T_Model", bound=BaseModel)

# Бронирования, которые реально блокируют номер
ACTIVE_STATUSES = (ReservationStatus.PENDING, ReservationStatus.CONFIRMED)


def describe_validation_error(error: ValidationError) -> str:
    """Собирает сообщения pydantic в одну строку."""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        parts.append(f"{location}: {item['msg']}" if location else item["msg"])
    return "; ".join(parts)


def build_model(model_class: Type[T_Model], data: Dict[str, Any]) -> T_Model:
    """Создает модель, превращая ошибки pydantic в доменные."""
    try:
        return model_class.model_validate(data)
    except ValidationError as e:
        raise BusinessRuleValidationException(describe_validation_error(e)) from e


def apply_patch(entity: T_Model, patch: BaseModel) -> T_Model:
    """Возвращает копию сущности с полями, явно заданными в патче."""
    data = entity.model_dump()
    data.update(patch.model_dump(exclude_unset=True))
    return build_model(type(entity), data)


class Room(BaseModel):
    """Номер в отеле."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    id: EntityId = Field(default_factory=generate_id)
    number: str = Field(..., min_length=1)  # Номер комнаты (например, "101", "202A")
    type: RoomType = RoomType.SIMPLE
    floor: int = 1
    price_per_night: Money
    capacity: int = Field(1, gt=0)
    status: RoomStatus = RoomStatus.AVAILABLE
    features: Set[str] = Field(default_factory=set)  # Удобства в номере
    description: Optional[str] = None
    image_url: Optional[str] = None


class Client(BaseModel):
    """Клиент отеля."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    id: EntityId = Field(default_factory=generate_id)
    last_name: str = Field(..., min_length=1)
    first_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    phone: str = Field(..., min_length=1)
    street: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    birth_date: Optional[date] = None
    document_type: Optional[str] = None
    document_number: Optional[str] = None  # Номер документа, удостоверяющего личность
    created_at: datetime = Field(default_factory=now)

    @field_validator("email")
    @classmethod
    def email_has_at_sign(cls, v: str) -> str:
        if "@" not in v:
            raise ValueError("Некорректный email")
        return v

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Reservation(BaseModel):
    """Бронирование номера."""

    model_config = ConfigDict(validate_assignment=True)

    id: EntityId = Field(default_factory=generate_id)
    room_id: EntityId
    client_id: EntityId
    arrival_date: date
    departure_date: date
    guests: int = Field(1, gt=0)
    status: ReservationStatus = ReservationStatus.PENDING
    total_price: Money
    comments: Optional[str] = None
    created_at: datetime = Field(default_factory=now)

    @field_validator("arrival_date", "departure_date", mode="before")
    @classmethod
    def normalize_dates(cls, v: Any) -> Any:
        return as_date(v)

    @model_validator(mode="after")
    def departure_after_arrival(self) -> "Reservation":
        if self.departure_date <= self.arrival_date:
            raise ValueError("Дата выезда должна быть позже даты заезда")
        return self

    @property
    def period(self) -> DateRange:
        return DateRange(arrival=self.arrival_date, departure=self.departure_date)

    @property
    def nights(self) -> int:
        return (self.departure_date - self.arrival_date).days

    def occupies(self, day: date) -> bool:
        """День занят, если он в полуинтервале [заезд, выезд)."""
        return self.period.contains(day)

    def is_arrival_day(self, day: date) -> bool:
        return as_date(day) == self.arrival_date

    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES


# Патчи: заданные поля заменяют сохраненные, остальные не меняются


class RoomPatch(BaseModel):
    """Изменения номера."""

    model_config = ConfigDict(extra="forbid")

    number: Optional[str] = None
    type: Optional[RoomType] = None
    floor: Optional[int] = None
    price_per_night: Optional[Money] = None
    capacity: Optional[int] = None
    status: Optional[RoomStatus] = None
    features: Optional[Set[str]] = None
    description: Optional[str] = None
    image_url: Optional[str] = None


class ClientPatch(BaseModel):
    """Изменения данных клиента."""

    model_config = ConfigDict(extra="forbid")

    last_name: Optional[str] = None
    first_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    birth_date: Optional[date] = None
    document_type: Optional[str] = None
    document_number: Optional[str] = None


class ReservationPatch(BaseModel):
    """Изменения бронирования."""

    model_config = ConfigDict(extra="forbid")

    room_id: Optional[EntityId] = None
    client_id: Optional[EntityId] = None
    arrival_date: Optional[date] = None
    departure_date: Optional[date] = None
    guests: Optional[int] = None
    status: Optional[ReservationStatus] = None
    total_price: Optional[Money] = None
    comments: Optional[str] = None

    @field_validator("arrival_date", "departure_date", mode="before")
    @classmethod
    def normalize_dates(cls, v: Any) -> Any:
        return as_date(v)

    def touches_pricing(self) -> bool:
        """Меняет ли патч номер или даты."""
        return bool(
            self.model_fields_set & {"room_id", "arrival_date", "departure_date"}
        )


class PricingCalculator:
    """Расчет стоимости проживания."""

    MIN_NIGHTS = 1

    @classmethod
    def nights(cls, arrival: date, departure: date) -> int:
        """Количество ночей; пустой или обратный период считается одной ночью."""
        if isinstance(arrival, datetime) and isinstance(departure, datetime):
            days = (departure - arrival) / timedelta(days=1)
        else:
            days = (as_date(departure) - as_date(arrival)).days
        # Округление половины вверх, как у Math.round
        return max(cls.MIN_NIGHTS, math.floor(days + 0.5))

    @classmethod
    def compute_price(cls, room: Room, arrival: date, departure: date) -> Money:
        return room.price_per_night * cls.nights(arrival, departure)


def compute_price(room: Room, arrival: date, departure: date) -> Money:
    """Стоимость проживания: ночи × цена номера за ночь."""
    return PricingCalculator.compute_price(room, arrival, departure)


# Черновики форм


class RoomDraft(BaseModel):
    """Черновик номера для формы создания."""

    model_config = ConfigDict(validate_assignment=True)

    number: str = ""
    type: RoomType = RoomType.SIMPLE
    floor: int = 1
    price_per_night: Decimal = Decimal("0")
    currency: str = "EUR"
    capacity: int = 1
    status: RoomStatus = RoomStatus.AVAILABLE
    features: Set[str] = Field(default_factory=set)
    description: Optional[str] = None
    image_url: Optional[str] = None

    def toggle_feature(self, feature: str) -> None:
        """Добавляет удобство или убирает его, если оно уже выбрано."""
        if feature in self.features:
            self.features.discard(feature)
        else:
            self.features.add(feature)

    def build(self) -> Room:
        data = self.model_dump(exclude={"price_per_night", "currency"})
        data["price_per_night"] = {
            "amount": self.price_per_night,
            "currency": self.currency,
        }
        return build_model(Room, data)


class ClientDraft(BaseModel):
    """Черновик клиента для формы создания."""

    model_config = ConfigDict(validate_assignment=True)

    last_name: str = ""
    first_name: str = ""
    email: str = ""
    phone: str = ""
    street: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    birth_date: Optional[date] = None
    document_type: Optional[str] = None
    document_number: Optional[str] = None

    def build(self) -> Client:
        return build_model(Client, self.model_dump())


class ReservationDraft(BaseModel):
    """
    Черновик бронирования.

    Стоимость пересчитывается при смене номера или дат,
    пока сотрудник не задал ее вручную.
    """

    model_config = ConfigDict(validate_assignment=True)

    room_id: Optional[EntityId] = None
    client_id: Optional[EntityId] = None
    arrival_date: date = Field(default_factory=today)
    departure_date: date = Field(default_factory=lambda: today() + timedelta(days=1))
    guests: int = 1
    status: ReservationStatus = ReservationStatus.PENDING
    total_price: Money = Field(default_factory=lambda: Money(amount=Decimal("0")))
    comments: Optional[str] = None
    price_overridden: bool = False

    _room: Optional[Room] = PrivateAttr(default=None)

    def choose_room(self, room: Room) -> None:
        self.room_id = room.id
        self._room = room
        self._reprice()

    def set_arrival(self, day: date) -> None:
        self.arrival_date = as_date(day)
        self._reprice()

    def set_departure(self, day: date) -> None:
        self.departure_date = as_date(day)
        self._reprice()

    def override_price(self, price: Money) -> None:
        """Ручная цена имеет приоритет над расчетной."""
        self.total_price = price
        self.price_overridden = True

    def _reprice(self) -> None:
        if self._room is not None and self._room.id != self.room_id:
            # room_id сменили напрямую: выбранный ранее номер устарел
            self._room = None
        if self._room is None or self.price_overridden:
            return
        self.total_price = compute_price(
            self._room, self.arrival_date, self.departure_date
        )

    def build(self) -> Reservation:
        if self.room_id is None:
            raise BusinessRuleValidationException("Не выбран номер")
        if self.client_id is None:
            raise BusinessRuleValidationException("Не выбран клиент")
        return build_model(
            Reservation, self.model_dump(exclude={"price_overridden"})
        )


class AvailabilityService:
    """Доменный сервис: кто занимает номер в заданный день."""

    def __init__(self, reservation_repository: "IReservationRepository"):
        self.reservation_repository = reservation_repository

    def occupancy_on(self, room_id: EntityId, day: date) -> List[Reservation]:
        """Бронирования номера, занимающие день (день выезда свободен)."""
        day = as_date(day)
        candidates = self.reservation_repository.find_by_room(
            room_id, arriving_on_or_before=day
        )
        return [reservation for reservation in candidates if reservation.occupies(day)]

    def find_overlapping(
        self,
        room_id: EntityId,
        arrival: date,
        departure: date,
        exclude_reservation_id: Optional[EntityId] = None,
    ) -> List[Reservation]:
        """Активные бронирования номера, пересекающиеся с периодом."""
        arrival, departure = as_date(arrival), as_date(departure)
        if departure <= arrival:
            # Пустой период ничего не занимает
            return []
        requested = DateRange(arrival=arrival, departure=departure)
        candidates = self.reservation_repository.find_by_room(
            room_id, arriving_on_or_before=departure - timedelta(days=1)
        )
        return [
            reservation
            for reservation in candidates
            if reservation.id != exclude_reservation_id
            and reservation.is_active()
            and reservation.period.overlaps(requested)
        ]

    def is_room_free(
        self,
        room_id: EntityId,
        arrival: date,
        departure: date,
        exclude_reservation_id: Optional[EntityId] = None,
    ) -> bool:
        return not self.find_overlapping(
            room_id, arrival, departure, exclude_reservation_id
        )


class DeletionPolicy:
    """Правила удаления связанных сущностей."""

    @staticmethod
    def ensure_client_deletable(
        client: Client, reservations: List[Reservation]
    ) -> None:
        if reservations:
            raise ConflictException(
                f"У клиента {client.full_name} есть бронирования "
                f"({len(reservations)}), сначала удалите их"
            )

    @staticmethod
    def dangling_after_room_deletion(
        room: Room, reservations: List[Reservation]
    ) -> List[EntityId]:
        # Удаление номера не блокируется: бронирования остаются с висячей ссылкой
        return [reservation.id for reservation in reservations]

"""
Основные доменные типы и утилиты общего ядра.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional, Union
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Общие типы идентификаторов
EntityId = UUID


def generate_id() -> UUID:
    """Генерирует новый UUID."""
    return uuid4()


class Money(BaseModel):
    """Денежная сумма с валютой."""

    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(..., ge=0, description="Сумма денег")
    currency: str = Field(
        default="EUR", min_length=3, max_length=3, description="Код валюты (ISO 4217)"
    )

    def __add__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            raise TypeError("Можно складывать только объекты Money")
        if self.currency != other.currency:
            raise ValueError("Нельзя складывать разные валюты")
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def __mul__(self, multiplier: Union[int, Decimal]) -> "Money":
        if isinstance(multiplier, bool) or not isinstance(multiplier, (int, Decimal)):
            raise TypeError("Множитель должен быть целым числом или Decimal")
        if multiplier < 0:
            raise ValueError("Множитель не может быть отрицательным")
        return Money(amount=self.amount * multiplier, currency=self.currency)

    __rmul__ = __mul__

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"


class DateRange(BaseModel):
    """Период проживания [заезд, выезд): день выезда не занят."""

    model_config = ConfigDict(frozen=True)

    arrival: date
    departure: date

    @model_validator(mode="after")
    def departure_after_arrival(self) -> "DateRange":
        if self.departure <= self.arrival:
            raise ValueError("Дата выезда должна быть позже даты заезда")
        return self

    @property
    def nights(self) -> int:
        """Количество ночей в периоде."""
        return (self.departure - self.arrival).days

    def contains(self, day: date) -> bool:
        """Проверяет, занят ли день периодом (день выезда не занят)."""
        return self.arrival <= as_date(day) < self.departure

    def overlaps(self, other: "DateRange") -> bool:
        """Проверяет пересечение двух периодов."""
        return self.arrival < other.departure and other.arrival < self.departure


# Общие перечисления
class RoomType(str, Enum):
    """Типы номеров в отеле."""

    SIMPLE = "simple"
    DOUBLE = "double"
    SUITE = "suite"
    FAMILY = "family"
    DELUXE = "deluxe"


class RoomStatus(str, Enum):
    """Статусы номеров."""

    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"
    CLEANING = "cleaning"
    RESERVED = "reserved"


class ReservationStatus(str, Enum):
    """Статусы бронирования."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class UserRole(str, Enum):
    """Роли сотрудников отеля."""

    ADMIN = "admin"
    RECEPTIONIST = "receptionist"


class SessionContext(BaseModel):
    """Контекст текущего пользователя, передаваемый в операции явно."""

    model_config = ConfigDict(frozen=True)

    user_id: Optional[str] = None
    first_name: str = ""
    last_name: str = ""
    email: Optional[str] = None
    role: Optional[UserRole] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v else v

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def display_name(self) -> str:
        if not self.is_authenticated:
            return "anonymous"
        return f"{self.first_name} {self.last_name}".strip() or str(self.user_id)

    @classmethod
    def anonymous(cls) -> "SessionContext":
        """Неаутентифицированный контекст."""
        return cls()


# Общие исключения
class DomainException(Exception):
    """Базовое исключение для доменных ошибок."""

    pass


class NotFoundException(DomainException):
    """Сущность с указанным идентификатором отсутствует."""

    def __init__(self, entity: str, entity_id: object):
        super().__init__(f"{entity} с id {entity_id} не найден(а)")
        self.entity = entity
        self.entity_id = entity_id


class ConflictException(DomainException):
    """Операция противоречит текущему состоянию хранилища."""

    pass


class BusinessRuleValidationException(DomainException):
    """Исключение при нарушении бизнес-правил."""

    pass


# Общие утилиты
def now() -> datetime:
    """Возвращает текущую дату и время (UTC)."""
    return datetime.now(timezone.utc)


def today() -> date:
    """Возвращает текущую дату."""
    return date.today()


def as_date(value: date) -> date:
    """Отбрасывает время суток: сравнение дней идет по календарной дате."""
    if isinstance(value, datetime):
        return value.date()
    return value

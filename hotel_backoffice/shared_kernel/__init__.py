"""
Общее ядро (Shared Kernel) для бэк-офиса отеля.

Содержит общие типы данных и утилиты, используемые в различных ограниченных контекстах.
"""

from .domain import (
    BusinessRuleValidationException,
    ConflictException,
    DateRange,
    # Исключения
    DomainException,
    # Базовые типы
    EntityId,
    # Основные классы
    Money,
    NotFoundException,
    ReservationStatus,
    RoomStatus,
    # Перечисления
    RoomType,
    SessionContext,
    UserRole,
    as_date,
    generate_id,
    # Утилиты
    now,
    today,
)

__all__ = [
    # Базовые типы
    "EntityId",
    "generate_id",
    # Основные классы
    "Money",
    "DateRange",
    "SessionContext",
    # Перечисления
    "RoomType",
    "RoomStatus",
    "ReservationStatus",
    "UserRole",
    # Исключения
    "DomainException",
    "NotFoundException",
    "ConflictException",
    "BusinessRuleValidationException",
    # Утилиты
    "now",
    "today",
    "as_date",
]

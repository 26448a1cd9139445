"""
Модуль контекста бронирования (Reservations Context).

Отвечает за номера, клиентов и бронирования отеля, включая:
- Хранение сущностей и операции создания, изменения и удаления
- Проверку занятости номеров по дням
- Расчет стоимости проживания
"""

from . import application, domain, infrastructure, interfaces

__all__ = [
    "domain",
    "application",
    "infrastructure",
    "interfaces",
]

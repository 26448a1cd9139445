"""
Модуль календаря бронирований (Calendar View Context).

Строит сетку занятости "номер x день" для недели или скользящих 30 дней,
обеспечивает навигацию по окнам и отображение статусов.
"""

from . import application, domain, presentation

__all__ = [
    "domain",
    "application",
    "presentation",
]

"""
Настройки бэк-офиса отеля.

Значения по умолчанию можно переопределить переменными окружения ``HOTEL_*``.
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, field_validator


class HotelSettings(BaseModel):
    """Общие настройки приложения."""

    currency: str = Field(default="EUR", min_length=3, max_length=3)
    week_days: int = Field(default=7, gt=0)
    # Режим "месяц" - скользящее окно от понедельника, без выравнивания по месяцу
    month_window_days: int = Field(default=30, gt=0)
    date_format: str = "%d.%m.%Y"
    search_date_format: str = "%d/%m/%Y"
    log_level: str = "INFO"
    default_country: str = "Франция"

    @field_validator("currency")
    @classmethod
    def currency_upper(cls, v: str) -> str:
        if not v.isalpha():
            raise ValueError("Код валюты должен состоять из букв")
        return v.upper()

    @field_validator("log_level")
    @classmethod
    def known_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Неизвестный уровень логирования: {v}")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "HotelSettings":
        """Создает настройки из переменных окружения."""
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = environ.get(f"HOTEL_{name.upper()}")
            if raw is not None and raw != "":
                values[name] = raw
        return cls(**values)

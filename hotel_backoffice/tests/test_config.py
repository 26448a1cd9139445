import pytest
from pydantic import ValidationError

from hotel_backoffice.config import HotelSettings


def test_defaults():
    settings = HotelSettings()
    assert settings.currency == "EUR"
    assert settings.week_days == 7
    assert settings.month_window_days == 30
    assert settings.log_level == "INFO"


def test_from_env_overrides_known_fields():
    settings = HotelSettings.from_env(
        {
            "HOTEL_CURRENCY": "rub",
            "HOTEL_MONTH_WINDOW_DAYS": "28",
            "HOTEL_LOG_LEVEL": "debug",
            "HOTEL_DATE_FORMAT": "",
            "UNRELATED": "x",
        }
    )
    assert settings.currency == "RUB"
    assert settings.month_window_days == 28
    assert settings.log_level == "DEBUG"
    assert settings.date_format == "%d.%m.%Y"


@pytest.mark.parametrize(
    "env",
    [
        {"HOTEL_MONTH_WINDOW_DAYS": "0"},
        {"HOTEL_CURRENCY": "EU"},
        {"HOTEL_CURRENCY": "E1R"},
        {"HOTEL_LOG_LEVEL": "LOUD"},
    ],
)
def test_invalid_values_are_rejected(env):
    with pytest.raises(ValidationError):
        HotelSettings.from_env(env)

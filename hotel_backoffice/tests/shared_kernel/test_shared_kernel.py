"""
Тесты для типов общего ядра.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from hotel_backoffice.shared_kernel import (
    DateRange,
    Money,
    NotFoundException,
    SessionContext,
    UserRole,
    as_date,
)


class TestMoney:
    def test_addition_keeps_currency(self):
        total = Money(amount=Decimal("10.50")) + Money(amount=Decimal("4.50"))
        assert total == Money(amount=Decimal("15.00"))
        assert total.currency == "EUR"

    def test_cannot_add_different_currencies(self):
        with pytest.raises(ValueError, match="разные валюты"):
            Money(amount=1, currency="EUR") + Money(amount=1, currency="RUB")

    def test_multiplication_by_nights(self):
        assert Money(amount=Decimal("100")) * 3 == Money(amount=Decimal("300"))
        assert 2 * Money(amount=Decimal("100")) == Money(amount=Decimal("200"))

    def test_negative_multiplier_is_rejected(self):
        with pytest.raises(ValueError, match="отрицательным"):
            Money(amount=1) * -1

    def test_negative_amount_is_rejected(self):
        with pytest.raises(ValidationError):
            Money(amount=Decimal("-1"))

    def test_str(self):
        assert str(Money(amount=Decimal("12.5"))) == "12.50 EUR"


class TestDateRange:
    def test_nights(self):
        period = DateRange(arrival=date(2024, 3, 10), departure=date(2024, 3, 13))
        assert period.nights == 3

    def test_departure_must_follow_arrival(self):
        with pytest.raises(ValidationError, match="позже даты заезда"):
            DateRange(arrival=date(2024, 3, 10), departure=date(2024, 3, 10))

    def test_contains_is_half_open(self):
        period = DateRange(arrival=date(2024, 3, 10), departure=date(2024, 3, 13))
        assert period.contains(date(2024, 3, 10))
        assert period.contains(date(2024, 3, 12))
        assert not period.contains(date(2024, 3, 13))
        assert not period.contains(date(2024, 3, 9))

    def test_back_to_back_periods_do_not_overlap(self):
        first = DateRange(arrival=date(2024, 3, 10), departure=date(2024, 3, 13))
        second = DateRange(arrival=date(2024, 3, 13), departure=date(2024, 3, 15))
        assert not first.overlaps(second)
        assert not second.overlaps(first)
        assert first.overlaps(
            DateRange(arrival=date(2024, 3, 12), departure=date(2024, 3, 14))
        )


def test_as_date_drops_time_of_day():
    assert as_date(datetime(2024, 3, 10, 23, 59)) == date(2024, 3, 10)
    assert as_date(date(2024, 3, 10)) == date(2024, 3, 10)


def test_anonymous_session():
    session = SessionContext.anonymous()
    assert not session.is_authenticated
    assert session.display_name == "anonymous"


def test_authenticated_session():
    session = SessionContext(
        user_id="2",
        first_name="Мария",
        last_name="Дюпон",
        email=" Reception@Hotel.com ",
        role=UserRole.RECEPTIONIST,
    )
    assert session.is_authenticated
    assert session.display_name == "Мария Дюпон"
    assert session.email == "reception@hotel.com"


def test_not_found_message_mentions_entity():
    error = NotFoundException("Номер", "abc")
    assert "Номер" in str(error)
    assert error.entity_id == "abc"

"""Tests for date parser with relative dates and named periods."""

import pytest
from datetime import date, timedelta
from bizledger.utils.date_parser import (
    PERIODS,
    financial_year_start,
    get_date_range,
    parse_date,
    quarter_start,
)


def test_parse_iso_date():
    """Test parsing ISO dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)
    assert parse_date("2024-03-04") == date(2024, 3, 4)


def test_parse_day_first_date():
    """Test that slash dates are read day-first."""
    assert parse_date("04/03/2024") == date(2024, 3, 4)
    assert parse_date("15/01/2024") == date(2024, 1, 15)
    assert parse_date("15 Jan 2024") == date(2024, 1, 15)


def test_parse_today():
    """Test parsing 'today'."""
    assert parse_date("today") == date.today()


def test_parse_yesterday():
    """Test parsing 'yesterday'."""
    assert parse_date(" Yesterday ") == date.today() - timedelta(days=1)


def test_parse_last_month():
    """Test parsing 'last month'."""
    result = parse_date("last month")
    # Should be first day of last month
    today = date.today()
    if today.month == 1:
        expected = date(today.year - 1, 12, 1)
    else:
        expected = date(today.year, today.month - 1, 1)
    assert result == expected


def test_parse_this_year():
    """Test parsing 'this year'."""
    today = date.today()
    assert parse_date("this year") == date(today.year, 1, 1)


def test_parse_invalid_date():
    """Test that garbage raises ValueError."""
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not a date")


def test_quarter_start():
    assert quarter_start(date(2024, 2, 29)) == date(2024, 1, 1)
    assert quarter_start(date(2024, 6, 30)) == date(2024, 4, 1)
    assert quarter_start(date(2024, 12, 1)) == date(2024, 10, 1)


def test_financial_year_start():
    """The Australian financial year starts on 1 July."""
    assert financial_year_start(date(2024, 7, 1)) == date(2024, 7, 1)
    assert financial_year_start(date(2024, 6, 30)) == date(2023, 7, 1)
    assert financial_year_start(date(2025, 1, 10)) == date(2024, 7, 1)


@pytest.mark.parametrize(
    "period, expected",
    [
        ("this-month", (date(2024, 5, 1), date(2024, 5, 15))),
        ("last-month", (date(2024, 4, 1), date(2024, 4, 30))),
        ("this-quarter", (date(2024, 4, 1), date(2024, 5, 15))),
        ("last-quarter", (date(2024, 1, 1), date(2024, 3, 31))),
        ("this-year", (date(2024, 1, 1), date(2024, 5, 15))),
        ("last-year", (date(2023, 1, 1), date(2023, 12, 31))),
        ("this-fy", (date(2023, 7, 1), date(2024, 5, 15))),
        ("last-fy", (date(2022, 7, 1), date(2023, 6, 30))),
    ],
)
def test_get_date_range(period, expected):
    assert get_date_range(period, today=date(2024, 5, 15)) == expected


def test_get_date_range_covers_all_periods():
    for period in PERIODS:
        start, end = get_date_range(period)
        assert start <= end


def test_last_month_across_year_boundary():
    assert get_date_range("last-month", today=date(2024, 1, 20)) == (
        date(2023, 12, 1),
        date(2023, 12, 31),
    )


def test_last_quarter_across_year_boundary():
    assert get_date_range("last-quarter", today=date(2024, 2, 1)) == (
        date(2023, 10, 1),
        date(2023, 12, 31),
    )


def test_unknown_period():
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("next-decade")

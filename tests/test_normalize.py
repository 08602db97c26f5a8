"""
Unit tests for amount and date normalization.
"""
from datetime import date

import pytest

from core.normalize import clean_amount, is_date_like, normalize_date, today_iso


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1,234.50", 1234.5),
        ("₹ 500", 500.0),
        ("500.00 INR", 500.0),
        ("-45.5", -45.5),
        (250, 250.0),
    ],
)
def test_clean_amount(raw, expected):
    """Test punctuation and currency markers are stripped."""
    assert clean_amount(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "", None, "1.2.3", "-", "N/A"])
def test_clean_amount_invalid_is_zero(raw):
    """Test empty or unparseable amounts clean to zero."""
    assert clean_amount(raw) == 0.0


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2024-01-31", "2024-01-31"),
        ("31/01/2024", "2024-01-31"),
        ("01/31/2024", "2024-01-31"),
        ("5.3.2024", "2024-03-05"),
        ("2024/1/5", "2024-01-05"),
        ("2024-01-31 10:30:00", "2024-01-31"),
        ("12 May 2024", "2024-05-12"),
    ],
)
def test_normalize_date(raw, expected):
    """Test heterogeneous date formats reach ISO form."""
    assert normalize_date(raw) == expected


@pytest.mark.parametrize("raw", ["not a date", "", None, "   "])
def test_normalize_date_defaults_to_today(raw):
    """Test unparseable dates fall back to the current date."""
    assert normalize_date(raw) == date.today().isoformat()


def test_today_iso():
    """Test today's date is ISO formatted."""
    assert today_iso() == date.today().isoformat()


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("12/05/2024", True),
        ("2024-01-31", True),
        ("12 May 2024", True),
        ("450", False),
        ("Starbucks", False),
        ("Zomato order", False),
        ("", False),
        (None, False),
    ],
)
def test_is_date_like(raw, expected):
    """Test date-shaped field detection."""
    assert is_date_like(raw) is expected


def test_clean_amount_overflow_is_zero():
    """Test digit runs too long for a float clean to zero."""
    assert clean_amount("9" * 400) == 0.0


@pytest.mark.parametrize(
    "raw, month_day",
    [("12 May", "05-12"), ("May 12", "05-12"), ("1st Jan", "01-01")],
)
def test_normalize_date_without_year_uses_current_year(raw, month_day):
    """Test dates missing a year are placed in the current year."""
    assert normalize_date(raw) == f"{date.today().year}-{month_day}"


def test_normalize_date_month_only_defaults_to_today():
    """Test a bare month name is not treated as a date."""
    assert normalize_date("May") == date.today().isoformat()

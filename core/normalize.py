"""
Value normalization: amount cleaning and date reconciliation.
Both normalizers are total: bad input degrades to a default, never an exception.
"""
import math
import re
import warnings
from datetime import date
from typing import Any, Optional

import pandas as pd

from core.logger import setup_logger

logger = setup_logger(__name__)

DATE_PATTERN = re.compile(r"(\d{1,4})[-/.](\d{1,2})[-/.](\d{1,4})")
DIGIT_RUN_PATTERN = re.compile(r"\d+")
MIN_YEAR = 1900


def today_iso() -> str:
    """Current local date as YYYY-MM-DD."""
    return date.today().isoformat()


def clean_amount(value: Any) -> float:
    """
    Clean a raw amount cell into a float.
    Strips everything except digits, '.' and '-', so currency symbols,
    thousands separators and trailing text such as 'INR' are ignored.

    Args:
        value: Raw amount value (string or number)

    Returns:
        Parsed float, or 0.0 if empty or invalid
    """
    if value is None:
        return 0.0

    cleaned = ""
    for char in str(value):
        if char.isdigit() or char in [".", "-"]:
            cleaned += char

    if not cleaned:
        return 0.0

    try:
        amount = float(cleaned)
    except (ValueError, TypeError):
        logger.debug(f"Failed to parse amount: '{value}'")
        return 0.0

    if not math.isfinite(amount):
        logger.debug(f"Amount out of range: '{value}'")
        return 0.0
    return amount


def _build_date(year: int, month: int, day: int) -> Optional[str]:
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def _parse_numeric_date(text: str) -> Optional[str]:
    """
    Interpret three numeric groups separated by '-', '/' or '.'.

    A 4-digit first group reads as Y-M-D. A 4-digit last group reads as
    D-M-Y, or M-D-Y when the middle group cannot be a month.
    """
    match = DATE_PATTERN.search(text)
    if not match:
        return None

    first, middle, last = match.groups()
    if len(first) == 4:
        return _build_date(int(first), int(middle), int(last))
    if len(last) == 4:
        day, month = int(first), int(middle)
        if month > 12 and day <= 12:
            day, month = month, day
        return _build_date(int(last), month, day)
    return None


def _parse_generic_date(text: str) -> Optional[str]:
    """
    Free-form calendar date parse (e.g. '12 May 2024', '05-Jan-24').

    Text without a day number ('May') is rejected. Text without a year
    ('12 May') is placed in the current year.
    """
    digit_runs = DIGIT_RUN_PATTERN.findall(text)
    if not digit_runs:
        return None

    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        try:
            parsed = pd.to_datetime(text, dayfirst=True, errors="coerce")
        except (ValueError, TypeError, OverflowError):
            return None
    if parsed is None or pd.isna(parsed):
        return None

    year_tokens = {f"{parsed.year:04d}", f"{parsed.year % 100:02d}"}
    if parsed.year < MIN_YEAR or not year_tokens.intersection(digit_runs):
        return _build_date(date.today().year, parsed.month, parsed.day)
    return parsed.date().isoformat()


def normalize_date(value: Any) -> str:
    """
    Normalize heterogeneous date text into YYYY-MM-DD.

    Args:
        value: Raw date cell

    Returns:
        ISO calendar date; today's date when nothing can be parsed
    """
    if value is None:
        return today_iso()

    text = str(value).strip()
    if not text:
        return today_iso()

    result = _parse_numeric_date(text) or _parse_generic_date(text)
    if result is None:
        logger.debug(f"Unparseable date '{text}', defaulting to today")
        return today_iso()
    return result


def is_date_like(value: Any) -> bool:
    """
    Check whether a field looks like a calendar date.

    Numeric group dates match directly. Other text must mix letters and
    digits (e.g. '12 May 2024') and survive a generic parse; purely
    numeric fields are left for amount detection.
    """
    if value is None:
        return False
    text = str(value).strip()
    if not text:
        return False
    if DATE_PATTERN.search(text):
        return True
    has_digit = any(c.isdigit() for c in text)
    has_alpha = any(c.isalpha() for c in text)
    if not (has_digit and has_alpha):
        return False
    return _parse_generic_date(text) is not None

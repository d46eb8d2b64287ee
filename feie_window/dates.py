"""
Calendar-day arithmetic on ISO dates.

Dates travel as `YYYY-MM-DD` strings. Arithmetic goes through a whole-day
epoch index (days since 1970-01-01) so there is no time-of-day or timezone
component anywhere.
"""

from __future__ import annotations

import re
from datetime import date, timedelta
from typing import Any, Callable

from dateutil.relativedelta import relativedelta

from feie_window.errors import CalculatorError, ErrorCode

ISO_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
EPOCH = date(1970, 1, 1)

DateISO = str


def is_iso_date(value: Any) -> bool:
    """Strict `YYYY-MM-DD` check that also rejects impossible days like Feb 30."""
    if not isinstance(value, str) or not ISO_DATE_RE.fullmatch(value):
        return False
    year, month, day = (int(part) for part in value.split("-"))
    try:
        parsed = date(year, month, day)
    except ValueError:
        return False
    return (parsed.year, parsed.month, parsed.day) == (year, month, day)


def assert_iso_date(value: Any, field_name: str) -> None:
    if not is_iso_date(value):
        raise CalculatorError(
            ErrorCode.DATE_FORMAT_ERROR,
            f"Invalid date format for '{field_name}'",
            {"value": value if isinstance(value, str) else repr(value)},
        )


def parse_iso_date(value: DateISO) -> date:
    year, month, day = (int(part) for part in value.split("-"))
    return date(year, month, day)


def to_epoch_days(value: DateISO) -> int:
    return (parse_iso_date(value) - EPOCH).days


def from_epoch_days(days: int) -> DateISO:
    return (EPOCH + timedelta(days=days)).isoformat()


def compare_date(a: DateISO, b: DateISO) -> int:
    diff = to_epoch_days(a) - to_epoch_days(b)
    return (diff > 0) - (diff < 0)


def add_days(value: DateISO, days: int) -> DateISO:
    return from_epoch_days(to_epoch_days(value) + days)


def shift_years(value: DateISO, delta_years: int) -> DateISO:
    """
    Move a date by whole calendar years.

    When the same month/day does not exist in the target year (Feb 29 into a
    non-leap year) the result is the last valid day of that month.
    """
    return (parse_iso_date(value) + relativedelta(years=delta_years)).isoformat()


def diff_days_inclusive(start: DateISO, end: DateISO) -> int:
    return to_epoch_days(end) - to_epoch_days(start) + 1


def diff_days_exclusive(start: DateISO, end: DateISO) -> int:
    return to_epoch_days(end) - to_epoch_days(start)


def build_indexer(origin: DateISO) -> Callable[[DateISO], int]:
    """Return a function mapping a date to its day offset from `origin`."""
    origin_epoch = to_epoch_days(origin)

    def index_of(value: DateISO) -> int:
        return to_epoch_days(value) - origin_epoch

    return index_of


def min_date(*values: DateISO) -> DateISO:
    return min(values, key=to_epoch_days)


def max_date(*values: DateISO) -> DateISO:
    return max(values, key=to_epoch_days)


def calendar_tax_year(year: int) -> tuple[DateISO, DateISO]:
    """Bounds of the standard January through December tax year."""
    return date(year, 1, 1).isoformat(), date(year, 12, 31).isoformat()

"""
Interval Normalization

Validation, merging and complement computation for lists of travel intervals.

Two adjacency rules live here and they are deliberately different:
- `normalize_intervals` rejects an interval whose start is on or before the
  previous end (touching ranges are an overlap, a gap day is required).
- `merge_intervals` coalesces ranges when `next.start <= prev.end + 1`, so
  back-to-back ranges become one block before taking the complement.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from feie_window.dates import (
    DateISO,
    add_days,
    assert_iso_date,
    compare_date,
    diff_days_inclusive,
    is_iso_date,
    to_epoch_days,
)
from feie_window.errors import CalculatorError, ErrorCode
from feie_window.models import CoverageBounds, Interval

logger = logging.getLogger(__name__)


def interval_sort_key(interval: Interval) -> tuple[int, int]:
    return to_epoch_days(interval.start_date), to_epoch_days(interval.end_date)


def _interval_fields(raw: Any, field_name: str, index: int) -> tuple[Any, Any]:
    if raw is None:
        raise CalculatorError(
            ErrorCode.INVALID_INTERVAL_BOUNDS,
            f"Interval at index {index} is missing",
            {"field": field_name, "index": index},
        )
    if isinstance(raw, Interval):
        return raw.start_date, raw.end_date
    if isinstance(raw, Mapping):
        return raw.get("start_date"), raw.get("end_date")
    # Anything else cannot carry dates; report it against the start field.
    return None, None


def normalize_intervals(
    intervals: Iterable[Interval | Mapping[str, Any]] | None,
    field_name: str,
    bounds: CoverageBounds | tuple[DateISO, DateISO] | None = None,
) -> list[Interval]:
    """
    Validate raw intervals and return them sorted by (start, end).

    Each interval is checked in input order for date format, start <= end and,
    when `bounds` is given, containment. The sorted list is then walked once
    for duplicates and overlaps. The first violation raises CalculatorError.
    """
    if not intervals:
        return []

    if bounds is not None:
        bounds = CoverageBounds(*bounds)

    sanitized: list[Interval] = []
    for index, raw in enumerate(intervals):
        start_date, end_date = _interval_fields(raw, field_name, index)
        assert_iso_date(start_date, f"{field_name}[{index}].start_date")
        assert_iso_date(end_date, f"{field_name}[{index}].end_date")
        interval = Interval(start_date, end_date)

        if compare_date(start_date, end_date) > 0:
            raise CalculatorError(
                ErrorCode.INVALID_INTERVAL_BOUNDS,
                "Interval start must be on or before end date.",
                {"field": field_name, "index": index, "interval": interval.to_dict()},
            )

        if bounds is not None and (
            compare_date(start_date, bounds.start) < 0 or compare_date(end_date, bounds.end) > 0
        ):
            raise CalculatorError(
                ErrorCode.INTERVAL_OUT_OF_RANGE,
                "Interval lies outside allowed bounds.",
                {
                    "field": field_name,
                    "index": index,
                    "interval": interval.to_dict(),
                    "bounds": {"min": bounds.start, "max": bounds.end},
                },
            )

        sanitized.append(interval)

    sanitized.sort(key=interval_sort_key)

    result: list[Interval] = []
    for current in sanitized:
        if not result:
            result.append(current)
            continue

        last = result[-1]
        if last == current:
            raise CalculatorError(
                ErrorCode.INTERVAL_DUPLICATE,
                "Duplicate interval detected.",
                {"field": field_name, "interval": current.to_dict()},
            )

        if compare_date(current.start_date, last.end_date) <= 0:
            raise CalculatorError(
                ErrorCode.INTERVAL_OVERLAP,
                "Intervals must be non-overlapping and strictly ordered.",
                {"field": field_name, "last": last.to_dict(), "current": current.to_dict()},
            )

        result.append(current)

    return result


def merge_intervals(intervals: Sequence[Interval]) -> list[Interval]:
    """Coalesce overlapping or adjacent intervals. Input must be sorted by start."""
    merged: list[Interval] = []
    for interval in intervals:
        if merged and compare_date(add_days(merged[-1].end_date, 1), interval.start_date) >= 0:
            last = merged[-1]
            end_date = last.end_date if compare_date(last.end_date, interval.end_date) >= 0 else interval.end_date
            merged[-1] = Interval(last.start_date, end_date)
        else:
            merged.append(interval)
    return merged


def invert_periods(
    periods: Sequence[Interval],
    coverage_start: DateISO,
    coverage_end: DateISO,
) -> list[Interval]:
    """
    Complement of `periods` within [coverage_start, coverage_end].

    Works in either direction: US periods in, foreign periods out, or the
    reverse.
    """
    if not periods:
        return [Interval(coverage_start, coverage_end)]

    inverted: list[Interval] = []
    cursor = coverage_start
    for period in merge_intervals(periods):
        if compare_date(cursor, period.start_date) < 0:
            inverted.append(Interval(cursor, add_days(period.start_date, -1)))
        cursor = add_days(period.end_date, 1)

    if compare_date(cursor, coverage_end) <= 0:
        inverted.append(Interval(cursor, coverage_end))

    return [interval for interval in inverted if diff_days_inclusive(interval.start_date, interval.end_date) > 0]


def sanitize_period_rows(rows: Iterable[Mapping[str, Any]]) -> list[Interval]:
    """
    Turn editor rows into sorted intervals.

    Rows with a blank or malformed date are dropped rather than reported, which
    matches how a half-filled form row behaves while the user is still typing.
    """
    sanitized: list[Interval] = []
    dropped = 0
    for row in rows:
        start_date = (row.get("start_date") or "").strip()
        end_date = (row.get("end_date") or "").strip()
        if not (is_iso_date(start_date) and is_iso_date(end_date)):
            if start_date or end_date:
                dropped += 1
            continue
        sanitized.append(Interval(start_date, end_date))

    if dropped:
        logger.warning(f"Dropped {dropped} period row(s) with incomplete or invalid dates.")

    sanitized.sort(key=interval_sort_key)
    return sanitized

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from itertools import accumulate
from typing import Callable

from feie_window.dates import (
    DateISO,
    add_days,
    build_indexer,
    diff_days_inclusive,
    max_date,
    min_date,
)
from feie_window.models import Interval


@dataclass
class OccupancyIndex:
    """
    Per-day foreign presence over [origin, end].

    `days[i]` is 1 when `origin + i` is covered by a foreign interval.
    `prefix[i]` is the inclusive running total of `days[0..i]`.
    """

    origin: DateISO
    end: DateISO
    days: list[int]
    prefix: list[int]
    _index_of: Callable[[DateISO], int] = field(repr=False)

    def __len__(self) -> int:
        return len(self.days)

    def index_of(self, value: DateISO) -> int:
        return self._index_of(value)

    def date_at(self, index: int) -> DateISO:
        return add_days(self.origin, index)


def build_foreign_occupancy(
    foreign_periods: Sequence[Interval],
    coverage_start: DateISO,
    coverage_end: DateISO,
) -> OccupancyIndex:
    total_days = diff_days_inclusive(coverage_start, coverage_end)
    days = [0] * total_days
    index_of = build_indexer(coverage_start)

    for interval in foreign_periods:
        start_index = max(index_of(max_date(interval.start_date, coverage_start)), 0)
        end_index = min(index_of(min_date(interval.end_date, coverage_end)), total_days - 1)
        for i in range(start_index, end_index + 1):
            days[i] = 1

    return OccupancyIndex(
        origin=coverage_start,
        end=coverage_end,
        days=days,
        prefix=list(accumulate(days)),
        _index_of=index_of,
    )


def range_sum(prefix: Sequence[int], start_index: int, end_index: int) -> int:
    """Occupied days in the inclusive index range [start_index, end_index]."""
    if start_index == 0:
        return prefix[end_index]
    return prefix[end_index] - prefix[start_index - 1]

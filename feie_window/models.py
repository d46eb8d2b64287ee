from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NamedTuple

from feie_window.dates import DateISO


@dataclass(frozen=True)
class Interval:
    """Closed, inclusive span of whole days at one location."""

    start_date: DateISO
    end_date: DateISO

    def to_dict(self) -> dict[str, str]:
        return {"start_date": self.start_date, "end_date": self.end_date}


class CoverageBounds(NamedTuple):
    start: DateISO
    end: DateISO


@dataclass
class NormalizedInput:
    tax_year_start: DateISO
    tax_year_end: DateISO
    tax_year_days: int
    coverage: CoverageBounds
    us_periods: list[Interval]
    foreign_periods: list[Interval]


@dataclass(frozen=True)
class WindowComputation:
    window_start: DateISO
    window_end: DateISO
    foreign_days: int
    overlap_days: int


@dataclass(frozen=True)
class QualifiedWindow:
    window_start: DateISO
    window_end: DateISO
    foreign_days: int
    overlap_days: int
    pro_rata_fraction: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "window_start": self.window_start,
            "window_end": self.window_end,
            "foreign_days": self.foreign_days,
            "overlap_days": self.overlap_days,
            "pro_rata_fraction": self.pro_rata_fraction,
        }


@dataclass
class FeieEvaluation:
    qualified: bool
    best_windows: list[QualifiedWindow]
    total_tax_year_days: int
    max_foreign_days: int


@dataclass
class PlanningInfo:
    us_days_remaining: int
    optimal_starts: list[DateISO] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "us_days_remaining": self.us_days_remaining,
            "optimal_starts": list(self.optimal_starts),
        }

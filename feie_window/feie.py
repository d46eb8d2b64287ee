"""
FEIE Window Evaluation

Enumerates every 12-month window that fits inside the coverage bounds, scores
each one by foreign days and tax-year overlap, and picks the qualifying
windows with the largest overlap.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from feie_window.constants import PRO_RATA_QUANTUM, REQUIRED_FOREIGN_DAYS
from feie_window.dates import (
    DateISO,
    add_days,
    compare_date,
    diff_days_inclusive,
    max_date,
    min_date,
    shift_years,
)
from feie_window.models import (
    CoverageBounds,
    FeieEvaluation,
    NormalizedInput,
    PlanningInfo,
    QualifiedWindow,
    WindowComputation,
)
from feie_window.occupancy import build_foreign_occupancy, range_sum

logger = logging.getLogger(__name__)


def compute_coverage_bounds(tax_year_start: DateISO, tax_year_end: DateISO) -> CoverageBounds:
    return CoverageBounds(shift_years(tax_year_start, -1), shift_years(tax_year_end, 1))


def window_end_for(window_start: DateISO) -> DateISO:
    return add_days(shift_years(window_start, 1), -1)


def compute_overlap(a_start: DateISO, a_end: DateISO, b_start: DateISO, b_end: DateISO) -> int:
    start = max_date(a_start, b_start)
    end = min_date(a_end, b_end)
    if compare_date(start, end) > 0:
        return 0
    return diff_days_inclusive(start, end)


def pro_rata_fraction(overlap_days: int, tax_year_days: int) -> float:
    fraction = Decimal(overlap_days) / Decimal(tax_year_days)
    return float(fraction.quantize(PRO_RATA_QUANTUM, rounding=ROUND_HALF_UP))


def enumerate_windows(normalized: NormalizedInput) -> list[WindowComputation]:
    """One candidate per coverage day, in start-date order."""
    coverage_start, coverage_end = normalized.coverage
    occupancy = build_foreign_occupancy(normalized.foreign_periods, coverage_start, coverage_end)
    total_days = len(occupancy)

    windows: list[WindowComputation] = []
    for start_index in range(total_days):
        window_start = occupancy.date_at(start_index)
        window_end = window_end_for(window_start)

        # Later starts only end later, so nothing after this fits either.
        if compare_date(window_end, coverage_end) > 0:
            break

        end_index = occupancy.index_of(window_end)
        windows.append(
            WindowComputation(
                window_start=window_start,
                window_end=window_end,
                foreign_days=range_sum(occupancy.prefix, start_index, end_index),
                overlap_days=compute_overlap(
                    window_start, window_end, normalized.tax_year_start, normalized.tax_year_end
                ),
            )
        )

    logger.debug(f"Enumerated {len(windows)} candidate windows over {coverage_start}..{coverage_end}")
    return windows


def evaluate_feie(
    normalized: NormalizedInput,
    windows: list[WindowComputation] | None = None,
) -> FeieEvaluation:
    """
    Qualification is met when any window reaches the required foreign days.
    Among those windows, every one tied at the maximum tax-year overlap is kept.
    """
    if windows is None:
        windows = enumerate_windows(normalized)
    tax_year_days = diff_days_inclusive(normalized.tax_year_start, normalized.tax_year_end)

    qualified = False
    max_overlap = 0
    max_foreign_days = 0
    best: list[QualifiedWindow] = []

    for window in windows:
        max_foreign_days = max(max_foreign_days, window.foreign_days)
        if window.foreign_days < REQUIRED_FOREIGN_DAYS:
            continue
        qualified = True

        if window.overlap_days > max_overlap:
            max_overlap = window.overlap_days
            best = []

        if window.overlap_days == max_overlap:
            best.append(
                QualifiedWindow(
                    window_start=window.window_start,
                    window_end=window.window_end,
                    foreign_days=window.foreign_days,
                    overlap_days=window.overlap_days,
                    pro_rata_fraction=pro_rata_fraction(window.overlap_days, tax_year_days),
                )
            )

    best.sort(key=lambda item: item.window_start)

    return FeieEvaluation(
        qualified=qualified,
        best_windows=best,
        total_tax_year_days=tax_year_days,
        max_foreign_days=max_foreign_days,
    )


def compute_planning_starts(windows: list[WindowComputation]) -> list[DateISO]:
    if not windows:
        return []
    max_foreign = max(window.foreign_days for window in windows)
    return sorted({window.window_start for window in windows if window.foreign_days == max_foreign})


def summarize_planning(
    normalized: NormalizedInput,
    windows: list[WindowComputation] | None = None,
) -> PlanningInfo:
    """How many more foreign days the best window needs, and which starts achieve it."""
    if windows is None:
        windows = enumerate_windows(normalized)
    max_foreign = max((window.foreign_days for window in windows), default=0)
    return PlanningInfo(
        us_days_remaining=max(0, REQUIRED_FOREIGN_DAYS - max_foreign),
        optimal_starts=compute_planning_starts(windows),
    )

from feie_window.calculator import calculate_feie, normalize_input
from feie_window.dates import (
    add_days,
    calendar_tax_year,
    compare_date,
    diff_days_exclusive,
    diff_days_inclusive,
    from_epoch_days,
    is_iso_date,
    max_date,
    min_date,
    shift_years,
    to_epoch_days,
)
from feie_window.errors import CalculatorError, ErrorCode
from feie_window.feie import enumerate_windows, evaluate_feie, summarize_planning
from feie_window.intervals import invert_periods, merge_intervals, normalize_intervals, sanitize_period_rows
from feie_window.models import Interval, PlanningInfo, QualifiedWindow
from feie_window.occupancy import build_foreign_occupancy, range_sum

__all__ = [
    "CalculatorError",
    "ErrorCode",
    "Interval",
    "PlanningInfo",
    "QualifiedWindow",
    "add_days",
    "build_foreign_occupancy",
    "calculate_feie",
    "calendar_tax_year",
    "compare_date",
    "diff_days_exclusive",
    "diff_days_inclusive",
    "enumerate_windows",
    "evaluate_feie",
    "from_epoch_days",
    "invert_periods",
    "is_iso_date",
    "max_date",
    "merge_intervals",
    "min_date",
    "normalize_input",
    "normalize_intervals",
    "range_sum",
    "sanitize_period_rows",
    "shift_years",
    "summarize_planning",
    "to_epoch_days",
]

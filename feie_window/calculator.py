"""
Calculator Facade

Single entry point for callers: takes a request mapping in wire shape and
returns a response dict. Domain failures never escape as exceptions; they come
back as `{"qualified": False, "error": {...}}`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from feie_window.constants import (
    MAX_TAX_YEAR_DATE,
    MIN_TAX_YEAR_DATE,
    MODE_US_PERIODS,
    REQUIRED_FOREIGN_DAYS,
    VALID_MODES,
)
from feie_window.dates import assert_iso_date, compare_date, diff_days_inclusive
from feie_window.errors import CalculatorError, ErrorCode
from feie_window.feie import compute_coverage_bounds, enumerate_windows, evaluate_feie, summarize_planning
from feie_window.intervals import invert_periods, normalize_intervals
from feie_window.models import FeieEvaluation, NormalizedInput, PlanningInfo

logger = logging.getLogger(__name__)


def _is_period_list(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _has_periods(value: Any) -> bool:
    return _is_period_list(value) and len(value) > 0


def normalize_input(request: Mapping[str, Any]) -> NormalizedInput:
    tax_year_start = request.get("tax_year_start")
    tax_year_end = request.get("tax_year_end")
    mode = request.get("mode")

    assert_iso_date(tax_year_start, "tax_year_start")
    assert_iso_date(tax_year_end, "tax_year_end")

    if compare_date(tax_year_start, tax_year_end) > 0:
        raise CalculatorError(ErrorCode.TAX_YEAR_ORDER, "Tax year start must not be after tax year end.")

    if compare_date(tax_year_start, MIN_TAX_YEAR_DATE) < 0 or compare_date(tax_year_end, MAX_TAX_YEAR_DATE) > 0:
        raise CalculatorError(
            ErrorCode.DATE_FORMAT_ERROR,
            f"Tax year must fall between {MIN_TAX_YEAR_DATE} and {MAX_TAX_YEAR_DATE}.",
            {"tax_year_start": tax_year_start, "tax_year_end": tax_year_end},
        )

    tax_year_days = diff_days_inclusive(tax_year_start, tax_year_end)
    if tax_year_days < 1:
        raise CalculatorError(ErrorCode.WINDOW_TOO_SHORT, "Tax year window must be at least one day.")

    if mode not in VALID_MODES:
        raise CalculatorError(
            ErrorCode.INVALID_MODE,
            "Mode must be either US or Foreign periods.",
            {"mode": mode if isinstance(mode, str) else repr(mode)},
        )

    coverage = compute_coverage_bounds(tax_year_start, tax_year_end)
    logger.debug(f"Coverage bounds for {tax_year_start}..{tax_year_end}: {coverage.start}..{coverage.end}")

    us_raw = request.get("us_periods")
    foreign_raw = request.get("foreign_periods")

    if mode == MODE_US_PERIODS:
        if not _is_period_list(us_raw):
            raise CalculatorError(
                ErrorCode.MISSING_PERIODS,
                "US periods are required in US mode.",
                {"value": repr(us_raw)},
            )
        if _has_periods(foreign_raw):
            raise CalculatorError(ErrorCode.UNEXPECTED_PERIODS, "Foreign periods must be omitted when mode is US.")
        us_periods = normalize_intervals(us_raw, "us_periods", coverage)
        foreign_periods = invert_periods(us_periods, coverage.start, coverage.end)
    else:
        if not _is_period_list(foreign_raw):
            raise CalculatorError(
                ErrorCode.MISSING_PERIODS,
                "Foreign periods are required in Foreign mode.",
                {"value": repr(foreign_raw)},
            )
        if _has_periods(us_raw):
            raise CalculatorError(ErrorCode.UNEXPECTED_PERIODS, "US periods must be omitted when mode is Foreign.")
        foreign_periods = normalize_intervals(foreign_raw, "foreign_periods", coverage)
        us_periods = invert_periods(foreign_periods, coverage.start, coverage.end)

    return NormalizedInput(
        tax_year_start=tax_year_start,
        tax_year_end=tax_year_end,
        tax_year_days=tax_year_days,
        coverage=coverage,
        us_periods=us_periods,
        foreign_periods=foreign_periods,
    )


def evaluation_to_output(evaluation: FeieEvaluation) -> dict[str, Any]:
    output: dict[str, Any] = {"qualified": evaluation.qualified}
    if evaluation.best_windows:
        output["best_windows"] = [window.to_dict() for window in evaluation.best_windows]
    output["total_tax_year_days"] = evaluation.total_tax_year_days
    return output


def error_to_output(error: CalculatorError) -> dict[str, Any]:
    return {"qualified": False, "error": error.to_dict()}


def calculate_feie(request: Mapping[str, Any]) -> dict[str, Any]:
    """
    Run normalization, inversion, window evaluation and planning for one request.

    Planning info is attached when `planning_mode` is set (full summary with
    optimal starts) or when the result is unqualified (remaining days only).
    """
    try:
        if not isinstance(request, Mapping):
            raise TypeError(f"Request must be a mapping, got {type(request).__name__}")

        normalized = normalize_input(request)
        windows = enumerate_windows(normalized)
        evaluation = evaluate_feie(normalized, windows)
        output = evaluation_to_output(evaluation)

        planning: PlanningInfo | None = None
        if request.get("planning_mode"):
            planning = summarize_planning(normalized, windows)
        elif not evaluation.qualified:
            planning = PlanningInfo(
                us_days_remaining=max(0, REQUIRED_FOREIGN_DAYS - evaluation.max_foreign_days),
                optimal_starts=[],
            )
        if planning is not None:
            output["planning_info"] = planning.to_dict()

        return output
    except CalculatorError as err:
        logger.debug(f"Calculation rejected: {err}")
        return error_to_output(err)
    except Exception as exc:
        logger.exception("Unexpected calculator failure")
        return error_to_output(
            CalculatorError(
                ErrorCode.UNKNOWN_ERROR,
                "Unexpected calculator failure.",
                {"type": type(exc).__name__, "cause": str(exc)},
            )
        )

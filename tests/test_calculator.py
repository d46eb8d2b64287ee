import pytest

from feie_window.calculator import calculate_feie, normalize_input
from feie_window.errors import CalculatorError, ErrorCode


def iv(start: str, end: str) -> dict[str, str]:
    return {"start_date": start, "end_date": end}


def base_request(**overrides):
    request = {"tax_year_start": "2024-01-01", "tax_year_end": "2024-12-31", "mode": "FOREIGN_PERIODS"}
    request.update(overrides)
    return request


@pytest.mark.integration
def test_qualifies_when_foreign_periods_exceed_threshold(foreign_request_2024):
    result = calculate_feie(foreign_request_2024)
    assert result["qualified"] is True
    assert result["total_tax_year_days"] == 366
    assert "error" not in result
    assert "planning_info" not in result
    assert result["best_windows"] == [
        {
            "window_start": "2024-01-01",
            "window_end": "2024-12-31",
            "foreign_days": 335,
            "overlap_days": 366,
            "pro_rata_fraction": 1.0,
        }
    ]


@pytest.mark.integration
def test_us_mode_matches_foreign_mode():
    us_result = calculate_feie(
        {
            "tax_year_start": "2024-01-01",
            "tax_year_end": "2024-12-31",
            "mode": "US_PERIODS",
            "us_periods": [iv("2024-12-01", "2024-12-31")],
        }
    )
    foreign_result = calculate_feie(
        base_request(
            foreign_periods=[iv("2023-01-01", "2024-11-30"), iv("2025-01-01", "2025-12-31")],
        )
    )
    assert us_result == foreign_result
    assert us_result["qualified"] is True


@pytest.mark.integration
def test_us_mode_with_no_us_days_is_fully_foreign():
    result = calculate_feie(
        {"tax_year_start": "2024-01-01", "tax_year_end": "2024-12-31", "mode": "US_PERIODS", "us_periods": []}
    )
    assert result["qualified"] is True
    assert result["best_windows"][0]["foreign_days"] == 366
    assert result["best_windows"][0]["overlap_days"] == 366


@pytest.mark.integration
def test_reports_planning_info_when_requested(short_trip_request_2024):
    result = calculate_feie({**short_trip_request_2024, "planning_mode": True})
    assert result["qualified"] is False
    assert "best_windows" not in result
    assert result["total_tax_year_days"] == 366
    planning = result["planning_info"]
    assert planning["us_days_remaining"] == 298
    assert planning["optimal_starts"][0] == "2023-02-02"
    assert planning["optimal_starts"][-1] == "2024-01-01"
    assert all(len(start) == 10 for start in planning["optimal_starts"])


@pytest.mark.integration
def test_unqualified_without_planning_gets_remaining_only(short_trip_request_2024):
    result = calculate_feie(short_trip_request_2024)
    assert result["qualified"] is False
    assert result["planning_info"] == {"us_days_remaining": 298, "optimal_starts": []}


@pytest.mark.integration
def test_planning_mode_when_already_qualified(foreign_request_2024):
    result = calculate_feie({**foreign_request_2024, "planning_mode": True})
    assert result["qualified"] is True
    assert result["planning_info"]["us_days_remaining"] == 0
    assert result["planning_info"]["optimal_starts"]


@pytest.mark.integration
def test_best_windows_are_sorted_and_tied():
    result = calculate_feie(
        {"tax_year_start": "2024-03-01", "tax_year_end": "2024-06-30", "mode": "US_PERIODS", "us_periods": []}
    )
    windows = result["best_windows"]
    starts = [w["window_start"] for w in windows]
    assert starts == sorted(starts)
    assert len({w["overlap_days"] for w in windows}) == 1
    assert all(w["foreign_days"] >= 330 for w in windows)
    assert result["total_tax_year_days"] == 122


@pytest.mark.integration
def test_single_day_tax_year():
    result = calculate_feie(base_request(tax_year_start="2024-06-15", tax_year_end="2024-06-15",
                                         foreign_periods=[iv("2024-01-01", "2024-12-31")]))
    assert result["qualified"] is True
    assert result["total_tax_year_days"] == 1
    assert all(w["overlap_days"] == 1 and w["pro_rata_fraction"] == 1.0 for w in result["best_windows"])


@pytest.mark.integration
def test_is_deterministic(foreign_request_2024):
    assert calculate_feie(foreign_request_2024) == calculate_feie(foreign_request_2024)


@pytest.mark.integration
@pytest.mark.parametrize(
    "request_overrides, expected_code",
    [
        ({"tax_year_end": "invalid-date", "mode": "US_PERIODS", "us_periods": []}, "DATE_FORMAT_ERROR"),
        ({"tax_year_start": None}, "DATE_FORMAT_ERROR"),
        ({"tax_year_start": "2024-12-31", "tax_year_end": "2024-01-01", "foreign_periods": []}, "TAX_YEAR_ORDER"),
        ({"mode": "BOTH", "foreign_periods": []}, "INVALID_MODE"),
        ({"mode": "US_PERIODS"}, "MISSING_PERIODS"),
        ({}, "MISSING_PERIODS"),
        (
            {"mode": "US_PERIODS", "us_periods": [], "foreign_periods": [iv("2024-01-01", "2024-02-01")]},
            "UNEXPECTED_PERIODS",
        ),
        (
            {"us_periods": [iv("2024-01-01", "2024-02-01")], "foreign_periods": []},
            "UNEXPECTED_PERIODS",
        ),
        ({"foreign_periods": [iv("2022-06-01", "2022-07-01")]}, "INTERVAL_OUT_OF_RANGE"),
        ({"foreign_periods": [iv("2024-02-01", "2024-01-01")]}, "INVALID_INTERVAL_BOUNDS"),
        ({"foreign_periods": [iv("2024-01-01", "2024-01-05"), iv("2024-01-05", "2024-01-09")]}, "INTERVAL_OVERLAP"),
        ({"foreign_periods": [iv("2024-01-01", "2024-01-05"), iv("2024-01-01", "2024-01-05")]}, "INTERVAL_DUPLICATE"),
        ({"foreign_periods": 5}, "MISSING_PERIODS"),
        ({"foreign_periods": ""}, "MISSING_PERIODS"),
        ({"foreign_periods": False}, "MISSING_PERIODS"),
        ({"foreign_periods": 0}, "MISSING_PERIODS"),
        ({"foreign_periods": {}}, "MISSING_PERIODS"),
        ({"mode": "US_PERIODS", "us_periods": ""}, "MISSING_PERIODS"),
        ({"mode": "US_PERIODS", "us_periods": {}}, "MISSING_PERIODS"),
        ({"tax_year_start": "２０２４-01-01", "foreign_periods": []}, "DATE_FORMAT_ERROR"),
        ({"tax_year_start": "9999-01-01", "tax_year_end": "9999-12-31", "foreign_periods": []}, "DATE_FORMAT_ERROR"),
        ({"tax_year_start": "9998-01-01", "tax_year_end": "9998-12-31", "foreign_periods": []}, "DATE_FORMAT_ERROR"),
        ({"tax_year_start": "0001-01-01", "tax_year_end": "0001-12-31", "foreign_periods": []}, "DATE_FORMAT_ERROR"),
    ],
)
def test_errors_are_returned_as_data(request_overrides, expected_code):
    result = calculate_feie(base_request(**request_overrides))
    assert result["qualified"] is False
    assert result["error"]["code"] == expected_code
    assert result["error"]["message"]
    assert "best_windows" not in result
    assert "total_tax_year_days" not in result
    assert "planning_info" not in result


@pytest.mark.integration
def test_error_details_carry_field():
    result = calculate_feie(base_request(foreign_periods=[iv("2024-01-01", "2024-01-10"), iv("2024-01-08", "2024-01-12")]))
    assert result["error"]["details"]["field"] == "foreign_periods"


@pytest.mark.integration
def test_unknown_error_preserves_cause():
    result = calculate_feie(["not", "a", "mapping"])
    assert result == {
        "qualified": False,
        "error": {
            "code": "UNKNOWN_ERROR",
            "message": "Unexpected calculator failure.",
            "details": {"type": "TypeError", "cause": "Request must be a mapping, got list"},
        },
    }


@pytest.mark.unit
def test_normalize_input_raises_domain_errors():
    with pytest.raises(CalculatorError) as excinfo:
        normalize_input(base_request(mode="US_PERIODS"))
    assert excinfo.value.code == ErrorCode.MISSING_PERIODS


@pytest.mark.unit
def test_normalize_input_derives_complement(foreign_request_2024):
    normalized = normalize_input(foreign_request_2024)
    assert normalized.tax_year_days == 366
    assert tuple(normalized.coverage) == ("2023-01-01", "2025-12-31")
    assert [p.to_dict() for p in normalized.us_periods] == [
        iv("2023-01-01", "2023-12-31"),
        iv("2024-12-01", "2025-12-31"),
    ]


@pytest.mark.unit
def test_non_list_periods_are_treated_as_missing():
    for value in ["", False, 0, {}, "2024-01-01"]:
        with pytest.raises(CalculatorError) as excinfo:
            normalize_input(base_request(foreign_periods=value))
        assert excinfo.value.code == ErrorCode.MISSING_PERIODS
        assert excinfo.value.details == {"value": repr(value)}


@pytest.mark.integration
@pytest.mark.parametrize("year", [2, 9997])
def test_tax_years_at_the_supported_edges_compute(year):
    start, end = f"{year:04d}-01-01", f"{year:04d}-12-31"
    result = calculate_feie(base_request(tax_year_start=start, tax_year_end=end, foreign_periods=[iv(start, end)]))
    assert "error" not in result
    assert result["qualified"] is True
    assert result["best_windows"][0]["window_start"] == start


@pytest.mark.unit
def test_tax_year_outside_supported_range_reports_bounds():
    with pytest.raises(CalculatorError) as excinfo:
        normalize_input(base_request(tax_year_start="9999-01-01", tax_year_end="9999-12-31", foreign_periods=[]))
    assert excinfo.value.code == ErrorCode.DATE_FORMAT_ERROR
    assert "0002-01-01" in excinfo.value.message
    assert "9997-12-31" in excinfo.value.message

import pytest
from typing import Any

from feie_window.models import CoverageBounds


@pytest.fixture
def bounds_2024() -> CoverageBounds:
    """Coverage bounds for the 2024 calendar tax year."""
    return CoverageBounds("2023-01-01", "2025-12-31")


@pytest.fixture
def foreign_request_2024() -> dict[str, Any]:
    """Foreign-mode request that clears 330 days inside calendar 2024."""
    return {
        "tax_year_start": "2024-01-01",
        "tax_year_end": "2024-12-31",
        "mode": "FOREIGN_PERIODS",
        "foreign_periods": [{"start_date": "2024-01-01", "end_date": "2024-11-30"}],
    }


@pytest.fixture
def short_trip_request_2024() -> dict[str, Any]:
    """Foreign-mode request with a single 32-day trip."""
    return {
        "tax_year_start": "2024-01-01",
        "tax_year_end": "2024-12-31",
        "mode": "FOREIGN_PERIODS",
        "foreign_periods": [{"start_date": "2024-01-01", "end_date": "2024-02-01"}],
    }

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from feie_window.constants import MODE_FOREIGN_PERIODS, MODE_US_PERIODS
from feie_window.dates import calendar_tax_year
from feie_window.models import Interval


@dataclass(frozen=True)
class SampleDataset:
    id: str
    name: str
    description: str
    mode: str
    tax_year: int
    us_periods: tuple[Interval, ...] = field(default_factory=tuple)
    foreign_periods: tuple[Interval, ...] = field(default_factory=tuple)

    def to_request(self, planning_mode: bool = False) -> dict[str, Any]:
        tax_year_start, tax_year_end = calendar_tax_year(self.tax_year)
        request: dict[str, Any] = {
            "tax_year_start": tax_year_start,
            "tax_year_end": tax_year_end,
            "mode": self.mode,
            "planning_mode": planning_mode,
        }
        if self.mode == MODE_US_PERIODS:
            request["us_periods"] = [period.to_dict() for period in self.us_periods]
        else:
            request["foreign_periods"] = [period.to_dict() for period in self.foreign_periods]
        return request


def _periods(*pairs: tuple[str, str]) -> tuple[Interval, ...]:
    return tuple(Interval(start, end) for start, end in pairs)


TRAVEL_HISTORY_2016_TO_2025 = _periods(
    ("2016-05-28", "2016-06-13"),
    ("2016-11-06", "2016-11-20"),
    ("2017-01-07", "2017-02-13"),
    ("2017-08-06", "2017-08-29"),
    ("2017-11-19", "2017-12-02"),
    ("2018-05-26", "2018-07-12"),
    ("2018-11-18", "2018-12-11"),
    ("2019-06-21", "2019-06-29"),
    ("2020-12-06", "2020-12-28"),
    ("2021-03-19", "2021-03-30"),
    ("2021-08-28", "2021-09-05"),
    ("2022-01-07", "2022-01-16"),
    ("2022-05-06", "2022-05-11"),
    ("2022-12-13", "2023-01-01"),
    ("2023-08-10", "2023-09-09"),
    ("2024-10-30", "2024-12-09"),
    ("2025-05-31", "2025-06-29"),
)

SAMPLE_DATASETS: tuple[SampleDataset, ...] = (
    SampleDataset(
        id="us-presence-archive",
        name="Long-term US visits history",
        description=(
            "Travel log of Arrive/Depart USA intervals from 2016 through mid-2025. "
            "Only the stays inside the selected tax year's coverage bounds are used."
        ),
        mode=MODE_US_PERIODS,
        tax_year=2024,
        us_periods=tuple(
            period
            for period in TRAVEL_HISTORY_2016_TO_2025
            if period.start_date >= "2023-01-01" and period.end_date <= "2025-12-31"
        ),
    ),
    SampleDataset(
        id="foreign-deployments",
        name="Two-year foreign contract",
        description=(
            "Primary work happens abroad with only short returns to the US. "
            "Demonstrates a clearly qualifying 330-day window."
        ),
        mode=MODE_FOREIGN_PERIODS,
        tax_year=2024,
        foreign_periods=_periods(
            ("2023-01-04", "2023-08-17"),
            ("2023-09-03", "2024-03-15"),
            ("2024-04-02", "2024-10-01"),
            ("2024-10-20", "2024-12-31"),
        ),
    ),
    SampleDataset(
        id="frequent-us-breaks",
        name="Foreign assignments with frequent US resets",
        description=(
            "Repeated long trips back to the US break qualification. "
            "The foreign stays are substantial but rarely cover 330 days."
        ),
        mode=MODE_FOREIGN_PERIODS,
        tax_year=2023,
        foreign_periods=_periods(
            ("2022-07-12", "2022-11-05"),
            ("2023-01-09", "2023-04-14"),
            ("2023-05-22", "2023-07-29"),
            ("2023-09-01", "2023-11-18"),
        ),
    ),
    SampleDataset(
        id="us-heavy-year",
        name="US-heavy sabbatical year",
        description=(
            "Most of the coverage window is spent inside the US with scattered short foreign trips. "
            "Useful for checking the not-qualified output."
        ),
        mode=MODE_US_PERIODS,
        tax_year=2022,
        us_periods=_periods(
            ("2021-10-05", "2022-01-15"),
            ("2022-02-20", "2022-04-02"),
            ("2022-04-18", "2022-07-08"),
            ("2022-07-22", "2022-09-30"),
            ("2022-10-05", "2022-12-31"),
        ),
    ),
)


def get_sample(sample_id: str) -> SampleDataset:
    for sample in SAMPLE_DATASETS:
        if sample.id == sample_id:
            return sample
    raise KeyError(f"Unknown sample dataset: {sample_id}")

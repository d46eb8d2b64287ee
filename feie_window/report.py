from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from feie_window.constants import APP_NAME, DISCLAIMER, MODE_US_PERIODS
from feie_window.models import Interval


def format_percent(fraction: float) -> str:
    return f"{fraction * 100:.2f}%"


def _period_rows(request: Mapping[str, Any]) -> tuple[str, list[Mapping[str, Any]]]:
    if request.get("mode") == MODE_US_PERIODS:
        title, rows = "US Periods", request.get("us_periods")
    else:
        title, rows = "Foreign Periods", request.get("foreign_periods")
    return title, [row.to_dict() if isinstance(row, Interval) else row for row in rows or []]


def result_to_markdown(request: Mapping[str, Any], result: Mapping[str, Any]) -> str:
    """Human-readable summary of one calculation. Formatting only."""
    lines: list[str] = []

    lines.append(f"# {APP_NAME} Summary")
    lines.append("")
    lines.append(f"- Tax Year: {request.get('tax_year_start')} to {request.get('tax_year_end')}")
    lines.append(f"- Mode: `{request.get('mode')}`")
    lines.append(f"- Planning Mode: `{bool(request.get('planning_mode'))}`")
    lines.append("")

    lines.append("## Result")
    lines.append(f"- Status: {'Qualified' if result.get('qualified') else 'Not qualified yet'}")
    total_days = result.get("total_tax_year_days")
    lines.append(f"- Total tax-year days: {total_days if total_days is not None else 'n/a'}")
    lines.append("")

    best_windows = result.get("best_windows") or []
    if best_windows:
        lines.append("## Best 12-Month Windows")
        lines.append("| Window Start | Window End | Foreign Days | Overlap Days | Pro-Rata |")
        lines.append("| :--- | :--- | ---: | ---: | ---: |")
        for window in best_windows:
            lines.append(
                f"| {window['window_start']} | {window['window_end']} | {window['foreign_days']} "
                f"| {window['overlap_days']} | {format_percent(window['pro_rata_fraction'])} |"
            )
        lines.append("")
    elif not result.get("error"):
        lines.append("No qualifying windows identified yet.")
        lines.append("")

    planning = result.get("planning_info")
    if planning:
        lines.append("## Planning Insights")
        lines.append(f"- Foreign days needed: {planning['us_days_remaining']}")
        starts = planning.get("optimal_starts") or []
        if starts:
            lines.append("- Optimal window starts:")
            for start in starts:
                lines.append(f"  - {start}")
        lines.append("")

    error = result.get("error")
    if error:
        lines.append("## Error")
        lines.append(f"- Code: `{error['code']}`")
        lines.append(f"- Message: {error['message']}")
        lines.append("")

    title, rows = _period_rows(request)
    lines.append(f"## {title}")
    if rows:
        lines.append("| Start | End |")
        lines.append("| :--- | :--- |")
        for row in rows:
            lines.append(f"| {row.get('start_date', '')} | {row.get('end_date', '')} |")
    else:
        lines.append("(none)")
    lines.append("")

    lines.append("---")
    lines.append(f"{APP_NAME} · {DISCLAIMER}")
    return "\n".join(lines) + "\n"

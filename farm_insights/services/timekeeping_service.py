"""
Timekeeping Service.

Business rules for worker time clock data: hours between clock events,
weekly totals, overtime detection and display formatting. Band colors for a
single shift come from the agronomic classifier's worked-hours table.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, List, Optional

from farm_insights.services.agronomic_classifier import Classification, agronomic_classifier
from farm_insights.services.agronomic_rules import REGULAR_HOURS, WEEKLY_OVERTIME_HOURS

logger = logging.getLogger(__name__)


def calculate_hours_worked(
    clock_in: datetime,
    clock_out: Optional[datetime] = None,
    as_of: Optional[datetime] = None
) -> float:
    """
    Hours between clock-in and clock-out.

    An open shift (no clock-out) is measured up to as_of. Intervals that end
    before they start count as zero.
    """
    end = clock_out or as_of
    if clock_in is None or end is None:
        return 0.0
    hours = (end - clock_in).total_seconds() / 3600.0
    if hours < 0:
        logger.warning(f"[Timekeeping] Clock-out {end} precedes clock-in {clock_in}")
        return 0.0
    return hours


def shift_hours(shift: Any) -> float:
    """Hours of a shift record, preferring recorded hours over clock events."""
    hours = getattr(shift, "hours_worked", None)
    if hours is not None:
        return float(hours)
    return calculate_hours_worked(getattr(shift, "clock_in", None), getattr(shift, "clock_out", None))


def calculate_weekly_hours(shifts: Iterable[Any]) -> float:
    return sum(shift_hours(shift) for shift in shifts)


def is_overtime_shift(hours: float) -> bool:
    return hours > REGULAR_HOURS


def is_overtime_week(total_hours: float) -> bool:
    """Standard 40-hour work week."""
    return total_hours > WEEKLY_OVERTIME_HOURS


def round_to_quarter_hour(hours: float) -> float:
    return round(hours * 4.0) / 4.0


def format_hours(hours: float) -> str:
    """Format decimal hours as H:MM."""
    whole_hours = int(hours)
    minutes = int(round((hours - whole_hours) * 60))
    if minutes == 60:
        whole_hours, minutes = whole_hours + 1, 0
    return f"{whole_hours}:{minutes:02d}"


@dataclass
class WeeklySummary:
    total_hours: float
    overtime_hours: float
    is_overtime: bool
    shift_bands: List[Classification] = field(default_factory=list)


def summarize_week(shifts: Iterable[Any]) -> WeeklySummary:
    """Total a week of shifts and classify each one."""
    hours = [shift_hours(shift) for shift in shifts]
    total = sum(hours)
    summary = WeeklySummary(
        total_hours=total,
        overtime_hours=max(0.0, total - WEEKLY_OVERTIME_HOURS),
        is_overtime=is_overtime_week(total),
        shift_bands=[agronomic_classifier.classify_worked_hours(h) for h in hours],
    )
    if summary.is_overtime:
        logger.info(f"[Timekeeping] Weekly overtime: {total:.2f}h > {WEEKLY_OVERTIME_HOURS:.0f}h")
    return summary

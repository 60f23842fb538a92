from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Mapping, Optional

from ..core.constants import ATTENDANCE_BUCKETS, ATTENDANCE_RATINGS
from ..core.enums import DayStatus
from .model import DayCounts


def tally_days(statuses: Iterable[DayStatus]) -> DayCounts:
    """Tally resolved statuses. ``no-record`` working days count as absent;
    week-offs and holidays are not working days and are ignored."""
    present = late = leave = absent = 0
    for status in statuses:
        if status == DayStatus.PRESENT:
            present += 1
        elif status == DayStatus.LATE:
            late += 1
        elif status == DayStatus.LEAVE:
            leave += 1
        elif status == DayStatus.NO_RECORD:
            absent += 1
    return DayCounts(present=present, late=late, leave=leave, absent=absent)


def attendance_percentage(counts: DayCounts) -> float:
    attended = counts.present + counts.late
    total = attended + counts.leave + counts.absent
    if total == 0:
        return 0.0
    return round(attended / total * 100, 1)


def average_work_hours(hours: Iterable[Optional[Decimal | float]]) -> float:
    """Mean over records that actually logged hours."""
    logged = [float(h) for h in hours if h is not None and float(h) > 0]
    if not logged:
        return 0.0
    return round(sum(logged) / len(logged), 1)


def mean(values: Iterable[float]) -> float:
    values = list(values)
    if not values:
        return 0.0
    return round(sum(values) / len(values), 1)


def _first_at_or_above(percentage: float, thresholds) -> str:
    for label, lower in thresholds:
        if percentage >= lower:
            return label
    return thresholds[-1][0]


def bucket_for(percentage: float) -> str:
    return _first_at_or_above(percentage, ATTENDANCE_BUCKETS)


def rating_for(percentage: float) -> str:
    return _first_at_or_above(percentage, ATTENDANCE_RATINGS)


def distribution(percentages: Iterable[float]) -> Mapping[str, int]:
    buckets = {label: 0 for label, _ in ATTENDANCE_BUCKETS}
    for p in percentages:
        buckets[bucket_for(p)] += 1
    return buckets

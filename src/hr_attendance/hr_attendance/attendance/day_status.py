from __future__ import annotations

from datetime import date
from typing import Collection, Iterable, Mapping, Optional

from ..common.datetime_utils import is_sunday
from ..core.enums import AttendanceStatus, DayStatus
from ..leaves.model import LeaveRequest
from .model import AttendanceRecord

_FROM_RECORD = {
    AttendanceStatus.PRESENT: DayStatus.PRESENT,
    AttendanceStatus.LATE: DayStatus.LATE,
}


def resolve_day_status(
    day: date,
    *,
    holidays: Collection[date],
    leaves: Iterable[LeaveRequest],
    record: Optional[AttendanceRecord],
    fallback: DayStatus = DayStatus.WEEKOFF,
) -> DayStatus:
    """Single display status for one employee-date.

    First match wins: holiday, approved leave span, attendance record,
    Sunday, then ``fallback``. Pure: every input is passed in, nothing is
    cached, so the result always follows the persisted facts.
    """

    if day in holidays:
        return DayStatus.HOLIDAY
    if any(leave.is_approved and leave.covers(day) for leave in leaves):
        return DayStatus.LEAVE
    if record is not None:
        return _FROM_RECORD[record.status]
    if is_sunday(day):
        return DayStatus.WEEKOFF
    return fallback


def resolve_range(
    days: Iterable[date],
    *,
    holidays: Collection[date],
    leaves: Iterable[LeaveRequest],
    records_by_date: Mapping[date, AttendanceRecord],
    fallback: DayStatus = DayStatus.WEEKOFF,
) -> dict[date, DayStatus]:
    approved = [leave for leave in leaves if leave.is_approved]
    return {
        day: resolve_day_status(
            day,
            holidays=holidays,
            leaves=approved,
            record=records_by_date.get(day),
            fallback=fallback,
        )
        for day in days
    }

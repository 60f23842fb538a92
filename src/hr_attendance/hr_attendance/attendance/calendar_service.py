from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..common.datetime_utils import iter_dates, month_bounds
from ..core.enums import DayStatus
from ..core.settings import EngineSettings
from ..holidays.repository import HolidayRepository
from ..leaves.repository import LeaveRepository
from .day_status import resolve_range
from .repository import AttendanceRepository


@dataclass(frozen=True)
class CalendarDay:
    day: date
    status: DayStatus


@dataclass(frozen=True)
class MonthCalendar:
    employee_id: int
    year: int
    month: int
    days: list[CalendarDay]
    counts: dict[str, int]

    @property
    def presents(self) -> int:
        return self.counts.get(DayStatus.PRESENT.value, 0) + self.counts.get(DayStatus.LATE.value, 0)


class CalendarService:
    """Read path for the attendance calendar.

    Every call re-reads records, approved leaves and holidays, so an approval
    committed a moment ago is always reflected.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        holidays: HolidayRepository,
        *,
        settings: EngineSettings | None = None,
    ):
        self._attendance = attendance
        self._leaves = leaves
        self._holidays = holidays
        self._settings = settings or EngineSettings()

    def _resolve(self, employee_id: int, start: date, end: date) -> dict[date, DayStatus]:
        records = self._attendance.list_between(start_date=start, end_date=end, employee_id=int(employee_id))
        leaves = self._leaves.list_approved_overlapping(start_date=start, end_date=end, employee_id=int(employee_id))
        holidays = {h.holiday_date for h in self._holidays.list_between(start_date=start, end_date=end)}
        return resolve_range(
            iter_dates(start, end),
            holidays=holidays,
            leaves=leaves,
            records_by_date={r.work_date: r for r in records},
            fallback=self._settings.unrecorded_workday_status,
        )

    def day_status(self, *, employee_id: int, day: date) -> DayStatus:
        return self._resolve(employee_id, day, day)[day]

    def month(self, *, employee_id: int, year: int, month: int) -> MonthCalendar:
        start, end = month_bounds(int(year), int(month))
        statuses = self._resolve(employee_id, start, end)

        counts = {s.value: 0 for s in DayStatus}
        for status in statuses.values():
            counts[status.value] += 1

        return MonthCalendar(
            employee_id=int(employee_id),
            year=int(year),
            month=int(month),
            days=[CalendarDay(day=d, status=s) for d, s in sorted(statuses.items())],
            counts=counts,
        )

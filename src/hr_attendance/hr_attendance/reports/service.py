from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Collection, Optional, Sequence

from ..attendance.day_status import resolve_day_status, resolve_range
from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import iter_dates, now_local
from ..common.validators import require_date_range
from ..core.enums import DayStatus
from ..core.exceptions import NotFoundError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..holidays.repository import HolidayRepository
from ..leaves.model import LeaveRequest
from ..leaves.repository import LeaveRepository
from .calculator import attendance_percentage, average_work_hours, distribution, mean, rating_for, tally_days
from .model import (
    CompanyReport,
    DailyReport,
    DailyRow,
    DepartmentAverage,
    DistributionBucket,
    EmployeeAttendanceSummary,
    OverallStats,
)

NOT_AVAILABLE = "N/A"


class ReportService:
    """Read-side rollups recomputed from records, leaves and holidays on every call.

    Working days without a record or leave count as absent here (the
    resolver runs with a ``no-record`` fallback); days after ``as_of`` are
    not counted.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        holidays: HolidayRepository,
        employees: EmployeeRepository,
    ):
        self._attendance = attendance
        self._leaves = leaves
        self._holidays = holidays
        self._employees = employees

    def _holiday_set(self, start: date, end: date) -> set[date]:
        return {h.holiday_date for h in self._holidays.list_between(start_date=start, end_date=end)}

    @staticmethod
    def _summarize(
        employee: Employee,
        *,
        start: date,
        end: date,
        records: Sequence[AttendanceRecord],
        leaves: Sequence[LeaveRequest],
        holidays: Collection[date],
    ) -> EmployeeAttendanceSummary:
        statuses = resolve_range(
            iter_dates(start, end),
            holidays=holidays,
            leaves=leaves,
            records_by_date={r.work_date: r for r in records},
            fallback=DayStatus.NO_RECORD,
        )
        counts = tally_days(statuses.values())
        percentage = attendance_percentage(counts)
        return EmployeeAttendanceSummary(
            employee_id=employee.employee_id,
            employee_code=employee.employee_code,
            full_name=employee.full_name,
            department=employee.department or NOT_AVAILABLE,
            position=employee.position or NOT_AVAILABLE,
            present_days=counts.present,
            late_days=counts.late,
            leave_days=counts.leave,
            absent_days=counts.absent,
            avg_work_hours=average_work_hours(r.work_hours for r in records),
            attendance_percentage=percentage,
            rating=rating_for(percentage),
        )

    def employee_summary(
        self,
        *,
        employee_id: int,
        start: date,
        end: date,
        as_of: date | None = None,
    ) -> EmployeeAttendanceSummary:
        require_date_range(start, end)
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")

        last = min(end, as_of or now_local().date())
        records = self._attendance.list_between(start_date=start, end_date=end, employee_id=employee.employee_id)
        leaves = self._leaves.list_approved_overlapping(start_date=start, end_date=end, employee_id=employee.employee_id)
        return self._summarize(
            employee,
            start=start,
            end=last,
            records=records,
            leaves=leaves,
            holidays=self._holiday_set(start, end),
        )

    def company_report(
        self,
        *,
        start: date,
        end: date,
        department: Optional[str] = None,
        as_of: date | None = None,
    ) -> CompanyReport:
        require_date_range(start, end)
        last = min(end, as_of or now_local().date())

        employees = self._employees.list_active(department=department)
        records_by_employee: dict[int, list[AttendanceRecord]] = defaultdict(list)
        for r in self._attendance.list_between(start_date=start, end_date=end):
            records_by_employee[r.employee_id].append(r)
        leaves_by_employee: dict[int, list[LeaveRequest]] = defaultdict(list)
        for leave in self._leaves.list_approved_overlapping(start_date=start, end_date=end):
            leaves_by_employee[leave.employee_id].append(leave)
        holidays = self._holiday_set(start, end)

        summaries = [
            self._summarize(
                e,
                start=start,
                end=last,
                records=records_by_employee.get(e.employee_id, []),
                leaves=leaves_by_employee.get(e.employee_id, []),
                holidays=holidays,
            )
            for e in employees
        ]

        by_department: dict[str, list[float]] = defaultdict(list)
        for s in summaries:
            by_department[s.department].append(s.attendance_percentage)
        departments = [
            DepartmentAverage(department=name, employees=len(values), attendance=mean(values))
            for name, values in sorted(by_department.items())
        ]

        buckets = distribution(s.attendance_percentage for s in summaries)
        overall = OverallStats(
            total_employees=len(summaries),
            avg_attendance=mean(s.attendance_percentage for s in summaries),
            total_present_days=sum(s.present_days for s in summaries),
            avg_work_hours=mean(s.avg_work_hours for s in summaries),
        )

        return CompanyReport(
            start=start,
            end=end,
            employees=summaries,
            departments=departments,
            distribution=[DistributionBucket(range=label, count=n) for label, n in buckets.items()],
            overall=overall,
        )

    def daily_report(self, *, day: date) -> DailyReport:
        """One row per active employee for ``day``, with counts per status."""
        employees = self._employees.list_active()
        records = {r.employee_id: r for r in self._attendance.list_between(start_date=day, end_date=day)}
        leaves_by_employee: dict[int, list[LeaveRequest]] = defaultdict(list)
        for leave in self._leaves.list_approved_overlapping(start_date=day, end_date=day):
            leaves_by_employee[leave.employee_id].append(leave)
        holidays = self._holiday_set(day, day)

        rows: list[DailyRow] = []
        counts = {s.value: 0 for s in DayStatus}
        for e in employees:
            record = records.get(e.employee_id)
            status = resolve_day_status(
                day,
                holidays=holidays,
                leaves=leaves_by_employee.get(e.employee_id, []),
                record=record,
                fallback=DayStatus.NO_RECORD,
            )
            counts[status.value] += 1
            rows.append(
                DailyRow(
                    employee_id=e.employee_id,
                    employee_code=e.employee_code,
                    full_name=e.full_name,
                    gender=e.gender.value,
                    status=status,
                    work_mode=record.work_mode if record else None,
                    punch_in_time=record.punch_in_time if record else None,
                    punch_out_time=record.punch_out_time if record else None,
                    work_hours=float(record.work_hours) if record and record.work_hours is not None else None,
                    home_reached=bool(record.home_reached) if record else False,
                    home_reached_at=record.home_reached_at if record else None,
                )
            )

        rows.sort(key=lambda r: (r.punch_in_time is None, r.punch_in_time or day, r.employee_code))
        return DailyReport(day=day, rows=rows, counts=counts)
